"""Opaque keys handed to the moderation UI."""

import base64
import binascii
import json

from ..errors import DecodeError


def encode_key(collection: str, key: str) -> str:
    """Encode a collection/key pair as a URL-safe token."""
    raw = json.dumps([collection, key], separators=(",", ":")).encode("utf-8")
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


def decode_key(token: str, collection: str) -> str:
    """
    Decode a token produced by ``encode_key``.

    Raises:
        DecodeError: If the token is malformed or belongs to another collection
    """
    token = (token or "").strip()
    if not token:
        raise DecodeError("key is required")

    padded = token + "=" * (-len(token) % 4)
    try:
        decoded = json.loads(base64.urlsafe_b64decode(padded.encode("ascii")).decode("utf-8"))
    except (binascii.Error, UnicodeError, ValueError) as e:
        raise DecodeError(f"malformed key {token!r}") from e

    if (
        not isinstance(decoded, list)
        or len(decoded) != 2
        or not all(isinstance(part, str) and part for part in decoded)
    ):
        raise DecodeError(f"malformed key {token!r}")

    if decoded[0] != collection:
        raise DecodeError(f"key does not refer to a {collection}")

    return decoded[1]
