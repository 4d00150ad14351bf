"""Sanitizing and parsing of untrusted form input."""

import warnings
from datetime import date, datetime
from typing import Optional
from urllib.parse import urlparse

from bs4 import BeautifulSoup, Comment, MarkupResemblesLocatorWarning, ParserRejectedMarkup

from ..errors import ValidationError


DATE_FORMAT = "%Y-%m-%d"
DISPLAY_DATE_FORMAT = "%d %b %Y"

# Elements whose content is code, not text; dropped together with their body.
_EXECUTABLE_TAGS = ["script", "style", "iframe", "object", "embed", "template"]

# Short form values such as "Go Time" or a bare URL are expected input.
warnings.filterwarnings("ignore", category=MarkupResemblesLocatorWarning)


def _strip_markup(text: str) -> str:
    try:
        soup = BeautifulSoup(text, "html.parser")
    except ParserRejectedMarkup as e:
        raise ValidationError("text contains malformed markup") from e

    for element in soup(_EXECUTABLE_TAGS):
        element.extract()
    for comment in soup.find_all(string=lambda s: isinstance(s, Comment)):
        comment.extract()
    return soup.get_text()


def sanitize(value: Optional[str]) -> str:
    """
    Trim surrounding whitespace and reduce the value to plain text.

    Tags and comments are dropped, executable blocks together with their
    content. Parsing repeats until the text stops changing, so entity-encoded
    markup cannot survive as a tag. The result is plain text; escaping is
    left to whatever renders it.

    Raises:
        ValidationError: If the HTML parser rejects the input outright
    """
    text = (value or "").strip()
    previous = None
    while text and text != previous:
        previous = text
        text = _strip_markup(text).strip()
    return text


def parse_date(value: Optional[str], field_name: str = "date") -> date:
    """
    Parse a ``YYYY-MM-DD`` date.

    Raises:
        ValidationError: If the value is missing or not a real calendar date
    """
    text = (value or "").strip()
    if not text:
        raise ValidationError(f"{field_name} is required")
    try:
        return datetime.strptime(text, DATE_FORMAT).date()
    except ValueError as e:
        raise ValidationError(
            f"{field_name} must be a date in YYYY-MM-DD format, got {text!r}"
        ) from e


def parse_optional_int(value: Optional[str], field_name: str) -> Optional[int]:
    """Parse a non-negative integer form field; blank means absent."""
    text = (value or "").strip()
    if not text:
        return None
    try:
        number = int(text)
    except ValueError as e:
        raise ValidationError(f"{field_name} must be a whole number, got {text!r}") from e
    if number < 0:
        raise ValidationError(f"{field_name} must not be negative")
    return number


def validate_url(value: Optional[str], field_name: str = "url") -> str:
    """
    Return the trimmed URL if it is an absolute http(s) link.

    Raises:
        ValidationError: For empty values, other schemes, or a missing host
    """
    text = (value or "").strip()
    if not text:
        raise ValidationError(f"{field_name} is required")

    parsed = urlparse(text)
    if parsed.scheme.lower() not in ("http", "https") or not parsed.netloc:
        raise ValidationError(f"{field_name} must be an absolute http(s) URL")

    if any(ch in text for ch in "<>\"' "):
        raise ValidationError(f"{field_name} contains characters not allowed in a URL")

    return text
