"""Record stores backing the catalog and the moderation queue."""

from .base import EPISODES, SUBMISSIONS, RecordStore, sort_records
from .dynamodb import DynamoDBStore
from .keys import decode_key, encode_key
from .memory import InMemoryStore

__all__ = [
    "EPISODES",
    "SUBMISSIONS",
    "RecordStore",
    "sort_records",
    "DynamoDBStore",
    "InMemoryStore",
    "decode_key",
    "encode_key",
]
