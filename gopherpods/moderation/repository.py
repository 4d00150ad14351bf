"""Typed access to the pending Submission collection."""

from typing import List

from ..models.submission import Submission
from ..storage.base import SUBMISSIONS, RecordStore
from ..storage.keys import decode_key, encode_key


class SubmissionRepository:
    """Maps Submission objects onto a RecordStore collection."""

    def __init__(self, store: RecordStore):
        self.store = store

    def add(self, submission: Submission) -> str:
        """Persist a submission and return its opaque key."""
        raw_key = self.store.put(SUBMISSIONS, submission.to_record())
        return encode_key(SUBMISSIONS, raw_key)

    def list_oldest_first(self) -> List[Submission]:
        return [
            Submission.from_record(record, key=encode_key(SUBMISSIONS, raw_key))
            for raw_key, record in self.store.query(SUBMISSIONS, "submitted_at")
        ]

    def delete(self, key: str) -> str:
        """
        Delete by opaque key; an already-deleted submission is not an error.

        Returns the decoded store key.
        """
        raw_key = decode_key(key, SUBMISSIONS)
        self.store.delete(SUBMISSIONS, raw_key)
        return raw_key

    def count(self) -> int:
        return self.store.count(SUBMISSIONS)
