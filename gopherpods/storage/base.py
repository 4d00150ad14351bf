"""Abstract ordered key/value record store."""

from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional, Tuple


Record = Dict[str, Any]
KeyedRecord = Tuple[str, Record]

EPISODES = "Episode"
SUBMISSIONS = "Submission"


class RecordStore(ABC):
    """
    Persistent collections of flat records.

    Implementations raise ``StoreError`` for any backend failure. Deleting a
    key that does not exist is a no-op, so retried moderator actions stay
    harmless.
    """

    @abstractmethod
    def put(self, collection: str, record: Record, key: Optional[str] = None) -> str:
        """Write a record, returning its key (store-assigned when ``key`` is None)."""

    @abstractmethod
    def delete(self, collection: str, key: str) -> None:
        """Remove a record if present."""

    @abstractmethod
    def query(
        self,
        collection: str,
        order_by: str,
        descending: bool = False,
    ) -> List[KeyedRecord]:
        """Return every record of a collection ordered by one field."""

    @abstractmethod
    def count(self, collection: str) -> int:
        """Number of records in a collection."""

    @abstractmethod
    def allocate_ids(self, collection: str, count: int) -> int:
        """
        Reserve ``count`` consecutive ids for a collection.

        Returns the first id of the block. Ids are never handed out twice;
        any part of a block left unused is discarded.
        """


def sort_records(
    records: Iterable[KeyedRecord],
    order_by: str,
    descending: bool = False,
) -> List[KeyedRecord]:
    """Stable sort by one field; records missing the field sort last."""
    items = list(records)
    present = [item for item in items if item[1].get(order_by) is not None]
    missing = [item for item in items if item[1].get(order_by) is None]
    present.sort(key=lambda item: item[1][order_by], reverse=descending)
    return present + missing
