"""Typed access to the Episode collection."""

from typing import List

from ..models.episode import Episode
from ..storage.base import EPISODES, RecordStore


class EpisodeRepository:
    """Maps Episode objects onto a RecordStore collection."""

    def __init__(self, store: RecordStore, id_block_size: int = 100):
        self.store = store
        self.id_block_size = id_block_size

    def list_newest_first(self) -> List[Episode]:
        """Ordered full scan, newest ``episode_date`` first."""
        return [
            Episode.from_record(record)
            for _, record in self.store.query(EPISODES, "episode_date", descending=True)
        ]

    def allocate_id(self) -> int:
        """
        Reserve a block of ids and return its first one.

        The rest of the block is discarded, trading id density for one store
        round-trip per new episode.
        """
        return self.store.allocate_ids(EPISODES, self.id_block_size)

    def add(self, episode: Episode) -> None:
        self.store.put(EPISODES, episode.to_record(), key=str(episode.id))
