"""
Abstract base classes defining the interfaces for the jam judging system.

All interfaces are synchronous; the core never performs I/O itself and only
talks to storage and entry sources through these seams.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence

from .models import Comparison, Entry, PairUnavailable, SelectedPair


class EntryFetcher(ABC):
    """Interface for fetching the entries of a jam."""

    @abstractmethod
    def list_entries(self, jam_id: str) -> list[Entry]:
        """Return all entries for a jam, in a stable order."""
        pass

    @abstractmethod
    def get_entry(self, jam_id: str, entry_id: str) -> Entry:
        """Get a specific entry by ID. Raises KeyError if unknown."""
        pass


class ComparisonStore(ABC):
    """
    Durable, append-only log of comparisons.

    At most one comparison may exist per (jam, judge, low id, high id); the
    store enforces this atomically.
    """

    @abstractmethod
    def append(self, comparison: Comparison) -> None:
        """
        Append a canonical comparison.

        Raises:
            DuplicateComparisonError: if this judge already recorded the pair
        """
        pass

    @abstractmethod
    def comparisons_for_jam(
        self,
        jam_id: str,
        from_timestamp: float | None = None,
        to_timestamp: float | None = None,
    ) -> list[Comparison]:
        """Snapshot of a jam's comparisons, newest first, optionally bounded (inclusive)."""
        pass

    @abstractmethod
    def count_for_judge(self, jam_id: str, judge_id: str) -> int:
        """Number of comparisons a judge has recorded for a jam."""
        pass


class PairSelector(ABC):
    """Interface for choosing which pair a judge sees next."""

    @abstractmethod
    def select_next_pair(
        self, jam_id: str, judge_id: str, entries: Sequence[Entry]
    ) -> SelectedPair | PairUnavailable:
        """
        Select the next pair to present to a judge.

        Args:
            jam_id: Jam being judged
            judge_id: Judge asking for a pair
            entries: All entries of the jam

        Returns:
            SelectedPair in presentation order, or PairUnavailable with the reason
        """
        pass


class Judge(ABC):
    """Interface for something that can judge a presented pair."""

    judge_id: str

    @abstractmethod
    def judge_pair(self, entry_a: Entry, entry_b: Entry) -> str | None:
        """Return the id of the preferred entry, or None to skip the pair."""
        pass
