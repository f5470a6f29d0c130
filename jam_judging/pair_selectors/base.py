"""
Shared plumbing for pair selectors.

Reads the jam snapshot from the store, works out which pairs a judge may
still see and randomizes presentation order. Subclasses only decide which
candidate pair to take.
"""

import threading
from abc import abstractmethod
from collections.abc import Iterable, Sequence

import numpy as np
from typing_extensions import override

from ..canonical import pair_key
from ..interfaces import ComparisonStore, PairSelector
from ..models import (
    Comparison,
    Entry,
    PairKey,
    PairUnavailable,
    SelectedPair,
    UnavailableReason,
    unique_entries,
)


def judged_pair_keys(judge_id: str, comparisons: Iterable[Comparison]) -> set[PairKey]:
    """Pairs this judge already has an outcome for, skips included."""
    return {c.pair_key for c in comparisons if c.judge_id == judge_id}


def unjudged_pairs(
    judge_id: str, entries: Sequence[Entry], comparisons: Iterable[Comparison]
) -> list[tuple[Entry, Entry]]:
    """Every unordered pair of entries the judge has not recorded yet."""
    judged = judged_pair_keys(judge_id, comparisons)
    candidates = list[tuple[Entry, Entry]]()
    for i in range(len(entries)):
        for j in range(i + 1, len(entries)):
            if pair_key(entries[i].entry_id, entries[j].entry_id) in judged:
                continue
            candidates.append((entries[i], entries[j]))
    return candidates


class BasePairSelector(PairSelector):
    """Pair selector reading comparisons from a ComparisonStore."""

    def __init__(
        self,
        store: ComparisonStore,
        seed: int | None = None,
        rng: np.random.Generator | None = None,
    ):
        """
        Args:
            store: Comparison store to read jam snapshots from
            seed: Seed for a fresh random generator (ignored when rng is given)
            rng: Random generator to draw from
        """
        self.store = store
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        # numpy generators are not thread-safe
        self._rng_lock = threading.Lock()

    @override
    def select_next_pair(
        self, jam_id: str, judge_id: str, entries: Sequence[Entry]
    ) -> SelectedPair | PairUnavailable:
        if len(entries) < 2:
            return PairUnavailable(UnavailableReason.INSUFFICIENT_ENTRIES)
        comparisons = self.store.comparisons_for_jam(jam_id)
        return self.choose_pair(judge_id, entries, comparisons)

    def choose_pair(
        self,
        judge_id: str,
        entries: Sequence[Entry],
        comparisons: Sequence[Comparison],
    ) -> SelectedPair | PairUnavailable:
        """Pick a pair for the judge from an in-memory snapshot."""
        entries = unique_entries(entries)
        if len(entries) < 2:
            return PairUnavailable(UnavailableReason.INSUFFICIENT_ENTRIES)

        candidates = unjudged_pairs(judge_id, entries, comparisons)
        if not candidates:
            return PairUnavailable(UnavailableReason.EXHAUSTED)

        with self._rng_lock:
            first, second = candidates[self._pick_index(candidates, comparisons)]
            return self._present(first, second)

    @abstractmethod
    def _pick_index(
        self,
        candidates: Sequence[tuple[Entry, Entry]],
        comparisons: Sequence[Comparison],
    ) -> int:
        """Index into candidates of the pair to present."""
        pass

    def _present(self, first: Entry, second: Entry) -> SelectedPair:
        # Fresh coin flip per call to avoid positional bias
        if self.rng.random() < 0.5:
            return SelectedPair(entry_a=first, entry_b=second)
        return SelectedPair(entry_a=second, entry_b=first)
