"""
Judging service.

Coordinates entry fetching, pair selection, session tracking, vote recording
and ranking reports for jams. The service never retries a rejected vote;
callers fetch a new pair instead.
"""

from dataclasses import dataclass

from .canonical import canonicalize
from .exceptions import DuplicateComparisonError, ValidationError
from .interfaces import ComparisonStore, EntryFetcher, PairSelector
from .logging_config import get_logger
from .models import (
    Comparison,
    Entry,
    Outcome,
    PairUnavailable,
    RankedEntry,
    RankingStats,
    SessionProgress,
    UnavailableReason,
)
from .rankers.spectral_ranker import SpectralRanker
from .session import SessionTracker


@dataclass(frozen=True)
class PairOffer:
    """A pair to show a judge, with their current session progress."""

    entry_a: Entry
    entry_b: Entry
    progress: SessionProgress


@dataclass(frozen=True)
class VoteReceipt:
    recorded: bool
    session_complete: bool
    progress: SessionProgress


@dataclass(frozen=True)
class RankingReport:
    jam_id: str
    rankings: list[RankedEntry]
    stats: RankingStats


class JudgingService:
    """Entry point for the judging flow of a jam."""

    def __init__(
        self,
        fetcher: EntryFetcher,
        store: ComparisonStore,
        selector: PairSelector,
        tracker: SessionTracker,
        ranker: SpectralRanker,
    ):
        self.fetcher: EntryFetcher = fetcher
        self.store: ComparisonStore = store
        self.selector: PairSelector = selector
        self.tracker: SessionTracker = tracker
        self.ranker: SpectralRanker = ranker
        self.logger = get_logger("judging_service")

    def next_pair(self, jam_id: str, judge_id: str) -> PairOffer | PairUnavailable:
        """Next pair for a judge, or the reason none can be offered."""
        entries = self.fetcher.list_entries(jam_id)
        if len(entries) < 2:
            return PairUnavailable(UnavailableReason.INSUFFICIENT_ENTRIES)

        if self.tracker.has_exhausted_all_pairs(jam_id, judge_id, entries):
            return PairUnavailable(UnavailableReason.EXHAUSTED)

        progress = self.tracker.get_session_progress(jam_id, judge_id)
        selection = self.selector.select_next_pair(jam_id, judge_id, entries)
        if isinstance(selection, PairUnavailable):
            return selection

        return PairOffer(entry_a=selection.entry_a, entry_b=selection.entry_b, progress=progress)

    def record_vote(
        self,
        jam_id: str,
        judge_id: str,
        entry_a_id: str,
        entry_b_id: str,
        winner_id: str | None = None,
        preference: float | None = None,
    ) -> VoteReceipt:
        """
        Record a judge's vote on a presented pair.

        Args:
            jam_id: Jam being judged
            judge_id: Judge casting the vote
            entry_a_id: Entry shown as A
            entry_b_id: Entry shown as B
            winner_id: Preferred entry; None together with no preference means skip
            preference: Graded preference toward A in [0, 1] (0.5 is a tie)

        Returns:
            VoteReceipt; recorded is False when the judge already voted on this pair

        Raises:
            ValidationError: for unknown entries, a winner outside the pair,
                or when both winner_id and preference are given
        """
        entry_ids = {entry.entry_id for entry in self.fetcher.list_entries(jam_id)}
        if entry_a_id not in entry_ids or entry_b_id not in entry_ids:
            raise ValidationError(f"Invalid entry IDs for {jam_id}: {entry_a_id}, {entry_b_id}")
        if winner_id is not None and preference is not None:
            raise ValidationError("Give either winner_id or preference, not both")

        if preference is not None:
            outcome = Outcome.from_score(preference)
        elif winner_id is None:
            outcome = Outcome.skipped()
        elif winner_id == entry_a_id:
            outcome = Outcome.decided(1.0)
        elif winner_id == entry_b_id:
            outcome = Outcome.decided(0.0)
        else:
            raise ValidationError(f"Winner {winner_id} is not part of the pair")

        low, high, canonical_outcome = canonicalize(entry_a_id, entry_b_id, outcome)
        comparison = Comparison(
            jam_id=jam_id,
            judge_id=judge_id,
            entry_low_id=low,
            entry_high_id=high,
            outcome=canonical_outcome,
        )

        recorded = True
        try:
            self.store.append(comparison)
            self.logger.info(f"Recorded {canonical_outcome.kind.value} vote by {judge_id} on {low} vs {high} in {jam_id}")
        except DuplicateComparisonError as e:
            recorded = False
            self.logger.warning(f"Vote not recorded: {e}")

        progress = self.tracker.get_session_progress(jam_id, judge_id)
        return VoteReceipt(
            recorded=recorded,
            session_complete=recorded and self.tracker.is_session_boundary(progress),
            progress=progress,
        )

    def ranking_report(
        self,
        jam_id: str,
        from_timestamp: float | None = None,
        to_timestamp: float | None = None,
    ) -> RankingReport:
        """Rankings and coverage statistics over the jam's comparisons."""
        entries = self.fetcher.list_entries(jam_id)
        comparisons = self.store.comparisons_for_jam(jam_id, from_timestamp, to_timestamp)

        rankings = self.ranker.calculate_rankings(entries, comparisons)
        stats = self.ranker.calculate_stats(entries, comparisons)
        self.logger.info(
            f"Ranked {len(rankings)} entries for {jam_id} from {stats.total_comparisons} comparisons "
            f"by {stats.total_judges} judges ({stats.coverage_percent:.0f}% coverage)"
        )
        return RankingReport(jam_id=jam_id, rankings=rankings, stats=stats)
