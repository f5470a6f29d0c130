"""
Tests for JudgingService.

Covers the pair/vote flow: availability reasons, vote canonicalization,
duplicate rejection, session boundaries and ranking reports.
"""

import json
from itertools import combinations
from pathlib import Path

import pytest

from jam_judging.exceptions import ValidationError
from jam_judging.fetchers.json_fetcher import JSONEntryFetcher
from jam_judging.models import Comparison, Outcome, PairUnavailable, UnavailableReason
from jam_judging.pair_selectors.uncertainty_selector import UncertaintyPairSelector
from jam_judging.rankers.spectral_ranker import SpectralRanker
from jam_judging.service import JudgingService, PairOffer
from jam_judging.session import SessionTracker
from jam_judging.storage.jsonl_storage import JSONLComparisonStore

JAM = "gj7"


@pytest.fixture
def make_service(tmp_path: Path):
    """Build a service over an entries file holding the given entry ids."""

    def _make(entry_ids: list[str]) -> JudgingService:
        entries_path = tmp_path / "entries.json"
        entries_path.write_text(json.dumps({JAM: [{"id": i, "title": f"Game {i}"} for i in entry_ids]}))
        store = JSONLComparisonStore(tmp_path / "comparisons.jsonl")
        return JudgingService(
            fetcher=JSONEntryFetcher(entries_path),
            store=store,
            selector=UncertaintyPairSelector(store, seed=0),
            tracker=SessionTracker(store),
            ranker=SpectralRanker(),
        )

    return _make


class TestNextPair:
    def test_insufficient_entries(self, make_service) -> None:
        service = make_service(["only"])

        result = service.next_pair(JAM, "judge-1")

        assert result == PairUnavailable(UnavailableReason.INSUFFICIENT_ENTRIES)

    def test_unknown_jam_is_insufficient(self, make_service) -> None:
        service = make_service(["a", "b"])

        result = service.next_pair("gj99", "judge-1")

        assert result == PairUnavailable(UnavailableReason.INSUFFICIENT_ENTRIES)

    def test_offers_pair_with_progress(self, make_service) -> None:
        # Arrange
        service = make_service(["a", "b", "c"])
        _ = service.record_vote(JAM, "judge-1", "a", "b", winner_id="a")

        # Act
        offer = service.next_pair(JAM, "judge-1")

        # Assert
        assert isinstance(offer, PairOffer)
        assert {offer.entry_a.entry_id, offer.entry_b.entry_id} != {"a", "b"}
        assert offer.entry_a.entry_id != offer.entry_b.entry_id
        assert offer.progress.completed_in_session == 1
        assert offer.progress.session_size == 10

    def test_exhausted_after_every_pair(self, make_service) -> None:
        service = make_service(["a", "b", "c"])
        for first, second in combinations(["a", "b", "c"], 2):
            _ = service.record_vote(JAM, "judge-1", first, second)

        result = service.next_pair(JAM, "judge-1")

        assert result == PairUnavailable(UnavailableReason.EXHAUSTED)
        assert isinstance(service.next_pair(JAM, "judge-2"), PairOffer)

    def test_judge_is_never_offered_a_judged_pair(self, make_service) -> None:
        ids = ["a", "b", "c", "d"]
        service = make_service(ids)
        seen = set[frozenset[str]]()

        for _ in range(6):
            offer = service.next_pair(JAM, "judge-1")
            assert isinstance(offer, PairOffer)
            pair = frozenset({offer.entry_a.entry_id, offer.entry_b.entry_id})
            assert pair not in seen
            seen.add(pair)
            _ = service.record_vote(JAM, "judge-1", offer.entry_a.entry_id, offer.entry_b.entry_id,
                                    winner_id=offer.entry_a.entry_id)

        assert len(seen) == 6
        assert isinstance(service.next_pair(JAM, "judge-1"), PairUnavailable)


class TestRecordVote:
    def test_winner_is_canonicalized(self, make_service) -> None:
        """A vote shown as (b, a) is stored as a-vs-b with the preference inverted."""
        # Arrange
        service = make_service(["a", "b"])

        # Act
        receipt = service.record_vote(JAM, "judge-1", "b", "a", winner_id="b")

        # Assert
        assert receipt.recorded
        [stored] = service.store.comparisons_for_jam(JAM)
        assert (stored.entry_low_id, stored.entry_high_id) == ("a", "b")
        assert stored.outcome == Outcome.decided(0.0)
        assert stored.winner_id() == "b"

    def test_graded_preference(self, make_service) -> None:
        service = make_service(["a", "b"])

        _ = service.record_vote(JAM, "judge-1", "b", "a", preference=0.25)

        [stored] = service.store.comparisons_for_jam(JAM)
        assert stored.outcome == Outcome.decided(0.75)

    def test_half_preference_is_tie(self, make_service) -> None:
        service = make_service(["a", "b"])

        _ = service.record_vote(JAM, "judge-1", "a", "b", preference=0.5)

        [stored] = service.store.comparisons_for_jam(JAM)
        assert stored.outcome == Outcome.tie()

    def test_no_winner_is_skip(self, make_service) -> None:
        service = make_service(["a", "b"])

        receipt = service.record_vote(JAM, "judge-1", "a", "b")

        assert receipt.recorded
        [stored] = service.store.comparisons_for_jam(JAM)
        assert stored.outcome.is_skipped
        assert receipt.progress.completed_in_session == 1

    def test_duplicate_in_either_order_not_recorded(self, make_service) -> None:
        service = make_service(["a", "b"])
        _ = service.record_vote(JAM, "judge-1", "a", "b", winner_id="a")

        receipt = service.record_vote(JAM, "judge-1", "b", "a", winner_id="b")

        assert not receipt.recorded
        assert not receipt.session_complete
        [stored] = service.store.comparisons_for_jam(JAM)
        assert stored.winner_id() == "a"

    @pytest.mark.parametrize(
        "entry_a, entry_b, kwargs",
        [
            ("a", "ghost", {"winner_id": "a"}),
            ("a", "b", {"winner_id": "c"}),
            ("a", "b", {"winner_id": "a", "preference": 0.8}),
            ("a", "a", {"winner_id": "a"}),
            ("a", "b", {"preference": 1.5}),
        ],
    )
    def test_invalid_votes_rejected(self, make_service, entry_a, entry_b, kwargs) -> None:
        service = make_service(["a", "b", "c"])

        with pytest.raises(ValidationError):
            _ = service.record_vote(JAM, "judge-1", entry_a, entry_b, **kwargs)

        assert service.store.comparisons_for_jam(JAM) == []

    def test_session_complete_on_tenth_vote(self, make_service) -> None:
        # Arrange - 6 entries give 15 pairs
        ids = ["a", "b", "c", "d", "e", "f"]
        service = make_service(ids)

        # Act
        receipts = [
            service.record_vote(JAM, "judge-1", first, second, winner_id=first)
            for first, second in combinations(ids, 2)
        ]

        # Assert
        completed = [i for i, receipt in enumerate(receipts, start=1) if receipt.session_complete]
        assert completed == [10]
        assert receipts[9].progress.completed_in_session == 0
        assert receipts[9].progress.sessions_completed == 1
        assert receipts[-1].progress.completed_in_session == 5


class TestRankingReport:
    def test_report_ranks_and_counts(self, make_service) -> None:
        # Arrange
        service = make_service(["a", "b", "c"])
        _ = service.record_vote(JAM, "judge-1", "a", "b", winner_id="b")
        _ = service.record_vote(JAM, "judge-1", "b", "c", winner_id="b")
        _ = service.record_vote(JAM, "judge-2", "a", "b")

        # Act
        report = service.ranking_report(JAM)

        # Assert
        assert report.jam_id == JAM
        assert report.rankings[0].entry.entry_id == "b"
        assert [r.rank for r in report.rankings] == [1, 2, 3]
        assert report.stats.total_judges == 2
        assert report.stats.total_comparisons == 3
        assert report.stats.skipped_count == 1
        assert report.stats.coverage_percent == pytest.approx(200 / 3)

    def test_report_filters_by_time_range(self, make_service) -> None:
        service = make_service(["a", "b"])
        service.store.append(Comparison(JAM, "early", "a", "b", Outcome.decided(1.0), timestamp=100.0))
        service.store.append(Comparison(JAM, "late", "a", "b", Outcome.decided(0.0), timestamp=500.0))

        report = service.ranking_report(JAM, from_timestamp=400.0)

        assert report.stats.total_comparisons == 1
        assert report.rankings[0].entry.entry_id == "b"

    def test_report_without_comparisons_is_neutral(self, make_service) -> None:
        service = make_service(["x", "y"])

        report = service.ranking_report(JAM)

        assert [(r.entry.entry_id, r.score) for r in report.rankings] == [("x", 50.0), ("y", 50.0)]
        assert report.stats.coverage_percent == 0.0
