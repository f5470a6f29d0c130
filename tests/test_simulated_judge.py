"""
Tests for SimulatedJudge implementation.

Focus on ground truth + noise behavior.
"""

import pytest

from jam_judging.exceptions import ConfigurationError
from jam_judging.judges.sim_judge import SimulatedJudge
from jam_judging.models import Entry


class TestSimulatedJudge:
    """Test SimulatedJudge behavior through public interface."""

    def test_zero_noise_picks_better_entry(self) -> None:
        """With noise=0, the higher ground truth score always wins."""
        # Arrange
        judge = SimulatedJudge("sim", {"a": 10.0, "b": 5.0}, noise=0.0)

        # Act
        results = {judge.judge_pair(Entry("a"), Entry("b")), judge.judge_pair(Entry("b"), Entry("a"))}

        # Assert
        assert results == {"a"}

    def test_noise_adds_variance(self) -> None:
        judge = SimulatedJudge("sim", {"a": 0.5, "b": 0.4}, noise=1.0, seed=3)

        winners = {judge.judge_pair(Entry("a"), Entry("b")) for _ in range(50)}

        assert winners == {"a", "b"}, "High noise should flip some close votes"

    def test_seed_reproducible(self) -> None:
        truth = {"a": 0.5, "b": 0.4}
        first = SimulatedJudge("sim", truth, noise=0.5, seed=42)
        second = SimulatedJudge("sim", truth, noise=0.5, seed=42)

        votes_first = [first.judge_pair(Entry("a"), Entry("b")) for _ in range(20)]
        votes_second = [second.judge_pair(Entry("a"), Entry("b")) for _ in range(20)]

        assert votes_first == votes_second

    def test_skip_rate_one_always_skips(self) -> None:
        judge = SimulatedJudge("sim", {"a": 1.0, "b": 0.0}, skip_rate=1.0)

        assert judge.judge_pair(Entry("a"), Entry("b")) is None

    def test_invalid_skip_rate(self) -> None:
        with pytest.raises(ConfigurationError):
            _ = SimulatedJudge("sim", {}, skip_rate=1.5)

    def test_ground_truth_is_copied(self) -> None:
        judge = SimulatedJudge("sim", {"a": 1.0})

        truth = judge.get_ground_truth()
        truth["a"] = 0.0

        assert judge.get_ground_truth() == {"a": 1.0}
