"""
Uncertainty selector implementation.

Implements uncertainty-based sampling for active ranking: pairs whose
outcome is least settled across all judges are the most likely to be shown.
"""

from collections.abc import Iterable, Sequence

import numpy as np
from typing_extensions import override

from ..canonical import pair_key
from ..logging_config import get_logger
from ..models import Comparison, Entry, PairKey
from .base import BasePairSelector

logger = get_logger("uncertainty_selector")


def beta_variance(wins_low: int, wins_high: int) -> float:
    """
    Posterior variance of the low entry's win probability.

    Beta(1, 1) prior updated with the observed wins on each side:
    alpha = wins_low + 1, beta = wins_high + 1,
    var = alpha * beta / ((alpha + beta)^2 * (alpha + beta + 1)).
    """
    alpha = wins_low + 1
    beta = wins_high + 1
    total = alpha + beta
    return (alpha * beta) / (total**2 * (total + 1))


def tally_wins(comparisons: Iterable[Comparison]) -> dict[PairKey, tuple[int, int]]:
    """
    Count decided wins per canonical pair across all judges.

    Returns:
        pair key -> (wins for the low entry, wins for the high entry).
        Ties and skips count toward neither side.
    """
    tallies = dict[PairKey, tuple[int, int]]()
    for comparison in comparisons:
        wins_low, wins_high = tallies.get(comparison.pair_key, (0, 0))
        if comparison.outcome.favours_first():
            wins_low += 1
        elif comparison.outcome.favours_second():
            wins_high += 1
        tallies[comparison.pair_key] = (wins_low, wins_high)
    return tallies


class UncertaintyPairSelector(BasePairSelector):
    """
    Uncertainty-based selector for active ranking.

    Weights every pair the judge has not yet seen by the Beta-Bernoulli
    posterior variance of its outcome and draws one pair proportionally.
    Untested and evenly split pairs carry the highest weight.
    """

    def _weights(
        self,
        candidates: Sequence[tuple[Entry, Entry]],
        comparisons: Sequence[Comparison],
    ) -> np.ndarray:
        tallies = tally_wins(comparisons)
        return np.array(
            [
                beta_variance(*tallies.get(pair_key(a.entry_id, b.entry_id), (0, 0)))
                for a, b in candidates
            ],
            dtype=float,
        )

    @override
    def _pick_index(
        self,
        candidates: Sequence[tuple[Entry, Entry]],
        comparisons: Sequence[Comparison],
    ) -> int:
        weights = self._weights(candidates, comparisons)
        total = float(weights.sum())

        if total <= 0.0:
            # Not reachable under a Beta(1, 1) prior, kept for degenerate input
            logger.warning("Total uncertainty weight is zero, falling back to uniform choice")
            return int(self.rng.integers(len(candidates)))

        index = int(self.rng.choice(len(candidates), p=weights / total))
        a, b = candidates[index]
        logger.debug(
            f"Selected {a.entry_id} vs {b.entry_id} from {len(candidates)} candidates "
            f"(variance={weights[index]:.4f}, share={weights[index] / total:.3f})"
        )
        return index
