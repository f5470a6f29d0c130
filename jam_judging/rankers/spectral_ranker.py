"""
Spectral ranker implementation.

Aggregates sparse pairwise outcomes into a global 0-100 score with a
PageRank-style power iteration over the column-normalized win matrix.
"""

from collections.abc import Sequence

import numpy as np

from ..constants import (
    DEFAULT_POWER_ITERATIONS,
    MAX_SCORE,
    NEUTRAL_SCORE,
    RANK_EPSILON,
    total_pair_count,
)
from ..exceptions import ConfigurationError
from ..logging_config import get_logger
from ..models import Comparison, Entry, RankedEntry, RankingStats, unique_entries


class SpectralRanker:
    """
    Ranks entries by the dominant eigenvector of their win matrix.

    M[i][j] counts how often entry i beat entry j. Each column is normalized
    into a distribution over the entries that beat j; a column with no
    evidence teleports uniformly so never-beaten entries do not become rank
    sinks. The stationary vector is approximated by power iteration and then
    min-max scaled to [0, 100].

    Stateless between calls: every ranking is recomputed from the snapshot.
    """

    def __init__(
        self,
        iterations: int = DEFAULT_POWER_ITERATIONS,
        tolerance: float | None = None,
        epsilon: float = RANK_EPSILON,
    ):
        """
        Initialize spectral ranker.

        Args:
            iterations: Power iteration budget (fixed count when tolerance is None)
            tolerance: Stop early once the L1 change between iterations drops below this
            epsilon: Threshold below which column sums and score ranges count as zero
        """
        if iterations < 1:
            raise ConfigurationError(f"iterations must be at least 1, got {iterations}")
        if tolerance is not None and tolerance <= 0:
            raise ConfigurationError(f"tolerance must be positive, got {tolerance}")
        self.iterations = iterations
        self.tolerance = tolerance
        self.epsilon = epsilon
        self.logger = get_logger("spectral_ranker")

    def win_matrix(self, entries: Sequence[Entry], comparisons: Sequence[Comparison]) -> np.ndarray:
        """Decided-win counts between entries, indexed by input position."""
        index = {entry.entry_id: i for i, entry in enumerate(entries)}
        matrix = np.zeros((len(entries), len(entries)), dtype=float)

        ignored = 0
        for comparison in comparisons:
            winner = comparison.winner_id()
            loser = comparison.loser_id()
            if winner is None or loser is None:
                continue
            if winner not in index or loser not in index:
                ignored += 1
                continue
            matrix[index[winner], index[loser]] += 1

        if ignored:
            self.logger.debug(f"Ignored {ignored} comparisons referencing unknown entries")
        return matrix

    def stochastic_matrix(self, matrix: np.ndarray) -> np.ndarray:
        """Column-normalize, teleporting uniformly for columns without evidence."""
        n = matrix.shape[0]
        col_sums = matrix.sum(axis=0)
        normalized = np.full((n, n), 1.0 / n)
        has_evidence = col_sums > self.epsilon
        normalized[:, has_evidence] = matrix[:, has_evidence] / col_sums[has_evidence]
        return normalized

    def power_iterate(self, normalized: np.ndarray) -> np.ndarray:
        n = normalized.shape[0]
        vector = np.full(n, 1.0 / n)

        for iteration in range(1, self.iterations + 1):
            new_vector = normalized @ vector
            total = new_vector.sum()
            if total > self.epsilon:
                new_vector = new_vector / total

            delta = float(np.abs(new_vector - vector).sum())
            vector = new_vector
            if self.tolerance is not None and delta < self.tolerance:
                self.logger.debug(f"Power iteration converged after {iteration} iterations (delta={delta:.2e})")
                break

        return vector

    def calculate_rankings(
        self, entries: Sequence[Entry], comparisons: Sequence[Comparison]
    ) -> list[RankedEntry]:
        """
        Rank entries from the full comparison snapshot.

        Returns:
            Entries sorted by score descending with 1-based ranks. Equal scores
            keep their input order. A repeated entry id is ranked once, at its
            first position.
        """
        entries = unique_entries(entries)
        n = len(entries)
        if n == 0:
            return []
        if n == 1:
            return [RankedEntry(entry=entries[0], score=MAX_SCORE, rank=1)]

        matrix = self.win_matrix(entries, comparisons)
        if not matrix.any():
            self.logger.debug("No decided comparisons yet, all entries neutral")
            return [
                RankedEntry(entry=entry, score=NEUTRAL_SCORE, rank=i + 1)
                for i, entry in enumerate(entries)
            ]

        vector = self.power_iterate(self.stochastic_matrix(matrix))

        low = float(vector.min())
        spread = float(vector.max()) - low
        if spread > self.epsilon:
            scores = [(float(v) - low) / spread * MAX_SCORE for v in vector]
        else:
            scores = [NEUTRAL_SCORE] * n

        order = sorted(range(n), key=lambda i: (-scores[i], i))
        return [
            RankedEntry(entry=entries[i], score=scores[i], rank=rank)
            for rank, i in enumerate(order, 1)
        ]

    def calculate_stats(
        self, entries: Sequence[Entry], comparisons: Sequence[Comparison]
    ) -> RankingStats:
        """Judge count, comparison totals and share of pairs with a non-skipped outcome."""
        entries = unique_entries(entries)
        judges = {c.judge_id for c in comparisons}
        skipped_count = sum(1 for c in comparisons if c.outcome.is_skipped)
        covered = {c.pair_key for c in comparisons if not c.outcome.is_skipped}

        total_pairs = total_pair_count(len(entries))
        coverage_percent = len(covered) / total_pairs * 100.0 if total_pairs > 0 else 0.0

        return RankingStats(
            total_judges=len(judges),
            total_comparisons=len(comparisons),
            skipped_count=skipped_count,
            coverage_percent=coverage_percent,
        )
