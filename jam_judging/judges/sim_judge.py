"""
Simulated judge implementation.

Picks winners from latent entry scores with a noise parameter, for dry runs
of a jam before real judges arrive.
"""

import random
from typing import Dict

from typing_extensions import override

from ..exceptions import ConfigurationError
from ..interfaces import Judge
from ..models import Entry


class SimulatedJudge(Judge):
    """
    Simulated judge for testing purposes.

    Compares ground truth scores with added Gaussian noise and occasionally
    skips a pair.
    """

    def __init__(
        self,
        judge_id: str,
        ground_truth: Dict[str, float],
        noise: float = 0.1,
        skip_rate: float = 0.0,
        seed: int | None = None,
    ):
        """
        Initialize simulated judge.

        Args:
            judge_id: Identifier recorded with this judge's votes
            ground_truth: Dict mapping entry_id to true quality score
            noise: Amount of noise to add (0-1, where 1 = full noise)
            skip_rate: Probability of skipping a pair instead of voting
            seed: Random seed for reproducible votes
        """
        if not 0.0 <= skip_rate <= 1.0:
            raise ConfigurationError(f"skip_rate must be within [0, 1], got {skip_rate}")
        self.judge_id = judge_id
        self.ground_truth = ground_truth
        self.noise = max(0.0, min(1.0, noise))  # Clamp to [0, 1]
        self.skip_rate = skip_rate
        self._random = random.Random(seed)

    def _noisy_score(self, entry: Entry) -> float:
        score = self.ground_truth.get(entry.entry_id, 0.0)
        if self.noise == 0:
            return score
        return score + self._random.gauss(0, self.noise)

    @override
    def judge_pair(self, entry_a: Entry, entry_b: Entry) -> str | None:
        if self.skip_rate and self._random.random() < self.skip_rate:
            return None
        if self._noisy_score(entry_a) >= self._noisy_score(entry_b):
            return entry_a.entry_id
        return entry_b.entry_id

    def get_ground_truth(self) -> Dict[str, float]:
        """Get ground truth scores for debugging."""
        return self.ground_truth.copy()
