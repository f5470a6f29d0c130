"""
Random pair selector implementation.

Uniform choice over the pairs a judge has not seen yet; baseline for
comparing against uncertainty sampling.
"""

from collections.abc import Sequence

from typing_extensions import override

from ..logging_config import get_logger
from ..models import Comparison, Entry
from .base import BasePairSelector

logger = get_logger("random_selector")


class RandomPairSelector(BasePairSelector):
    """Random pair selector - for testing/baseline."""

    @override
    def _pick_index(
        self,
        candidates: Sequence[tuple[Entry, Entry]],
        comparisons: Sequence[Comparison],
    ) -> int:
        index = int(self.rng.integers(len(candidates)))
        logger.debug(f"Selected random pair {index + 1}/{len(candidates)}")
        return index
