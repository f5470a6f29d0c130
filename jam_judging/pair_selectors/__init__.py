"""
Pair selector implementations.

Provides implementations of the PairSelector interface for choosing which
pair of entries a judge compares next.

Available implementations:
- UncertaintyPairSelector: Samples pairs weighted by Beta-Bernoulli outcome uncertainty
- RandomPairSelector: Uniformly samples unjudged pairs (baseline)
"""

from .random_selector import RandomPairSelector
from .uncertainty_selector import UncertaintyPairSelector, beta_variance, tally_wins

__all__ = ["RandomPairSelector", "UncertaintyPairSelector", "beta_variance", "tally_wins"]
