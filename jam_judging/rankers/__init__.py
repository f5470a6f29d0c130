"""
Ranker implementations.

Available implementations:
- SpectralRanker: Power iteration over the pairwise win matrix with uniform
  teleportation for entries that were never beaten
"""

from .spectral_ranker import SpectralRanker

__all__ = ["SpectralRanker"]
