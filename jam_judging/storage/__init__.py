"""
Storage implementations.

Provides implementations of the ComparisonStore interface for persisting
pairwise comparisons.

Available implementations:
- JSONLComparisonStore: Append-only JSONL log with an in-memory uniqueness index
"""

from .jsonl_storage import JSONLComparisonStore

__all__ = ["JSONLComparisonStore"]
