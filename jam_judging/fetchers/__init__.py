"""
Entry fetcher implementations.

Available implementations:
- JSONEntryFetcher: Loads jam entries from a JSON file keyed by jam slug
"""

from .json_fetcher import JSONEntryFetcher

__all__ = ["JSONEntryFetcher"]
