"""
Shared constants for judging sessions and rank aggregation.
"""

# Comparisons a judge completes before being asked to continue or stop
JUDGING_SESSION_SIZE = 10

DEFAULT_POWER_ITERATIONS = 100
RANK_EPSILON = 1e-10
NEUTRAL_SCORE = 50.0
MAX_SCORE = 100.0


def total_pair_count(entry_count: int) -> int:
    """Number of unordered pairs among entry_count entries."""
    if entry_count < 2:
        return 0
    return entry_count * (entry_count - 1) // 2
