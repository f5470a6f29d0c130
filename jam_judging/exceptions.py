"""
Exception classes for the jam judging system.

Kept in one module so models, storage and the service can share them
without import cycles.
"""


class JamJudgingError(Exception):
    """Base exception for all jam judging errors."""
    pass


class ValidationError(JamJudgingError):
    """Malformed entry, outcome, comparison or vote."""
    pass


class ConfigurationError(JamJudgingError):
    """Invalid selector, ranker, tracker or simulation settings."""
    pass


class DuplicateComparisonError(JamJudgingError):
    """Raised by a comparison store when the judge already recorded this pair."""
    pass
