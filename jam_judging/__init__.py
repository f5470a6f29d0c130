"""
Jam Judging - Pairwise Comparative Judging for Game Jams

Active pair selection driven by Beta-Bernoulli outcome uncertainty, and a
PageRank-style spectral ranking over the recorded pairwise outcomes.
"""

from .canonical import canonicalize, pair_key
from .constants import JUDGING_SESSION_SIZE, total_pair_count
from .exceptions import ConfigurationError, DuplicateComparisonError, JamJudgingError, ValidationError
from .interfaces import ComparisonStore, EntryFetcher, Judge, PairSelector
from .models import (
    Comparison,
    Entry,
    Outcome,
    OutcomeKind,
    PairUnavailable,
    RankedEntry,
    RankingStats,
    SelectedPair,
    SessionProgress,
    UnavailableReason,
)
from .rankers.spectral_ranker import SpectralRanker
from .service import JudgingService, PairOffer, RankingReport, VoteReceipt
from .session import SessionTracker

__version__ = "0.1.0"
__all__ = [
    "canonicalize",
    "pair_key",
    "JUDGING_SESSION_SIZE",
    "total_pair_count",
    "JamJudgingError",
    "ValidationError",
    "ConfigurationError",
    "DuplicateComparisonError",
    "ComparisonStore",
    "EntryFetcher",
    "Judge",
    "PairSelector",
    "Comparison",
    "Entry",
    "Outcome",
    "OutcomeKind",
    "PairUnavailable",
    "RankedEntry",
    "RankingStats",
    "SelectedPair",
    "SessionProgress",
    "UnavailableReason",
    "SpectralRanker",
    "JudgingService",
    "PairOffer",
    "RankingReport",
    "VoteReceipt",
    "SessionTracker",
]
