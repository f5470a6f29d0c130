"""
Core dataclasses for the jam judging system.

Defines entries, tagged pairwise outcomes, canonical comparisons and the
derived session/ranking results, with validation.
"""

import time
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .exceptions import ValidationError

TIE_POINT = 0.5

PairKey = tuple[str, str]


@dataclass(frozen=True)
class Entry:
    """A submission being ranked within a jam. Metadata is not interpreted."""

    entry_id: str
    title: str = ""
    metadata: dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    def __post_init__(self) -> None:
        if not self.entry_id:
            raise ValidationError("entry_id cannot be empty")


def unique_entries(entries: Iterable[Entry]) -> list[Entry]:
    """Drop repeated entry ids, keeping the first occurrence."""
    seen = set[str]()
    unique = list[Entry]()
    for entry in entries:
        if entry.entry_id in seen:
            continue
        seen.add(entry.entry_id)
        unique.append(entry)
    return unique


class OutcomeKind(str, Enum):
    DECIDED = "decided"
    TIE = "tie"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class Outcome:
    """
    Result of one pairwise judgement.

    `preference` is only set for DECIDED outcomes and expresses preference
    toward the first entry of the pair it is attached to: 1.0 is a hard win,
    0.0 a hard loss, values in between are partial preference. The tie point
    itself is represented by the TIE kind, never by a decided 0.5.
    """

    kind: OutcomeKind
    preference: float | None = None

    def __post_init__(self) -> None:
        if self.kind is OutcomeKind.DECIDED:
            if self.preference is None:
                raise ValidationError("decided outcome requires a preference")
            if not 0.0 <= self.preference <= 1.0:
                raise ValidationError(
                    f"preference must be within [0, 1], got {self.preference}"
                )
            if self.preference == TIE_POINT:
                raise ValidationError("preference of 0.5 is a tie, use Outcome.tie()")
        elif self.preference is not None:
            raise ValidationError(f"{self.kind.value} outcome cannot carry a preference")

    @classmethod
    def decided(cls, preference: float) -> "Outcome":
        return cls(OutcomeKind.DECIDED, float(preference))

    @classmethod
    def tie(cls) -> "Outcome":
        return cls(OutcomeKind.TIE)

    @classmethod
    def skipped(cls) -> "Outcome":
        return cls(OutcomeKind.SKIPPED)

    @classmethod
    def from_score(cls, score: float | None) -> "Outcome":
        """Build an outcome from the legacy nullable score (None = skip, 0.5 = tie)."""
        if score is None:
            return cls.skipped()
        if score == TIE_POINT:
            return cls.tie()
        return cls.decided(score)

    @property
    def score(self) -> float | None:
        """Legacy nullable-score view of this outcome."""
        if self.kind is OutcomeKind.SKIPPED:
            return None
        if self.kind is OutcomeKind.TIE:
            return TIE_POINT
        return self.preference

    @property
    def is_decided(self) -> bool:
        return self.kind is OutcomeKind.DECIDED

    @property
    def is_skipped(self) -> bool:
        return self.kind is OutcomeKind.SKIPPED

    def inverted(self) -> "Outcome":
        """Same judgement seen from the other entry's side."""
        if self.kind is OutcomeKind.DECIDED:
            assert self.preference is not None
            return Outcome.decided(1.0 - self.preference)
        return self

    def favours_first(self) -> bool:
        return self.is_decided and self.preference is not None and self.preference > TIE_POINT

    def favours_second(self) -> bool:
        return self.is_decided and self.preference is not None and self.preference < TIE_POINT


@dataclass(frozen=True)
class Comparison:
    """One judge's canonical outcome for one pair of entries in a jam."""

    jam_id: str
    judge_id: str
    entry_low_id: str
    entry_high_id: str
    outcome: Outcome
    timestamp: float = field(default_factory=time.time)

    def __post_init__(self) -> None:
        if not self.jam_id:
            raise ValidationError("jam_id cannot be empty")
        if not self.judge_id:
            raise ValidationError("judge_id cannot be empty")
        if not self.entry_low_id < self.entry_high_id:
            raise ValidationError(
                f"comparison is not canonical: {self.entry_low_id!r} must sort before {self.entry_high_id!r}"
            )

    @property
    def pair_key(self) -> PairKey:
        return (self.entry_low_id, self.entry_high_id)

    def winner_id(self) -> str | None:
        """Id of the preferred entry, or None for ties and skips."""
        if self.outcome.favours_first():
            return self.entry_low_id
        if self.outcome.favours_second():
            return self.entry_high_id
        return None

    def loser_id(self) -> str | None:
        if self.outcome.favours_first():
            return self.entry_high_id
        if self.outcome.favours_second():
            return self.entry_low_id
        return None


@dataclass(frozen=True)
class SessionProgress:
    """Derived per-judge progress; never persisted."""

    completed_in_session: int
    session_size: int
    sessions_completed: int


class UnavailableReason(str, Enum):
    INSUFFICIENT_ENTRIES = "insufficient_entries"
    EXHAUSTED = "exhausted"


@dataclass(frozen=True)
class PairUnavailable:
    """No pair can be offered, and why."""

    reason: UnavailableReason


@dataclass(frozen=True)
class SelectedPair:
    """A pair in presentation order. Not canonical; never store it as-is."""

    entry_a: Entry
    entry_b: Entry


@dataclass
class RankedEntry:
    entry: Entry
    score: float
    rank: int


@dataclass(frozen=True)
class RankingStats:
    total_judges: int
    total_comparisons: int
    skipped_count: int
    coverage_percent: float
