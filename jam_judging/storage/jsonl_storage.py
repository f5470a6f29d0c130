"""
JSONL storage implementation.

Persists comparisons to an append-only JSONL file and keeps an in-memory
index for the uniqueness check and per-judge counts.
"""

import json
import threading
import typing
from pathlib import Path
from typing import Any

from typing_extensions import override

from ..exceptions import DuplicateComparisonError, ValidationError
from ..interfaces import ComparisonStore
from ..logging_config import get_logger
from ..models import Comparison, Outcome, OutcomeKind

# Module-level logger
logger = get_logger("jsonl_storage")

ComparisonKey = tuple[str, str, str, str]


def comparison_to_record(comparison: Comparison) -> dict[str, Any]:
    return {
        "jam_id": comparison.jam_id,
        "judge_id": comparison.judge_id,
        "entry_low_id": comparison.entry_low_id,
        "entry_high_id": comparison.entry_high_id,
        "outcome": {
            "kind": comparison.outcome.kind.value,
            "preference": comparison.outcome.preference,
        },
        "timestamp": comparison.timestamp,
    }


def record_to_comparison(data: dict[str, Any]) -> Comparison:
    """
    Rebuild a comparison from a stored record.

    Raises:
        AssertionError: if required fields are missing or have the wrong type
        ValidationError: if the record violates comparison invariants
    """
    for name in ("jam_id", "judge_id", "entry_low_id", "entry_high_id"):
        assert name in data, f"Missing required field: {name}"
        assert isinstance(data[name], str), f"{name} must be a string"
    assert "outcome" in data, "Missing required field: outcome"
    assert isinstance(data["outcome"], dict), "outcome must be a dictionary"

    outcome_data = typing.cast(dict[str, Any], data["outcome"])
    try:
        kind = OutcomeKind(outcome_data.get("kind"))
    except ValueError as e:
        raise AssertionError(f"Unknown outcome kind: {outcome_data.get('kind')}") from e
    preference = outcome_data.get("preference")
    if preference is not None:
        assert isinstance(preference, (int, float)), "preference must be a number"
        preference = float(preference)

    timestamp = 0.0
    if "timestamp" in data:
        assert isinstance(data["timestamp"], (int, float)), "timestamp must be a number"
        timestamp = float(data["timestamp"])

    return Comparison(
        jam_id=data["jam_id"],
        judge_id=data["judge_id"],
        entry_low_id=data["entry_low_id"],
        entry_high_id=data["entry_high_id"],
        outcome=Outcome(kind, preference),
        timestamp=timestamp,
    )


class JSONLComparisonStore(ComparisonStore):
    """
    JSONL-based comparison store.

    One comparison per line, append-only. The whole log is loaded into memory
    on construction; appends are serialized with a lock so the duplicate check
    and the write happen atomically.
    """

    path: Path

    def __init__(self, path: Path):
        """
        Initialize JSONL comparison store.

        Args:
            path: Path to the JSONL file holding comparisons
        """
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)

        self._lock = threading.Lock()
        self._comparisons = list[Comparison]()
        self._keys = set[ComparisonKey]()

        self._load()
        logger.info(f"JSONL comparison store initialized: {self.path} ({len(self._comparisons)} comparisons)")

    @staticmethod
    def _key(comparison: Comparison) -> ComparisonKey:
        return (
            comparison.jam_id,
            comparison.judge_id,
            comparison.entry_low_id,
            comparison.entry_high_id,
        )

    def _load(self) -> None:
        if not self.path.exists():
            return

        with open(self.path, "r", encoding="utf-8") as f:
            for line in f:
                line = line.strip()
                if not line:
                    continue

                try:
                    data = typing.cast(dict[str, Any], json.loads(line))  # pyright: ignore[reportExplicitAny]
                    assert isinstance(data, dict), "record must be a JSON object"
                    comparison = record_to_comparison(data)
                except (json.JSONDecodeError, AssertionError, ValidationError) as e:
                    # Skip corrupted or invalid lines
                    logger.warning(f"Skipping invalid JSON line in {self.path}: {e}")
                    continue

                key = self._key(comparison)
                if key in self._keys:
                    logger.warning(f"Skipping duplicate comparison in {self.path}: {key}")
                    continue
                self._keys.add(key)
                self._comparisons.append(comparison)

    @override
    def append(self, comparison: Comparison) -> None:
        key = self._key(comparison)
        with self._lock:
            if key in self._keys:
                raise DuplicateComparisonError(
                    f"Judge {comparison.judge_id} already compared {comparison.entry_low_id} "
                    f"and {comparison.entry_high_id} in {comparison.jam_id}"
                )

            with open(self.path, "a", encoding="utf-8") as f:
                json.dump(comparison_to_record(comparison), f, ensure_ascii=False)
                f.write("\n")

            self._keys.add(key)
            self._comparisons.append(comparison)

        logger.debug(f"Persisted comparison {key} -> {comparison.outcome.kind.value}")

    @override
    def comparisons_for_jam(
        self,
        jam_id: str,
        from_timestamp: float | None = None,
        to_timestamp: float | None = None,
    ) -> list[Comparison]:
        with self._lock:
            snapshot = [c for c in self._comparisons if c.jam_id == jam_id]

        if from_timestamp is not None:
            snapshot = [c for c in snapshot if c.timestamp >= from_timestamp]
        if to_timestamp is not None:
            snapshot = [c for c in snapshot if c.timestamp <= to_timestamp]

        snapshot.sort(key=lambda c: c.timestamp, reverse=True)
        return snapshot

    @override
    def count_for_judge(self, jam_id: str, judge_id: str) -> int:
        with self._lock:
            return sum(1 for c in self._comparisons if c.jam_id == jam_id and c.judge_id == judge_id)

    def get_comparison_count(self) -> int:
        """Get number of stored comparisons across all jams."""
        with self._lock:
            return len(self._comparisons)

    def clear(self) -> None:
        """Delete all comparisons (for testing)."""
        with self._lock:
            if self.path.exists():
                self.path.unlink()
            self._comparisons.clear()
            self._keys.clear()
