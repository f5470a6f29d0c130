"""
Per-judge session tracking.

Progress and exhaustion are derived from a single comparison count; nothing
here is persisted.
"""

from collections.abc import Sequence

from .constants import JUDGING_SESSION_SIZE, total_pair_count
from .exceptions import ConfigurationError
from .interfaces import ComparisonStore
from .logging_config import get_logger
from .models import Entry, SessionProgress

logger = get_logger("session_tracker")


class SessionTracker:
    """Derives session progress and pair exhaustion for a judge."""

    def __init__(self, store: ComparisonStore, session_size: int = JUDGING_SESSION_SIZE):
        if session_size <= 0:
            raise ConfigurationError(f"session_size must be positive, got {session_size}")
        self.store = store
        self.session_size = session_size

    def progress_from_count(self, total: int) -> SessionProgress:
        return SessionProgress(
            completed_in_session=total % self.session_size,
            session_size=self.session_size,
            sessions_completed=total // self.session_size,
        )

    def get_session_progress(self, jam_id: str, judge_id: str) -> SessionProgress:
        total = self.store.count_for_judge(jam_id, judge_id)
        return self.progress_from_count(total)

    def has_exhausted_all_pairs(
        self, jam_id: str, judge_id: str, entries: Sequence[Entry]
    ) -> bool:
        """True once the judge has as many comparisons as there are pairs."""
        count = self.store.count_for_judge(jam_id, judge_id)
        exhausted = count >= total_pair_count(len(entries))
        if exhausted:
            logger.debug(f"Judge {judge_id} exhausted {jam_id}: {count} comparisons, {len(entries)} entries")
        return exhausted

    @staticmethod
    def is_session_boundary(progress: SessionProgress) -> bool:
        """True right after a judge finishes a full session."""
        return progress.completed_in_session == 0 and progress.sessions_completed > 0
