"""
Orchestrator for simulated judging runs.

Drives a set of judges through the judging service concurrently, the way
real judges would hit the pair/vote endpoints, and reports the result.
"""

from concurrent.futures import ThreadPoolExecutor, as_completed, Future
from dataclasses import dataclass, field
from collections.abc import Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from loguru import Logger

from .exceptions import ConfigurationError
from .interfaces import Judge
from .logging_config import get_logger
from .models import PairUnavailable, UnavailableReason
from .service import JudgingService, RankingReport

# Abort if every judge failed and at least this many ran
EARLY_ABORT_THRESHOLD = 2


@dataclass
class SimulationConfig:
    """Configuration for a simulated judging run."""

    jam_id: str
    votes_per_judge: int = 10  # pair requests each judge makes at most
    max_workers: int = 4  # thread pool size

    def __post_init__(self):
        """Validate configuration."""
        if not self.jam_id:
            raise ConfigurationError("jam_id cannot be empty")
        if self.votes_per_judge <= 0:
            raise ConfigurationError(f"votes_per_judge must be positive, got {self.votes_per_judge}")
        if self.max_workers <= 0:
            raise ConfigurationError(f"max_workers must be positive, got {self.max_workers}")


@dataclass
class JudgeRun:
    """What one judge did during a run."""

    judge_id: str
    recorded: int = 0
    skipped: int = 0
    rejected: int = 0
    sessions_completed: int = 0
    unavailable: str | None = None


@dataclass
class SimulationSummary:
    runs: list[JudgeRun] = field(default_factory=list)
    failures: list[tuple[str, str, str]] = field(default_factory=list)  # (judge_id, exception_type, exception_msg)

    @property
    def total_recorded(self) -> int:
        return sum(run.recorded for run in self.runs)

    @property
    def total_rejected(self) -> int:
        return sum(run.rejected for run in self.runs)

    @property
    def exhausted_judges(self) -> list[str]:
        """Judges who ran out of unseen pairs."""
        return [run.judge_id for run in self.runs if run.unavailable == UnavailableReason.EXHAUSTED.value]


class Orchestrator:
    """Runs judges against a JudgingService in parallel."""

    def __init__(self, service: JudgingService, judges: Sequence[Judge], config: SimulationConfig):
        if not judges:
            raise ConfigurationError("at least one judge is required")
        self.service: JudgingService = service
        self.judges: Sequence[Judge] = judges
        self.config: SimulationConfig = config
        self.logger: Logger = get_logger("orchestrator")

    def _run_judge(self, judge: Judge) -> JudgeRun:
        """Pair/vote loop for a single judge (runs in a worker thread)."""
        run = JudgeRun(judge_id=judge.judge_id)
        jam_id = self.config.jam_id

        for _ in range(self.config.votes_per_judge):
            offer = self.service.next_pair(jam_id, judge.judge_id)
            if isinstance(offer, PairUnavailable):
                run.unavailable = offer.reason.value
                self.logger.info(f"Judge {judge.judge_id} stopped: {offer.reason.value}")
                break

            winner_id = judge.judge_pair(offer.entry_a, offer.entry_b)
            receipt = self.service.record_vote(
                jam_id,
                judge.judge_id,
                offer.entry_a.entry_id,
                offer.entry_b.entry_id,
                winner_id=winner_id,
            )
            if not receipt.recorded:
                run.rejected += 1
                continue

            run.recorded += 1
            if winner_id is None:
                run.skipped += 1
            if receipt.session_complete:
                run.sessions_completed += 1
                self.logger.debug(f"Judge {judge.judge_id} completed session {receipt.progress.sessions_completed}")

        return run

    def run(self) -> tuple[SimulationSummary, RankingReport]:
        """Run every judge, then rank the jam."""
        self.logger.info(f"Starting simulation with {len(self.judges)} judges and config: {self.config}")
        summary = SimulationSummary()

        with ThreadPoolExecutor(max_workers=self.config.max_workers) as executor:
            futures: dict[Future[JudgeRun], str] = {
                executor.submit(self._run_judge, judge): judge.judge_id for judge in self.judges
            }
            for future in as_completed(futures):
                judge_id = futures[future]
                try:
                    run = future.result()
                except Exception as e:
                    self.logger.error(f"Judge {judge_id} failed: {e}")
                    summary.failures.append((judge_id, type(e).__name__, str(e)))
                    continue
                summary.runs.append(run)
                self.logger.info(f"Judge {judge_id} finished: {run.recorded} votes recorded, {run.rejected} rejected")

        if len(summary.failures) >= EARLY_ABORT_THRESHOLD and not summary.runs:
            raise RuntimeError(f"All {len(summary.failures)} judges failed - aborting")

        summary.runs.sort(key=lambda run: run.judge_id)
        report = self.service.ranking_report(self.config.jam_id)
        self.logger.info(
            f"Simulation complete: {summary.total_recorded} votes recorded, {summary.total_rejected} rejected"
        )
        return summary, report
