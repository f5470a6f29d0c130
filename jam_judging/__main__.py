"""
CLI entry point for jam judging.

Prints rankings for a jam from stored comparisons, or runs a simulated
judging round against an entries file.
"""

import argparse
import sys
from argparse import Namespace
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import TypedDict

from prettytable import PrettyTable

from .exceptions import JamJudgingError
from .fetchers.json_fetcher import JSONEntryFetcher
from .judges.sim_judge import SimulatedJudge
from .logging_config import get_logger, setup_logging
from .models import Entry
from .orchestrator import Orchestrator, SimulationConfig, SimulationSummary
from .pair_selectors.random_selector import RandomPairSelector
from .pair_selectors.uncertainty_selector import UncertaintyPairSelector
from .rankers.spectral_ranker import SpectralRanker
from .service import JudgingService, RankingReport
from .session import SessionTracker
from .storage.jsonl_storage import JSONLComparisonStore

TITLE_WIDTH = 30


class CLIArgs(TypedDict):
    """Typed representation of parsed CLI arguments."""
    command: str
    jam: str
    entries: str
    comparisons: str | None
    output_dir: str | None
    date_from: str | None
    date_to: str | None
    iterations: int
    tolerance: float | None
    judges: int
    votes_per_judge: int
    noise: float
    skip_rate: float
    selector: str
    workers: int
    seed: int | None
    debug: bool
    log_level: str
    log_dir: str | None


def parse_args(argv: list[str] | None = None) -> Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Jam Judging - pairwise comparison ranking for game jams"
    )
    _ = parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    _ = parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default="INFO",
        help="Set logging level (default: INFO)"
    )
    _ = parser.add_argument("--log-dir", help="Directory for log files (default: log to stderr only)")

    subparsers = parser.add_subparsers(dest="command", required=True)

    common = argparse.ArgumentParser(add_help=False)
    _ = common.add_argument("--jam", required=True, help="Jam slug (e.g., gj7)")
    _ = common.add_argument("--entries", required=True, help="Path to the entries JSON file")
    _ = common.add_argument(
        "--iterations",
        type=int,
        default=100,
        help="Power iteration budget for ranking (default: 100)"
    )
    _ = common.add_argument(
        "--tolerance",
        type=float,
        help="Stop power iteration early once the change drops below this"
    )

    rankings = subparsers.add_parser("rankings", parents=[common], help="Print rankings for a jam")
    _ = rankings.add_argument("--comparisons", required=True, help="Path to the comparisons JSONL file")
    _ = rankings.add_argument("--from", dest="date_from", help="Start date (ISO format, e.g., 2026-01-15)")
    _ = rankings.add_argument("--to", dest="date_to", help="End date, inclusive (ISO format, e.g., 2026-01-31)")

    simulate = subparsers.add_parser("simulate", parents=[common], help="Run simulated judges on a jam")
    _ = simulate.add_argument("--output-dir", required=True, help="Directory for the comparisons log")
    _ = simulate.add_argument("--judges", type=int, default=3, help="Number of simulated judges (default: 3)")
    _ = simulate.add_argument(
        "--votes-per-judge",
        type=int,
        default=10,
        help="Pairs each judge is offered at most (default: 10)"
    )
    _ = simulate.add_argument("--noise", type=float, default=0.1, help="Judge noise level (0-1, default: 0.1)")
    _ = simulate.add_argument("--skip-rate", type=float, default=0.0, help="Probability a judge skips a pair")
    _ = simulate.add_argument(
        "--selector",
        choices=["uncertainty", "random"],
        default="uncertainty",
        help="Pair selection strategy (default: uncertainty)"
    )
    _ = simulate.add_argument("--workers", type=int, default=1, help="Number of worker threads (default: 1)")
    _ = simulate.add_argument("--seed", type=int, help="Random seed for reproducible runs")

    return parser.parse_args(argv)


def args_to_typed(ns: Namespace) -> CLIArgs:
    """Convert argparse Namespace to typed CLIArgs."""
    return CLIArgs(
        command=ns.command,
        jam=ns.jam,
        entries=ns.entries,
        comparisons=getattr(ns, "comparisons", None),
        output_dir=getattr(ns, "output_dir", None),
        date_from=getattr(ns, "date_from", None),
        date_to=getattr(ns, "date_to", None),
        iterations=ns.iterations,
        tolerance=ns.tolerance,
        judges=getattr(ns, "judges", 0),
        votes_per_judge=getattr(ns, "votes_per_judge", 0),
        noise=getattr(ns, "noise", 0.0),
        skip_rate=getattr(ns, "skip_rate", 0.0),
        selector=getattr(ns, "selector", "uncertainty"),
        workers=getattr(ns, "workers", 1),
        seed=getattr(ns, "seed", None),
        debug=ns.debug,
        log_level=ns.log_level,
        log_dir=ns.log_dir,
    )


def parse_date(value: str) -> datetime:
    """Parse an ISO date, treating naive values as UTC."""
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError as e:
        raise ValueError(f"Invalid date: {value}") from e
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def date_range(date_from: str | None, date_to: str | None) -> tuple[float | None, float | None]:
    """Timestamp bounds for a date range; the end date covers its whole day."""
    from_timestamp = parse_date(date_from).timestamp() if date_from else None
    to_timestamp = None
    if date_to:
        end_of_day = parse_date(date_to) + timedelta(days=1) - timedelta(milliseconds=1)
        to_timestamp = end_of_day.timestamp()
    return from_timestamp, to_timestamp


def team_names(entry: Entry) -> str:
    """Team members from entry metadata, as a list or a plain string."""
    team = entry.metadata.get("team")
    if not team:
        return ""
    if isinstance(team, (list, tuple)):
        return ", ".join(str(member) for member in team)
    return str(team)


def format_report(report: RankingReport) -> str:
    """Render rankings and statistics as text."""
    table = PrettyTable()
    table.field_names = ["Rank", "Score", "Entry", "Title", "Team"]
    table.align["Rank"] = "r"
    table.align["Score"] = "r"
    table.align["Title"] = "l"
    table.align["Team"] = "l"

    for ranked in report.rankings:
        title = ranked.entry.title
        if len(title) > TITLE_WIDTH:
            title = title[: TITLE_WIDTH - 3] + "..."
        table.add_row([ranked.rank, f"{ranked.score:.1f}", ranked.entry.entry_id, title, team_names(ranked.entry)])

    stats = report.stats
    lines = [
        f"Rankings for {report.jam_id}",
        str(table),
        "",
        "Statistics:",
        f"  Total judges: {stats.total_judges}",
        f"  Total comparisons: {stats.total_comparisons}",
        f"  Skipped: {stats.skipped_count}",
        f"  Coverage: {stats.coverage_percent:.0f}% of pairs have >=1 comparison",
    ]
    return "\n".join(lines)


def format_summary(summary: SimulationSummary) -> str:
    table = PrettyTable()
    table.field_names = ["Judge", "Recorded", "Skipped", "Rejected", "Sessions", "Stopped"]
    for run in summary.runs:
        table.add_row([run.judge_id, run.recorded, run.skipped, run.rejected, run.sessions_completed, run.unavailable or "-"])
    return str(table)


def wire_service(args: CLIArgs, store: JSONLComparisonStore) -> JudgingService:
    """Wire dependency injection components."""
    logger = get_logger("wire_service")

    fetcher = JSONEntryFetcher(Path(args["entries"]))
    if args["selector"] == "random":
        selector = RandomPairSelector(store, seed=args["seed"])
    else:
        selector = UncertaintyPairSelector(store, seed=args["seed"])
    logger.info(f"Using {type(selector).__name__}")

    return JudgingService(
        fetcher=fetcher,
        store=store,
        selector=selector,
        tracker=SessionTracker(store),
        ranker=SpectralRanker(iterations=args["iterations"], tolerance=args["tolerance"]),
    )


def run_rankings(args: CLIArgs) -> None:
    comparisons_path = args["comparisons"]
    assert comparisons_path is not None, "rankings requires --comparisons"
    from_timestamp, to_timestamp = date_range(args["date_from"], args["date_to"])

    store = JSONLComparisonStore(Path(comparisons_path))
    service = wire_service(args, store)
    report = service.ranking_report(args["jam"], from_timestamp, to_timestamp)

    if not report.rankings:
        print(f"No entries found for jam: {args['jam']}")
        return

    if args["date_from"] or args["date_to"]:
        print(f"Comparisons: {args['date_from'] or 'beginning'} to {args['date_to'] or 'now'}")
    print(format_report(report))


def run_simulation(args: CLIArgs) -> None:
    output_dir = args["output_dir"]
    assert output_dir is not None, "simulate requires --output-dir"

    store = JSONLComparisonStore(Path(output_dir) / "comparisons.jsonl")
    service = wire_service(args, store)

    # Ground truth: later entries in the file are better
    entries = service.fetcher.list_entries(args["jam"])
    ground_truth = {entry.entry_id: float(i) / max(1, len(entries)) for i, entry in enumerate(entries)}
    seed = args["seed"]
    judges = [
        SimulatedJudge(
            f"sim_judge_{i + 1}",
            ground_truth,
            noise=args["noise"],
            skip_rate=args["skip_rate"],
            seed=None if seed is None else seed + i,
        )
        for i in range(args["judges"])
    ]

    config = SimulationConfig(
        jam_id=args["jam"],
        votes_per_judge=args["votes_per_judge"],
        max_workers=args["workers"],
    )
    summary, report = Orchestrator(service, judges, config).run()

    print(format_summary(summary))
    print()
    print(format_report(report))


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    args = args_to_typed(parse_args(argv))
    setup_logging(
        level=args["log_level"],
        debug=args["debug"],
        log_dir=Path(args["log_dir"]) if args["log_dir"] else None,
    )
    logger = get_logger("main")

    try:
        if args["command"] == "rankings":
            run_rankings(args)
        else:
            run_simulation(args)
    except (ValueError, JamJudgingError) as e:
        # Bad dates, bad entries file, invalid configuration
        logger.error(str(e))
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except FileNotFoundError as e:
        logger.error(str(e))
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        print("\nInterrupted by user", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
