# harvest_service/run_harvest.py

import argparse
import asyncio
import sys
from pathlib import Path
from typing import List, Optional

import structlog

from .config import load_settings
from .core.exceptions import ConfigError
from .engine import HarvestEngine
from .observability.logger import configure_logging
from .parsing.document import RaceDocument
from .parsing.entries import default_strategies, extract_entries
from .persistence import write_results
from .utils.text import truncate

EXIT_OK = 0
EXIT_FATAL = 1
EXIT_NO_RESULTS = 2

# Rows of each table shown when inspecting a saved page
PREVIEW_ROWS = 5


def _int_pair(value: str) -> tuple:
    """Parses "1-12" into (1, 12)."""
    try:
        low, high = (int(part) for part in value.split("-", 1))
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected LOW-HIGH, got {value!r}")
    return low, high


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="race-harvester",
        description="Scan race_id pages and recover race entries as JSON.",
    )
    parser.add_argument("--batch-size", type=int, help="Concurrent fetches per batch.")
    parser.add_argument("--max-candidates", type=int, help="Total race ids to examine.")
    parser.add_argument("--days-back", type=int, help="Oldest accepted race date, in days before today.")
    parser.add_argument("--days-forward", type=int, help="Latest accepted race date, in days after today.")
    parser.add_argument("--min-horses", type=int, help="Minimum horses for a race to be kept.")
    parser.add_argument("--venues", help="Comma separated venue codes in priority order, e.g. 05,06,09.")
    parser.add_argument("--meetings", type=_int_pair, help="Meeting number range, e.g. 1-6.")
    parser.add_argument("--days", type=_int_pair, help="Meeting day range, e.g. 1-12.")
    parser.add_argument("--races", type=_int_pair, help="Race number range, e.g. 1-12.")
    parser.add_argument("--page-kind", choices=["entry", "result"], help="Which race page to scan.")
    parser.add_argument("--output-dir", help="Directory for races.json and summary.json.")
    parser.add_argument("--strict", action="store_true", default=None, help="Exit non-zero when no races are found.")
    parser.add_argument("--log-level", help="Logging level (default from settings).")
    parser.add_argument("--json-logs", action="store_true", default=None, help="Emit JSON log lines.")
    parser.add_argument(
        "--parse-file",
        type=Path,
        help="Run the horse-table extraction on a saved HTML page instead of scanning.",
    )
    return parser


def settings_overrides(args: argparse.Namespace) -> dict:
    return {
        "BATCH_SIZE": args.batch_size,
        "MAX_CANDIDATES": args.max_candidates,
        "DAYS_BACK": args.days_back,
        "DAYS_FORWARD": args.days_forward,
        "MIN_HORSES": args.min_horses,
        "VENUE_CODES": [v.strip() for v in args.venues.split(",") if v.strip()] if args.venues is not None else None,
        "MEETING_RANGE": args.meetings,
        "DAY_RANGE": args.days,
        "RACE_RANGE": args.races,
        "PAGE_KIND": args.page_kind,
        "OUTPUT_DIR": args.output_dir,
        "STRICT_MODE": args.strict,
        "LOG_LEVEL": args.log_level,
        "LOG_JSON": args.json_logs,
    }


def inspect_page(path: Path, settings) -> int:
    """
    Runs the extractor against a saved page and logs what it saw: the first
    rows of every table cell by cell, then the recovered horses. Used to
    work out the column layout of a page variant the extractor misses.
    """
    log = structlog.get_logger("race-harvester.inspect")
    document = RaceDocument(path.read_text(encoding="utf-8", errors="replace"))
    log.info("Page loaded", file=str(path), title=document.title)

    for number, table in enumerate(document.select("table"), start=1):
        rows = table.css("tr")
        log.info("Table", table=number, rows=len(rows))
        for index, row in enumerate(rows[:PREVIEW_ROWS]):
            cells = RaceDocument.cell_texts(row, "td, th")
            if cells:
                log.info("Row", table=number, row=index, cells=[truncate(c) for c in cells])

    strategies = default_strategies(settings.PAGE_KIND, settings.JOCKEY_STRICT)
    entries = extract_entries(document, strategies, minimum=settings.MIN_HORSES)
    for entry in entries:
        log.info("Horse", position=entry.position, name=entry.name, jockey=entry.jockey)

    if len(entries) < settings.MIN_HORSES:
        log.warning("Too few horses recovered", horses=len(entries), minimum=settings.MIN_HORSES)
        return EXIT_NO_RESULTS
    log.info("Extraction succeeded", horses=len(entries))
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    log = structlog.get_logger("race-harvester")

    try:
        settings = load_settings(**settings_overrides(args))
    except ConfigError as e:
        configure_logging("INFO")
        log.error("Invalid configuration, harvest not started", error=str(e), field=e.field)
        return EXIT_FATAL

    configure_logging(settings.LOG_LEVEL, json_output=settings.LOG_JSON)

    if args.parse_file is not None:
        try:
            return inspect_page(args.parse_file, settings)
        except OSError as e:
            log.error("Cannot read page", file=str(args.parse_file), error=str(e))
            return EXIT_FATAL

    run = asyncio.run(HarvestEngine(config=settings).run())

    races_path, summary_path = write_results(run.result, settings.OUTPUT_DIR)
    log.info(
        "Results written",
        races=run.result.summary.total_races,
        graded=run.result.summary.graded_stakes,
        races_file=str(races_path),
        summary_file=str(summary_path),
    )

    if settings.STRICT_MODE and run.result.summary.total_races == 0:
        return EXIT_NO_RESULTS
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
