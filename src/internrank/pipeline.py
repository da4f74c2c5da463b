"""
internrank pipeline - orchestrates the CSV-to-statistics flow.

Rows that fail shape or field checks are dropped silently (counted, never
reported in the output). An input stream that cannot be read yields `{}`.
"""

import csv
import sys
import uuid
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import TextIO

from .dedupe import ApplicantStore
from .exporter import (
    EMPTY_JSON,
    export_csv,
    export_excel,
    export_json,
    generate_report,
    stats_to_json,
    write_stats,
)
from .logger import ProgressLogger
from .models import ExportFormat, RunConfig, RunResult
from .parser import parse_row
from .ranking import TOP_APPLICANT_COUNT, RankingEngine
from .validator import trim, validate_fields

FIELD_COUNT = 4

# Failures while reading the stream itself, as opposed to bad rows
STREAM_ERRORS = (OSError, csv.Error, UnicodeDecodeError)

# No per-field cap: an oversized field is a bad row, not an unreadable stream
csv.field_size_limit(min(sys.maxsize, 2**31 - 1))


@dataclass
class RowCounts:
    """Ingestion tally for one input stream."""

    read: int = 0
    accepted: int = 0
    skip_reasons: dict[str, int] = field(default_factory=dict)

    @property
    def skipped(self) -> int:
        return sum(self.skip_reasons.values())

    def skip(self, reason: str) -> None:
        self.skip_reasons[reason] = self.skip_reasons.get(reason, 0) + 1


def _skip_reason(row: Sequence[str]) -> str | None:
    """Why a raw row is rejected, or None if it can be parsed."""
    if len(row) != FIELD_COUNT:
        return "field_count"
    if not trim(row[0]):
        return "blank_name"
    return validate_fields([trim(value) for value in row])


def process_rows(
    rows: Iterable[Sequence[str]],
    store: ApplicantStore | None = None,
    logger: ProgressLogger | None = None,
) -> tuple[ApplicantStore, RowCounts]:
    """Validate, parse and upsert every acceptable row into a store."""
    store = store if store is not None else ApplicantStore()
    counts = RowCounts()

    for row in rows:
        counts.read += 1
        reason = _skip_reason(row)
        if reason is None:
            try:
                applicant = parse_row([trim(value) for value in row])
            except ValueError:
                # Grammar-valid but impossible date, e.g. month 13
                reason = "unparsable"
            else:
                store.upsert(applicant)
                counts.accepted += 1
                continue

        counts.skip(reason)
        if logger:
            logger.skip(reason, ",".join(row))

    return store, counts


def process_csv(stream: TextIO, top_n: int = TOP_APPLICANT_COUNT) -> str:
    """
    Rank a CSV stream and return the statistics JSON.

    Uses a fresh store per call. Returns `{}` if the stream cannot be read.
    """
    try:
        store, _ = process_rows(csv.reader(stream))
    except STREAM_ERRORS:
        return EMPTY_JSON
    return stats_to_json(RankingEngine(store).stats(top_n))


class Pipeline:
    """Main pipeline orchestrator."""

    def __init__(self, config: RunConfig, verbose: bool = False, quiet: bool = False):
        self.config = config
        self.run_id = datetime.now().strftime("%Y%m%d_%H%M%S") + "_" + uuid.uuid4().hex[:6]
        self.logger = ProgressLogger(self.run_id, verbose=verbose, quiet=quiet)

    def run(self, output_dir: Path | None = None) -> RunResult:
        """
        Execute the full pipeline.

        Raises FileNotFoundError if the input file does not exist. Any other
        read failure is recorded on the result, which then carries no stats.
        """
        input_path = self.config.input_path
        if not input_path.is_file():
            raise FileNotFoundError(f"Input file not found: {input_path}")

        result = RunResult(
            config=self.config,
            run_id=self.run_id,
            started_at=datetime.now(UTC),
        )
        self.logger.phase("Starting run", f"ID={self.run_id}")

        # Step 1: Ingest rows
        self.logger.phase("Reading applicants", f"Step 1/3 - {input_path}")
        try:
            with open(input_path, newline="", encoding="utf-8") as f:
                store, counts = process_rows(csv.reader(f), logger=self.logger)
        except STREAM_ERRORS as e:
            result.errors.append(f"Read error: {e}")
            self.logger.error(f"Could not read {input_path}: {e}")
            result.finished_at = datetime.now(UTC)
            self._export(result, output_dir)
            return result

        result.rows_read = counts.read
        result.rows_accepted = counts.accepted
        result.rows_skipped = counts.skipped
        result.skip_reasons = dict(counts.skip_reasons)
        self.logger.rows(counts.read, counts.accepted, counts.skipped)
        self.logger.skip_reasons(counts.skip_reasons)
        self.logger.deduped(counts.accepted, store.unique_count())

        # Step 2: Rank
        self.logger.phase("Ranking", f"Step 2/3 - {store.unique_count()} applicants")
        engine = RankingEngine(store)
        if self.logger.verbose and engine.is_single_day() and store.unique_count() > 1:
            self.logger.warning("All applications delivered on one day; no score adjustment")
        result.stats = engine.stats(self.config.top_n)
        result.ranking = engine.ranking()
        self.logger.ranked(result.stats.top_applicants)

        result.finished_at = datetime.now(UTC)

        # Step 3: Export
        self._export(result, output_dir)
        return result

    def _export(self, result: RunResult, output_dir: Path | None) -> None:
        output_dir = output_dir or self.config.output_dir
        if not output_dir:
            return

        run_dir = output_dir / self.run_id
        formats = self.config.formats
        self.logger.phase("Exporting", f"Step 3/3 - {len(formats)} format(s)")

        for index, fmt in enumerate(formats, 1):
            path = self._export_one(fmt, result, run_dir)
            self.logger.progress("Export", index, len(formats), str(path))

        self.logger.finish(result.stats.unique_applicants if result.stats else 0, str(run_dir))

    @staticmethod
    def _export_one(fmt: ExportFormat, result: RunResult, run_dir: Path) -> Path:
        if fmt == "json":
            write_stats(result.stats, run_dir / "stats.json")
            export_json(result.ranking, run_dir / "ranking.json")
            return run_dir / "stats.json"
        if fmt == "csv":
            export_csv(result.ranking, run_dir / "ranking.csv")
            return run_dir / "ranking.csv"
        if fmt == "xlsx":
            export_excel(result.ranking, run_dir / "ranking.xlsx")
            return run_dir / "ranking.xlsx"
        generate_report(result, run_dir / "report.md")
        return run_dir / "report.md"


def run_pipeline(
    input_path: Path | str,
    top_n: int = TOP_APPLICANT_COUNT,
    output_dir: Path | None = None,
    formats: list[ExportFormat] | None = None,
    verbose: bool = False,
    quiet: bool = False,
) -> RunResult:
    """Convenience function to run a pipeline."""
    config = RunConfig(
        input_path=Path(input_path),
        top_n=top_n,
        output_dir=output_dir,
        formats=formats or ["json"],
    )
    pipeline = Pipeline(config, verbose=verbose, quiet=quiet)
    return pipeline.run(output_dir=output_dir)
