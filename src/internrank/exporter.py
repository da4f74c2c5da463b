"""
internrank exporter - statistics JSON plus CSV/JSON/Excel ranking tables.
"""

import csv
import json
from decimal import ROUND_HALF_UP, Decimal
from pathlib import Path
from typing import Any, TextIO

from .models import ApplicantStats, RankedApplicant, RunResult

# Output for an input stream that could not be read at all
EMPTY_JSON = "{}"

# CSV column order (stable schema - derived from RankedApplicant)
RANKING_COLUMNS = [
    "rank",
    "last_name",
    "first_name",
    "middle_names",
    "email",
    "delivery_datetime",
    "score",
    "adjusted_score",
]


def round_half_up(value: float, places: int = 2) -> float:
    """Round like a human would (2.345 -> 2.35), not banker's rounding."""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def stats_to_dict(stats: ApplicantStats) -> dict[str, Any]:
    """Statistics with output key names and the average rounded half-up."""
    data = stats.model_dump(by_alias=True)
    data["averageScore"] = round_half_up(stats.average_score)
    return data


def stats_to_json(stats: ApplicantStats) -> str:
    """Pretty-printed statistics JSON (2-space indent, fixed key order)."""
    return json.dumps(stats_to_dict(stats), indent=2)


def ranked_to_row(ranked: RankedApplicant) -> dict:
    """Convert a RankedApplicant to a flat CSV row dict."""
    applicant = ranked.applicant
    return {
        "rank": ranked.rank,
        "last_name": applicant.name.last_name,
        "first_name": applicant.name.first_name,
        "middle_names": " ".join(applicant.name.middle_names or ()),
        "email": applicant.email,
        "delivery_datetime": applicant.delivery_datetime.isoformat(),
        "score": f"{applicant.score:.2f}",
        "adjusted_score": f"{ranked.adjusted_score:.2f}",
    }


def export_csv(ranking: list[RankedApplicant], output: Path | TextIO) -> int:
    """Export the ranking to CSV. Returns number of rows written."""
    rows = [ranked_to_row(ranked) for ranked in ranking]

    if isinstance(output, Path):
        output.parent.mkdir(parents=True, exist_ok=True)
        with open(output, "w", newline="", encoding="utf-8") as f:
            writer = csv.DictWriter(f, fieldnames=RANKING_COLUMNS)
            writer.writeheader()
            writer.writerows(rows)
    else:
        writer = csv.DictWriter(output, fieldnames=RANKING_COLUMNS)
        writer.writeheader()
        writer.writerows(rows)

    return len(rows)


def export_excel(ranking: list[RankedApplicant], output: Path) -> int:
    """Export the ranking to an Excel file with auto-fitted column widths."""
    from openpyxl import Workbook
    from openpyxl.styles import Font
    from openpyxl.utils import get_column_letter

    rows = [ranked_to_row(ranked) for ranked in ranking]
    output.parent.mkdir(parents=True, exist_ok=True)

    wb = Workbook()
    ws = wb.active
    ws.title = "Ranking"

    for col_idx, col_name in enumerate(RANKING_COLUMNS, 1):
        ws.cell(row=1, column=col_idx, value=col_name).font = Font(bold=True)

    for row_idx, row_data in enumerate(rows, 2):
        for col_idx, col_name in enumerate(RANKING_COLUMNS, 1):
            ws.cell(row=row_idx, column=col_idx, value=row_data.get(col_name, ""))

    for col_idx, col_name in enumerate(RANKING_COLUMNS, 1):
        max_length = len(col_name)
        for row_data in rows:
            max_length = max(max_length, min(len(str(row_data.get(col_name, ""))), 50))
        ws.column_dimensions[get_column_letter(col_idx)].width = max_length + 2

    ws.freeze_panes = "A2"
    wb.save(output)
    return len(rows)


def export_json(ranking: list[RankedApplicant], output: Path) -> int:
    """Export the ranking to a JSON file (canonical format)."""
    output.parent.mkdir(parents=True, exist_ok=True)
    data = [ranked.model_dump(mode="json") for ranked in ranking]
    with open(output, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, default=str)
    return len(data)


def write_stats(stats: ApplicantStats | None, output: Path) -> None:
    """Write the statistics JSON, or `{}` for an unreadable input."""
    output.parent.mkdir(parents=True, exist_ok=True)
    text = stats_to_json(stats) if stats is not None else EMPTY_JSON
    with open(output, "w", encoding="utf-8") as f:
        f.write(text + "\n")


def generate_report(result: RunResult, output: Path) -> None:
    """Generate a markdown run report."""
    output.parent.mkdir(parents=True, exist_ok=True)

    report = f"""# internrank Run Report

## Run Info
| Field | Value |
|---|---|
| Run ID | {result.run_id} |
| Input | {result.config.input_path} |
| Started | {result.started_at.isoformat()} |
| Finished | {result.finished_at.isoformat() if result.finished_at else "In progress"} |
| Rows Read | {result.rows_read} |
| Rows Accepted | {result.rows_accepted} |
| Rows Skipped | {result.rows_skipped} |
"""

    if result.stats is not None:
        stats = stats_to_dict(result.stats)
        report += f"""
## Statistics
| Field | Value |
|---|---|
| Unique Applicants | {stats["uniqueApplicants"]} |
| Top Applicants | {", ".join(stats["topApplicants"]) or "-"} |
| Average Score (top half) | {stats["averageScore"]} |
"""

    if result.skip_reasons:
        report += """
## Skipped Rows by Reason
| Reason | Count |
|---|---|
"""
        for reason, count in sorted(result.skip_reasons.items(), key=lambda x: -x[1]):
            report += f"| {reason} | {count} |\n"

    if result.ranking:
        report += """
## Ranking
| Rank | Name | Email | Score | Adjusted |
|---|---|---|---|---|
"""
        for ranked in result.ranking:
            applicant = ranked.applicant
            report += (
                f"| {ranked.rank} | {applicant.name.full_name} | {applicant.email} "
                f"| {applicant.score:.2f} | {ranked.adjusted_score:.2f} |\n"
            )

    if result.errors:
        report += "\n## Errors\n"
        for err in result.errors:
            report += f"- {err}\n"

    with open(output, "w", encoding="utf-8") as f:
        f.write(report)
