"""Tests for exporters."""

import csv
import io
import json
from pathlib import Path

import pytest

from internrank.dedupe import ApplicantStore
from internrank.exporter import (
    RANKING_COLUMNS,
    export_csv,
    export_excel,
    export_json,
    generate_report,
    ranked_to_row,
    round_half_up,
    stats_to_dict,
    stats_to_json,
    write_stats,
)
from internrank.models import ApplicantStats, RankedApplicant, RunConfig, RunResult
from internrank.ranking import RankingEngine


@pytest.fixture
def ranking(three_day_store: ApplicantStore) -> list[RankedApplicant]:
    """Ranking table for the three-day store."""
    return RankingEngine(three_day_store).ranking()


class TestRoundHalfUp:
    """Tests for round_half_up."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [(8.125, 8.13), (0.125, 0.13), (7.5, 7.5), (0.0, 0.0), (2.675, 2.68), (9.994, 9.99)],
    )
    def test_rounding(self, value: float, expected: float) -> None:
        """Halves round up, unlike round()."""
        assert round_half_up(value) == expected


class TestStatsSerialization:
    """Tests for stats_to_dict and stats_to_json."""

    def test_stats_to_dict(self) -> None:
        """Output keys and rounded average."""
        stats = ApplicantStats(unique_applicants=3, top_applicants=["Doe"], average_score=8.125)
        assert stats_to_dict(stats) == {
            "uniqueApplicants": 3,
            "topApplicants": ["Doe"],
            "averageScore": 8.13,
        }

    def test_empty_stats_json(self) -> None:
        """Empty statistics keep a float average."""
        text = stats_to_json(ApplicantStats())
        assert '"averageScore": 0.0' in text
        assert json.loads(text) == {"uniqueApplicants": 0, "topApplicants": [], "averageScore": 0.0}


class TestRankedToRow:
    """Tests for ranked_to_row."""

    def test_row(self, ranking: list[RankedApplicant]) -> None:
        """Rows carry rank, names and both scores."""
        row = ranked_to_row(ranking[0])
        assert row["rank"] == 1
        assert row["last_name"] == "Doe"
        assert row["score"] == "8.00"
        assert row["adjusted_score"] == "9.00"
        assert row["delivery_datetime"] == "2024-01-01T09:00:00"
        assert row["middle_names"] == ""

    def test_all_columns(self, ranking: list[RankedApplicant]) -> None:
        """Every CSV column is present."""
        row = ranked_to_row(ranking[0])
        for col in RANKING_COLUMNS:
            assert col in row, f"Missing column: {col}"


class TestExportCsv:
    """Tests for export_csv."""

    def test_export_to_stringio(self, ranking: list[RankedApplicant]) -> None:
        """Rows are written in rank order."""
        output = io.StringIO()
        count = export_csv(ranking, output)

        assert count == 3
        output.seek(0)
        rows = list(csv.DictReader(output))
        assert [r["last_name"] for r in rows] == ["Doe", "Smith", "Jones"]

    def test_export_to_file(self, ranking: list[RankedApplicant], tmp_path: Path) -> None:
        """Parent directories are created."""
        path = tmp_path / "nested" / "ranking.csv"
        assert export_csv(ranking, path) == 3
        with open(path, encoding="utf-8") as f:
            assert len(list(csv.DictReader(f))) == 3

    def test_export_empty(self) -> None:
        """An empty ranking writes only the header."""
        output = io.StringIO()
        assert export_csv([], output) == 0
        output.seek(0)
        assert list(csv.DictReader(output)) == []


class TestExportJson:
    """Tests for export_json and write_stats."""

    def test_export_json(self, ranking: list[RankedApplicant], tmp_path: Path) -> None:
        """The ranking dumps as a JSON list."""
        path = tmp_path / "ranking.json"
        assert export_json(ranking, path) == 3
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data[0]["applicant"]["email"] == "doe@example.com"
        assert data[2]["adjusted_score"] == 5.0

    def test_write_stats(self, tmp_path: Path) -> None:
        """Statistics are written as output JSON."""
        path = tmp_path / "stats.json"
        stats = ApplicantStats(unique_applicants=1, top_applicants=["Doe"], average_score=9.5)
        write_stats(stats, path)
        assert json.loads(path.read_text(encoding="utf-8"))["topApplicants"] == ["Doe"]

    def test_write_stats_unreadable_input(self, tmp_path: Path) -> None:
        """Missing stats are written as {}."""
        path = tmp_path / "stats.json"
        write_stats(None, path)
        assert path.read_text(encoding="utf-8").strip() == "{}"


class TestExportExcel:
    """Tests for export_excel."""

    def test_export_excel(self, ranking: list[RankedApplicant], tmp_path: Path) -> None:
        """Header plus one row per applicant."""
        from openpyxl import load_workbook

        path = tmp_path / "ranking.xlsx"
        assert export_excel(ranking, path) == 3

        ws = load_workbook(path).active
        assert ws.title == "Ranking"
        assert ws.cell(row=1, column=1).value == "rank"
        assert ws.cell(row=2, column=2).value == "Doe"
        assert ws.max_row == 4


class TestGenerateReport:
    """Tests for generate_report."""

    def test_report_sections(self, ranking: list[RankedApplicant], tmp_path: Path) -> None:
        """The report lists statistics, skips, ranking and errors."""
        result = RunResult(
            config=RunConfig(input_path=Path("applicants.csv")),
            run_id="20240101_120000_abc123",
            rows_read=5,
            rows_accepted=3,
            rows_skipped=2,
            skip_reasons={"email": 2},
            stats=ApplicantStats(
                unique_applicants=3, top_applicants=["Doe", "Smith", "Jones"], average_score=7.5
            ),
            ranking=ranking,
            errors=["something odd"],
        )
        path = tmp_path / "report.md"
        generate_report(result, path)
        report = path.read_text(encoding="utf-8")

        assert "20240101_120000_abc123" in report
        assert "| Top Applicants | Doe, Smith, Jones |" in report
        assert "| email | 2 |" in report
        assert "| 1 | Test Doe | doe@example.com | 8.00 | 9.00 |" in report
        assert "- something odd" in report

    def test_report_without_stats(self, tmp_path: Path) -> None:
        """Unreadable runs still produce a report."""
        result = RunResult(config=RunConfig(), errors=["Read error: boom"])
        path = tmp_path / "report.md"
        generate_report(result, path)
        report = path.read_text(encoding="utf-8")
        assert "## Statistics" not in report
        assert "Read error: boom" in report
