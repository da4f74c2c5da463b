"""Pytest configuration and fixtures."""

from collections.abc import Callable
from pathlib import Path

import pytest

from internrank.dedupe import ApplicantStore
from internrank.models import Applicant, ApplicantName, DeliveryDateTime

# Three-day submission window used across tests
EARLY_DAY = "2024-01-01T09:00:00"
MIDDLE_DAY = "2024-01-02T15:00:00"
LATE_DAY_AM = "2024-01-03T10:00:00"
LATE_DAY_PM = "2024-01-03T15:00:00"

SAMPLE_CSV = """\
John Doe,john@example.com,2024-01-01T09:00:00,8.0
Jane Smith,jane@example.com,2024-01-03T10:00:00,7.0
Bob Lee Jones,bob@example.com,2024-01-03T15:00:00,6.0
"""


@pytest.fixture
def make_applicant() -> Callable[..., Applicant]:
    """Factory for applicants with sensible defaults."""

    def _make(
        last_name: str = "Doe",
        score: float = 5.0,
        delivered: str = EARLY_DAY,
        email: str | None = None,
        first_name: str = "Test",
    ) -> Applicant:
        return Applicant(
            name=ApplicantName(first_name=first_name, last_name=last_name),
            email=email or f"{last_name.lower()}@example.com",
            delivery_datetime=DeliveryDateTime.parse(delivered),
            score=score,
        )

    return _make


@pytest.fixture
def sample_applicant(make_applicant: Callable[..., Applicant]) -> Applicant:
    """Create a sample applicant."""
    return make_applicant(last_name="Doe", score=9.5, delivered="2023-05-01T10:00:00")


@pytest.fixture
def three_day_store(make_applicant: Callable[..., Applicant]) -> ApplicantStore:
    """Doe (first day), Smith (last day AM), Jones (last day PM)."""
    return ApplicantStore(
        [
            make_applicant(last_name="Doe", score=8.0, delivered=EARLY_DAY),
            make_applicant(last_name="Smith", score=7.0, delivered=LATE_DAY_AM),
            make_applicant(last_name="Jones", score=6.0, delivered=LATE_DAY_PM),
        ]
    )


@pytest.fixture
def sample_csv_file(tmp_path: Path) -> Path:
    """Write the sample CSV to a temporary file."""
    path = tmp_path / "applicants.csv"
    path.write_text(SAMPLE_CSV, encoding="utf-8")
    return path
