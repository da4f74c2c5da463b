"""
internrank data models - strict Pydantic schemas for applicant ranking.

Design principles:
- extra="forbid" everywhere (fail fast on unknown fields)
- Applicant values are frozen; the adjusted score is derived, never stored
- Models only hold pre-validated data; grammar checks live in validator.py
"""

from __future__ import annotations

import functools
from datetime import UTC, datetime
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from .validator import split_name

DELIVERY_DATETIME_FORMAT = "%Y-%m-%dT%H:%M:%S"
MIN_SCORE = 0.0
MAX_SCORE = 10.0
FIRST_DAY_BONUS = 1.0
LAST_DAY_AFTERNOON_MALUS = 1.0
MIDDAY_HOUR = 12

ExportFormat = Literal["json", "csv", "xlsx", "report"]


# =============================================================================
# APPLICANT NAME
# =============================================================================


class ApplicantName(BaseModel):
    """A full name split into first, middle and last parts."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    first_name: str = Field(..., min_length=1)
    middle_names: tuple[str, ...] | None = Field(
        default=None, description="Interior names; None (not empty) when there are none"
    )
    last_name: str = Field(..., min_length=1)

    @classmethod
    def parse(cls, full_name: str) -> ApplicantName:
        """Split a pre-validated full name on runs of ASCII whitespace."""
        parts = split_name(full_name)
        return cls(
            first_name=parts[0],
            middle_names=tuple(parts[1:-1]) if len(parts) > 2 else None,
            last_name=parts[-1],
        )

    @property
    def full_name(self) -> str:
        return " ".join([self.first_name, *(self.middle_names or ()), self.last_name])


# =============================================================================
# DELIVERY DATETIME
# =============================================================================


@functools.total_ordering
class DeliveryDateTime(BaseModel):
    """Naive date and time an application was delivered at."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    value: datetime

    @classmethod
    def parse(cls, delivery_datetime: str) -> DeliveryDateTime:
        """
        Parse a grammar-valid `YYYY-MM-DDTHH:MM:SS` string.

        Raises ValueError for well-shaped but impossible values (month 13, day 32).
        """
        return cls(value=datetime.strptime(delivery_datetime, DELIVERY_DATETIME_FORMAT))

    def is_on_same_date(self, other: DeliveryDateTime) -> bool:
        """Check if both fall on the same calendar day."""
        return self.value.date() == other.value.date()

    def is_after_midday(self) -> bool:
        """Check if the time of day is at or after 12:00:00."""
        return self.value.hour >= MIDDAY_HOUR

    def isoformat(self) -> str:
        return self.value.strftime(DELIVERY_DATETIME_FORMAT)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, DeliveryDateTime):
            return NotImplemented
        return self.value < other.value


# =============================================================================
# APPLICANT (THE CANONICAL UNIT)
# =============================================================================


def clamp_score(value: float) -> float:
    """Clamp a score into [0.0, 10.0]."""
    return max(MIN_SCORE, min(MAX_SCORE, value))


class Applicant(BaseModel):
    """
    A single accepted applicant record.
    Email is the unique key used by the store.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: ApplicantName
    email: str
    delivery_datetime: DeliveryDateTime
    # Not range-checked: adjusted_score clamps whatever it is given
    score: float

    def adjusted_score(self, earliest: DeliveryDateTime, latest: DeliveryDateTime) -> float:
        """
        Score with the submission-window adjustment applied.

        +1.0 when delivered on the first day of the window, otherwise -1.0 when
        delivered on the last day at or after midday. Clamped to [0, 10].
        """
        delivered = self.delivery_datetime
        adjusted = self.score
        if delivered.is_on_same_date(earliest):
            adjusted += FIRST_DAY_BONUS
        elif delivered.is_on_same_date(latest) and delivered.is_after_midday():
            adjusted -= LAST_DAY_AFTERNOON_MALUS
        return clamp_score(adjusted)


class RankedApplicant(BaseModel):
    """One row of the final ranking table."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    rank: int = Field(..., ge=1)
    applicant: Applicant
    adjusted_score: float


# =============================================================================
# STATISTICS
# =============================================================================


class ApplicantStats(BaseModel):
    """Summary statistics; dumps with camelCase keys in output order."""

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    unique_applicants: int = Field(default=0, ge=0, alias="uniqueApplicants")
    top_applicants: list[str] = Field(default_factory=list, alias="topApplicants")
    average_score: float = Field(default=0.0, alias="averageScore")


# =============================================================================
# RUN CONFIGURATION & RESULTS
# =============================================================================


class RunConfig(BaseModel):
    """Configuration for a single run."""

    model_config = ConfigDict(extra="forbid")

    input_path: Path = Field(default=Path("input.csv"), description="CSV file to rank")
    top_n: int = Field(default=3, ge=1, le=100, description="Size of the top list")
    output_dir: Path | None = Field(default=None, description="Where exports are written")
    formats: list[ExportFormat] = Field(default_factory=lambda: ["json"])


class RunResult(BaseModel):
    """Result of a pipeline run."""

    model_config = ConfigDict(extra="forbid")

    config: RunConfig
    run_id: str = Field(default="")
    started_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    finished_at: datetime | None = Field(default=None)

    # Ingestion stats
    rows_read: int = Field(default=0)
    rows_accepted: int = Field(default=0)
    rows_skipped: int = Field(default=0)
    skip_reasons: dict[str, int] = Field(default_factory=dict)

    # None when the input stream could not be read
    stats: ApplicantStats | None = Field(default=None)
    ranking: list[RankedApplicant] = Field(default_factory=list)

    errors: list[str] = Field(default_factory=list)
