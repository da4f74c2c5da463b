"""
internrank dedupe - email-keyed applicant store.

Last write wins: a later valid row for the same email replaces the earlier
one, regardless of delivery time or score. Not thread-safe.
"""

from collections.abc import Iterable, Iterator

from .models import Applicant


class ApplicantStore:
    """Mapping of email -> most recently accepted Applicant."""

    def __init__(self, applicants: Iterable[Applicant] = ()):
        self._applicants: dict[str, Applicant] = {}
        for applicant in applicants:
            self.upsert(applicant)

    def upsert(self, applicant: Applicant | None) -> None:
        """Insert or replace an applicant by email."""
        if applicant is None:
            raise ValueError("Applicant cannot be None")
        if not applicant.email:
            raise ValueError("Applicant email cannot be empty")
        # Replacing keeps the email's original slot in iteration order
        self._applicants[applicant.email] = applicant

    def all(self) -> tuple[Applicant, ...]:
        """Snapshot of stored applicants in first-insertion order of their emails."""
        return tuple(self._applicants.values())

    def unique_count(self) -> int:
        return len(self._applicants)

    def get(self, email: str) -> Applicant | None:
        return self._applicants.get(email)

    def __len__(self) -> int:
        return len(self._applicants)

    def __contains__(self, email: object) -> bool:
        return email in self._applicants

    def __iter__(self) -> Iterator[Applicant]:
        return iter(self.all())
