"""
internrank ranking engine - time-adjusted scoring and top-N selection.

Ordering (multi-day window):
1. Adjusted score, descending
2. Raw score, descending
3. Delivery time, ascending (earlier ranks higher)
4. Email, ascending

When every applicant delivered on the same calendar day no adjustment is
applied and only the raw score orders the list; ties keep store order.
"""

from .dedupe import ApplicantStore
from .models import Applicant, ApplicantStats, DeliveryDateTime, RankedApplicant

TOP_APPLICANT_COUNT = 3


class RankingEngine:
    """Read-only ranking view over an ApplicantStore."""

    def __init__(self, store: ApplicantStore):
        self.store = store

    @staticmethod
    def _window(
        applicants: tuple[Applicant, ...],
    ) -> tuple[DeliveryDateTime | None, DeliveryDateTime | None]:
        if not applicants:
            return None, None
        deliveries = [a.delivery_datetime for a in applicants]
        return min(deliveries), max(deliveries)

    @staticmethod
    def _spans_one_day(earliest: DeliveryDateTime | None, latest: DeliveryDateTime | None) -> bool:
        return earliest is None or latest is None or earliest.is_on_same_date(latest)

    def earliest(self) -> DeliveryDateTime | None:
        """Earliest delivery across the store, None if empty."""
        return self._window(self.store.all())[0]

    def latest(self) -> DeliveryDateTime | None:
        """Latest delivery across the store, None if empty."""
        return self._window(self.store.all())[1]

    @staticmethod
    def adjusted_score(
        applicant: Applicant, earliest: DeliveryDateTime, latest: DeliveryDateTime
    ) -> float:
        return applicant.adjusted_score(earliest, latest)

    def is_single_day(self) -> bool:
        """True when there is no multi-day window to adjust against."""
        return self._spans_one_day(*self._window(self.store.all()))

    def _ordered(self) -> list[tuple[Applicant, float]]:
        """All applicants in rank order, paired with the score they ranked by."""
        applicants = self.store.all()
        earliest, latest = self._window(applicants)

        if self._spans_one_day(earliest, latest):
            # sorted() is stable, so raw-score ties stay in store order
            ordered = sorted(applicants, key=lambda a: -a.score)
            return [(a, a.score) for a in ordered]

        adjusted = {a.email: a.adjusted_score(earliest, latest) for a in applicants}
        ordered = sorted(
            applicants,
            key=lambda a: (-adjusted[a.email], -a.score, a.delivery_datetime.value, a.email),
        )
        return [(a, adjusted[a.email]) for a in ordered]

    def top_applicants(self, n: int = TOP_APPLICANT_COUNT) -> list[Applicant]:
        """Top n applicants (fewer if the store holds fewer)."""
        return [applicant for applicant, _ in self._ordered()[:n]]

    def top_last_names(self, n: int = TOP_APPLICANT_COUNT) -> list[str]:
        """Last names of the top n applicants; duplicates are kept."""
        return [applicant.name.last_name for applicant in self.top_applicants(n)]

    def average_of_top_half(self) -> float:
        """
        Mean raw score of the higher-scoring half, before adjustments.

        Odd counts include the middle applicant: 5 applicants -> top 3.
        Not rounded; rounding belongs to serialization.
        """
        scores = sorted((a.score for a in self.store.all()), reverse=True)
        if not scores:
            return 0.0
        top_half = scores[: (len(scores) + 1) // 2]
        return sum(top_half) / len(top_half)

    def ranking(self, n: int | None = None) -> list[RankedApplicant]:
        """Full ranking table (or its first n rows) for exports."""
        ordered = self._ordered()
        if n is not None:
            ordered = ordered[:n]
        return [
            RankedApplicant(rank=index, applicant=applicant, adjusted_score=score)
            for index, (applicant, score) in enumerate(ordered, 1)
        ]

    def stats(self, n: int = TOP_APPLICANT_COUNT) -> ApplicantStats:
        """Summary statistics for the JSON output."""
        return ApplicantStats(
            unique_applicants=self.store.unique_count(),
            top_applicants=self.top_last_names(n),
            average_score=self.average_of_top_half(),
        )
