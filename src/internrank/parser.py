"""
internrank record parser - turns a validated CSV row into an Applicant.
"""

from collections.abc import Sequence

from .models import Applicant, ApplicantName, DeliveryDateTime


def parse_row(fields: Sequence[str]) -> Applicant:
    """
    Build an Applicant from trimmed `[name, email, delivery_datetime, score]`.

    Does no grammar checks of its own: callers run validator.validate_fields
    first. Raises ValueError when a grammar-valid datetime is not a real date.
    """
    name, email, delivery_datetime, score = fields
    return Applicant(
        name=ApplicantName.parse(name),
        email=email,
        delivery_datetime=DeliveryDateTime.parse(delivery_datetime),
        score=float(score),
    )
