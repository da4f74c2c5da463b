"""
internrank field validator - strict grammars for raw CSV fields.

Every predicate accepts None and returns False instead of raising.
"""

import re

# Starts with a letter, one @, no dot right after @, a dot in the domain, ends with a letter
EMAIL_PATTERN = re.compile(r"[a-zA-Z][a-zA-Z0-9._-]*@[a-zA-Z0-9_-]+\.[a-zA-Z0-9._-]*[a-zA-Z]")

# yyyy-MM-ddTHH:mm:ss, shape only (month 13 passes here)
DELIVERY_DATETIME_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}T[0-9]{2}:[0-9]{2}:[0-9]{2}")

# 0-10 with at most two decimals; 10 only as 10, 10.0 or 10.00
SCORE_PATTERN = re.compile(r"10(\.0{1,2})?|[0-9](\.[0-9]{1,2})?")

FIELD_NAMES = ("name", "email", "delivery_datetime", "score")

# Names split on ASCII whitespace only; a no-break space stays inside a part
NAME_SEPARATOR = re.compile(r"\s+", re.ASCII)

# Space and the ASCII control characters
TRIM_CHARS = "".join(chr(code) for code in range(0x21))


def trim(value: str) -> str:
    """Strip surrounding space and control characters, leaving Unicode spaces."""
    return value.strip(TRIM_CHARS)


def split_name(full_name: str) -> list[str]:
    """Split a full name into its parts; empty for a blank name."""
    trimmed = trim(full_name)
    if not trimmed:
        return []
    return NAME_SEPARATOR.split(trimmed)


def is_valid_name(full_name: str | None) -> bool:
    """A name needs at least a first and a last part."""
    if full_name is None:
        return False
    return len(split_name(full_name)) >= 2


def is_valid_email(email: str | None) -> bool:
    """ASCII-only email matching the strict address grammar."""
    if not email or not email.isascii():
        return False
    return EMAIL_PATTERN.fullmatch(email) is not None


def is_valid_delivery_datetime(delivery_datetime: str | None) -> bool:
    if delivery_datetime is None:
        return False
    return DELIVERY_DATETIME_PATTERN.fullmatch(delivery_datetime) is not None


def is_valid_score(score: str | None) -> bool:
    """
    Decimal score between 0 and 10 using `.` as separator.

    Rejects negatives, values above 10, more than two decimals and
    surrounding whitespace.
    """
    if not score:
        return False
    return SCORE_PATTERN.fullmatch(score) is not None


_VALIDATORS = (is_valid_name, is_valid_email, is_valid_delivery_datetime, is_valid_score)


def validate_fields(fields: list[str]) -> str | None:
    """Return the name of the first invalid field, or None if all four pass."""
    for field_name, check, value in zip(FIELD_NAMES, _VALIDATORS, fields, strict=True):
        if not check(value):
            return field_name
    return None
