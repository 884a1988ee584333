"""
Display formatters for raw provider values.

Every function here is pure and total: missing or unusable input yields
NOT_AVAILABLE instead of raising.
"""

import math
from datetime import date, datetime, timezone
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Optional, Union


NOT_AVAILABLE = "Not Available"

SECONDS_PER_DAY = 86_400


def _to_decimal(value: Any) -> Optional[Decimal]:
    """Coerce a number or numeric string to Decimal, or None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip().replace(",", "")
        if not value:
            return None
    try:
        result = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None
    if not result.is_finite():
        return None
    return result


def format_currency(amount: Any) -> str:
    """
    Format an amount with thousands separators and no decimals.

    The caller adds the currency symbol, e.g. ``"$" + format_currency(v)``.
    """
    value = _to_decimal(amount)
    if value is None:
        return NOT_AVAILABLE
    rounded = int(value.to_integral_value(rounding=ROUND_HALF_UP))
    return f"{rounded:,}"


def format_number_with_commas(number: Any) -> str:
    """Format an integer count with thousands separators."""
    value = _to_decimal(number)
    if value is None:
        return NOT_AVAILABLE
    return f"{int(value):,}"


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse an ISO-8601-ish timestamp as returned by WHOIS providers.

    Accepts ``datetime``/``date`` objects, ``Z`` suffixes and space
    separators. Returns None for empty or unparseable input.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text[:10])
    except ValueError:
        return None


def format_date(value: Any) -> str:
    """Format a timestamp as ``Month D, YYYY``."""
    parsed = parse_timestamp(value)
    if parsed is None:
        return NOT_AVAILABLE
    return f"{parsed:%B} {parsed.day}, {parsed.year}"


def format_domain_age(age_in_days: Optional[Union[int, float]]) -> str:
    """
    Format an age in days as ``Y Years M Months D Days``.

    Years are 365 days and months 30 days; calendar lengths are ignored.
    The day count is what remains after whole years and months.
    """
    if age_in_days is None or isinstance(age_in_days, bool):
        return NOT_AVAILABLE
    try:
        days = math.floor(age_in_days)
    except (TypeError, ValueError, OverflowError):
        return NOT_AVAILABLE
    years = days // 365
    months = (days % 365) // 30
    remainder = (days % 365) % 30
    return f"{years} Years {months} Months {remainder} Days"


def compute_domain_age_days(
    creation_date: Any,
    now: Optional[datetime] = None,
) -> Optional[int]:
    """
    Whole days elapsed since ``creation_date``, never negative.

    Naive timestamps are treated as UTC. Returns None when the creation
    date is missing or unparseable.
    """
    created = parse_timestamp(creation_date)
    if created is None:
        return None
    if created.tzinfo is None:
        created = created.replace(tzinfo=timezone.utc)

    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    elapsed = (now - created).total_seconds()
    return max(0, math.floor(elapsed / SECONDS_PER_DAY))


def format_yes_no(flag: Optional[bool]) -> str:
    if flag is None:
        return NOT_AVAILABLE
    return "Yes" if flag else "No"
