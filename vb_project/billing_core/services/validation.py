import datetime
from decimal import Decimal, InvalidOperation
from django.core.exceptions import ValidationError
from django.utils.dateparse import parse_date, parse_datetime


# ------------------------------------
# Input validation shared by services
# ------------------------------------
def parse_iso_date(value, field="date") -> datetime.date:
    """Accept a date, a datetime or an ISO-8601 string."""
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    if isinstance(value, str):
        parsed = parse_date(value)
        if parsed is None:
            dt = parse_datetime(value)
            parsed = dt.date() if dt else None
        if parsed is not None:
            return parsed
    raise ValidationError(f"{field} must be an ISO-8601 date")


def parse_amount(value, field="amount") -> Decimal:
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError(f"{field} must be a number")
    if not amount.is_finite():
        raise ValidationError(f"{field} must be a number")
    if amount < 0:
        raise ValidationError(f"{field} must be >= 0")
    return amount


def parse_bool(value, field="flag", allow_none=True):
    """JSON booleans only; None means "not given".  "false" is rejected,
    not read as truthy."""
    if isinstance(value, bool) or (value is None and allow_none):
        return value
    raise ValidationError(f"{field} must be true or false")


def require_ids(ids, field="ids") -> list:
    """Non-empty list of integer ids; duplicates are kept so the caller's
    count-match check rejects them."""
    if not isinstance(ids, (list, tuple)) or not ids:
        raise ValidationError(f"{field} must be a non-empty list")
    try:
        return [int(pk) for pk in ids]
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must contain ids only")


def clean_job_items(items) -> list:
    """Validate job items payload -> [(description, Decimal amount)]."""
    if not isinstance(items, (list, tuple)) or not items:
        raise ValidationError("A job needs at least one item")
    cleaned = []
    for idx, item in enumerate(items, start=1):
        if not isinstance(item, dict):
            raise ValidationError(f"Item {idx}: must be an object")
        description = (item.get("description") or "").strip()
        if not description:
            raise ValidationError(f"Item {idx}: description is required")
        cleaned.append((description, parse_amount(item.get("amount"), f"Item {idx} amount")))
    return cleaned
