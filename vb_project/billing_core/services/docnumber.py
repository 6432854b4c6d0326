"""
Document number allocation.

Numbers look like ``prefix + date part + zero padded running number``,
e.g. ``INV20250115007``.  The running number lives in a
DocumentNumberSequence row per (vendor, document type, period); the row is
only ever incremented inside the database (``UPDATE ... SET last_number =
last_number + 1``), never read-then-written, so concurrent allocations for
the same vendor and period cannot hand out the same number.
"""
import datetime
import logging
from typing import Optional
from django.db import IntegrityError, transaction
from django.db.models import F
from django.utils import timezone
from ..models import DocumentNumberConfig, DocumentNumberSequence

logger = logging.getLogger(__name__)

DEFAULT_PREFIXES = {"BILLING": "B", "RECEIPT": "R"}
DEFAULT_DATE_FORMAT = "YYYYMMDD"
DEFAULT_RUNNING_DIGITS = 3
DEFAULT_RESET_PERIOD = "DAILY"


def format_date_part(date: datetime.date, date_format: str) -> str:
    if date_format == "YYYYMM":
        return date.strftime("%Y%m")
    if date_format == "YYMM":
        return date.strftime("%y%m")
    return date.strftime("%Y%m%d")


def period_key(date: datetime.date, reset_period: str) -> str:
    if reset_period == "MONTHLY":
        return date.strftime("%Y%m")
    if reset_period == "YEARLY":
        return date.strftime("%Y")
    if reset_period == "NEVER":
        return "ALL"  # never reset, one sequence forever
    return date.strftime("%Y%m%d")


def format_number(prefix, date_format, running_digits, date, number) -> str:
    """Shared by allocate() and preview() so a preview always matches
    what would be allocated."""
    return f"{prefix}{format_date_part(date, date_format)}{str(number).zfill(running_digits)}"


def _sequence_filter(vendor_id, document_type, key):
    return DocumentNumberSequence.objects.filter(
        vendor_id=vendor_id, document_type=document_type, period_key=key
    )


def _increment_sequence(vendor_id, document_type, key) -> int:
    """Atomic increment-or-create, returns the new last_number.
    Must run inside a transaction: the UPDATE keeps the row locked until
    the caller commits."""
    updated = _sequence_filter(vendor_id, document_type, key).update(
        last_number=F("last_number") + 1
    )
    if not updated:
        try:
            # savepoint, so a lost creation race does not poison the outer transaction
            with transaction.atomic():
                DocumentNumberSequence.objects.create(
                    vendor_id=vendor_id,
                    document_type=document_type,
                    period_key=key,
                    last_number=1,
                )
            return 1
        except IntegrityError:
            # someone else created the row first, increment theirs
            _sequence_filter(vendor_id, document_type, key).update(
                last_number=F("last_number") + 1
            )
    return _sequence_filter(vendor_id, document_type, key).values_list(
        "last_number", flat=True
    ).get()


def allocate(vendor_id, document_type: str, date: Optional[datetime.date] = None) -> Optional[str]:
    """
    Allocate the next document number, advancing the sequence.

    Returns None when the vendor has no numbering config or numbering is
    disabled for ``document_type``; callers then fall back to their legacy
    reference scheme.
    """
    date = date or timezone.localdate()
    config = DocumentNumberConfig.objects.filter(vendor_id=vendor_id).first()
    if config is None:
        return None
    enabled, prefix = config.settings_for(document_type)
    if not enabled:
        return None

    key = period_key(date, config.reset_period)
    with transaction.atomic():
        number = _increment_sequence(vendor_id, document_type, key)

    ref = format_number(prefix, config.date_format, config.running_digits, date, number)
    logger.debug("Allocated %s number %s for vendor %s (period %s)",
                 document_type, ref, vendor_id, key)
    return ref


def preview(vendor_id, document_type: str, date: Optional[datetime.date] = None) -> str:
    """Next number as it would be allocated now, without advancing anything.
    A concurrent allocation between preview and commit can make it stale."""
    date = date or timezone.localdate()
    config = DocumentNumberConfig.objects.filter(vendor_id=vendor_id).first()
    if config is None:
        return format_number(
            DEFAULT_PREFIXES.get(document_type, "B"),
            DEFAULT_DATE_FORMAT,
            DEFAULT_RUNNING_DIGITS,
            date,
            1,
        )

    _, prefix = config.settings_for(document_type)
    key = period_key(date, config.reset_period)
    current = _sequence_filter(vendor_id, document_type, key).values_list(
        "last_number", flat=True
    ).first()
    return format_number(
        prefix, config.date_format, config.running_digits, date, (current or 0) + 1
    )


def legacy_reference(model, field, prefix, year) -> str:
    """
    Fallback reference used when auto-numbering is off:
    ``prefix + year + "-" + 4 digits``, continuing after the highest
    existing reference for that year.

    References are unique across all vendors, so the scan is too; two
    vendors without numbering config share one fallback series.
    """
    start = f"{prefix}{year}-"
    last = (
        model.objects.filter(**{f"{field}__startswith": start})
        .order_by(f"-{field}")
        .values_list(field, flat=True)
        .first()
    )
    next_number = 1
    if last:
        try:
            next_number = int(last[-4:]) + 1
        except ValueError:
            logger.warning("Unparseable %s %r", field, last)
    return f"{start}{next_number:04d}"
