import datetime
from decimal import Decimal
from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.db.models import Sum
from django.db.models.functions import Coalesce
from django.utils import timezone
from ..exceptions import ConsistencyViolation, DuplicateReference
from ..models import BillingNote, PaymentVoucher, Receipt
from ..models.voucher import VOUCHER_STATUS_CHOICES
from .access import Principal, require_admin, require_privileged, vendor_scope
from .audit_helper import log_action
from .validation import parse_iso_date, require_ids

VOUCHER_PREFIX = "PV"


def next_voucher_ref(day: datetime.date) -> str:
    """PV + YYYYMMDD + 3 digits, restarting every day.  Independent of the
    vendor document numbering."""
    prefix = f"{VOUCHER_PREFIX}{day:%Y%m%d}"
    last = (
        PaymentVoucher.objects.filter(voucher_ref__startswith=prefix)
        .order_by("-voucher_ref")
        .values_list("voucher_ref", flat=True)
        .first()
    )
    next_number = int(last[-3:]) + 1 if last else 1
    return f"{prefix}{next_number:03d}"


def list_payment_vouchers(principal: Principal, vendor_id=None, status=None):
    require_privileged(principal)
    vouchers = PaymentVoucher.objects.all().with_status(status)
    if vendor_id:
        vouchers = vouchers.for_vendor(vendor_scope(principal, vendor_id))
    return vouchers.select_related("vendor", "created_by").prefetch_related("billing_notes")


def get_payment_voucher(principal: Principal, voucher_id) -> PaymentVoucher:
    require_privileged(principal)
    return (
        PaymentVoucher.objects.select_related("vendor", "created_by")
        .prefetch_related("billing_notes__jobs")
        .get(pk=voucher_id)
    )


def voucherable_billing_notes(principal: Principal, vendor_id):
    """SUBMITTED notes of a vendor that are not in any voucher yet."""
    require_privileged(principal)
    return (
        BillingNote.objects.for_vendor(vendor_id)
        .filter(status="SUBMITTED", payment_voucher__isnull=True)
        .prefetch_related("jobs")
        .order_by("-billing_date", "-id")
    )


def create_payment_voucher(
    principal: Principal,
    vendor_id,
    billing_note_ids,
    voucher_date,
    remark="",
) -> PaymentVoucher:
    """
    Consolidate SUBMITTED billing notes of one vendor.  All or nothing:
    every requested note must qualify.  Members become APPROVED.
    """
    require_privileged(principal)
    vendor_id = vendor_scope(principal, vendor_id)
    note_ids = require_ids(billing_note_ids, "billing_note_ids")
    voucher_date = parse_iso_date(voucher_date, "voucher_date")

    with transaction.atomic():
        notes = list(
            BillingNote.objects.for_vendor(vendor_id)
            .select_for_update()
            .filter(pk__in=note_ids, status="SUBMITTED", payment_voucher__isnull=True)
        )
        if len(notes) != len(note_ids):
            raise ConsistencyViolation(
                "Some billing notes are invalid, not SUBMITTED, or already in another voucher")

        # summed by the database from each note's frozen snapshot
        totals = BillingNote.objects.filter(pk__in=note_ids).aggregate(
            subtotal=Coalesce(Sum("subtotal"), Decimal("0.00")),
            vat=Coalesce(Sum("vat_amount"), Decimal("0.00")),
            wht=Coalesce(Sum("wht_amount"), Decimal("0.00")),
            net=Coalesce(Sum("net_total"), Decimal("0.00")),
        )

        voucher_ref = next_voucher_ref(timezone.localdate())
        try:
            with transaction.atomic():
                voucher = PaymentVoucher.objects.create(
                    voucher_ref=voucher_ref,
                    vendor_id=vendor_id,
                    voucher_date=voucher_date,
                    subtotal=totals["subtotal"],
                    total_vat=totals["vat"],
                    total_wht=totals["wht"],
                    net_total=totals["net"],
                    remark=remark or "",
                    created_by_id=principal.user_id,
                )
        except IntegrityError:
            raise DuplicateReference("Payment voucher reference already exists, try again")

        BillingNote.objects.filter(pk__in=note_ids).update(
            payment_voucher=voucher, status="APPROVED"
        )
        log_action(
            action="create",
            instance=voucher,
            principal=principal,
            changes={
                "voucher_ref": voucher_ref,
                "billing_note_ids": note_ids,
                "net_total": str(voucher.net_total),
            },
        )
    return voucher


def _release_members(voucher: PaymentVoucher) -> int:
    """Unlink every member and put it back to SUBMITTED."""
    if Receipt.objects.filter(billing_note__payment_voucher=voucher).exists():
        raise ConsistencyViolation(
            "Some billing notes of this voucher already have receipts, delete them first")
    return BillingNote.objects.filter(payment_voucher=voucher).update(
        payment_voucher=None, status="SUBMITTED"
    )


def cancel_payment_voucher(principal: Principal, voucher_id):
    """Revert all members to SUBMITTED and delete the voucher."""
    require_admin(principal)

    with transaction.atomic():
        voucher = PaymentVoucher.objects.select_for_update().get(pk=voucher_id)
        released = _release_members(voucher)
        log_action(
            action="cancel",
            instance=voucher,
            principal=principal,
            changes={"voucher_ref": voucher.voucher_ref, "released_billing_notes": released},
        )
        voucher.delete()


def update_payment_voucher_status(principal: Principal, voucher_id, status) -> PaymentVoucher:
    """
    PENDING / APPROVED only touch the voucher itself.  CANCELLED also
    releases the members (as cancel does) but keeps the voucher record.
    """
    require_admin(principal)
    if status not in dict(VOUCHER_STATUS_CHOICES):
        raise ValidationError(f"Unknown payment voucher status {status!r}")

    with transaction.atomic():
        voucher = PaymentVoucher.objects.select_for_update().get(pk=voucher_id)
        previous = voucher.status
        released = 0
        if status == "CANCELLED" and previous != "CANCELLED":
            released = _release_members(voucher)
        voucher.transition_to(status)
        log_action(
            action="status",
            instance=voucher,
            principal=principal,
            changes={"from": previous, "to": status, "released_billing_notes": released},
        )
    return voucher
