from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from ..exceptions import ConsistencyViolation, DuplicateReference
from ..models import BillingNote, Receipt
from ..models.receipt import RECEIPT_STATUS_CHOICES
from .access import (Principal, can_act_as_privileged, require_privileged,
                     require_vendor, vendor_scope)
from .audit_helper import log_action
from .docnumber import allocate, legacy_reference
from .files import schedule_file_removal
from .validation import parse_bool, parse_iso_date

LEGACY_RECEIPT_PREFIX = "RE"


def scoped_receipts(principal: Principal):
    if not can_act_as_privileged(principal):
        require_vendor(principal)
    return Receipt.objects.for_principal(principal)


def list_receipts(principal: Principal, vendor_id=None, status=None):
    vendor_id = vendor_scope(principal, vendor_id)
    return Receipt.objects.for_vendor(vendor_id).with_status(status).select_related("billing_note")


def get_receipt(principal: Principal, receipt_id) -> Receipt:
    return (
        scoped_receipts(principal)
        .select_related("billing_note", "billing_note__vendor")
        .prefetch_related("billing_note__jobs__items")
        .get(pk=receipt_id)
    )


def _revert_billing_to_pending(note: BillingNote):
    # always back to PENDING, whatever the note went through before
    if note.status != "PENDING":
        note.transition_to("PENDING")


def create_receipt(principal: Principal, billing_note_id, receipt_date) -> Receipt:
    """
    Issue the receipt of an APPROVED (or re-issued PAID) billing note.
    The receipt is created PAID and the note is forced to PAID with it.
    """
    vendor_id = require_vendor(principal)
    receipt_date = parse_iso_date(receipt_date, "receipt_date")

    with transaction.atomic():
        note = BillingNote.objects.for_vendor(vendor_id).select_for_update().get(
            pk=billing_note_id
        )
        if note.has_receipt:
            raise ConsistencyViolation("Receipt already exists for this billing note")
        if note.status == "CANCELLED":
            raise ConsistencyViolation("Cannot issue receipt for cancelled billing note")
        if note.status not in ("APPROVED", "PAID"):
            raise ConsistencyViolation(
                "Billing note must be APPROVED by Admin before issuing receipt")

        receipt_ref = allocate(vendor_id, "RECEIPT", receipt_date) or legacy_reference(
            Receipt, "receipt_ref", LEGACY_RECEIPT_PREFIX, receipt_date.year
        )
        if Receipt.objects.filter(receipt_ref=receipt_ref).exists():
            raise DuplicateReference("Receipt reference already exists")

        try:
            with transaction.atomic():
                receipt = Receipt.objects.create(
                    receipt_ref=receipt_ref,
                    billing_note=note,
                    vendor_id=vendor_id,
                    receipt_date=receipt_date,
                    status="PAID",
                )
        except IntegrityError:
            raise DuplicateReference("Receipt reference already exists")

        if note.status != "PAID":
            note.transition_to("PAID")

        log_action(
            action="issue_receipt",
            instance=receipt,
            principal=principal,
            changes={"billing_note_id": note.pk, "receipt_ref": receipt_ref},
        )
    return receipt


def delete_receipt(principal: Principal, receipt_id):
    """Remove the receipt (and its files) and put the billing note back to
    PENDING."""
    require_privileged(principal)

    with transaction.atomic():
        receipt = Receipt.objects.select_for_update().get(pk=receipt_id)
        note = BillingNote.objects.select_for_update().get(pk=receipt.billing_note_id)
        files = receipt.stored_files()

        log_action(
            action="delete_receipt",
            instance=receipt,
            principal=principal,
            changes={"billing_note_id": note.pk, "receipt_ref": receipt.receipt_ref},
        )
        receipt.delete()
        _revert_billing_to_pending(note)
        schedule_file_removal(files)
    return note


def update_receipt_status(principal: Principal, receipt_id, status, revert_billing=False) -> Receipt:
    require_privileged(principal)
    revert_billing = parse_bool(revert_billing, "revert_billing")
    if status not in dict(RECEIPT_STATUS_CHOICES):
        raise ValidationError(f"Unknown receipt status {status!r}")

    with transaction.atomic():
        receipt = Receipt.objects.select_for_update().get(pk=receipt_id)
        previous = receipt.status
        receipt.status = status
        receipt.save(update_fields=["status"])

        reverted = False
        if status == "PENDING" and revert_billing:
            note = BillingNote.objects.select_for_update().get(pk=receipt.billing_note_id)
            _revert_billing_to_pending(note)
            reverted = True

        log_action(
            action="status",
            instance=receipt,
            principal=principal,
            changes={"from": previous, "to": status, "billing_reverted": reverted},
        )
    return receipt
