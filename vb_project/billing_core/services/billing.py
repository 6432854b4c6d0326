from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.db.models import Q
from django.utils import timezone
from ..exceptions import ConsistencyViolation, DuplicateReference
from ..models import BillingNote, Job
from ..models.billing import BILLING_STATUS_CHOICES
from .access import (Principal, can_act_as_privileged, require_privileged,
                     require_vendor, vendor_scope)
from .audit_helper import log_action
from .calculation import calculate_for_jobs
from .docnumber import allocate, legacy_reference
from .files import schedule_file_removal
from .validation import parse_bool, parse_iso_date, require_ids

LEGACY_BILLING_PREFIX = "VBS"


# ----------------------------
# Lookups
# ----------------------------
def scoped_billing_notes(principal: Principal):
    """Vendors see their own notes, admin/user see every vendor's."""
    if not can_act_as_privileged(principal):
        require_vendor(principal)
    return BillingNote.objects.for_principal(principal)


def list_billing_notes(principal: Principal, vendor_id=None, status=None):
    vendor_id = vendor_scope(principal, vendor_id)
    return (
        BillingNote.objects.for_vendor(vendor_id)
        .with_status(status)
        .select_related("receipt")
        .prefetch_related("jobs__items")
    )


def get_billing_note(principal: Principal, note_id) -> BillingNote:
    return (
        scoped_billing_notes(principal)
        .select_related("vendor", "receipt")
        .prefetch_related("jobs__items")
        .get(pk=note_id)
    )


def preview_calculation(principal: Principal, job_ids, calculate_before_vat=None):
    """Read-only: the jobs may be PENDING or already BILLED (edit screen)."""
    vendor_id = require_vendor(principal)
    calculate_before_vat = parse_bool(calculate_before_vat, "calculate_before_vat")
    job_ids = require_ids(job_ids, "job_ids")
    jobs = list(
        Job.objects.for_vendor(vendor_id)
        .filter(pk__in=job_ids)
        .prefetch_related("items")
    )
    if len(jobs) != len(job_ids):
        raise ConsistencyViolation("Some jobs are not found or not yours")
    return jobs, calculate_for_jobs(vendor_id, jobs, calculate_before_vat)


# ----------------------------
# Create / edit
# ----------------------------
def _resolve_billing_ref(vendor_id, custom_ref, billing_date) -> str:
    ref = (custom_ref or "").strip()
    if not ref:
        # auto-numbering first, legacy VBS scheme otherwise
        ref = allocate(vendor_id, "BILLING", billing_date) or legacy_reference(
            BillingNote, "billing_ref", LEGACY_BILLING_PREFIX, billing_date.year
        )
    if BillingNote.objects.filter(billing_ref=ref).exists():
        raise DuplicateReference("Billing reference already exists")
    return ref


def create_billing_note(
    principal: Principal,
    job_ids,
    billing_ref=None,
    calculate_before_vat=None,
    remark="",
    billing_date=None,
) -> BillingNote:
    """
    Bill a set of PENDING jobs.  The note is created PENDING and every
    selected job becomes BILLED in the same transaction.
    """
    vendor_id = require_vendor(principal)
    job_ids = require_ids(job_ids, "job_ids")
    calculate_before_vat = parse_bool(calculate_before_vat, "calculate_before_vat")
    billing_date = (
        parse_iso_date(billing_date, "billing_date") if billing_date else timezone.localdate()
    )

    with transaction.atomic():
        # Lock the jobs so a concurrent note cannot bill them too
        jobs = list(
            Job.objects.for_vendor(vendor_id)
            .select_for_update()
            .filter(pk__in=job_ids, status="PENDING")
        )
        if len(jobs) != len(job_ids):
            raise ConsistencyViolation(
                "Some jobs are not found, already billed, or not yours")

        # allocated inside the transaction: a rollback returns the number
        ref = _resolve_billing_ref(vendor_id, billing_ref, billing_date)
        calculation = calculate_for_jobs(vendor_id, jobs, calculate_before_vat)

        note = BillingNote(
            billing_ref=ref,
            vendor_id=vendor_id,
            billing_date=billing_date,
            status="PENDING",
            remark=remark or "",
        )
        note.apply_calculation(calculation)
        try:
            with transaction.atomic():
                note.save()
        except IntegrityError:
            # lost a race on the unique billing_ref
            raise DuplicateReference("Billing reference already exists")

        Job.objects.filter(pk__in=job_ids).update(status="BILLED", billing_note=note)

        log_action(
            action="create",
            instance=note,
            principal=principal,
            changes={"billing_ref": ref, "job_ids": job_ids, **calculation.as_dict()},
        )
    return note


def edit_billing_note(
    principal: Principal,
    note_id,
    job_ids,
    remark=None,
    calculate_before_vat=None,
) -> BillingNote:
    """
    Replace the job set of a billing note and recompute its snapshot.
    Any generated PDF is invalidated.
    """
    vendor_id = require_vendor(principal)
    job_ids = require_ids(job_ids, "job_ids")
    calculate_before_vat = parse_bool(calculate_before_vat, "calculate_before_vat")

    with transaction.atomic():
        note = BillingNote.objects.for_vendor(vendor_id).select_for_update().get(pk=note_id)
        if note.has_receipt:
            raise ConsistencyViolation("Cannot edit billing note with receipt")
        if note.status == "CANCELLED":
            raise ConsistencyViolation("Cannot edit cancelled billing note")
        if note.payment_voucher_id:
            raise ConsistencyViolation(
                "Cannot edit billing note that belongs to a payment voucher")

        # PENDING jobs, or jobs already on this note; never another note's jobs
        new_jobs = list(
            Job.objects.for_vendor(vendor_id)
            .select_for_update()
            .filter(pk__in=job_ids)
            .filter(Q(status="PENDING") | Q(billing_note=note))
        )
        if len(new_jobs) != len(job_ids):
            raise ConsistencyViolation("Some jobs are invalid or already billed")

        previous_ids = list(note.jobs.values_list("pk", flat=True))
        # 1. release every currently linked job
        Job.objects.filter(billing_note=note).update(status="PENDING", billing_note=None)
        # 2. link the new set
        Job.objects.filter(pk__in=job_ids).update(status="BILLED", billing_note=note)

        calculation = calculate_for_jobs(vendor_id, new_jobs, calculate_before_vat)
        old_pdf = note.pdf_url
        note.apply_calculation(calculation)
        if remark is not None:
            note.remark = remark
        note.pdf_url = ""  # forces regeneration
        note.save()
        schedule_file_removal([old_pdf])

        log_action(
            action="edit",
            instance=note,
            principal=principal,
            changes={
                "released": sorted(set(previous_ids) - set(job_ids)),
                "linked": sorted(set(job_ids) - set(previous_ids)),
                **calculation.as_dict(),
            },
        )
    return note


# ----------------------------
# Status transitions
# ----------------------------
def cancel_billing_note(principal: Principal, note_id) -> BillingNote:
    """CANCELLED, and every linked job released back to PENDING."""
    with transaction.atomic():
        note = scoped_billing_notes(principal).select_for_update().get(pk=note_id)
        if note.has_receipt:
            raise ConsistencyViolation("Cannot cancel billing note with receipt")
        if note.payment_voucher_id:
            raise ConsistencyViolation(
                "Billing note belongs to a payment voucher, cancel the voucher first")

        note.transition_to("CANCELLED")
        released = Job.objects.filter(billing_note=note).update(
            status="PENDING", billing_note=None
        )
        log_action(
            action="cancel",
            instance=note,
            principal=principal,
            changes={"released_jobs": released},
        )
    return note


def update_billing_note_status(principal: Principal, note_id, status) -> BillingNote:
    """
    Direct status change, checked against the billing note transition table.
    CANCELLED goes through cancel_billing_note() so jobs are released; PAID
    is only reachable by issuing a receipt.
    """
    if status not in dict(BILLING_STATUS_CHOICES):
        raise ValidationError(f"Unknown billing note status {status!r}")
    if status == "CANCELLED":
        return cancel_billing_note(principal, note_id)
    if status == "PAID":
        raise ValidationError("A billing note becomes PAID only when a receipt is issued")
    if status == "APPROVED":
        require_privileged(principal)

    with transaction.atomic():
        note = scoped_billing_notes(principal).select_for_update().get(pk=note_id)
        if note.has_receipt:
            raise ConsistencyViolation("Billing note status is managed by its receipt")
        if note.payment_voucher_id:
            raise ConsistencyViolation(
                "Billing note status is managed by its payment voucher")

        previous = note.status
        note.transition_to(status)
        log_action(
            action="status",
            instance=note,
            principal=principal,
            changes={"from": previous, "to": status},
        )
    return note


def submit_billing_note(principal: Principal, note_id) -> BillingNote:
    return update_billing_note_status(principal, note_id, "SUBMITTED")


def approve_billing_note(principal: Principal, note_id) -> BillingNote:
    return update_billing_note_status(principal, note_id, "APPROVED")

