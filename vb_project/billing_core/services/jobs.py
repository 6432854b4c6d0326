from django.core.exceptions import ValidationError
from django.db import transaction
from ..exceptions import ConsistencyViolation
from ..models import Job, JobItem
from .access import Principal, require_vendor
from .audit_helper import log_action
from .validation import clean_job_items, parse_iso_date


JOB_FIELDS = ("ref_invoice_no", "container_no", "truck_plate", "declaration_no")


def _job_values(data) -> dict:
    description = (data.get("description") or "").strip()
    if not description:
        raise ValidationError("Job description is required")
    values = {
        "description": description,
        "clearance_date": parse_iso_date(data.get("clearance_date"), "clearance_date"),
    }
    for field in JOB_FIELDS:
        values[field] = data.get(field) or ""
    return values


def list_jobs(principal: Principal, status=None):
    vendor_id = require_vendor(principal)
    return (
        Job.objects.for_vendor(vendor_id)
        .with_status(status)
        .prefetch_related("items")
        .select_related("billing_note")
    )


def get_job(principal: Principal, job_id) -> Job:
    vendor_id = require_vendor(principal)
    return Job.objects.for_vendor(vendor_id).prefetch_related("items").get(pk=job_id)


def create_job(principal: Principal, data) -> Job:
    vendor_id = require_vendor(principal)
    values = _job_values(data)
    items = clean_job_items(data.get("items"))

    with transaction.atomic():
        job = Job.objects.create(vendor_id=vendor_id, **values)
        JobItem.objects.bulk_create(
            [JobItem(job=job, description=d, amount=a) for d, a in items]
        )
        log_action(action="create", instance=job, principal=principal,
                   changes={"items": len(items)})
    return job


def update_job(principal: Principal, job_id, data) -> Job:
    """Replace the job's fields and its whole item collection."""
    vendor_id = require_vendor(principal)
    values = _job_values(data)
    items = clean_job_items(data.get("items"))

    with transaction.atomic():
        job = Job.objects.for_vendor(vendor_id).select_for_update().get(pk=job_id)
        if job.is_billed:
            raise ConsistencyViolation("Cannot edit a billed job")

        for field, value in values.items():
            setattr(job, field, value)
        job.save()

        # delete-all then insert-all
        job.items.all().delete()
        JobItem.objects.bulk_create(
            [JobItem(job=job, description=d, amount=a) for d, a in items]
        )
        log_action(action="update", instance=job, principal=principal,
                   changes={"items": len(items)})
    return job


def delete_job(principal: Principal, job_id):
    vendor_id = require_vendor(principal)
    with transaction.atomic():
        job = Job.objects.for_vendor(vendor_id).select_for_update().get(pk=job_id)
        if job.is_billed:
            raise ConsistencyViolation("Cannot delete a billed job")
        log_action(action="delete", instance=job, principal=principal)
        job.delete()
