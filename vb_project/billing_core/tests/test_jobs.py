from decimal import Decimal

from django.core.exceptions import (ObjectDoesNotExist, PermissionDenied,
                                    ValidationError)
from django.db import IntegrityError, transaction
from django.test import TestCase

from billing_core.exceptions import ConsistencyViolation
from billing_core.models import Job, JobItem
from billing_core.services.billing import create_billing_note
from billing_core.services.jobs import (create_job, delete_job, get_job,
                                        list_jobs, update_job)

from .helpers import make_vendor, staff_principal, vendor_principal


def job_payload(*amounts, **extra):
    data = {
        "description": "Import clearance",
        "container_no": "MSKU1234567",
        "clearance_date": "2025-01-15",
        "items": [{"description": f"Fee {i}", "amount": a} for i, a in enumerate(amounts, 1)],
    }
    data.update(extra)
    return data


class JobServiceTests(TestCase):
    def setUp(self):
        self.vendor = make_vendor()
        self.principal = vendor_principal(self.vendor)

    def test_create_job_with_items(self):
        job = create_job(self.principal, job_payload("500.00", 570))

        self.assertEqual(job.status, "PENDING")
        self.assertEqual(job.vendor_id, self.vendor.pk)
        self.assertEqual(job.items.count(), 2)
        self.assertEqual(job.total_amount, Decimal("1070.00"))

    def test_job_needs_at_least_one_item(self):
        with self.assertRaises(ValidationError):
            create_job(self.principal, job_payload())
        self.assertFalse(Job.objects.exists())

    def test_negative_or_missing_amounts_are_rejected(self):
        with self.assertRaises(ValidationError):
            create_job(self.principal, job_payload("-1.00"))
        with self.assertRaises(ValidationError):
            create_job(self.principal, job_payload("abc"))

    def test_description_and_date_are_required(self):
        with self.assertRaises(ValidationError):
            create_job(self.principal, job_payload("1.00", description=" "))
        with self.assertRaises(ValidationError):
            create_job(self.principal, job_payload("1.00", clearance_date="15/01/2025"))

    def test_update_replaces_every_item(self):
        job = create_job(self.principal, job_payload("500.00", "570.00"))
        old_item_ids = set(job.items.values_list("pk", flat=True))

        job = update_job(self.principal, job.pk, job_payload("42.00", truck_plate="70-1234"))

        self.assertEqual(job.truck_plate, "70-1234")
        self.assertEqual(list(job.items.values_list("amount", flat=True)), [Decimal("42.00")])
        self.assertFalse(JobItem.objects.filter(pk__in=old_item_ids).exists())

    def test_billed_job_cannot_be_edited_or_deleted(self):
        job = create_job(self.principal, job_payload("100.00"))
        create_billing_note(self.principal, [job.pk])

        with self.assertRaises(ConsistencyViolation):
            update_job(self.principal, job.pk, job_payload("1.00"))
        with self.assertRaises(ConsistencyViolation):
            delete_job(self.principal, job.pk)
        self.assertTrue(Job.objects.filter(pk=job.pk).exists())

    def test_pending_job_can_be_deleted(self):
        job = create_job(self.principal, job_payload("100.00"))
        delete_job(self.principal, job.pk)
        self.assertFalse(Job.objects.exists())
        self.assertFalse(JobItem.objects.exists())

    def test_list_filters_by_status(self):
        j1 = create_job(self.principal, job_payload("100.00"))
        j2 = create_job(self.principal, job_payload("200.00"))
        create_billing_note(self.principal, [j1.pk])

        self.assertEqual([j.pk for j in list_jobs(self.principal, "PENDING")], [j2.pk])
        self.assertEqual(len(list_jobs(self.principal)), 2)

    def test_jobs_are_scoped_to_the_vendor(self):
        job = create_job(self.principal, job_payload("100.00"))
        other = vendor_principal(make_vendor("Vendor B", "0100000000002"))

        with self.assertRaises(ObjectDoesNotExist):
            get_job(other, job.pk)
        self.assertEqual(list(list_jobs(other)), [])

    def test_staff_accounts_have_no_jobs(self):
        with self.assertRaises(PermissionDenied):
            list_jobs(staff_principal())


class JobIntegrityTests(TestCase):
    def setUp(self):
        self.vendor = make_vendor()
        self.principal = vendor_principal(self.vendor)

    def test_billed_job_cannot_be_deleted_through_the_orm(self):
        job = create_job(self.principal, job_payload("100.00"))
        create_billing_note(self.principal, [job.pk])
        job.refresh_from_db()

        with self.assertRaises(ValidationError):
            job.delete()

    def test_database_rejects_billed_job_without_note(self):
        job = create_job(self.principal, job_payload("100.00"))
        with self.assertRaises(IntegrityError):
            with transaction.atomic():
                Job.objects.filter(pk=job.pk).update(status="BILLED")
