import datetime
import threading

import pytest
from django.db import connection
from django.test import TestCase, TransactionTestCase

from billing_core.models import (BillingNote, DocumentNumberConfig,
                                 DocumentNumberSequence)
from billing_core.services.docnumber import (allocate, legacy_reference,
                                             period_key, preview)

from .helpers import make_billing_note, make_vendor

DAY = datetime.date(2025, 1, 15)


class AllocateTests(TestCase):
    def setUp(self):
        self.vendor = make_vendor()

    def enable(self, **fields):
        fields.setdefault("billing_enabled", True)
        fields.setdefault("receipt_enabled", True)
        return DocumentNumberConfig.objects.create(vendor=self.vendor, **fields)

    def test_no_config_means_numbering_is_off(self):
        self.assertIsNone(allocate(self.vendor.pk, "BILLING", DAY))
        self.assertFalse(DocumentNumberSequence.objects.exists())

    def test_disabled_document_type_returns_none(self):
        self.enable(billing_enabled=False)
        self.assertIsNone(allocate(self.vendor.pk, "BILLING", DAY))
        # receipts are switched on separately
        self.assertEqual(allocate(self.vendor.pk, "RECEIPT", DAY), "R20250115001")

    def test_sequential_allocations_have_no_gaps(self):
        self.enable(billing_prefix="INV")

        numbers = [allocate(self.vendor.pk, "BILLING", DAY) for _ in range(5)]

        self.assertEqual(
            numbers,
            ["INV20250115001", "INV20250115002", "INV20250115003",
             "INV20250115004", "INV20250115005"],
        )
        seq = DocumentNumberSequence.objects.get(vendor=self.vendor, document_type="BILLING")
        self.assertEqual(seq.last_number, 5)

    def test_daily_reset_starts_each_day_at_one(self):
        self.enable()
        first = allocate(self.vendor.pk, "BILLING", DAY)
        allocate(self.vendor.pk, "BILLING", DAY)
        next_day = allocate(self.vendor.pk, "BILLING", DAY + datetime.timedelta(days=1))

        self.assertEqual(first, "B20250115001")
        self.assertEqual(next_day, "B20250116001")

    def test_monthly_reset_shares_the_sequence_within_a_month(self):
        self.enable(reset_period="MONTHLY", date_format="YYYYMM")
        allocate(self.vendor.pk, "BILLING", datetime.date(2025, 1, 2))
        second = allocate(self.vendor.pk, "BILLING", datetime.date(2025, 1, 31))
        february = allocate(self.vendor.pk, "BILLING", datetime.date(2025, 2, 1))

        self.assertEqual(second, "B202501002")
        self.assertEqual(february, "B202502001")

    def test_never_reset_keeps_counting(self):
        self.enable(reset_period="NEVER", date_format="YYMM", running_digits=5)
        allocate(self.vendor.pk, "BILLING", datetime.date(2024, 12, 31))
        number = allocate(self.vendor.pk, "BILLING", datetime.date(2025, 6, 1))

        self.assertEqual(number, "B250600002")
        self.assertEqual(
            DocumentNumberSequence.objects.get(vendor=self.vendor).period_key, "ALL"
        )

    def test_billing_and_receipt_sequences_are_independent(self):
        self.enable()
        allocate(self.vendor.pk, "BILLING", DAY)
        allocate(self.vendor.pk, "BILLING", DAY)
        self.assertEqual(allocate(self.vendor.pk, "RECEIPT", DAY), "R20250115001")

    def test_vendors_do_not_share_sequences(self):
        self.enable()
        other = make_vendor("Vendor B", "0100000000002")
        DocumentNumberConfig.objects.create(vendor=other, billing_enabled=True)

        allocate(self.vendor.pk, "BILLING", DAY)
        self.assertEqual(allocate(other.pk, "BILLING", DAY), "B20250115001")


class PreviewTests(TestCase):
    def setUp(self):
        self.vendor = make_vendor()

    def test_preview_without_config_uses_defaults(self):
        self.assertEqual(preview(self.vendor.pk, "BILLING", DAY), "B20250115001")
        self.assertEqual(preview(self.vendor.pk, "RECEIPT", DAY), "R20250115001")

    def test_preview_does_not_advance_the_sequence(self):
        DocumentNumberConfig.objects.create(vendor=self.vendor, billing_enabled=True)

        first = preview(self.vendor.pk, "BILLING", DAY)
        second = preview(self.vendor.pk, "BILLING", DAY)

        self.assertEqual(first, second)
        self.assertFalse(DocumentNumberSequence.objects.exists())

    def test_preview_matches_the_next_allocation(self):
        DocumentNumberConfig.objects.create(
            vendor=self.vendor, billing_enabled=True, billing_prefix="VB", running_digits=4
        )
        allocate(self.vendor.pk, "BILLING", DAY)

        expected = preview(self.vendor.pk, "BILLING", DAY)
        self.assertEqual(expected, "VB202501150002")
        self.assertEqual(allocate(self.vendor.pk, "BILLING", DAY), expected)

    def test_preview_uses_config_formatting_even_when_disabled(self):
        DocumentNumberConfig.objects.create(
            vendor=self.vendor, billing_enabled=False, billing_prefix="X", date_format="YYMM"
        )
        self.assertEqual(preview(self.vendor.pk, "BILLING", DAY), "X2501001")


class LegacyReferenceTests(TestCase):
    def setUp(self):
        self.vendor = make_vendor()

    def test_first_reference_of_the_year(self):
        ref = legacy_reference(BillingNote, "billing_ref", "VBS", 2025)
        self.assertEqual(ref, "VBS2025-0001")

    def test_continues_after_highest_existing_reference(self):
        make_billing_note(self.vendor, "VBS2025-0007", "10.00")
        make_billing_note(self.vendor, "VBS2025-0003", "10.00")
        make_billing_note(self.vendor, "VBS2024-0020", "10.00")

        ref = legacy_reference(BillingNote, "billing_ref", "VBS", 2025)
        self.assertEqual(ref, "VBS2025-0008")

    def test_series_is_shared_by_every_vendor(self):
        # billing_ref is unique across vendors
        other = make_vendor("Vendor B", "0100000000002")
        make_billing_note(other, "VBS2025-0009", "10.00")

        ref = legacy_reference(BillingNote, "billing_ref", "VBS", 2025)
        self.assertEqual(ref, "VBS2025-0010")


@pytest.mark.parametrize(
    "reset_period, expected",
    [("DAILY", "20250115"), ("MONTHLY", "202501"), ("YEARLY", "2025"), ("NEVER", "ALL")],
)
def test_period_key(reset_period, expected):
    assert period_key(DAY, reset_period) == expected


def allocate_on_own_connection(vendor_id, results, lock):
    """Thread target: Django gives every thread its own connection."""
    try:
        number = allocate(vendor_id, "BILLING", DAY)
        with lock:
            results.append(number)
    finally:
        connection.close()


class SeparateConnectionAllocateTests(TransactionTestCase):
    """Each allocation commits on its own connection before the next starts."""

    def test_allocations_on_separate_connections_continue_the_sequence(self):
        vendor = make_vendor()
        DocumentNumberConfig.objects.create(vendor=vendor, billing_enabled=True)
        results = []
        lock = threading.Lock()

        for _ in range(4):
            t = threading.Thread(target=allocate_on_own_connection,
                                 args=(vendor.pk, results, lock))
            t.start()
            t.join()

        self.assertEqual(results, [f"B20250115{n:03d}" for n in range(1, 5)])
        self.assertEqual(DocumentNumberSequence.objects.get(vendor=vendor).last_number, 4)


# Run against PostgreSQL with DB_ENGINE=postgresql (see vb_project/settings.py)
@pytest.mark.skipif(
    connection.vendor != "postgresql",
    reason="sqlite serializes writers, row locking needs postgresql",
)
class ConcurrentAllocateTests(TransactionTestCase):
    def test_concurrent_allocations_never_repeat_a_number(self):
        vendor = make_vendor()
        DocumentNumberConfig.objects.create(vendor=vendor, billing_enabled=True)
        workers = 8
        results = []
        lock = threading.Lock()

        threads = [
            threading.Thread(target=allocate_on_own_connection, args=(vendor.pk, results, lock))
            for _ in range(workers)
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        self.assertEqual(
            sorted(results), [f"B20250115{n:03d}" for n in range(1, workers + 1)]
        )
        seq = DocumentNumberSequence.objects.get(vendor=vendor)
        self.assertEqual(seq.last_number, workers)
