import datetime
from decimal import Decimal

from django.core.exceptions import PermissionDenied, ValidationError
from django.test import TestCase
from django.utils import timezone

from billing_core.exceptions import ConsistencyViolation
from billing_core.models import BillingNote, PaymentVoucher, Receipt
from billing_core.services.voucher import (cancel_payment_voucher,
                                           create_payment_voucher,
                                           list_payment_vouchers,
                                           next_voucher_ref,
                                           update_payment_voucher_status,
                                           voucherable_billing_notes)

from .helpers import (make_billing_note, make_vendor, staff_principal,
                      vendor_principal)

VOUCHER_DATE = datetime.date(2025, 1, 31)


class PaymentVoucherTests(TestCase):
    def setUp(self):
        self.vendor = make_vendor()
        self.admin = staff_principal()
        self.staff = staff_principal("clerk", role="USER")
        self.n1 = make_billing_note(self.vendor, "VBS2025-0001", "100.00")
        self.n2 = make_billing_note(self.vendor, "VBS2025-0002", "250.50")

    def create(self, notes, principal=None):
        return create_payment_voucher(
            principal or self.staff, self.vendor.pk, [n.pk for n in notes], VOUCHER_DATE
        )

    def test_voucher_totals_are_sums_of_member_snapshots(self):
        voucher = self.create([self.n1, self.n2])

        self.assertEqual(voucher.net_total, Decimal("350.50"))
        self.assertEqual(voucher.subtotal, Decimal("350.50"))
        self.assertEqual(voucher.status, "PENDING")
        for note in (self.n1, self.n2):
            note.refresh_from_db()
            self.assertEqual(note.status, "APPROVED")
            self.assertEqual(note.payment_voucher_id, voucher.pk)

    def test_voucher_reference_restarts_every_day(self):
        today = timezone.localdate()
        first = self.create([self.n1])
        second = self.create([self.n2])

        self.assertEqual(first.voucher_ref, f"PV{today:%Y%m%d}001")
        self.assertEqual(second.voucher_ref, f"PV{today:%Y%m%d}002")
        self.assertEqual(next_voucher_ref(datetime.date(2020, 1, 1)), "PV20200101001")

    def test_vendor_cannot_build_vouchers(self):
        with self.assertRaises(PermissionDenied):
            self.create([self.n1], principal=vendor_principal(self.vendor))

    def test_vendor_id_is_required(self):
        with self.assertRaises(ValidationError):
            create_payment_voucher(self.staff, None, [self.n1.pk], VOUCHER_DATE)

    def test_any_non_submitted_member_rejects_the_whole_voucher(self):
        pending = make_billing_note(self.vendor, "VBS2025-0003", "10.00", status="PENDING")

        with self.assertRaises(ConsistencyViolation):
            self.create([self.n1, pending])

        self.assertFalse(PaymentVoucher.objects.exists())
        self.n1.refresh_from_db()
        self.assertEqual(self.n1.status, "SUBMITTED")

    def test_note_already_in_a_voucher_is_rejected(self):
        self.create([self.n1])
        # back to SUBMITTED but still linked
        BillingNote.objects.filter(pk=self.n1.pk).update(status="SUBMITTED")

        with self.assertRaises(ConsistencyViolation):
            self.create([self.n1, self.n2])

    def test_another_vendors_note_is_rejected(self):
        other = make_vendor("Vendor B", "0100000000002")
        foreign = make_billing_note(other, "VBS2025-0001-B", "10.00")

        with self.assertRaises(ConsistencyViolation):
            self.create([self.n1, foreign])

    def test_cancel_reverts_members_and_deletes_voucher(self):
        voucher = self.create([self.n1, self.n2])

        cancel_payment_voucher(self.admin, voucher.pk)

        self.assertFalse(PaymentVoucher.objects.filter(pk=voucher.pk).exists())
        for note in (self.n1, self.n2):
            note.refresh_from_db()
            self.assertEqual(note.status, "SUBMITTED")
            self.assertIsNone(note.payment_voucher_id)

    def test_only_admin_can_cancel(self):
        voucher = self.create([self.n1])
        with self.assertRaises(PermissionDenied):
            cancel_payment_voucher(self.staff, voucher.pk)

    def test_cancel_is_refused_once_a_member_has_a_receipt(self):
        voucher = self.create([self.n1, self.n2])
        Receipt.objects.create(
            receipt_ref="RE2025-0001",
            billing_note=self.n1,
            vendor=self.vendor,
            receipt_date=VOUCHER_DATE,
        )

        with self.assertRaises(ConsistencyViolation):
            cancel_payment_voucher(self.admin, voucher.pk)

        self.assertTrue(PaymentVoucher.objects.filter(pk=voucher.pk).exists())
        self.n2.refresh_from_db()
        self.assertEqual(self.n2.payment_voucher_id, voucher.pk)

    def test_status_update_does_not_touch_members(self):
        voucher = self.create([self.n1])

        voucher = update_payment_voucher_status(self.admin, voucher.pk, "APPROVED")
        voucher = update_payment_voucher_status(self.admin, voucher.pk, "PENDING")

        self.assertEqual(voucher.status, "PENDING")
        self.n1.refresh_from_db()
        self.assertEqual(self.n1.status, "APPROVED")

    def test_status_cancelled_releases_members_and_keeps_record(self):
        voucher = self.create([self.n1, self.n2])

        voucher = update_payment_voucher_status(self.admin, voucher.pk, "CANCELLED")

        self.assertEqual(voucher.status, "CANCELLED")
        self.assertFalse(BillingNote.objects.filter(payment_voucher=voucher).exists())
        self.assertEqual(
            set(BillingNote.objects.values_list("status", flat=True)), {"SUBMITTED"}
        )
        with self.assertRaises(ValidationError):
            update_payment_voucher_status(self.admin, voucher.pk, "PENDING")

    def test_voucherable_notes_exclude_vouchered_and_other_statuses(self):
        make_billing_note(self.vendor, "VBS2025-0003", "10.00", status="PENDING")
        self.create([self.n1])

        notes = voucherable_billing_notes(self.staff, self.vendor.pk)

        self.assertEqual([n.pk for n in notes], [self.n2.pk])

    def test_listing_filters_by_vendor_and_status(self):
        voucher = self.create([self.n1])
        other = make_vendor("Vendor B", "0100000000002")
        create_payment_voucher(
            self.staff,
            other.pk,
            [make_billing_note(other, "VBS2025-0009", "5.00").pk],
            VOUCHER_DATE,
        )

        self.assertEqual(
            [v.pk for v in list_payment_vouchers(self.staff, vendor_id=self.vendor.pk)],
            [voucher.pk],
        )
        self.assertEqual(len(list_payment_vouchers(self.staff, status="PENDING")), 2)
        self.assertEqual(len(list_payment_vouchers(self.staff, status="APPROVED")), 0)
