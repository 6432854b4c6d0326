from django.contrib import admin
from django.test import RequestFactory, TestCase

from billing_core.admin import AuditLogAdmin, DocumentNumberSequenceAdmin
from billing_core.models import AuditLog, DocumentNumberSequence, User

from .helpers import make_vendor


class ReadOnlyAdminTests(TestCase):
    def setUp(self):
        self.vendor = make_vendor()
        self.other = make_vendor("Vendor B", "0100000000002")
        AuditLog.objects.create(vendor=self.vendor, action="create",
                                object_type="BillingNote", object_id="1")
        AuditLog.objects.create(vendor=self.other, action="create",
                                object_type="BillingNote", object_id="2")
        self.boss = User.objects.create_user(username="boss", password="pw", role="ADMIN",
                                             is_staff=True)
        self.vendor_user = User.objects.create_user(
            username="vendor", password="pw", role="VENDOR", vendor=self.vendor, is_staff=True
        )
        self.model_admin = AuditLogAdmin(AuditLog, admin.site)

    def request_as(self, user):
        request = RequestFactory().get("/admin/")
        request.user = user
        return request

    def test_rows_cannot_be_added_changed_or_deleted(self):
        request = self.request_as(self.boss)
        self.assertFalse(self.model_admin.has_add_permission(request))
        self.assertFalse(self.model_admin.has_change_permission(request))
        self.assertFalse(self.model_admin.has_delete_permission(request))
        self.assertNotIn("delete_selected", self.model_admin.get_actions(request))
        self.assertIn("changes", self.model_admin.get_readonly_fields(request))

    def test_vendor_user_sees_only_own_rows(self):
        rows = self.model_admin.get_queryset(self.request_as(self.vendor_user))
        self.assertEqual([log.vendor_id for log in rows], [self.vendor.pk])

        everything = self.model_admin.get_queryset(self.request_as(self.boss))
        self.assertEqual(everything.count(), 2)

    def test_vendor_filter_only_for_privileged_users(self):
        self.assertEqual(
            self.model_admin.get_list_filter(self.request_as(self.boss)),
            ("vendor", "action", "object_type"),
        )
        self.assertEqual(
            self.model_admin.get_list_filter(self.request_as(self.vendor_user)),
            ("action", "object_type"),
        )

    def test_sequence_counters_are_read_only(self):
        DocumentNumberSequence.objects.create(
            vendor=self.vendor, document_type="BILLING", period_key="20250115", last_number=3
        )
        sequence_admin = DocumentNumberSequenceAdmin(DocumentNumberSequence, admin.site)
        request = self.request_as(self.vendor_user)

        self.assertFalse(sequence_admin.has_change_permission(request))
        self.assertEqual(sequence_admin.get_queryset(request).get().last_number, 3)
