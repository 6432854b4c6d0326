from django.contrib import admin
from billing_core.models import BillingNote, Receipt
from .actions import (approve_billing_notes, cancel_billing_notes,
                      submit_billing_notes)
from .inlines import BilledJobInline
from .mixins import VendorAdminMixin


# Register `BillingNote` model
@admin.register(BillingNote)
class BillingNoteAdmin(VendorAdminMixin, admin.ModelAdmin):
    list_display = (
        "id",
        "billing_ref",
        "vendor",
        "billing_date",
        "status",
        "net_total",
        "payment_voucher",
    )
    list_filter = ("status", "vendor", "billing_date")
    actions = [submit_billing_notes, approve_billing_notes, cancel_billing_notes]
    search_fields = ("billing_ref", "vendor__company_name")
    inlines = [BilledJobInline]
    # the calculation snapshot and the status are owned by the services
    readonly_fields = (
        "billing_ref",
        "vendor",
        "billing_date",
        "subtotal",
        "price_before_vat",
        "vat_amount",
        "wht_amount",
        "net_total",
        "vat_rate_text",
        "wht_rate_text",
        "status",
        "payment_voucher",
        "pdf_url",
    )

    # Fetch everything in one SQL join
    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related("vendor", "payment_voucher")

    # Notes are only created from jobs through the API
    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        # removes “Delete” option once a receipt exists
        if obj and obj.has_receipt:
            return False
        return super().has_delete_permission(request, obj)


# Register `Receipt` model
@admin.register(Receipt)
class ReceiptAdmin(VendorAdminMixin, admin.ModelAdmin):
    list_display = ("id", "receipt_ref", "vendor", "billing_note", "receipt_date", "status")
    list_filter = ("status", "vendor", "receipt_date")
    search_fields = ("receipt_ref", "billing_note__billing_ref")
    readonly_fields = ("receipt_ref", "vendor", "billing_note", "status")

    # Fetch everything in one SQL join
    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related("vendor", "billing_note")

    def has_add_permission(self, request):
        return False

    # Deleting must revert the billing note, use the API
    def has_delete_permission(self, request, obj=None):
        return False
