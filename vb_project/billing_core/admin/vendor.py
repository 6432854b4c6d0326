from django.contrib import admin
from billing_core.models import (DocumentNumberConfig, DocumentNumberSequence,
                                 VatConfig, Vendor)
from .mixins import VendorAdminMixin
from .ReadOnly import ReadOnlyAdmin


# Register `Vendor` model
@admin.register(Vendor)
class VendorAdmin(admin.ModelAdmin):
    list_display = ("id", "company_name", "tax_id", "bank_name", "bank_account", "created_at")
    search_fields = ("company_name", "tax_id")
    ordering = ("company_name",)


@admin.register(VatConfig)
class VatConfigAdmin(VendorAdminMixin, admin.ModelAdmin):
    list_display = ("vendor", "vat_rate", "wht_rate", "calculate_before_vat", "updated_at")
    list_filter = ("calculate_before_vat",)

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related("vendor")


@admin.register(DocumentNumberConfig)
class DocumentNumberConfigAdmin(VendorAdminMixin, admin.ModelAdmin):
    list_display = (
        "vendor",
        "billing_enabled",
        "billing_prefix",
        "receipt_enabled",
        "receipt_prefix",
        "date_format",
        "running_digits",
        "reset_period",
    )
    list_filter = ("billing_enabled", "receipt_enabled", "reset_period")

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related("vendor")


# Counters are only advanced by the allocator
@admin.register(DocumentNumberSequence)
class DocumentNumberSequenceAdmin(ReadOnlyAdmin):
    list_display = ("vendor", "document_type", "period_key", "last_number")
    list_filter = ("document_type",)
    search_fields = ("period_key",)
