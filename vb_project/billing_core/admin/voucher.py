from django.contrib import admin
from billing_core.models import PaymentVoucher
from .actions import cancel_payment_vouchers
from .inlines import VoucherBillingNoteInline
from .mixins import VendorAdminMixin


# Register `PaymentVoucher` model
@admin.register(PaymentVoucher)
class PaymentVoucherAdmin(VendorAdminMixin, admin.ModelAdmin):
    list_display = (
        "id",
        "voucher_ref",
        "vendor",
        "voucher_date",
        "status",
        "net_total",
        "created_by",
    )
    list_filter = ("status", "vendor", "voucher_date")
    actions = [cancel_payment_vouchers]
    search_fields = ("voucher_ref", "vendor__company_name")
    inlines = [VoucherBillingNoteInline]
    # totals are sums of the members' snapshots
    readonly_fields = (
        "voucher_ref",
        "vendor",
        "subtotal",
        "total_vat",
        "total_wht",
        "net_total",
        "status",
        "created_by",
    )

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related("vendor", "created_by")

    def has_add_permission(self, request):
        return False

    # Use the cancel action, it reverts the members first
    def has_delete_permission(self, request, obj=None):
        return False
