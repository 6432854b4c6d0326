from django.contrib import admin
from billing_core.models import BillingNote, Job, JobItem

# ---------- Helpful inline admin classes ----------


class JobItemInline(admin.TabularInline):
    """Shows job items under a Job page"""

    model = JobItem
    extra = 0
    fields = ("description", "amount")

    # Items of a billed job are frozen into the billing note snapshot
    def has_add_permission(self, request, obj=None):
        if obj and obj.status == "BILLED":
            return False
        return super().has_add_permission(request, obj)

    def has_change_permission(self, request, obj=None):
        if obj and obj.status == "BILLED":
            return False
        return super().has_change_permission(request, obj)

    def has_delete_permission(self, request, obj=None):
        if obj and obj.status == "BILLED":
            return False
        return super().has_delete_permission(request, obj)


class BilledJobInline(admin.TabularInline):
    """Read-only list of the jobs linked to a billing note"""

    model = Job
    fk_name = "billing_note"
    extra = 0
    fields = ("description", "container_no", "clearance_date", "status")
    readonly_fields = fields
    show_change_link = True
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


class VoucherBillingNoteInline(admin.TabularInline):
    """Read-only list of the billing notes of a payment voucher"""

    model = BillingNote
    fk_name = "payment_voucher"
    extra = 0
    fields = ("billing_ref", "billing_date", "net_total", "status")
    readonly_fields = fields
    show_change_link = True
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False
