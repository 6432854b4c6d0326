from django.contrib import admin
from billing_core.models import Job
from .inlines import JobItemInline
from .mixins import VendorAdminMixin


# Register `Job` model
@admin.register(Job)
class JobAdmin(VendorAdminMixin, admin.ModelAdmin):
    list_display = (
        "id",
        "vendor",
        "description",
        "container_no",
        "clearance_date",
        "status",
        "billing_note",
    )
    list_filter = ("status", "vendor", "clearance_date")
    search_fields = ("description", "container_no", "ref_invoice_no", "declaration_no")
    inlines = [JobItemInline]
    readonly_fields = ("status", "billing_note")

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related("vendor", "billing_note")

    """ Enforce immutability at admin level """

    def get_readonly_fields(self, request, obj=None):
        # A billed job is part of a billing note snapshot
        if obj and obj.status == "BILLED":
            return [f.name for f in self.model._meta.fields]
        return super().get_readonly_fields(request, obj)

    def has_delete_permission(self, request, obj=None):
        if obj and obj.status == "BILLED":
            return False
        return super().has_delete_permission(request, obj)
