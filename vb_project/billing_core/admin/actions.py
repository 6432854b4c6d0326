from django.contrib import admin, messages
from django.core.exceptions import PermissionDenied, ValidationError
from billing_core.services.access import Principal
from billing_core.services.billing import (approve_billing_note,
                                           cancel_billing_note,
                                           submit_billing_note)
from billing_core.services.voucher import cancel_payment_voucher

# ---------- Admin actions ----------
# Every action goes through the service layer so the admin
# cannot bypass the status rules or the job / voucher bookkeeping.


def _run_for_each(modeladmin, request, queryset, service, verb):
    principal = Principal.from_user(request.user)
    success = 0
    for obj in queryset:
        try:
            service(principal, obj.pk)
            success += 1
        except (ValidationError, PermissionDenied) as e:
            modeladmin.message_user(request, f"{obj}: {e}", level=messages.ERROR)
    modeladmin.message_user(
        request,
        f"{verb} {success} of {len(queryset)} selected.",
        level=messages.SUCCESS if success == len(queryset) else messages.WARNING,
    )


@admin.action(description="Submit selected billing notes")
def submit_billing_notes(modeladmin, request, queryset):
    _run_for_each(modeladmin, request, queryset, submit_billing_note, "Submitted")


@admin.action(description="Approve selected billing notes")
def approve_billing_notes(modeladmin, request, queryset):
    _run_for_each(modeladmin, request, queryset, approve_billing_note, "Approved")


@admin.action(description="Cancel selected billing notes (release jobs)")
def cancel_billing_notes(modeladmin, request, queryset):
    _run_for_each(modeladmin, request, queryset, cancel_billing_note, "Cancelled")


@admin.action(description="Cancel selected payment vouchers (revert members)")
def cancel_payment_vouchers(modeladmin, request, queryset):
    _run_for_each(modeladmin, request, queryset, cancel_payment_voucher, "Cancelled")
