import json
import logging
from functools import wraps
from django.core.exceptions import (ObjectDoesNotExist, PermissionDenied,
                                    ValidationError)
from django.http import JsonResponse
from django.views.decorators.http import require_http_methods
from .serializers import (serialize_billing_note, serialize_job,
                          serialize_payment_voucher, serialize_receipt,
                          serialize_tax_config)
from .services import billing, jobs, receipt, vendor_settings, voucher

logger = logging.getLogger(__name__)


def ok(data, status=200):
    return JsonResponse({"success": True, "data": data}, status=status)


def error(message, status):
    return JsonResponse({"success": False, "error": message}, status=status)


def api_view(func):
    """Authenticate the caller and map service exceptions to status codes."""

    @wraps(func)
    def wrapper(request, *args, **kwargs):
        principal = getattr(request, "principal", None)
        if principal is None:
            return error("Authentication required", 401)
        try:
            return func(request, principal, *args, **kwargs)
        except PermissionDenied as e:
            return error(str(e) or "Forbidden", 403)
        except ObjectDoesNotExist:
            return error("Not found", 404)
        except ValidationError as e:
            logger.info("Rejected %s %s: %s", request.method, request.path, e.messages)
            return error("; ".join(e.messages), 400)

    return wrapper


def _body(request) -> dict:
    if not request.body:
        return {}
    try:
        data = json.loads(request.body)
    except (TypeError, ValueError):
        raise ValidationError("Request body must be JSON")
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


# ----------------------------
# Jobs
# ----------------------------
@require_http_methods(["GET", "POST"])
@api_view
def jobs_view(request, principal):
    if request.method == "POST":
        job = jobs.create_job(principal, _body(request))
        return ok(serialize_job(job), status=201)
    qs = jobs.list_jobs(principal, request.GET.get("status"))
    return ok([serialize_job(job) for job in qs])


@require_http_methods(["GET", "PUT", "DELETE"])
@api_view
def job_detail_view(request, principal, pk):
    if request.method == "PUT":
        job = jobs.update_job(principal, pk, _body(request))
        return ok(serialize_job(job))
    if request.method == "DELETE":
        jobs.delete_job(principal, pk)
        return ok({"id": pk})
    return ok(serialize_job(jobs.get_job(principal, pk)))


# ----------------------------
# Billing notes
# ----------------------------
@require_http_methods(["GET", "POST"])
@api_view
def billing_notes_view(request, principal):
    if request.method == "POST":
        data = _body(request)
        note = billing.create_billing_note(
            principal,
            data.get("job_ids"),
            billing_ref=data.get("billing_ref"),
            calculate_before_vat=data.get("calculate_before_vat"),
            remark=data.get("remark") or "",
            billing_date=data.get("billing_date"),
        )
        return ok(serialize_billing_note(note), status=201)
    qs = billing.list_billing_notes(
        principal, request.GET.get("vendor_id"), request.GET.get("status")
    )
    return ok([serialize_billing_note(note) for note in qs])


@require_http_methods(["POST"])
@api_view
def billing_preview_view(request, principal):
    data = _body(request)
    _, calculation = billing.preview_calculation(
        principal, data.get("job_ids"), data.get("calculate_before_vat")
    )
    return ok(calculation.as_dict())


@require_http_methods(["GET", "PUT"])
@api_view
def billing_note_detail_view(request, principal, pk):
    if request.method == "PUT":
        data = _body(request)
        billing.edit_billing_note(
            principal,
            pk,
            data.get("job_ids"),
            remark=data.get("remark"),
            calculate_before_vat=data.get("calculate_before_vat"),
        )
    note = billing.get_billing_note(principal, pk)
    return ok(serialize_billing_note(note, detail=True))


@require_http_methods(["POST", "PATCH"])
@api_view
def billing_note_status_view(request, principal, pk):
    note = billing.update_billing_note_status(principal, pk, _body(request).get("status"))
    return ok(serialize_billing_note(note))


@require_http_methods(["POST"])
@api_view
def billing_note_cancel_view(request, principal, pk):
    note = billing.cancel_billing_note(principal, pk)
    return ok(serialize_billing_note(note))


# ----------------------------
# Receipts
# ----------------------------
@require_http_methods(["GET", "POST"])
@api_view
def receipts_view(request, principal):
    if request.method == "POST":
        data = _body(request)
        created = receipt.create_receipt(
            principal, data.get("billing_note_id"), data.get("receipt_date")
        )
        return ok(serialize_receipt(created), status=201)
    qs = receipt.list_receipts(
        principal, request.GET.get("vendor_id"), request.GET.get("status")
    )
    return ok([serialize_receipt(r) for r in qs])


@require_http_methods(["GET", "DELETE"])
@api_view
def receipt_detail_view(request, principal, pk):
    if request.method == "DELETE":
        note = receipt.delete_receipt(principal, pk)
        return ok({"id": pk, "billing_note": serialize_billing_note(note)})
    return ok(serialize_receipt(receipt.get_receipt(principal, pk), detail=True))


@require_http_methods(["POST", "PATCH"])
@api_view
def receipt_status_view(request, principal, pk):
    data = _body(request)
    updated = receipt.update_receipt_status(
        principal, pk, data.get("status"), revert_billing=data.get("revert_billing")
    )
    return ok(serialize_receipt(updated))


# ----------------------------
# Payment vouchers
# ----------------------------
@require_http_methods(["GET", "POST"])
@api_view
def payment_vouchers_view(request, principal):
    if request.method == "POST":
        data = _body(request)
        created = voucher.create_payment_voucher(
            principal,
            data.get("vendor_id"),
            data.get("billing_note_ids"),
            data.get("voucher_date"),
            remark=data.get("remark") or "",
        )
        return ok(serialize_payment_voucher(created), status=201)
    qs = voucher.list_payment_vouchers(
        principal, request.GET.get("vendor_id"), request.GET.get("status")
    )
    return ok([serialize_payment_voucher(v) for v in qs])


@require_http_methods(["GET"])
@api_view
def payment_voucher_detail_view(request, principal, pk):
    found = voucher.get_payment_voucher(principal, pk)
    return ok(serialize_payment_voucher(found, detail=True))


@require_http_methods(["POST", "PATCH"])
@api_view
def payment_voucher_status_view(request, principal, pk):
    updated = voucher.update_payment_voucher_status(
        principal, pk, _body(request).get("status")
    )
    return ok(serialize_payment_voucher(updated))


@require_http_methods(["POST"])
@api_view
def payment_voucher_cancel_view(request, principal, pk):
    voucher.cancel_payment_voucher(principal, pk)
    return ok({"id": pk})


@require_http_methods(["GET"])
@api_view
def voucherable_billing_notes_view(request, principal, vendor_id):
    qs = voucher.voucherable_billing_notes(principal, vendor_id)
    return ok([serialize_billing_note(note) for note in qs])


# ----------------------------
# Vendor settings
# ----------------------------
@require_http_methods(["GET", "PUT"])
@api_view
def doc_number_config_view(request, principal):
    if request.method == "PUT":
        vendor_settings.update_doc_number_config(principal, _body(request))
    config = vendor_settings.get_doc_number_config(principal, request.GET.get("vendor_id"))
    return ok(config)


@require_http_methods(["GET"])
@api_view
def doc_number_preview_view(request, principal):
    number = vendor_settings.document_number_preview(
        principal, request.GET.get("type"), request.GET.get("vendor_id")
    )
    return ok({"type": request.GET.get("type"), "preview": number})


@require_http_methods(["GET", "PUT"])
@api_view
def tax_settings_view(request, principal):
    if request.method == "PUT":
        vendor_settings.update_tax_config(principal, _body(request))
    config = vendor_settings.get_tax_config(principal, request.GET.get("vendor_id"))
    return ok(serialize_tax_config(config))
