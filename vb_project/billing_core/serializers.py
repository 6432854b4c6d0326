"""
Plain dict builders for the JSON views.  Money is always a 2-dp string,
dates ISO-8601.
"""
from .bahttext import baht_text


def money(value):
    return f"{value:.2f}"


def _date(value):
    return value.isoformat() if value else None


def serialize_job_item(item):
    return {"id": item.pk, "description": item.description, "amount": money(item.amount)}


def serialize_job(job):
    items = list(job.items.all())
    return {
        "id": job.pk,
        "vendor_id": job.vendor_id,
        "description": job.description,
        "ref_invoice_no": job.ref_invoice_no,
        "container_no": job.container_no,
        "truck_plate": job.truck_plate,
        "clearance_date": _date(job.clearance_date),
        "declaration_no": job.declaration_no,
        "status": job.status,
        "billing_note_id": job.billing_note_id,
        "items": [serialize_job_item(item) for item in items],
        "total_amount": money(sum((item.amount for item in items), 0)),
        "created_at": _date(job.created_at),
    }


def serialize_billing_note(note, detail=False):
    data = {
        "id": note.pk,
        "billing_ref": note.billing_ref,
        "vendor_id": note.vendor_id,
        "billing_date": _date(note.billing_date),
        "subtotal": money(note.subtotal),
        "price_before_vat": money(note.price_before_vat),
        "vat_amount": money(note.vat_amount),
        "wht_amount": money(note.wht_amount),
        "net_total": money(note.net_total),
        "vat_rate": note.vat_rate_text,
        "wht_rate": note.wht_rate_text,
        "status": note.status,
        "remark": note.remark,
        "payment_voucher_id": note.payment_voucher_id,
        "pdf_url": note.pdf_url or None,
        "created_at": _date(note.created_at),
    }
    if detail:
        receipt = note.receipt if note.has_receipt else None
        data["jobs"] = [serialize_job(job) for job in note.jobs.all()]
        data["receipt"] = serialize_receipt(receipt) if receipt else None
        data["net_total_text"] = baht_text(note.net_total)
    return data


def serialize_receipt(receipt, detail=False):
    data = {
        "id": receipt.pk,
        "receipt_ref": receipt.receipt_ref,
        "billing_note_id": receipt.billing_note_id,
        "vendor_id": receipt.vendor_id,
        "receipt_date": _date(receipt.receipt_date),
        "status": receipt.status,
        "receipt_file": receipt.receipt_file or None,
        "pdf_url": receipt.pdf_url or None,
        "created_at": _date(receipt.created_at),
    }
    if detail:
        note = receipt.billing_note
        data["billing_note"] = serialize_billing_note(note)
        data["jobs"] = [serialize_job(job) for job in note.jobs.all()]
        data["net_total_text"] = baht_text(note.net_total)
    return data


def serialize_payment_voucher(voucher, detail=False):
    data = {
        "id": voucher.pk,
        "voucher_ref": voucher.voucher_ref,
        "vendor_id": voucher.vendor_id,
        "voucher_date": _date(voucher.voucher_date),
        "subtotal": money(voucher.subtotal),
        "total_vat": money(voucher.total_vat),
        "total_wht": money(voucher.total_wht),
        "net_total": money(voucher.net_total),
        "remark": voucher.remark,
        "status": voucher.status,
        "created_by_id": voucher.created_by_id,
        "billing_note_ids": [note.pk for note in voucher.billing_notes.all()],
        "created_at": _date(voucher.created_at),
    }
    if detail:
        data["billing_notes"] = [serialize_billing_note(n) for n in voucher.billing_notes.all()]
    return data


def serialize_tax_config(config):
    return {
        "vat_rate": money(config["vat_rate"]),
        "wht_rate": money(config["wht_rate"]),
        "calculate_before_vat": config["calculate_before_vat"],
        "is_default": config["is_default"],
    }
