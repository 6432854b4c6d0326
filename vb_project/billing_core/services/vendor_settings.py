from django.core.exceptions import ValidationError
from django.db import transaction
from ..models import DocumentNumberConfig, VatConfig
from ..models.docnumber import DOCUMENT_TYPE_CHOICES
from .access import Principal, require_vendor, vendor_scope
from .audit_helper import log_action
from .calculation import default_rates
from .docnumber import (DEFAULT_DATE_FORMAT, DEFAULT_PREFIXES,
                        DEFAULT_RESET_PERIOD, DEFAULT_RUNNING_DIGITS, preview)
from .validation import parse_amount, parse_bool

DOC_NUMBER_FIELDS = (
    "billing_enabled",
    "billing_prefix",
    "receipt_enabled",
    "receipt_prefix",
    "date_format",
    "running_digits",
    "reset_period",
)


# ----------------------------
# Tax settings
# ----------------------------
def get_tax_config(principal: Principal, vendor_id=None) -> dict:
    """Vendor's tax settings, or the system defaults when never saved."""
    vendor_id = vendor_scope(principal, vendor_id)
    config = VatConfig.objects.filter(vendor_id=vendor_id).first()
    if config is None:
        vat_rate, wht_rate = default_rates()
        return {
            "vat_rate": vat_rate,
            "wht_rate": wht_rate,
            "calculate_before_vat": False,
            "is_default": True,
        }
    return {
        "vat_rate": config.vat_rate,
        "wht_rate": config.wht_rate,
        "calculate_before_vat": config.calculate_before_vat,
        "is_default": False,
    }


def update_tax_config(principal: Principal, data) -> VatConfig:
    vendor_id = require_vendor(principal)
    defaults = {}
    if "vat_rate" in data:
        defaults["vat_rate"] = parse_amount(data["vat_rate"], "vat_rate")
    if "wht_rate" in data:
        defaults["wht_rate"] = parse_amount(data["wht_rate"], "wht_rate")
    if "calculate_before_vat" in data:
        defaults["calculate_before_vat"] = parse_bool(
            data["calculate_before_vat"], "calculate_before_vat", allow_none=False)

    with transaction.atomic():
        config = VatConfig.objects.select_for_update().filter(vendor_id=vendor_id).first()
        if config is None:
            vat_rate, wht_rate = default_rates()
            config = VatConfig(vendor_id=vendor_id, vat_rate=vat_rate, wht_rate=wht_rate)
        for field, value in defaults.items():
            setattr(config, field, value)
        config.save()  # full_clean() enforces 0..100
        log_action(action="update_tax_config", instance=config, principal=principal,
                   changes={k: str(v) for k, v in defaults.items()})
    return config


# ----------------------------
# Document numbering
# ----------------------------
def get_doc_number_config(principal: Principal, vendor_id=None) -> dict:
    vendor_id = vendor_scope(principal, vendor_id)
    config = DocumentNumberConfig.objects.filter(vendor_id=vendor_id).first()
    if config is None:
        return {
            "billing_enabled": False,
            "billing_prefix": DEFAULT_PREFIXES["BILLING"],
            "receipt_enabled": False,
            "receipt_prefix": DEFAULT_PREFIXES["RECEIPT"],
            "date_format": DEFAULT_DATE_FORMAT,
            "running_digits": DEFAULT_RUNNING_DIGITS,
            "reset_period": DEFAULT_RESET_PERIOD,
        }
    return {field: getattr(config, field) for field in DOC_NUMBER_FIELDS}


def update_doc_number_config(principal: Principal, data) -> DocumentNumberConfig:
    vendor_id = require_vendor(principal)
    changes = {field: data[field] for field in DOC_NUMBER_FIELDS if field in data}
    if "running_digits" in changes:
        try:
            changes["running_digits"] = int(changes["running_digits"])
        except (TypeError, ValueError):
            raise ValidationError("running_digits must be a number")
    for field in ("billing_prefix", "receipt_prefix"):
        if field in changes:
            changes[field] = (changes[field] or "").strip()
            if not changes[field]:
                raise ValidationError(f"{field} must not be empty")
    for field in ("billing_enabled", "receipt_enabled"):
        if field in changes:
            changes[field] = parse_bool(changes[field], field, allow_none=False)

    with transaction.atomic():
        config, _ = DocumentNumberConfig.objects.select_for_update().get_or_create(
            vendor_id=vendor_id
        )
        for field, value in changes.items():
            setattr(config, field, value)
        config.save()  # full_clean() checks choices, prefix length, digits 2..6
        log_action(action="update_doc_number_config", instance=config,
                   principal=principal, changes=changes)
    return config


def document_number_preview(principal: Principal, document_type, vendor_id=None) -> str:
    if document_type not in dict(DOCUMENT_TYPE_CHOICES):
        raise ValidationError("type must be BILLING or RECEIPT")
    vendor_id = vendor_scope(principal, vendor_id)
    return preview(vendor_id, document_type)
