import logging
from typing import Optional
from ..models import AuditLog

logger = logging.getLogger("billing_core.audit")


def log_action(
    *,
    action: str,
    instance,
    principal=None,
    vendor_id: Optional[int] = None,
    changes: dict | None = None,
):
    """
    Central audit logger.
    Call inside the same transaction as the change it records.
    """

    if vendor_id is None:
        vendor_id = getattr(instance, "vendor_id", None)

    AuditLog.objects.create(
        vendor_id=vendor_id,
        user_id=getattr(principal, "user_id", None),
        action=action,
        object_type=instance.__class__.__name__,
        object_id=str(instance.pk),
        changes=changes,
    )
    logger.info(
        "%s %s(%s) by user %s: %s",
        action,
        instance.__class__.__name__,
        instance.pk,
        getattr(principal, "user_id", None),
        changes or {},
    )
