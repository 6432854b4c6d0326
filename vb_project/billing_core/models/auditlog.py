from django.conf import settings
from django.db import models
from ..managers import VendorScopedManager
from .vendor import Vendor


# ---------- Audit / Event log ----------
class AuditLog(models.Model):  # Traceability for every document state change
    vendor = models.ForeignKey(
        Vendor,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
    )
    # Nullable in case the action was automated (seed script, worker)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True, blank=True, on_delete=models.SET_NULL
    )
    # create, edit, submit, approve, cancel, issue_receipt, ...
    action = models.CharField(max_length=50)
    # "BillingNote", "Receipt", "PaymentVoucher", "Job"
    object_type = models.CharField(max_length=100)
    object_id = models.CharField(max_length=100)
    # before/after details, JSON
    changes = models.JSONField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    objects = VendorScopedManager()

    class Meta:
        indexes = [
            models.Index(fields=["vendor", "created_at"], name="auditlog_vendor_created_idx"),
            models.Index(fields=["object_type", "object_id"], name="auditlog_object_idx"),
        ]

    def __str__(self):
        return f"[{self.created_at:%Y-%m-%d %H:%M}] {self.user} {self.action} {self.object_type}({self.object_id})"
