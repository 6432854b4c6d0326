from decimal import Decimal
from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from ..managers import VendorScopedManager
from .vendor import Vendor

VOUCHER_STATUS_CHOICES = [
    ("PENDING", "Pending"),
    ("APPROVED", "Approved"),
    ("CANCELLED", "Cancelled"),
]

VOUCHER_TRANSITIONS = {
    "PENDING": ["APPROVED", "CANCELLED"],
    "APPROVED": ["PENDING", "CANCELLED"],
    "CANCELLED": [],
}

MONEY = dict(max_digits=16, decimal_places=2, default=Decimal("0.00"))


class PaymentVoucher(models.Model):
    """Consolidates SUBMITTED billing notes of one vendor for payment.
    Totals are sums of the members' frozen snapshots."""

    # Globally unique, PV + YYYYMMDD + 3 digits
    voucher_ref = models.CharField(max_length=32, unique=True)
    vendor = models.ForeignKey(
        Vendor, on_delete=models.PROTECT, related_name="payment_vouchers"
    )
    voucher_date = models.DateField()

    subtotal = models.DecimalField(**MONEY)
    total_vat = models.DecimalField(**MONEY)
    total_wht = models.DecimalField(**MONEY)
    net_total = models.DecimalField(**MONEY)

    remark = models.TextField(blank=True)
    status = models.CharField(
        max_length=10, choices=VOUCHER_STATUS_CHOICES, default="PENDING"
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="payment_vouchers",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    objects = VendorScopedManager()

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["vendor", "status"], name="voucher_vendor_status_idx"),
        ]

    def __str__(self):
        return f"PaymentVoucher: {self.voucher_ref}"

    def transition_to(self, new_status):
        if new_status not in VOUCHER_TRANSITIONS.get(self.status, []):
            raise ValidationError(
                f"Cannot go from {self.status} to {new_status}")
        self.status = new_status
        self.save(update_fields=["status"])
