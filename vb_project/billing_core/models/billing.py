from decimal import Decimal
from django.core.exceptions import ValidationError
from django.db import models
from ..managers import VendorScopedManager
from .vendor import Vendor

BILLING_STATUS_CHOICES = [
    ("PENDING", "Pending"),
    ("SUBMITTED", "Submitted"),
    ("APPROVED", "Approved"),
    ("PAID", "Paid"),
    ("CANCELLED", "Cancelled"),
]

# Current state vs. allowed next states
BILLING_TRANSITIONS = {
    "PENDING": ["SUBMITTED", "CANCELLED"],
    "SUBMITTED": ["PENDING", "APPROVED", "CANCELLED"],
    # back to SUBMITTED when the payment voucher is cancelled
    "APPROVED": ["SUBMITTED", "PAID", "CANCELLED"],
    # back to PENDING when the receipt is deleted or reverted
    "PAID": ["PENDING", "CANCELLED"],
    "CANCELLED": [],  # terminal
}

MONEY = dict(max_digits=14, decimal_places=2, default=Decimal("0.00"))


class BillingNote(models.Model):
    """
    A vendor's bill for a set of jobs.  The monetary fields are a frozen
    snapshot taken at creation / edit time and are never recomputed when
    the vendor's tax configuration changes afterwards.
    """

    # Unique across all vendors
    billing_ref = models.CharField(max_length=64, unique=True)
    vendor = models.ForeignKey(
        Vendor, on_delete=models.PROTECT, related_name="billing_notes"
    )
    billing_date = models.DateField()

    # Calculation snapshot
    subtotal = models.DecimalField(**MONEY)
    price_before_vat = models.DecimalField(**MONEY)
    vat_amount = models.DecimalField(**MONEY)
    wht_amount = models.DecimalField(**MONEY)
    net_total = models.DecimalField(**MONEY)
    # Rates as they were when the snapshot was taken, e.g. "7"
    vat_rate_text = models.CharField(max_length=16, blank=True)
    wht_rate_text = models.CharField(max_length=16, blank=True)

    status = models.CharField(
        max_length=12, choices=BILLING_STATUS_CHOICES, default="PENDING"
    )
    remark = models.TextField(blank=True)

    # Set while the note is part of an active payment voucher
    payment_voucher = models.ForeignKey(
        "PaymentVoucher",
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="billing_notes",
    )
    # Generated PDF, relative to MEDIA_ROOT
    pdf_url = models.CharField(max_length=255, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = VendorScopedManager()

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["vendor", "status"], name="billingnote_vendor_status_idx"),
            models.Index(fields=["payment_voucher"], name="billingnote_voucher_idx"),
        ]

    def __str__(self):
        return f"BillingNote: {self.billing_ref}"

    @property
    def has_receipt(self):
        # query instead of the cached reverse accessor, receipts come and go
        from .receipt import Receipt

        return Receipt.objects.filter(billing_note_id=self.pk).exists()

    def apply_calculation(self, calculation):
        """Copy a Calculation result onto the snapshot fields."""
        self.subtotal = calculation.subtotal
        self.price_before_vat = calculation.price_before_vat
        self.vat_amount = calculation.vat_amount
        self.wht_amount = calculation.wht_amount
        self.net_total = calculation.net_total
        self.vat_rate_text = calculation.vat_rate_text
        self.wht_rate_text = calculation.wht_rate_text

    def can_transition_to(self, new_status):
        return new_status in BILLING_TRANSITIONS.get(self.status, [])

    def transition_to(self, new_status):
        if not self.can_transition_to(new_status):
            raise ValidationError(
                f"Cannot go from {self.status} to {new_status}")

        self.status = new_status
        self.save(update_fields=["status", "updated_at"])
