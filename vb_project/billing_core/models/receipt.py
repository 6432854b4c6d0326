from django.db import models
from ..managers import VendorScopedManager
from .billing import BillingNote
from .vendor import Vendor

RECEIPT_STATUS_CHOICES = [
    ("PENDING", "Pending"),
    ("PAID", "Paid"),
]


class Receipt(models.Model):
    # Unique across all vendors
    receipt_ref = models.CharField(max_length=64, unique=True)
    # At most one receipt per billing note; delete the receipt before the note
    billing_note = models.OneToOneField(
        BillingNote, on_delete=models.PROTECT, related_name="receipt"
    )
    vendor = models.ForeignKey(
        Vendor, on_delete=models.PROTECT, related_name="receipts"
    )
    receipt_date = models.DateField()
    # Issuing a receipt implies payment
    status = models.CharField(
        max_length=10, choices=RECEIPT_STATUS_CHOICES, default="PAID"
    )

    # Uploaded / generated files, relative to MEDIA_ROOT
    receipt_file = models.CharField(max_length=255, blank=True)
    pdf_url = models.CharField(max_length=255, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    objects = VendorScopedManager()

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["vendor", "status"], name="receipt_vendor_status_idx"),
        ]

    def __str__(self):
        return f"Receipt: {self.receipt_ref}"

    def stored_files(self):
        return [path for path in (self.receipt_file, self.pdf_url) if path]
