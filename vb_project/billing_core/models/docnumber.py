from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from .vendor import Vendor

DOCUMENT_TYPE_CHOICES = [
    ("BILLING", "Billing note"),
    ("RECEIPT", "Receipt"),
]

DATE_FORMAT_CHOICES = [
    ("YYYYMMDD", "YYYYMMDD"),
    ("YYYYMM", "YYYYMM"),
    ("YYMM", "YYMM"),
]

RESET_PERIOD_CHOICES = [
    ("DAILY", "Daily"),
    ("MONTHLY", "Monthly"),
    ("YEARLY", "Yearly"),
    ("NEVER", "Never"),
]


class DocumentNumberConfig(models.Model):
    """Auto-numbering settings of a vendor.  Prefix and on/off switch are
    per document type, the date part and running number are shared."""

    vendor = models.OneToOneField(
        Vendor, on_delete=models.CASCADE, related_name="doc_number_config"
    )

    billing_enabled = models.BooleanField(default=False)
    billing_prefix = models.CharField(max_length=10, default="B")
    receipt_enabled = models.BooleanField(default=False)
    receipt_prefix = models.CharField(max_length=10, default="R")

    date_format = models.CharField(
        max_length=8, choices=DATE_FORMAT_CHOICES, default="YYYYMMDD"
    )
    running_digits = models.PositiveSmallIntegerField(
        default=3, validators=[MinValueValidator(2), MaxValueValidator(6)]
    )
    reset_period = models.CharField(
        max_length=8, choices=RESET_PERIOD_CHOICES, default="DAILY"
    )

    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"Numbering for {self.vendor}"

    def settings_for(self, document_type):
        """Return (enabled, prefix) for BILLING or RECEIPT."""
        if document_type == "BILLING":
            return self.billing_enabled, self.billing_prefix
        return self.receipt_enabled, self.receipt_prefix

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)


class DocumentNumberSequence(models.Model):
    """Running counter per (vendor, document type, period).  The only
    contended row in the system; always incremented in the database."""

    vendor = models.ForeignKey(
        Vendor, on_delete=models.CASCADE, related_name="doc_number_sequences"
    )
    document_type = models.CharField(max_length=8, choices=DOCUMENT_TYPE_CHOICES)
    # "20250115" (DAILY), "202501" (MONTHLY), "2025" (YEARLY), "ALL" (NEVER)
    period_key = models.CharField(max_length=8)
    last_number = models.PositiveIntegerField(default=0)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["vendor", "document_type", "period_key"],
                name="uq_doc_number_sequence_period",
            ),
        ]

    def __str__(self):
        return f"{self.vendor_id}/{self.document_type}/{self.period_key}: {self.last_number}"
