from decimal import Decimal
from django.core.exceptions import ValidationError
from django.db import models
from ..managers import VendorScopedManager
from .vendor import Vendor

JOB_STATUS_CHOICES = [
    ("PENDING", "Pending"),  # available to be billed
    ("BILLED", "Billed"),  # linked to exactly one billing note
]


# ---------- Jobs / JobItems ----------
class Job(models.Model):
    vendor = models.ForeignKey(Vendor, on_delete=models.CASCADE, related_name="jobs")

    description = models.TextField()
    ref_invoice_no = models.CharField(max_length=64, blank=True)
    container_no = models.CharField(max_length=64, blank=True)
    truck_plate = models.CharField(max_length=32, blank=True)
    clearance_date = models.DateField()
    declaration_no = models.CharField(max_length=64, blank=True)

    status = models.CharField(
        max_length=10, choices=JOB_STATUS_CHOICES, default="PENDING"
    )
    # Set only while BILLED
    billing_note = models.ForeignKey(
        "BillingNote",
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="jobs",
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = VendorScopedManager()

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["vendor", "status"], name="job_vendor_status_idx"),
            models.Index(fields=["billing_note"], name="job_billing_note_idx"),
        ]
        constraints = [
            # BILLED iff linked to a billing note
            models.CheckConstraint(
                condition=(
                    models.Q(status="BILLED", billing_note__isnull=False)
                    | models.Q(status="PENDING", billing_note__isnull=True)
                ),
                name="job_billed_iff_linked",
            ),
        ]

    def __str__(self):
        return f"Job {self.pk}: {self.description[:40]}"

    @property
    def total_amount(self):
        # derived, never stored
        return sum((item.amount for item in self.items.all()), Decimal("0.00"))

    @property
    def is_billed(self):
        return self.status == "BILLED"

    def clean(self):
        if (self.status == "BILLED") != (self.billing_note_id is not None):
            raise ValidationError(
                "A job is BILLED exactly when it is linked to a billing note.")


class JobItem(models.Model):  # Expense line owned by one job
    job = models.ForeignKey(Job, on_delete=models.CASCADE, related_name="items")
    description = models.CharField(max_length=255)
    amount = models.DecimalField(max_digits=14, decimal_places=2)

    class Meta:
        ordering = ["id"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(amount__gte=0),
                name="job_item_non_negative_amount",
            ),
        ]

    def __str__(self):
        return f"{self.description}: {self.amount}"

    def clean(self):
        if self.amount is not None and self.amount < 0:
            raise ValidationError("Item amount must be >= 0")
