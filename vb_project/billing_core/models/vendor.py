from decimal import Decimal
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models


class Vendor(models.Model):  # The party submitting jobs and billing notes

    company_name = models.CharField(max_length=200)
    company_address = models.TextField(blank=True)
    # Tax id is unique across the whole system
    tax_id = models.CharField(max_length=20, unique=True)

    # Where the payment voucher money goes
    bank_account = models.CharField(max_length=50, blank=True)
    bank_name = models.CharField(max_length=100, blank=True)
    bank_branch = models.CharField(max_length=100, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["company_name"]

    def __str__(self):
        return self.company_name


# ---------- Tax configuration ----------
class VatConfig(models.Model):
    """Per-vendor VAT / withholding-tax rates used when billing notes are
    calculated.  Rates are percentages (7 means 7%)."""

    vendor = models.OneToOneField(
        Vendor, on_delete=models.CASCADE, related_name="vat_config"
    )
    vat_rate = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=Decimal("7.00"),
        validators=[MinValueValidator(0), MaxValueValidator(100)],
    )
    wht_rate = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=Decimal("3.00"),
        validators=[MinValueValidator(0), MaxValueValidator(100)],
    )
    # True: job item amounts are already pre-VAT
    # False: job item amounts include VAT and must be reverse-engineered
    calculate_before_vat = models.BooleanField(default=False)

    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.vendor} VAT {self.vat_rate}% / WHT {self.wht_rate}%"

    def save(self, *args, **kwargs):
        self.full_clean()  # run validations before saving
        return super().save(*args, **kwargs)
