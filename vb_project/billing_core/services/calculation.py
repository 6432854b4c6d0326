"""
Billing amount calculation.

Two invoicing conventions are supported:

* ``calculate_before_vat=True``: job item amounts are pre-VAT prices, VAT
  and WHT are added on top of the subtotal.
* ``calculate_before_vat=False``: job item amounts already include VAT, the
  pre-VAT price is extracted by dividing by ``1 + vat_rate / 100``.

Every monetary step is rounded half-up to 2 decimal places before it feeds
the next one.
"""
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional
from django.conf import settings

CENT = Decimal("0.01")
HUNDRED = Decimal("100")


def round_money(value) -> Decimal:
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def rate_text(rate: Decimal) -> str:
    # Decimal("7.00") -> "7", Decimal("1.50") -> "1.5"
    return f"{Decimal(rate).normalize():f}"


@dataclass(frozen=True)
class Calculation:
    subtotal: Decimal
    price_before_vat: Decimal
    vat_amount: Decimal
    wht_amount: Decimal
    net_total: Decimal
    vat_rate: Decimal
    wht_rate: Decimal

    @property
    def vat_rate_text(self):
        return rate_text(self.vat_rate)

    @property
    def wht_rate_text(self):
        return rate_text(self.wht_rate)

    def as_dict(self):
        return {
            "subtotal": f"{self.subtotal:.2f}",
            "priceBeforeVat": f"{self.price_before_vat:.2f}",
            "vatAmount": f"{self.vat_amount:.2f}",
            "whtAmount": f"{self.wht_amount:.2f}",
            "netTotal": f"{self.net_total:.2f}",
            "vatRate": self.vat_rate_text,
            "whtRate": self.wht_rate_text,
        }


def calculate_amounts(
    amounts: Iterable[Decimal],
    vat_rate,
    wht_rate,
    calculate_before_vat: bool,
) -> Calculation:
    """Pure function, never raises for non-negative input.  Callers reject
    empty job selections themselves."""
    vat_rate = Decimal(vat_rate)
    wht_rate = Decimal(wht_rate)
    subtotal = sum((Decimal(a) for a in amounts), Decimal("0.00"))

    if calculate_before_vat:
        price_before_vat = subtotal
    else:
        # subtotal includes VAT, e.g. divide by 1.07 for 7%
        price_before_vat = round_money(subtotal / (1 + vat_rate / HUNDRED))

    vat_amount = round_money(price_before_vat * vat_rate / HUNDRED)
    wht_amount = round_money(price_before_vat * wht_rate / HUNDRED)
    net_total = round_money(price_before_vat + vat_amount - wht_amount)

    return Calculation(
        subtotal=round_money(subtotal),
        price_before_vat=round_money(price_before_vat),
        vat_amount=vat_amount,
        wht_amount=wht_amount,
        net_total=net_total,
        vat_rate=vat_rate,
        wht_rate=wht_rate,
    )


def default_rates():
    return (
        Decimal(str(settings.BILLING_DEFAULT_VAT_RATE)),
        Decimal(str(settings.BILLING_DEFAULT_WHT_RATE)),
    )


def resolve_tax_settings(vendor_id, calculate_before_vat: Optional[bool] = None):
    """Vendor's (vat_rate, wht_rate, calculate_before_vat).
    An explicit ``calculate_before_vat`` overrides the vendor setting."""
    from ..models import VatConfig

    config = VatConfig.objects.filter(vendor_id=vendor_id).first()
    if config is None:
        vat_rate, wht_rate = default_rates()
        configured_mode = False
    else:
        vat_rate, wht_rate = config.vat_rate, config.wht_rate
        configured_mode = config.calculate_before_vat

    if calculate_before_vat is None:
        calculate_before_vat = configured_mode
    return vat_rate, wht_rate, calculate_before_vat


def calculate_for_jobs(vendor_id, jobs, calculate_before_vat: Optional[bool] = None) -> Calculation:
    """Run the calculation over every item of ``jobs`` using the vendor's
    tax settings."""
    from ..models import JobItem

    vat_rate, wht_rate, before_vat = resolve_tax_settings(vendor_id, calculate_before_vat)
    job_ids = [job.pk for job in jobs]
    amounts = JobItem.objects.filter(job_id__in=job_ids).values_list("amount", flat=True)
    return calculate_amounts(amounts, vat_rate, wht_rate, before_vat)
