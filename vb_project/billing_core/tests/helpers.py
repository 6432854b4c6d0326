import datetime
from decimal import Decimal
from django.contrib.auth import get_user_model
from billing_core.models import BillingNote, Job, JobItem, Vendor
from billing_core.services.access import Principal

User = get_user_model()


def make_vendor(name="Vendor A", tax_id="0100000000001"):
    return Vendor.objects.create(company_name=name, tax_id=tax_id)


def make_job(vendor, *amounts, description="Customs clearance"):
    """Job with one item per amount."""
    job = Job.objects.create(
        vendor=vendor,
        description=description,
        clearance_date=datetime.date(2025, 1, 15),
    )
    for idx, amount in enumerate(amounts, start=1):
        JobItem.objects.create(job=job, description=f"Item {idx}", amount=Decimal(amount))
    return job


def vendor_principal(vendor):
    return Principal(user_id=None, role="VENDOR", vendor_id=vendor.pk)


def staff_principal(username="admin", role="ADMIN"):
    # vouchers record their creator, so privileged callers need a real user
    user = User.objects.create_user(username=username, password="pw", role=role)
    return Principal.from_user(user)


def make_billing_note(vendor, ref, net_total, status="SUBMITTED", **fields):
    """Billing note with a hand-made snapshot."""
    net_total = Decimal(net_total)
    return BillingNote.objects.create(
        billing_ref=ref,
        vendor=vendor,
        billing_date=datetime.date(2025, 1, 15),
        subtotal=net_total,
        price_before_vat=net_total,
        net_total=net_total,
        status=status,
        **fields,
    )
