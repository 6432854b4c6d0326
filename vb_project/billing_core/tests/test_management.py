from io import StringIO

import pytest
from django.core.management import call_command

from billing_core.models import DocumentNumberConfig, Job, User, Vendor


@pytest.mark.django_db
def test_seed_demo_creates_a_billable_vendor():
    out = StringIO()
    call_command("seed_demo", vendor="Siam Freight Co., Ltd.", stdout=out)

    vendor = Vendor.objects.get(tax_id="0105500000001")
    assert vendor.company_name == "Siam Freight Co., Ltd."
    assert User.objects.get(username="vendor").vendor == vendor
    assert User.objects.get(username="admin").role == "ADMIN"
    assert DocumentNumberConfig.objects.get(vendor=vendor).billing_enabled is True
    assert Job.objects.for_vendor(vendor).with_status("PENDING").count() == 2
    assert "has 2 PENDING job(s)" in out.getvalue()


@pytest.mark.django_db
def test_seed_demo_can_run_twice():
    call_command("seed_demo", stdout=StringIO())
    call_command("seed_demo", stdout=StringIO())

    assert Vendor.objects.count() == 1
    assert Job.objects.count() == 2
