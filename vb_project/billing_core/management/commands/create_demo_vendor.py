import datetime
from decimal import Decimal
from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.db import transaction
from billing_core.models import (DocumentNumberConfig, Job, JobItem,
                                 VatConfig, Vendor)

User = get_user_model()


class Command(BaseCommand):
    help = (
        "Create a demo vendor, its vendor login, an admin login and a few "
        "PENDING jobs ready to be billed."
    )

    # Define command-line arguments
    def add_arguments(self, parser):
        parser.add_argument(
            "--vendor-name",  # Define flag
            default="Demo Logistics Co., Ltd.",
            help="Name of the demo vendor to create.",
        )
        parser.add_argument(
            "--tax-id", default="0105500000001", help="Tax id of the demo vendor."
        )
        parser.add_argument(
            "--username", default="vendor", help="Username for the vendor user."
        )
        parser.add_argument(
            "--password", default="demo123", help="Password for both demo users."
        )

    def _user(self, username, password, **fields):
        user, created = User.objects.get_or_create(
            username=username,
            defaults={"email": f"{username}@example.com", **fields},
        )
        if created:  # only set a password on new users
            user.set_password(password)
            user.save()
        self.stdout.write(
            self.style.SUCCESS(f"User: {user.username} ({user.role}, pw={password})")
        )
        return user

    @transaction.atomic
    def handle(self, *args, **options):
        # Read arguments from add_arguments()
        vendor_name = options["vendor_name"]
        password = options["password"]

        # 1. Vendor, looked up by its unique tax id
        vendor, created = Vendor.objects.get_or_create(
            tax_id=options["tax_id"],
            defaults={
                "company_name": vendor_name,
                "company_address": "99 Rama IV Road, Bangkok 10110",
                "bank_account": "123-4-56789-0",
                "bank_name": "Demo Bank",
                "bank_branch": "Silom",
            },
        )
        self.stdout.write(self.style.SUCCESS(
            f"{'Created' if created else 'Reusing'} vendor: {vendor}"))

        # 2. Users
        self._user("admin", password, role="ADMIN", is_staff=True, is_superuser=True)
        self._user(options["username"], password, role="VENDOR", vendor=vendor)

        # 3. Settings
        VatConfig.objects.get_or_create(vendor=vendor)
        DocumentNumberConfig.objects.get_or_create(
            vendor=vendor,
            defaults={"billing_enabled": True, "receipt_enabled": True},
        )
        self.stdout.write(self.style.SUCCESS("Created tax and numbering settings"))

        # 4. A few jobs, only on the first run
        if vendor.jobs.exists():
            self.stdout.write(self.style.NOTICE("Vendor already has jobs, skipping"))
            return

        today = datetime.date.today()
        samples = [
            ("Customs clearance BKK port", "MSKU1234567", [("Clearance fee", "1070.00")]),
            ("Import declaration", "TGHU7654321",
             [("Declaration fee", "500.00"), ("Transport", "1500.00")]),
        ]
        for description, container_no, items in samples:
            job = Job.objects.create(
                vendor=vendor,
                description=description,
                container_no=container_no,
                clearance_date=today,
            )
            JobItem.objects.bulk_create(
                [JobItem(job=job, description=d, amount=Decimal(a)) for d, a in items]
            )
            self.stdout.write(self.style.SUCCESS(f"Created {job}"))

        self.stdout.write(self.style.SUCCESS("Demo vendor setup complete!"))
