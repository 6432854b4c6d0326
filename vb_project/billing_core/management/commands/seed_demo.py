from django.core.management import call_command
from django.core.management.base import BaseCommand
from billing_core.models import Job, Vendor


class Command(BaseCommand):
    help = "Seeds the database with a demo vendor, its users and PENDING jobs."

    # Define command-line arguments
    def add_arguments(self, parser):
        parser.add_argument(
            "--vendor",  # Define flag
            type=str,
            default="Demo Logistics Co., Ltd.",
            help="Name of the demo vendor (default: Demo Logistics Co., Ltd.)",
        )
        parser.add_argument(
            "--tax-id", default="0105500000001", help="Tax id of the demo vendor."
        )

    def handle(self, *args, **options):
        vendor_name = options["vendor"]  # Read argument from add_arguments()

        self.stdout.write(self.style.NOTICE(f"Seeding demo vendor {vendor_name}..."))
        call_command(
            "create_demo_vendor",
            vendor_name=vendor_name,
            tax_id=options["tax_id"],
            stdout=self.stdout,
        )

        vendor = Vendor.objects.get(tax_id=options["tax_id"])
        pending = Job.objects.for_vendor(vendor.pk).with_status("PENDING").count()
        self.stdout.write(self.style.SUCCESS(
            f"Demo data seeded: vendor #{vendor.pk} has {pending} PENDING job(s)."))
