from decimal import Decimal

from django.core.exceptions import PermissionDenied, ValidationError
from django.test import TestCase

from billing_core.models import DocumentNumberConfig, VatConfig
from billing_core.services.vendor_settings import (document_number_preview,
                                                   get_doc_number_config,
                                                   get_tax_config,
                                                   update_doc_number_config,
                                                   update_tax_config)

from .helpers import make_vendor, staff_principal, vendor_principal


class TaxConfigTests(TestCase):
    def setUp(self):
        self.vendor = make_vendor()
        self.principal = vendor_principal(self.vendor)

    def test_defaults_match_the_calculation_defaults(self):
        config = get_tax_config(self.principal)
        self.assertEqual(config["vat_rate"], Decimal("7"))
        self.assertEqual(config["wht_rate"], Decimal("3"))
        self.assertFalse(config["calculate_before_vat"])
        self.assertTrue(config["is_default"])

    def test_update_creates_then_changes_the_config(self):
        update_tax_config(self.principal, {"wht_rate": "1"})
        update_tax_config(self.principal, {"calculate_before_vat": True})

        config = VatConfig.objects.get(vendor=self.vendor)
        self.assertEqual(config.vat_rate, Decimal("7.00"))
        self.assertEqual(config.wht_rate, Decimal("1.00"))
        self.assertTrue(config.calculate_before_vat)
        self.assertFalse(get_tax_config(self.principal)["is_default"])

    def test_mode_flag_must_be_a_boolean(self):
        for value in ("false", "true", 0, None):
            with self.subTest(value=value):
                with self.assertRaises(ValidationError):
                    update_tax_config(self.principal, {"calculate_before_vat": value})
        self.assertFalse(VatConfig.objects.exists())

    def test_rates_over_100_are_rejected(self):
        with self.assertRaises(ValidationError):
            update_tax_config(self.principal, {"vat_rate": "150"})
        self.assertFalse(VatConfig.objects.exists())

    def test_admin_reads_a_named_vendor(self):
        admin = staff_principal()
        with self.assertRaises(ValidationError):
            get_tax_config(admin)
        self.assertTrue(get_tax_config(admin, self.vendor.pk)["is_default"])
        with self.assertRaises(PermissionDenied):
            update_tax_config(admin, {"vat_rate": "7"})


class DocNumberConfigTests(TestCase):
    def setUp(self):
        self.vendor = make_vendor()
        self.principal = vendor_principal(self.vendor)

    def test_defaults_when_never_saved(self):
        self.assertEqual(
            get_doc_number_config(self.principal),
            {
                "billing_enabled": False,
                "billing_prefix": "B",
                "receipt_enabled": False,
                "receipt_prefix": "R",
                "date_format": "YYYYMMDD",
                "running_digits": 3,
                "reset_period": "DAILY",
            },
        )

    def test_upsert(self):
        update_doc_number_config(self.principal, {"billing_enabled": True, "billing_prefix": "INV"})
        update_doc_number_config(self.principal, {"running_digits": "4"})

        config = DocumentNumberConfig.objects.get(vendor=self.vendor)
        self.assertTrue(config.billing_enabled)
        self.assertEqual(config.billing_prefix, "INV")
        self.assertEqual(config.running_digits, 4)

    def test_invalid_values_are_rejected(self):
        for data in (
            {"billing_prefix": "X" * 11},
            {"billing_prefix": "  "},
            {"running_digits": 7},
            {"running_digits": 1},
            {"reset_period": "HOURLY"},
            {"date_format": "DDMMYYYY"},
            {"billing_enabled": "false"},
            {"receipt_enabled": 1},
            {"receipt_enabled": None},
        ):
            with self.subTest(data=data):
                with self.assertRaises(ValidationError):
                    update_doc_number_config(self.principal, data)
        # nothing was switched on by a rejected payload
        self.assertFalse(
            DocumentNumberConfig.objects.filter(vendor=self.vendor, billing_enabled=True).exists()
        )

    def test_preview(self):
        update_doc_number_config(self.principal, {"billing_prefix": "INV"})
        number = document_number_preview(self.principal, "BILLING")
        self.assertTrue(number.startswith("INV"))
        self.assertTrue(number.endswith("001"))
        with self.assertRaises(ValidationError):
            document_number_preview(self.principal, "VOUCHER")
