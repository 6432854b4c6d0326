from decimal import Decimal

import pytest

from billing_core.bahttext import baht_text


@pytest.mark.parametrize(
    "amount, expected",
    [
        (Decimal("0"), "(ศูนย์บาทถ้วน)"),
        (Decimal("1"), "(หนึ่งบาทถ้วน)"),
        (Decimal("11"), "(สิบเอ็ดบาทถ้วน)"),
        (Decimal("21"), "(ยี่สิบเอ็ดบาทถ้วน)"),
        (Decimal("100"), "(หนึ่งร้อยบาทถ้วน)"),
        (Decimal("101"), "(หนึ่งร้อยเอ็ดบาทถ้วน)"),
        (Decimal("121.50"), "(หนึ่งร้อยยี่สิบเอ็ดบาทห้าสิบสตางค์)"),
        (Decimal("1040.00"), "(หนึ่งพันสี่สิบบาทถ้วน)"),
        (Decimal("350.50"), "(สามร้อยห้าสิบบาทห้าสิบสตางค์)"),
        (Decimal("0.25"), "(ยี่สิบห้าสตางค์)"),
        (Decimal("1000000"), "(หนึ่งล้านบาทถ้วน)"),
        (Decimal("2500000"), "(สองล้านห้าแสนบาทถ้วน)"),
    ],
)
def test_baht_text(amount, expected):
    assert baht_text(amount) == expected


def test_baht_text_rounds_to_satang():
    # 10.005 rounds half up to 10.01
    assert baht_text("10.005") == "(สิบบาทหนึ่งสตางค์)"
