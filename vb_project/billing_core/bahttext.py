"""Amounts in Thai words, as printed on billing notes and receipts."""
from .services.calculation import round_money

DIGITS = ["ศูนย์", "หนึ่ง", "สอง", "สาม", "สี่", "ห้า", "หก", "เจ็ด", "แปด", "เก้า"]
POSITIONS = ["", "สิบ", "ร้อย", "พัน", "หมื่น", "แสน"]
MILLION = 1_000_000


def _read_group(number: int) -> str:
    """Read 1..999999."""
    text = ""
    digits = str(number)
    for index, char in enumerate(digits):
        digit = int(char)
        position = len(digits) - index - 1
        if digit == 0:
            continue
        if position == 1 and digit == 1:
            text += "สิบ"
        elif position == 1 and digit == 2:
            text += "ยี่สิบ"
        elif position == 0 and digit == 1 and number > 1:
            text += "เอ็ด"
        else:
            text += DIGITS[digit] + POSITIONS[position]
    return text


def read_number(number: int) -> str:
    if number == 0:
        return ""
    millions, rest = divmod(number, MILLION)
    text = read_number(millions) + "ล้าน" if millions else ""
    if rest:
        text += _read_group(rest)
    return text


def baht_text(amount) -> str:
    """
    >>> baht_text("121.50")
    '(หนึ่งร้อยยี่สิบเอ็ดบาทห้าสิบสตางค์)'
    """
    amount = round_money(amount)
    prefix = ""
    if amount < 0:
        prefix = "ลบ"
        amount = -amount

    baht = int(amount)
    satang = int((amount - baht) * 100)
    if baht == 0 and satang == 0:
        return "(ศูนย์บาทถ้วน)"

    text = read_number(baht) + "บาท" if baht else ""
    text += read_number(satang) + "สตางค์" if satang else "ถ้วน"
    return f"({prefix}{text})"
