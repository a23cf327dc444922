"""
Formatting utilities for exports, e-mails and API payloads.
Dates follow the Turkish convention (DD.MM.YYYY); money is rendered with
two fixed decimals.
"""
from decimal import Decimal, ROUND_HALF_UP, localcontext
from datetime import date, datetime
from typing import Union, Optional

from teklif.utils.number_format import to_decimal

CENTS = Decimal('0.01')


def _group_thousands(integer_part: str, separator: str) -> str:
    reversed_int = integer_part[::-1]
    groups = [reversed_int[i:i+3] for i in range(0, len(reversed_int), 3)]
    return separator.join(groups)[::-1]


def quantize_money(value: Union[int, float, Decimal, str, None]) -> Decimal:
    """Round a monetary amount to cents (half up), whatever its magnitude."""
    num = to_decimal(value)
    with localcontext() as ctx:
        # room for every integer digit plus the two decimals
        ctx.prec = max(ctx.prec, num.adjusted() + 3)
        return num.quantize(CENTS, rounding=ROUND_HALF_UP)


def money_2(value: Union[int, float, Decimal, str, None]) -> str:
    """
    Format an amount with exactly 2 decimals and no grouping, as used in
    the CSV export.

    Examples:
        money_2(50) -> "50.00"
        money_2(Decimal('3.335')) -> "3.34"
        money_2(None) -> "0.00"
    """
    num = quantize_money(value)
    if num == 0:
        # avoid "-0.00"
        num = num.copy_abs()
    return f"{num:.2f}"


def _money_grouped(value, thousands: str, decimal_sep: str) -> str:
    num = quantize_money(value)
    sign = "-" if num < 0 else ""
    integer_part, decimal_part = f"{num.copy_abs():.2f}".split(".")
    return f"{sign}{_group_thousands(integer_part, thousands)}{decimal_sep}{decimal_part}"


def money_us(value: Union[int, float, Decimal, str, None]) -> str:
    """
    Format an amount in en-US style: 1,234.50
    """
    return _money_grouped(value, ",", ".")


def money_tr(value: Union[int, float, Decimal, str, None]) -> str:
    """
    Format an amount in Turkish style: 1.234,50
    """
    return _money_grouped(value, ".", ",")


def plain_number(value: Union[int, float, Decimal, str, None]) -> str:
    """
    Render a number without trailing zeros or exponent notation.

    Examples:
        plain_number(30) -> "30"
        plain_number(Decimal('32.50')) -> "32.5"
        plain_number(None) -> "0"
    """
    num = to_decimal(value)
    if num == 0:
        return "0"
    if num == num.to_integral_value():
        return str(int(num))
    return format(num.normalize(), 'f')


def date_tr(value: Union[date, datetime, None]) -> str:
    """
    Format a date in Turkish style: DD.MM.YYYY

    Returns "-" when the date is missing.

    Examples:
        date_tr(date(2026, 1, 12)) -> "12.01.2026"
    """
    if value is None:
        return "-"

    if isinstance(value, datetime):
        value = value.date()

    if not isinstance(value, date):
        return "-"

    return value.strftime("%d.%m.%Y")


def date_filename(value: Optional[date] = None) -> str:
    """Date for file names: DD-MM-YYYY (dots are replaced by hyphens)."""
    return date_tr(value or date.today()).replace(".", "-")


def parse_date(value) -> Optional[date]:
    """
    Parse a stored date.

    Accepts date/datetime objects and ISO strings ("2025-01-05" or
    "2025-01-05T10:30:00.000Z"). Returns None for anything else.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None

    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        pass
    try:
        return datetime.strptime(text[:10], "%Y-%m-%d").date()
    except ValueError:
        return None
