"""Number coercion utilities for stored proposal data."""
import re
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

ZERO = Decimal('0')

# 1.234,56 (Turkish grouping) as typed into the editor by hand
TR_NUMBER_PATTERN = re.compile(r"^-?(?:\d{1,3}(?:\.\d{3})+|\d+)(?:,\d+)?$")


def to_decimal(value: Any, default: Decimal = ZERO) -> Decimal:
    """
    Convert a stored numeric value to Decimal.

    Accepts int, float, Decimal and numeric strings in either plain
    (1234.56) or Turkish (1.234,56) notation. Anything else (None, empty,
    booleans, garbage, NaN/Infinity) yields ``default``.

    Examples:
        to_decimal(100) -> Decimal('100')
        to_decimal('32,5') -> Decimal('32.5')
        to_decimal('1.234,56') -> Decimal('1234.56')
        to_decimal(None) -> Decimal('0')
    """
    if value is None or isinstance(value, bool):
        return default

    if isinstance(value, Decimal):
        num = value
    elif isinstance(value, (int, float)):
        num = Decimal(str(value))
    elif isinstance(value, str):
        cleaned = value.strip()
        if not cleaned:
            return default
        if ',' in cleaned and TR_NUMBER_PATTERN.match(cleaned):
            cleaned = cleaned.replace('.', '').replace(',', '.')
        try:
            num = Decimal(cleaned)
        except (InvalidOperation, ValueError):
            return default
    else:
        return default

    if not num.is_finite():
        return default
    return num


def first_nonzero(*values: Any) -> Decimal:
    """Return the first value that converts to a non-zero Decimal, else 0."""
    for value in values:
        num = to_decimal(value)
        if num:
            return num
    return ZERO


def to_quantity(value: Any) -> int:
    """
    Normalize a line quantity to a positive integer.

    Missing, zero, negative or unparseable quantities count as 1.
    """
    num = to_decimal(value)
    if num <= 0:
        return 1
    qty = int(num)
    return qty if qty > 0 else 1


def to_int(value: Any) -> Optional[int]:
    """Convert to int, returning None when the value is missing or invalid."""
    if value is None or isinstance(value, bool) or value == '':
        return None
    num = to_decimal(value, default=None)
    if num is None:
        return None
    return int(num)
