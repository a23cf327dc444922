"""Identifier normalization for proposals and companies."""
from decimal import Decimal, InvalidOperation
from typing import Optional, Union

Identifier = Union[int, str]


def normalize_id(value) -> Optional[Identifier]:
    """
    Normalize an identifier to a single canonical type.

    Records coming from the editor store company ids either as numbers or
    as text, so every id is parsed once on ingestion and compared strictly
    afterwards.

    Args:
        value: None, int, float or str

    Returns:
        int for integral ids (text or number), stripped str for anything else, None if empty

    Examples:
        normalize_id("7") -> 7
        normalize_id(7.0) -> 7
        normalize_id("5.0") -> 5
        normalize_id(" abc ") -> "abc"
        normalize_id("") -> None
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, int):
        return value

    if isinstance(value, float):
        if value != value or value in (float('inf'), float('-inf')):
            return None
        return int(value) if value.is_integer() else str(value)

    text = str(value).strip()
    if not text:
        return None

    try:
        num = Decimal(text)
    except InvalidOperation:
        return text
    if num.is_finite() and num == num.to_integral_value():
        return int(num)

    return text


def clean_text(value) -> str:
    """Stored free text as a stripped string ('' when missing)."""
    if value is None:
        return ''
    return str(value).strip()
