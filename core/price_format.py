"""
Price string normalization.

Steam formats prices for display in the requested wallet currency:
"$1,234.56", "1.234,56€", "5,--€", "¥ 1,200". These helpers turn them into
plain ``Decimal`` values.
"""

from __future__ import annotations

import logging
import re
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from core.constants import BACKPACK_TF_VALUE_DECIMALS

logger = logging.getLogger(__name__)

# First run of digits and separators, after whitespace and apostrophe
# group marks ("1'234.50") are removed
_NUMBER = re.compile(r"\d(?:[\d.,]*\d)?")
_GROUP_MARKS = re.compile(r"[\s'\u2019]+")
_SEPARATORS = ",."


def parse_price(value: Any) -> Optional[Decimal]:
    """
    Strip currency symbols and thousands separators from a display price.

    The last separator is the decimal mark unless it is followed by exactly
    three digits, in which case every separator groups thousands. Steam's
    "--" placeholder for zero minor units reads as "00".

    Returns:
        Decimal value, or None for missing/unparseable input

    Example:
        >>> parse_price("1,234.56")
        Decimal('1234.56')
        >>> parse_price("0,03€")
        Decimal('0.03')
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return value
    if isinstance(value, (int, float)):
        return Decimal(str(value))

    text = str(value).strip()
    negative = text.startswith("-") and not text.startswith("--")
    match = _NUMBER.search(_GROUP_MARKS.sub("", text.replace("--", "00")))
    if match is None:
        if text:
            logger.debug("Unparseable price %r", value)
        return None
    cleaned = match.group(0)

    last = max(cleaned.rfind(","), cleaned.rfind("."))
    if last == -1:
        number = cleaned
    else:
        head, frac = cleaned[:last], cleaned[last + 1:]
        other = "." if cleaned[last] == "," else ","
        head_digits = _strip_separators(head)
        is_decimal = (
            len(frac) != 3
            or other in head
            or head_digits in ("", "0")
        ) and cleaned[last] not in head
        if is_decimal:
            number = f"{head_digits or '0'}.{frac or '0'}"
        else:
            number = _strip_separators(cleaned)

    try:
        result = Decimal(number)
    except InvalidOperation:
        logger.debug("Unparseable price %r", value)
        return None
    return -result if negative else result


def parse_volume(value: Any) -> Optional[int]:
    """Volume arrives as a display string too ("1,234")."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    digits = re.sub(r"\D", "", str(value))
    return int(digits) if digits else None


def cents_to_decimal(value: Any) -> Optional[Decimal]:
    """
    Convert a backpack.tf minor-unit value to major units.

    Example:
        >>> cents_to_decimal(250)
        Decimal('2.50')
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        return Decimal(str(value)).scaleb(-BACKPACK_TF_VALUE_DECIMALS)
    except InvalidOperation:
        logger.debug("Unparseable minor-unit value %r", value)
        return None


def _strip_separators(text: str) -> str:
    return "".join(ch for ch in text if ch not in _SEPARATORS)
