"""Exact decimal-string <-> integer base-unit conversion.

Amounts never pass through ``float`` or ``Decimal``: a single unit of
rounding error sends the wrong amount.  Excess fractional digits are
truncated, not rounded.

Examples:
    >>> to_base_units("1.23456", 4)
    12345
    >>> to_decimal_string(100000, 6)
    '0.1'
"""

from __future__ import annotations

import re

from wmgr.domain.errors import InvalidAmountFormat

AMOUNT_PATTERN = re.compile(r"^[0-9]*(\.[0-9]*)?$")

SOL_DECIMALS = 9
EVM_NATIVE_DECIMALS = 18
GWEI_DECIMALS = 9


def _strip_leading_zeros(digits: str) -> str:
    """Drop leading zeros but keep at least one digit (``"000"`` -> ``"0"``)."""
    stripped = digits.lstrip("0")
    return stripped or ("0" if digits else "")


def to_base_units(amount_text: str, decimals: int) -> int:
    """Convert a decimal string like ``"0.01"`` into integer base units."""
    if decimals < 0:
        raise InvalidAmountFormat(f"Decimals must be non-negative, got {decimals}")
    text = str(amount_text).strip()
    if not AMOUNT_PATTERN.match(text):
        raise InvalidAmountFormat(f"Invalid amount format: {amount_text}")

    whole, _, fraction = text.partition(".")
    whole = _strip_leading_zeros(whole) or "0"
    fraction = fraction.ljust(decimals, "0")[:decimals]
    digits = _strip_leading_zeros(whole + fraction)
    return int(digits) if digits else 0


def to_decimal_string(base_units: int, decimals: int) -> str:
    """Render integer base units as a canonical decimal string.

    Trailing fractional zeros are dropped, and the fraction is omitted
    entirely when it is zero.
    """
    if decimals < 0:
        raise InvalidAmountFormat(f"Decimals must be non-negative, got {decimals}")
    value = int(base_units)
    if value < 0:
        raise InvalidAmountFormat(f"Base-unit amount must be non-negative, got {value}")
    whole, frac = divmod(value, 10**decimals)
    if frac == 0:
        return str(whole)
    return f"{whole}.{str(frac).rjust(decimals, '0').rstrip('0')}"


def validate_amount(amount_text: str) -> str:
    """Check the amount grammar without knowing decimals yet; return it trimmed."""
    text = str(amount_text).strip()
    if not AMOUNT_PATTERN.match(text):
        raise InvalidAmountFormat(f"Invalid amount format: {amount_text}")
    return text
