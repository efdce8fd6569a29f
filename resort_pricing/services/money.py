"""
Decimal helpers shared by the pricing services.

All rounding is ROUND_HALF_UP; prices are never rounded with the builtin
round() (banker's rounding).
"""

import re
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation

ZERO = Decimal('0.00')
ONE = Decimal('1')
HUNDRED = Decimal('100')
FIVE = Decimal('5')

_LEADING_NUMBER = re.compile(r'^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)')


def to_decimal(value, default=ZERO):
    """Coerce a stored/entered value to Decimal; None, blanks and junk give `default`."""
    if value is None or value == '':
        return default
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return default


def strict_decimal(value):
    """
    Decimal for a value written to the database.

    Raises ValueError for None, blanks, junk and non-finite numbers instead
    of falling back to zero.
    """
    if isinstance(value, bool) or value is None or str(value).strip() == '':
        raise ValueError(f"Not a number: {value!r}")
    try:
        number = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except InvalidOperation:
        raise ValueError(f"Not a number: {value!r}")
    if not number.is_finite():
        raise ValueError(f"Not a number: {value!r}")
    return number


def parse_number(text):
    """
    Read the leading number of a string ('400', '12.5abc', ' -3').

    Returns a Decimal, or None when the string does not start with a number.
    """
    if text is None:
        return None
    match = _LEADING_NUMBER.match(str(text))
    if not match:
        return None
    return Decimal(match.group(1))


def round_whole(value):
    return to_decimal(value).quantize(ONE, rounding=ROUND_HALF_UP)


def round_rm5(value, enabled=True):
    """Round to the nearest multiple of 5 when enabled, else to the nearest integer."""
    value = to_decimal(value)
    if enabled:
        return (value / FIVE).quantize(ONE, rounding=ROUND_HALF_UP) * FIVE
    return value.quantize(ONE, rounding=ROUND_HALF_UP)


def quantize_money(value):
    return to_decimal(value).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)

