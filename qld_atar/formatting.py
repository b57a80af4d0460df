"""Number formatting shared by the TE/ATAR outputs and the cohort tables."""

import math
from decimal import Decimal, ROUND_HALF_UP


def parse_float(value):
    """Number from plain decimal text or a number; None for blanks, NaN, junk or '1_000' style digits."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip()
        if not text or '_' in text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    if number != number:  # NaN
        return None
    return number


def round_half_up(value, places=0):
    """Round to `places` decimals with ties going towards +infinity."""
    factor = 10 ** places
    return math.floor(value * factor + 0.5) / factor


def to_fixed(value, places):
    """Format with exactly `places` decimals, rounding the exact binary value half-up."""
    quantum = Decimal(1).scaleb(-places)
    return str(Decimal(float(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def format_number(value):
    """Plain number text: whole numbers drop the trailing '.0'."""
    if value is None:
        return None
    value = float(value)
    if value == int(value):
        return str(int(value))
    return repr(value)
