"""
TE -> ATAR conversion.

A fixed 6th-degree polynomial, rounded to the nearest 0.05 and then
clamped to [30, 99.95]. The wrappers thread status values (ineligible,
missing, unparseable) through instead of raising.
"""

import logging
import math

from . import config
from .formatting import parse_float, to_fixed
from .status import Status

logger = logging.getLogger(__name__)

RANGE_SUCCESS = 'success'
RANGE_INELIGIBLE = 'ineligible'
RANGE_ERROR = 'error'
RANGE_INVALID_INPUT = 'invalid_input'

_PASS_THROUGH = (Status.INELIGIBLE, Status.NOT_AVAILABLE)


def evaluate_atar_polynomial(te):
    """Raw polynomial value, before rounding and clamping."""
    return (config.ATAR_POLY_A * te ** 6 +
            config.ATAR_POLY_B * te ** 5 +
            config.ATAR_POLY_C * te ** 4 +
            config.ATAR_POLY_D * te ** 3 +
            config.ATAR_POLY_E * te ** 2 +
            config.ATAR_POLY_F * te +
            config.ATAR_POLY_G)


def te_to_atar_conversion(te_score):
    if te_score == Status.INELIGIBLE:
        return Status.INELIGIBLE
    if isinstance(te_score, bool) or not isinstance(te_score, (int, float)):
        raise TypeError(f"Invalid TE score: {te_score!r}")

    te_score = float(te_score)
    if not math.isfinite(te_score):
        raise ValueError(f"TE score must be finite: {te_score!r}")
    try:
        atar = evaluate_atar_polynomial(te_score)
    except OverflowError:
        # te ** 6 out of float range; the negative leading term sends the curve to the floor
        return config.ATAR_MIN
    steps = config.ATAR_STEPS_PER_UNIT
    atar = math.floor(atar * steps + 0.5) / steps

    if atar < config.ATAR_MIN:
        atar = config.ATAR_MIN
    if atar > config.ATAR_MAX:
        atar = config.ATAR_MAX
    return atar


def calculate_and_format_atar(te_value):
    """ATAR number, or a Status for ineligible/missing/bad input."""
    if te_value is None:
        return Status.NOT_AVAILABLE
    status = Status.lookup(te_value)
    if status in _PASS_THROUGH:
        return status
    try:
        numeric_te = parse_float(te_value)
        if numeric_te is None:
            return Status.INVALID_TE
        return te_to_atar_conversion(numeric_te)
    except (TypeError, ValueError, OverflowError) as e:
        logger.error("Error calculating ATAR from TE %r: %s", te_value, e)
        return Status.CALCULATION_ERROR


class AtarRangeResult:
    def __init__(self, status, display_string, lower_atar=None, nominal_atar=None, upper_atar=None):
        self.status = status
        self.lower_atar = lower_atar
        self.nominal_atar = nominal_atar
        self.upper_atar = upper_atar
        self.display_string = display_string

    @property
    def ok(self):
        return self.status == RANGE_SUCCESS

    def short_display(self):
        """Two-part 'lower - upper' text on success, otherwise the status text."""
        if self.ok and self.lower_atar is not None and self.upper_atar is not None:
            return f"{to_fixed(self.lower_atar, 2)} - {to_fixed(self.upper_atar, 2)}"
        return str(self.display_string)

    def to_dict(self):
        return {
            'status': self.status,
            'lowerAtar': self.lower_atar,
            'nominalAtar': self.nominal_atar,
            'upperAtar': self.upper_atar,
            'displayString': str(self.display_string),
        }

    def __repr__(self):
        return f"AtarRangeResult({self.status!r}, {str(self.display_string)!r})"


def _missing_or_status(value):
    return value is None or Status.lookup(value) in _PASS_THROUGH


def calculate_and_format_atar_range(te=None, lower_te=None, upper_te=None):
    """
    ATAR range from a TE triple.

    Accepts either the three values or a TEResult (or dict with
    te/lowerTE/upperTE) as the first argument.
    """
    if hasattr(te, 'lower_te'):
        te, lower_te, upper_te = te.te, te.lower_te, te.upper_te
    elif isinstance(te, dict):
        te, lower_te, upper_te = te.get('te'), te.get('lowerTE'), te.get('upperTE')

    if _missing_or_status(te):
        status = Status.lookup(te)
        return AtarRangeResult(RANGE_INELIGIBLE, status if status is not None else Status.NOT_AVAILABLE)

    if _missing_or_status(lower_te) or _missing_or_status(upper_te):
        return AtarRangeResult(RANGE_INELIGIBLE, Status.NOT_AVAILABLE)

    lower, middle, upper = parse_float(lower_te), parse_float(te), parse_float(upper_te)
    if lower is None or middle is None or upper is None:
        return AtarRangeResult(RANGE_INVALID_INPUT, Status.INVALID_TE_RANGE)

    results = [calculate_and_format_atar(v) for v in (lower, middle, upper)]
    for result in results:
        if isinstance(result, Status):
            return AtarRangeResult(RANGE_ERROR, result)

    lower_atar, nominal_atar, upper_atar = results
    display = (f"{to_fixed(lower_atar, 2)} - {to_fixed(nominal_atar, 2)} - "
               f"{to_fixed(upper_atar, 2)}")
    return AtarRangeResult(RANGE_SUCCESS, display, lower_atar, nominal_atar, upper_atar)
