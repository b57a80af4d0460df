"""
Rubber-band constraints for (lower, result, upper) input triples.

After a single field edit the triple is pulled back into
lower <= result <= upper. The edited field wins; a neighbour it crosses
is dragged along, and that neighbour may in turn drag the far end
(lower -> result -> upper, or upper -> result -> lower).

General subjects compare numerically (valid window 0-100), Applied
subjects by grade (E < D < C < B < A). VET and unknown categories are
returned untouched.
"""

from . import config
from .formatting import format_number, parse_float
from .scaling_params import SubjectType

CHANGED_FIELDS = ('lower', 'result', 'upper')

_GRADE_BY_VALUE = {v: g for g, v in config.GRADE_ORDER.items()}


def _parse_numeric(value):
    num = parse_float(value)
    if num is not None and config.RAW_MIN <= num <= config.RAW_MAX:
        return num
    return None


def _parse_grade(value):
    if value is None or str(value).strip() == '':
        return None
    return config.GRADE_ORDER.get(str(value).strip().upper())


def _grade_to_string(value):
    if value is None:
        return None
    return _GRADE_BY_VALUE.get(value)


class RubberBandResult:
    def __init__(self, lower_result, raw_result, upper_result):
        self.lower_result = lower_result
        self.raw_result = raw_result
        self.upper_result = upper_result

    def as_tuple(self):
        return self.lower_result, self.raw_result, self.upper_result

    def to_dict(self):
        return {
            'lowerResult': self.lower_result,
            'rawResult': self.raw_result,
            'upperResult': self.upper_result,
        }

    def __eq__(self, other):
        if not isinstance(other, RubberBandResult):
            return NotImplemented
        return self.as_tuple() == other.as_tuple()

    def __repr__(self):
        return "RubberBandResult(lower=%r, result=%r, upper=%r)" % self.as_tuple()


def apply_rubber_band_constraints(lower, result, upper, subject_type, changed):
    if changed not in CHANGED_FIELDS:
        raise ValueError(f"changed must be one of {CHANGED_FIELDS}, got {changed!r}")

    subject_type = SubjectType.parse(subject_type)
    if subject_type == SubjectType.GENERAL:
        parse, to_string = _parse_numeric, format_number
    elif subject_type == SubjectType.APPLIED:
        parse, to_string = _parse_grade, _grade_to_string
    else:
        return RubberBandResult(lower, result, upper)

    lo, mid, hi = parse(lower), parse(result), parse(upper)

    if changed == 'lower' and lo is not None:
        if mid is not None and lo > mid:
            mid = lo
        if hi is not None and mid is not None and mid > hi:
            hi = mid
    elif changed == 'result' and mid is not None:
        if lo is not None and mid < lo:
            lo = mid
        if hi is not None and mid > hi:
            hi = mid
    elif changed == 'upper' and hi is not None:
        if mid is not None and hi < mid:
            mid = hi
        if lo is not None and mid is not None and mid < lo:
            lo = mid

    return RubberBandResult(to_string(lo), to_string(mid), to_string(hi))
