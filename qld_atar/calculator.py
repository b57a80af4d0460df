"""
Single-student calculator: a list of editable subject rows, each with a
result and an optional lower/upper bound, producing TE, ATAR and an ATAR
range.
"""

from . import config
from .atar import calculate_and_format_atar, calculate_and_format_atar_range
from .cohort import variation_bounds
from .formatting import format_number, parse_float
from .rubberband import apply_rubber_band_constraints
from .scaling import ScalingResult, calculate_scaled_score
from .scaling_params import SubjectType
from .te import StudentScore, calculate_student_te_scores

EMPTY = '-'

_FIELD_ATTRS = {
    'lower': 'lower_result',
    'result': 'raw_result',
    'upper': 'upper_result',
}


class SubjectRow:
    def __init__(self, subject=None, raw_result=None, lower_result=None, upper_result=None,
                 validation_rule=None):
        self.subject = subject
        self.raw_result = raw_result
        self.lower_result = lower_result
        self.upper_result = upper_result
        self.validation_rule = validation_rule

    def copy(self, **changes):
        row = SubjectRow(self.subject, self.raw_result, self.lower_result,
                         self.upper_result, self.validation_rule)
        for key, value in changes.items():
            setattr(row, key, value)
        return row

    def __eq__(self, other):
        if not isinstance(other, SubjectRow):
            return NotImplemented
        return vars(self) == vars(other)

    def __repr__(self):
        return (f"SubjectRow({self.subject!r}, {self.lower_result!r}/{self.raw_result!r}/"
                f"{self.upper_result!r})")


def make_row(store, subject, raw_result=None, lower_result=None, upper_result=None):
    """Row for a subject given by display or canonical name."""
    entry = store.get_by_display_name(subject)
    display = entry.display_name if entry else subject
    rule = entry.validation if entry else None
    return SubjectRow(display, raw_result, lower_result, upper_result, rule)


def parse_and_scale(store, subject_name, raw_value, validation_rule):
    """Validate one field against the subject's rule and scale it; None if blank or invalid."""
    if not raw_value or not validation_rule or not subject_name:
        return None
    text = str(raw_value).strip()

    parsed = None
    if validation_rule == config.VALIDATION_NUMERIC:
        num = parse_float(text)
        if num is not None and config.RAW_MIN <= num <= config.RAW_MAX:
            parsed = num
    elif validation_rule == config.VALIDATION_GRADE:
        if text.upper() in config.GRADE_ORDER:
            parsed = text.upper()
    elif validation_rule == config.VALIDATION_PASS:
        if text.upper() == config.PASS_GRADE:
            parsed = text.upper()

    if parsed is None:
        return None
    return calculate_scaled_score(store, subject_name, parsed)


def update_row(row, field, value, store):
    """Set one of lower/result/upper and re-apply the rubber-band constraints."""
    if field not in _FIELD_ATTRS:
        raise ValueError(f"Unknown field {field!r}")
    row = row.copy(**{_FIELD_ATTRS[field]: value})
    entry = store.get_by_display_name(row.subject) if row.subject else None
    if entry is None or entry.subject_type not in (SubjectType.GENERAL, SubjectType.APPLIED):
        return row
    banded = apply_rubber_band_constraints(row.lower_result, row.raw_result, row.upper_result,
                                           entry.subject_type, field)
    return row.copy(lower_result=banded.lower_result, raw_result=banded.raw_result,
                    upper_result=banded.upper_result)


def apply_quick_range(rows, range_value):
    """Fill lower/upper for every row: raw +/- range_value for numeric rows, the grade itself otherwise."""
    range_value = config.parse_variation(range_value)
    updated = []
    for row in rows:
        if not row.subject or not row.validation_rule:
            updated.append(row)
            continue
        if row.validation_rule == config.VALIDATION_NUMERIC:
            raw = parse_float(row.raw_result)
            if raw is None or not (config.RAW_MIN <= raw <= config.RAW_MAX):
                updated.append(row)
                continue
            lower = config.clamp(raw - range_value, config.RAW_MIN, config.RAW_MAX)
            upper = config.clamp(raw + range_value, config.RAW_MIN, config.RAW_MAX)
            updated.append(row.copy(lower_result=format_number(lower),
                                    upper_result=format_number(upper)))
        elif row.validation_rule in (config.VALIDATION_GRADE, config.VALIDATION_PASS):
            updated.append(row.copy(lower_result=row.raw_result, upper_result=row.raw_result))
        else:
            updated.append(row)
    return updated


class RowScores:
    def __init__(self, lower, result, upper):
        self.lower = lower
        self.result = result
        self.upper = upper


class CalculatorResult:
    def __init__(self, te, lower_te, upper_te, atar, atar_range, row_scores):
        self.te = te
        self.lower_te = lower_te
        self.upper_te = upper_te
        self.atar = atar
        self.atar_range = atar_range
        self.row_scores = row_scores

    def to_dict(self):
        return {
            'te': str(self.te),
            'lowerTE': str(self.lower_te),
            'upperTE': str(self.upper_te),
            'atar': self.atar if isinstance(self.atar, float) else str(self.atar),
            'atarRange': str(self.atar_range),
        }


def score_rows(rows, store):
    """RowScores (ScalingResult or None per field) for each row."""
    scores = []
    for row in rows:
        lower = result = upper = None
        entry = store.get_by_display_name(row.subject) if row.subject else None
        if entry is not None:
            rule = entry.validation
            lower = parse_and_scale(store, entry.subject_name, row.lower_result, rule)
            result = parse_and_scale(store, entry.subject_name, row.raw_result, rule)
            upper = parse_and_scale(store, entry.subject_name, row.upper_result, rule)
        scores.append(RowScores(lower, result, upper))
    return scores


def calculate_rows(rows, store):
    row_scores = score_rows(rows, store)

    te_scores = []
    for row, scored in zip(rows, row_scores):
        if scored.result is None or not scored.result.ok:
            continue
        entry = store.get_by_display_name(row.subject)
        nominal = scored.result.scaled_score
        lower = scored.lower.scaled_score if isinstance(scored.lower, ScalingResult) and scored.lower.ok else nominal
        upper = scored.upper.scaled_score if isinstance(scored.upper, ScalingResult) and scored.upper.ok else nominal
        te_scores.append(StudentScore(nominal, entry.subject_type, lower, upper, subject=entry.subject_name))

    if not te_scores:
        return CalculatorResult(EMPTY, EMPTY, EMPTY, EMPTY, EMPTY, row_scores)

    te_result = calculate_student_te_scores(te_scores)
    atar = calculate_and_format_atar(te_result.te)
    atar_range = calculate_and_format_atar_range(te_result)
    return CalculatorResult(te_result.te, te_result.lower_te, te_result.upper_te,
                            atar, atar_range.display_string, row_scores)


def rows_for_student(student, store, variation=config.DEFAULT_VARIATION):
    """Editable rows for a cohort student, best scaled score first."""
    keyed = []
    for result in student.results:
        entry = store.get(result.subject)
        display = entry.display_name if entry else result.subject
        rule = entry.validation if entry else None
        subject_type = entry.subject_type if entry else SubjectType.GENERAL
        raw = None if result.raw_result is None else str(result.raw_result).strip()

        if subject_type == SubjectType.GENERAL:
            lower, upper = variation_bounds(raw, variation)
            lower, upper = format_number(lower), format_number(upper)
        else:
            lower, upper = raw, raw

        scaled = calculate_scaled_score(store, result.subject, raw)
        sort_key = scaled.scaled_score if scaled.ok else float('-inf')
        keyed.append((sort_key, SubjectRow(display, raw, lower, upper, rule)))

    keyed.sort(key=lambda item: item[0], reverse=True)
    return [row for _, row in keyed]
