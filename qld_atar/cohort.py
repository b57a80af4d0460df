"""
Cohort pipeline: scale every student's results, aggregate to a TE and
convert to an ATAR (point and range).

Range bounds come from the row itself when a lower/upper result was
supplied (pulled into order around the result), otherwise from the
cohort-wide variation (General subjects only; Applied/VET use the grade
for both bounds).

Per-subject failures exclude that subject from the TE; per-student
failures produce an error outcome and the batch carries on.
"""

import logging

from . import config
from .atar import AtarRangeResult, RANGE_ERROR, calculate_and_format_atar, calculate_and_format_atar_range
from .formatting import format_number, parse_float, to_fixed
from .rubberband import apply_rubber_band_constraints
from .scaling import calculate_scaled_score
from .scaling_params import SubjectType
from .status import Status
from .te import StudentScore, TEResult, calculate_student_te_scores

logger = logging.getLogger(__name__)


class SubjectResult:
    def __init__(self, subject, raw_result, lower_result=None, upper_result=None):
        self.subject = subject
        self.raw_result = raw_result
        self.lower_result = lower_result
        self.upper_result = upper_result

    @property
    def has_manual_range(self):
        return not _blank(self.lower_result) or not _blank(self.upper_result)

    def __repr__(self):
        return f"SubjectResult({self.subject!r}, {self.raw_result!r})"


class Student:
    def __init__(self, name, results=None):
        self.name = name
        self.results = list(results or [])

    def add_result(self, subject, raw_result, lower_result=None, upper_result=None):
        self.results.append(SubjectResult(subject, raw_result, lower_result, upper_result))

    def __repr__(self):
        return f"Student({self.name!r}, {len(self.results)} results)"


def _blank(value):
    return value is None or str(value).strip() == ''


def variation_bounds(raw_result, variation):
    """(lower, upper) General raw results for a +/- variation, or (None, None) if raw is not a number."""
    raw = parse_float(raw_result)
    if raw is None:
        return None, None
    variation = config.parse_variation(variation)
    lower = config.clamp(raw - variation, config.RAW_MIN, config.RAW_MAX)
    upper = config.clamp(raw + variation, config.RAW_MIN, config.RAW_MAX)
    return lower, upper


class SubjectOutcome:
    """One scaled subject row for one student."""

    def __init__(self, subject, display_name, subject_type, raw_result,
                 lower_result, upper_result, scaled, lower_scaled, upper_scaled):
        self.subject = subject
        self.display_name = display_name
        self.subject_type = subject_type
        self.raw_result = raw_result
        self.lower_result = lower_result
        self.upper_result = upper_result
        self.scaled = scaled
        self.lower_scaled = lower_scaled
        self.upper_scaled = upper_scaled

    @property
    def included(self):
        return self.scaled.ok

    @property
    def error(self):
        return self.scaled.error

    @property
    def scaled_score(self):
        return self.scaled.scaled_score if self.scaled.ok else None

    @property
    def result_range(self):
        if self.subject_type == SubjectType.GENERAL:
            lower, upper = parse_float(self.lower_result), parse_float(self.upper_result)
            if lower is None or upper is None:
                return None
            return f"{format_number(lower)} - {format_number(upper)}"
        if _blank(self.raw_result):
            return None
        return str(self.raw_result)

    @property
    def scaled_range(self):
        if not self.included:
            return None
        if self.subject_type == SubjectType.GENERAL:
            return f"{to_fixed(self.lower_scaled, 1)} - {to_fixed(self.upper_scaled, 1)}"
        return to_fixed(self.scaled.scaled_score, 1)

    def to_score(self):
        return StudentScore(self.scaled.scaled_score, self.subject_type,
                            self.lower_scaled, self.upper_scaled, subject=self.subject)


class StudentOutcome:
    def __init__(self, name, subjects, te_result, atar, atar_range, error=None):
        self.name = name
        self.subjects = subjects
        self.te_result = te_result
        self.atar = atar
        self.atar_range = atar_range
        self.error = error

    @property
    def te(self):
        return self.te_result.te

    @property
    def display_atar_range(self):
        return self.atar_range.short_display()

    @property
    def has_numeric_atar(self):
        return not isinstance(self.atar, Status) and isinstance(self.atar, (int, float))

    @classmethod
    def failed(cls, name, error):
        return cls(name, [], TEResult.not_available(), Status.CALCULATION_ERROR,
                   AtarRangeResult(RANGE_ERROR, Status.CALCULATION_ERROR), error=error)

    def __repr__(self):
        return f"StudentOutcome({self.name!r}, te={str(self.te)!r}, atar={self.atar!r})"


def _bound_score(store, subject, bound, fallback):
    if _blank(bound):
        return fallback
    result = calculate_scaled_score(store, subject, bound)
    if not result.ok:
        logger.debug("Bound %r for %s fell back to nominal: %s", bound, subject, result.error)
        return fallback
    return result.scaled_score


def scale_subject(store, result, variation=config.DEFAULT_VARIATION):
    entry = store.get(result.subject)
    subject_type = entry.subject_type if entry else None
    display_name = entry.display_name if entry else result.subject

    raw = result.raw_result
    if isinstance(raw, str):
        raw = raw.strip()
    scaled = calculate_scaled_score(store, result.subject, raw)

    if result.has_manual_range:
        lower, upper = result.lower_result, result.upper_result
        if subject_type in (SubjectType.GENERAL, SubjectType.APPLIED):
            banded = apply_rubber_band_constraints(lower, raw, upper, subject_type, 'result')
            lower, upper = banded.lower_result, banded.upper_result
    elif subject_type == SubjectType.GENERAL:
        lower, upper = variation_bounds(raw, variation)
    else:
        lower, upper = raw, raw

    if scaled.ok:
        lower_scaled = _bound_score(store, result.subject, lower, scaled.scaled_score)
        upper_scaled = _bound_score(store, result.subject, upper, scaled.scaled_score)
    else:
        lower_scaled = upper_scaled = None

    return SubjectOutcome(result.subject, display_name, subject_type, raw,
                          lower, upper, scaled, lower_scaled, upper_scaled)


def process_student(student, store, variation=config.DEFAULT_VARIATION):
    subjects = [scale_subject(store, r, variation) for r in student.results]

    if not subjects:
        te_result = TEResult.not_available()
    else:
        for s in subjects:
            if not s.included:
                logger.info("%s: %s excluded from TE (%s)", student.name, s.subject, s.error)
        te_result = calculate_student_te_scores([s.to_score() for s in subjects if s.included])

    atar = calculate_and_format_atar(te_result.te)
    atar_range = calculate_and_format_atar_range(te_result)
    return StudentOutcome(student.name, subjects, te_result, atar, atar_range)


class CohortResult:
    def __init__(self, outcomes, variation):
        self.outcomes = outcomes
        self.variation = variation
        self._by_name = {}
        for o in outcomes:
            self._by_name.setdefault(o.name, o)

    def __iter__(self):
        return iter(self.outcomes)

    def __len__(self):
        return len(self.outcomes)

    def get(self, name):
        return self._by_name.get(name)

    @property
    def failures(self):
        return [o for o in self.outcomes if o.error is not None]

    def filter(self, names):
        """Outcomes for the given student names (all outcomes if names is empty)."""
        if not names:
            return list(self.outcomes)
        wanted = {n.strip().lower() for n in names}
        return [o for o in self.outcomes if o.name.strip().lower() in wanted]


def process_cohort(students, store, variation=config.DEFAULT_VARIATION):
    variation = config.parse_variation(variation)
    outcomes = []
    for student in students:
        try:
            outcomes.append(process_student(student, store, variation))
        except Exception as e:
            logger.exception("Failed to process student %s", student.name)
            outcomes.append(StudentOutcome.failed(student.name, str(e)))
    return CohortResult(outcomes, variation)
