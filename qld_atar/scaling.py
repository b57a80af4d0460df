"""
Scaled-score calculator.

General subjects follow a logistic curve fitted to the QTAC percentile
points:  scaled = 100 / (1 + exp(-(a * raw + k))), rounded to 1 decimal.
Applied and VET subjects are a straight grade lookup.

Failures are returned, not raised: a ScalingResult with scaled_score 0
and an error message, so one bad subject never stops a whole student.
"""

import math

from . import config
from .formatting import parse_float, round_half_up
from .scaling_params import SubjectType


class ScalingResult:
    def __init__(self, scaled_score, error=None):
        self.scaled_score = scaled_score
        self.error = error

    @property
    def ok(self):
        return self.error is None

    @classmethod
    def failure(cls, message):
        return cls(0, message)

    def to_dict(self):
        d = {'scaledScore': self.scaled_score}
        if self.error is not None:
            d['error'] = self.error
        return d

    def __eq__(self, other):
        if not isinstance(other, ScalingResult):
            return NotImplemented
        return self.scaled_score == other.scaled_score and self.error == other.error

    def __repr__(self):
        if self.error is None:
            return f"ScalingResult({self.scaled_score})"
        return f"ScalingResult({self.scaled_score}, error={self.error!r})"


def logistic_scaled_score(a, k, raw):
    """Unrounded logistic curve value."""
    return 100 / (1 + math.exp(-(a * raw + k)))


def calculate_scaled_score(store, subject, raw_result):
    """Scale one raw result for one subject. Returns a ScalingResult."""
    if not subject or raw_result is None:
        return ScalingResult.failure("Missing required parameters")

    entry = store.get(subject)
    if entry is None:
        return ScalingResult.failure(f"No parameters found for subject: {subject}")

    if entry.subject_type == SubjectType.GENERAL:
        raw = parse_float(raw_result)
        if raw is None:
            return ScalingResult.failure("General subjects require a valid numeric result")
        if raw < config.RAW_MIN or raw > config.RAW_MAX:
            return ScalingResult.failure("General subject scores must be between 0 and 100")
        if not entry.has_coefficients:
            return ScalingResult.failure("Missing scaling parameters for subject")
        try:
            scaled = logistic_scaled_score(entry.a, entry.k, raw)
        except OverflowError:
            # exp() overflow means the curve is at its floor
            scaled = 0.0
        return ScalingResult(round_half_up(scaled, 1))

    if entry.subject_type in (SubjectType.APPLIED, SubjectType.VET):
        if not isinstance(raw_result, str):
            return ScalingResult.failure("Applied/VET subjects require a string result")
        grade = raw_result.strip().upper()
        if grade not in entry.grade_map:
            return ScalingResult.failure(f"No scaling mapping found for {subject} result: {grade}")
        return ScalingResult(entry.grade_map[grade])

    return ScalingResult.failure("Invalid subject type")


def scaling_curve(store, subject, step=1):
    """(raw, scaled) pairs across 0..100 for a General subject; empty if it cannot be scaled."""
    points = []
    count = int(round((config.RAW_MAX - config.RAW_MIN) / step))
    for i in range(count + 1):
        raw = config.RAW_MIN + i * step
        result = calculate_scaled_score(store, subject, raw)
        if not result.ok:
            return []
        points.append((raw, result.scaled_score))
    return points
