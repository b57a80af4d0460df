"""
Equivalent score calculator.

For a result in one General subject, find the raw result in other
subjects that gives the same scaled score. Each subject is represented by
a 101-entry table of scaled scores for raw 100, 99, ..., 0.
"""

import math

import numpy as np

from .formatting import to_fixed
from .scaling import scaling_curve
from .scaling_params import SubjectType

NOT_POSSIBLE = 'Not Possible'


def scaled_score_table(store, subject):
    """Scaled scores indexed by 100 - raw, or None if the subject cannot be scaled."""
    curve = scaling_curve(store, subject)
    if not curve:
        return None
    return np.array([scaled for _, scaled in reversed(curve)], dtype=float)


def build_equivalent_tables(store):
    tables = {}
    for entry in store.subjects(SubjectType.GENERAL):
        table = scaled_score_table(store, entry.subject_name)
        if table is not None:
            tables[entry.subject_name] = table
    return tables


def interpolate_score(raw, table):
    """Scaled score at a (possibly fractional) raw result."""
    if raw <= 0:
        return float(table[100])
    if raw >= 100:
        return float(table[0])
    upper_index = math.ceil(100 - raw)
    lower_index = math.floor(100 - raw)
    if upper_index == lower_index:
        return float(table[upper_index])
    upper_score = table[upper_index]
    lower_score = table[lower_index]
    fraction = raw - math.floor(raw)
    return float(lower_score + (upper_score - lower_score) * (1 - fraction))


def find_equivalent_raw(target_scaled, table):
    """Raw result giving target_scaled in this subject; NOT_POSSIBLE above its maximum."""
    if target_scaled > table[0]:
        return NOT_POSSIBLE
    for i in range(len(table) - 1):
        current, following = table[i], table[i + 1]
        if following <= target_scaled <= current:
            score = 100 - i
            if current == following:
                return float(score)
            fraction = (current - target_scaled) / (current - following)
            return float(score - fraction)
    return 0.0


class EquivalentScore:
    def __init__(self, subject, raw, scaled):
        self.subject = subject
        self.raw = raw
        self.scaled = scaled

    @property
    def possible(self):
        return self.raw != NOT_POSSIBLE

    @property
    def raw_display(self):
        return self.raw if not self.possible else to_fixed(self.raw, 1)

    @property
    def scaled_display(self):
        return to_fixed(self.scaled, 2)

    def compare(self, source_raw):
        """'better' if a lower raw result is needed here, 'worse' if higher, else ''."""
        if not self.possible:
            return ''
        if self.raw < source_raw:
            return 'better'
        if self.raw > source_raw:
            return 'worse'
        return ''

    def __repr__(self):
        return f"EquivalentScore({self.subject!r}, {self.raw_display}, {self.scaled_display})"


def equivalent_scores(store, subject, raw, comparison_subjects, tables=None):
    """
    Returns (source_scaled, [EquivalentScore or None per comparison subject]).
    None marks a comparison subject without a scaling curve.
    """
    if tables is None:
        tables = {}
    source_entry = store.get(subject)
    if source_entry is None:
        raise KeyError(f"Unknown subject: {subject}")

    def table_for(name):
        entry = store.get(name)
        if entry is None:
            return None, None
        if entry.subject_name not in tables:
            tables[entry.subject_name] = scaled_score_table(store, entry.subject_name)
        return entry, tables[entry.subject_name]

    _, source_table = table_for(subject)
    if source_table is None:
        raise ValueError(f"{subject} has no scaling curve")
    source_scaled = interpolate_score(float(raw), source_table)

    results = []
    for name in comparison_subjects:
        entry, table = table_for(name)
        if table is None:
            results.append(None)
            continue
        eq_raw = find_equivalent_raw(source_scaled, table)
        if eq_raw == NOT_POSSIBLE:
            scaled = float(table[0])
        else:
            scaled = interpolate_score(eq_raw, table)
        results.append(EquivalentScore(entry.display_name, eq_raw, scaled))
    return source_scaled, results
