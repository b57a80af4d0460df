"""
TE (Tertiary Entrance) aggregation.

Eligible students have at least 5 General subjects, or 4 General plus at
least one Applied or VET subject. The TE is the better of

    best 5 General
    best 4 General + max(best Applied, best VET)

computed separately for the lower, nominal and upper score sets.
"""

from . import config
from .formatting import to_fixed
from .scaling_params import SubjectType
from .status import Status


class StudentScore:
    def __init__(self, scaled_score, subject_type, lower_scaled_score=None,
                 upper_scaled_score=None, subject=None):
        self.scaled_score = scaled_score
        self.lower_scaled_score = scaled_score if lower_scaled_score is None else lower_scaled_score
        self.upper_scaled_score = scaled_score if upper_scaled_score is None else upper_scaled_score
        self.subject_type = SubjectType.parse(subject_type)
        self.subject = subject

    def __repr__(self):
        return (f"StudentScore({self.subject or '?'}: {self.lower_scaled_score}/"
                f"{self.scaled_score}/{self.upper_scaled_score}, {self.subject_type})")


class TEResult:
    def __init__(self, te, lower_te, upper_te):
        self.te = te
        self.lower_te = lower_te
        self.upper_te = upper_te

    @classmethod
    def ineligible(cls):
        return cls(Status.INELIGIBLE, Status.INELIGIBLE, Status.INELIGIBLE)

    @classmethod
    def not_available(cls):
        return cls(Status.NOT_AVAILABLE, Status.NOT_AVAILABLE, Status.NOT_AVAILABLE)

    @property
    def eligible(self):
        return self.te not in (Status.INELIGIBLE, Status.NOT_AVAILABLE)

    def to_dict(self):
        return {'te': self.te, 'lowerTE': self.lower_te, 'upperTE': self.upper_te}

    def __eq__(self, other):
        if not isinstance(other, TEResult):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self):
        return f"TEResult(te={self.te!r}, lower_te={self.lower_te!r}, upper_te={self.upper_te!r})"


def _count_by_type(scores):
    counts = {t: 0 for t in SubjectType}
    for s in scores:
        if s.subject_type in counts:
            counts[s.subject_type] += 1
    return counts


def is_atar_eligible(general_count, applied_count, vet_count):
    return (general_count >= config.MIN_GENERAL_FOR_ELIGIBILITY or
            (general_count >= config.MIN_GENERAL_WITH_APPLIED_OR_VET and
             (applied_count >= 1 or vet_count >= 1)))


def calculate_te_score(general, applied, vet):
    """Single TE value from three lists of scaled scores."""
    ranked = sorted(general, reverse=True)
    top5 = sum(ranked[:config.TE_TOP_GENERAL])
    top4 = sum(ranked[:config.TE_TOP_GENERAL_WITH_APPLIED_OR_VET])
    best_applied = max([0] + list(applied))
    best_vet = max([0] + list(vet))
    return max(top5, top4 + max(best_applied, best_vet))


def _te_for(scores, attr):
    by_type = {t: [] for t in SubjectType}
    for s in scores:
        if s.subject_type in by_type:
            by_type[s.subject_type].append(getattr(s, attr))
    return calculate_te_score(by_type[SubjectType.GENERAL],
                              by_type[SubjectType.APPLIED],
                              by_type[SubjectType.VET])


def calculate_student_te_scores(scores):
    """TEResult (1-decimal strings, or 'ATAR Ineligible') for one student's scores."""
    counts = _count_by_type(scores)
    if not is_atar_eligible(counts[SubjectType.GENERAL],
                            counts[SubjectType.APPLIED],
                            counts[SubjectType.VET]):
        return TEResult.ineligible()

    return TEResult(
        te=to_fixed(_te_for(scores, 'scaled_score'), 1),
        lower_te=to_fixed(_te_for(scores, 'lower_scaled_score'), 1),
        upper_te=to_fixed(_te_for(scores, 'upper_scaled_score'), 1),
    )
