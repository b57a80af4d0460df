"""QLD ATAR calculator: subject scaling, TE aggregation and TE -> ATAR conversion."""

from .atar import (AtarRangeResult, calculate_and_format_atar, calculate_and_format_atar_range,
                   te_to_atar_conversion)
from .cohort import Student, SubjectResult, process_cohort, process_student
from .errors import CohortFileError, QldAtarError, ScalingDataError
from .rubberband import apply_rubber_band_constraints
from .scaling import ScalingResult, calculate_scaled_score
from .scaling_params import ScalingParameterStore, SubjectScalingEntry, SubjectType
from .status import Status
from .te import StudentScore, TEResult, calculate_student_te_scores

__version__ = '0.1.0'
