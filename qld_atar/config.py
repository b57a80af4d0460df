"""
QLD ATAR calculator configuration.

Fixed domain constants for the scaling -> TE -> ATAR pipeline, plus the
runtime settings (data location, default cohort variation) that can be
overridden from the environment.
"""

import os

from .formatting import parse_float

# ============================================================
# TE -> ATAR polynomial (6th degree, highest power first)
# ============================================================
ATAR_POLY_A = -7.3159e-14
ATAR_POLY_B = 1.01772e-10
ATAR_POLY_C = -4.37167e-08
ATAR_POLY_D = 1.93676e-06
ATAR_POLY_E = 0.002716082
ATAR_POLY_F = -0.271855355
ATAR_POLY_G = 11.34274504

ATAR_MIN = 30.0
ATAR_MAX = 99.95
ATAR_STEPS_PER_UNIT = 20  # nearest 0.05

# ============================================================
# Subject results
# ============================================================
RAW_MIN = 0
RAW_MAX = 100

# Applied grade ordinal (higher is better)
GRADE_ORDER = {'E': 1, 'D': 2, 'C': 3, 'B': 4, 'A': 5}
PASS_GRADE = 'PASS'

VALIDATION_NUMERIC = '0 - 100'
VALIDATION_GRADE = 'A - E'
VALIDATION_PASS = 'Pass'

# ============================================================
# TE eligibility
# ============================================================
MIN_GENERAL_FOR_ELIGIBILITY = 5
MIN_GENERAL_WITH_APPLIED_OR_VET = 4
TE_TOP_GENERAL = 5
TE_TOP_GENERAL_WITH_APPLIED_OR_VET = 4

# ============================================================
# Cohort variation and school summary
# ============================================================
VARIATION_MIN = 0
VARIATION_MAX = 100
DEFAULT_VARIATION = 0

SUMMARY_THRESHOLDS = [99, 95, 90, 80, 70, 60]
HISTOGRAM_BUCKET_WIDTH = 5

# ============================================================
# Reference data
# ============================================================
PACKAGE_DIR = os.path.dirname(os.path.abspath(__file__))
DEFAULT_DATA_DIR = os.path.join(PACKAGE_DIR, "data")
GENERAL_SCALING_FILE = "Subject_type_and_general_scaling.csv"
APPLIED_VET_SCALING_FILE = "applied_and_vet_scaling.csv"

ENV_DATA_DIR = "QLD_ATAR_DATA_DIR"
ENV_VARIATION = "QLD_ATAR_VARIATION"


def clamp(value, low, high):
    return max(low, min(high, value))


def parse_variation(value):
    """Parse a cohort variation value, clamped to [0, 100]. Bad input is 0."""
    number = parse_float(value)
    if number is None:
        return DEFAULT_VARIATION
    number = clamp(number, VARIATION_MIN, VARIATION_MAX)
    if number == int(number):
        return int(number)
    return number


class Settings:
    def __init__(self, data_dir=DEFAULT_DATA_DIR, variation=DEFAULT_VARIATION):
        self.data_dir = data_dir
        self.variation = parse_variation(variation)

    @property
    def general_scaling_path(self):
        return os.path.join(self.data_dir, GENERAL_SCALING_FILE)

    @property
    def applied_vet_scaling_path(self):
        return os.path.join(self.data_dir, APPLIED_VET_SCALING_FILE)

    def __repr__(self):
        return f"Settings(data_dir={self.data_dir!r}, variation={self.variation!r})"


def load_settings(environ=None, **overrides):
    """Build Settings from defaults, then environment variables, then keyword overrides."""
    if environ is None:
        environ = os.environ
    values = {
        'data_dir': environ.get(ENV_DATA_DIR) or DEFAULT_DATA_DIR,
        'variation': environ.get(ENV_VARIATION, DEFAULT_VARIATION),
    }
    for key, value in overrides.items():
        if value is not None:
            values[key] = value
    return Settings(**values)
