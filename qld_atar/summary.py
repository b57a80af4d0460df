"""School-level ATAR summary: median, threshold distribution, histogram."""

import numpy as np
import pandas as pd

from . import config
from .formatting import to_fixed

DISTRIBUTION_COLUMNS = ['ATAR greater than or equal to', 'No. of students', '% of ATAR eligible students']
HISTOGRAM_COLUMNS = ['ATAR Range', 'Count', 'Percentage']


class SchoolSummary:
    def __init__(self, eligible_count, median_atar, distribution, histogram):
        self.eligible_count = eligible_count
        self.median_atar = median_atar
        self.distribution = distribution
        self.histogram = histogram

    @property
    def empty(self):
        return self.eligible_count == 0


def numeric_atars(outcomes):
    return [o.atar for o in outcomes if o.has_numeric_atar]


def threshold_distribution(atars, thresholds=None):
    if thresholds is None:
        thresholds = config.SUMMARY_THRESHOLDS
    total = len(atars)
    rows = []
    for threshold in thresholds:
        count = sum(1 for a in atars if a >= threshold)
        rows.append({
            DISTRIBUTION_COLUMNS[0]: threshold,
            DISTRIBUTION_COLUMNS[1]: count,
            DISTRIBUTION_COLUMNS[2]: to_fixed(count / total * 100, 2),
        })
    return pd.DataFrame(rows, columns=DISTRIBUTION_COLUMNS)


def atar_histogram(atars, width=config.HISTOGRAM_BUCKET_WIDTH):
    """5-point buckets labelled 'LL.00-UU.95', starting at the first non-empty one."""
    total = len(atars)
    rows = []
    for lower in range(0, 100, width):
        upper = lower + width
        count = sum(1 for a in atars if lower <= a < upper)
        rows.append({
            HISTOGRAM_COLUMNS[0]: f"{to_fixed(lower, 2)}-{to_fixed(upper - 0.05, 2)}",
            HISTOGRAM_COLUMNS[1]: count,
            HISTOGRAM_COLUMNS[2]: count / total * 100,
        })
    first = next((i for i, r in enumerate(rows) if r[HISTOGRAM_COLUMNS[1]] > 0), 0)
    return pd.DataFrame(rows[first:], columns=HISTOGRAM_COLUMNS).reset_index(drop=True)


def school_summary(outcomes):
    atars = numeric_atars(outcomes)
    if not atars:
        return SchoolSummary(0, None,
                             pd.DataFrame(columns=DISTRIBUTION_COLUMNS),
                             pd.DataFrame(columns=HISTOGRAM_COLUMNS))
    median = float(np.median(np.array(atars, dtype=float)))
    return SchoolSummary(len(atars), to_fixed(median, 2),
                         threshold_distribution(atars), atar_histogram(atars))
