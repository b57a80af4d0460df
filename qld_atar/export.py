"""
Cohort tables as pandas DataFrames, and writing them to CSV or Excel.
"""

import logging
import os

import pandas as pd

from .formatting import to_fixed
from .status import Status

logger = logging.getLogger(__name__)

RESULTS_COLUMNS = ['Student Name', 'Subject', 'Result', 'Scaled', 'TE', 'ATAR']
RANGED_RESULTS_COLUMNS = ['Student Name', 'Subject', 'Result Range', 'Scaled Range', 'ATAR Range']
ATARS_COLUMNS = ['Student Name', 'TE', 'ATAR']
RANGED_ATARS_COLUMNS = ['Student Name', 'TE Range', 'ATAR Range']

ERROR_CELL = 'Err'


def format_atar(atar):
    if isinstance(atar, Status) or isinstance(atar, str):
        return str(atar)
    return to_fixed(atar, 2)


def te_range(te_result):
    if te_result.te == Status.INELIGIBLE:
        return str(Status.INELIGIBLE)
    if Status.NOT_AVAILABLE in (te_result.te, te_result.lower_te, te_result.upper_te):
        return str(Status.NOT_AVAILABLE)
    return f"{te_result.lower_te} - {te_result.upper_te}"


def results_table(outcomes):
    rows = []
    for o in outcomes:
        for s in o.subjects:
            rows.append({
                'Student Name': o.name,
                'Subject': s.display_name,
                'Result': s.raw_result,
                'Scaled': to_fixed(s.scaled_score, 1) if s.included else ERROR_CELL,
                'TE': str(o.te),
                'ATAR': format_atar(o.atar),
            })
    return pd.DataFrame(rows, columns=RESULTS_COLUMNS)


def ranged_results_table(outcomes):
    rows = []
    for o in outcomes:
        for s in o.subjects:
            rows.append({
                'Student Name': o.name,
                'Subject': s.display_name,
                'Result Range': s.result_range or '',
                'Scaled Range': s.scaled_range or ERROR_CELL,
                'ATAR Range': o.display_atar_range,
            })
    return pd.DataFrame(rows, columns=RANGED_RESULTS_COLUMNS)


def atars_table(outcomes):
    rows = [{'Student Name': o.name, 'TE': str(o.te), 'ATAR': format_atar(o.atar)}
            for o in outcomes]
    return pd.DataFrame(rows, columns=ATARS_COLUMNS)


def ranged_atars_table(outcomes):
    rows = [{'Student Name': o.name, 'TE Range': te_range(o.te_result),
             'ATAR Range': o.display_atar_range}
            for o in outcomes]
    return pd.DataFrame(rows, columns=RANGED_ATARS_COLUMNS)


def export_table(df, filepath):
    """Write df to .csv or .xlsx depending on the extension."""
    ext = os.path.splitext(filepath)[1].lower()
    if ext == '.xlsx':
        df.to_excel(filepath, index=False)
    elif ext == '.csv':
        df.to_csv(filepath, index=False, encoding='utf-8')
    else:
        raise ValueError(f"Unsupported export format: {ext or filepath}")
    logger.info("Saved %d rows to %s", len(df), filepath)
    return filepath
