"""
Cohort results file loader.

Accepts CSV or Excel (.xlsx/.xls) with one row per (student, subject):

    Student Name | Subject | Result [| Subject Type] [| Lower Result] [| Upper Result]

Rows missing a required field are reported and skipped. When a Subject
Type column is present each result is also checked against its type
(General 0-100, Applied A-E, VET Pass).
"""

import logging
import os
import zipfile

import pandas as pd

from . import config
from .cohort import Student
from .errors import CohortFileError
from .formatting import parse_float
from .scaling_params import SubjectType

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ['Student Name', 'Subject', 'Result']
OPTIONAL_COLUMNS = ['Subject Type', 'Lower Result', 'Upper Result']
CSV_EXTENSIONS = ('.csv',)
EXCEL_EXTENSIONS = ('.xlsx', '.xls')


class CohortFile:
    def __init__(self, students, errors, source=None):
        self.students = students
        self.errors = errors
        self.source = source

    @property
    def student_names(self):
        return [s.name for s in self.students]

    def __len__(self):
        return len(self.students)


def validate_result(subject_type, result):
    """Error message for a result that does not fit its subject type, else None."""
    parsed_type = SubjectType.parse(subject_type)
    if parsed_type is None:
        return f"Invalid subject type: {subject_type}. Must be General, Applied, or VET."
    text = str(result).strip()
    if parsed_type == SubjectType.GENERAL:
        value = parse_float(text)
        if value is None or value < config.RAW_MIN or value > config.RAW_MAX:
            return f"Invalid result for General subject: {result}. Must be between 0 and 100."
    elif parsed_type == SubjectType.APPLIED:
        if text.upper() not in config.GRADE_ORDER:
            return f"Invalid result for Applied subject: {result}. Must be A, B, C, D, or E."
    elif parsed_type == SubjectType.VET:
        if text.upper() != config.PASS_GRADE:
            return f'Invalid result for VET subject: {result}. Must be "Pass".'
    return None


def _read_frame(path):
    ext = os.path.splitext(str(path))[1].lower()
    if ext in CSV_EXTENSIONS:
        reader = pd.read_csv
    elif ext in EXCEL_EXTENSIONS:
        reader = pd.read_excel
    else:
        raise CohortFileError("Unsupported file type. Please upload a CSV or Excel file.")
    try:
        df = reader(path, dtype=str)
    except FileNotFoundError:
        raise CohortFileError(f"File not found: {path}")
    except (pd.errors.ParserError, pd.errors.EmptyDataError, zipfile.BadZipFile, ValueError) as e:
        raise CohortFileError(f"Failed to parse {os.path.basename(str(path))}: {e}") from e
    return df


def _cell(row, column):
    if column not in row.index:
        return ''
    value = row[column]
    if value is None or (isinstance(value, float) and value != value):
        return ''
    text = str(value).strip()
    if text.lower() == 'nan':
        return ''
    return text


def parse_cohort_frame(df, strict=False, source=None):
    df = df.copy()
    df.columns = [str(c).strip() for c in df.columns]
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise CohortFileError(f"Missing required columns: {', '.join(missing)}")
    if df.empty:
        raise CohortFileError("File is empty or has no data rows")

    has_type = 'Subject Type' in df.columns
    students = {}
    errors = []
    for index, row in df.iterrows():
        line = int(index) + 2  # 1-based, after the header
        name, subject, result = (_cell(row, c) for c in REQUIRED_COLUMNS)
        if not name or not subject or not result:
            errors.append((line, "Missing required fields"))
            continue
        if has_type:
            message = validate_result(_cell(row, 'Subject Type'), result)
            if message:
                errors.append((line, message))
                continue
        student = students.get(name)
        if student is None:
            student = students[name] = Student(name)
        student.add_result(subject, result,
                           _cell(row, 'Lower Result') or None,
                           _cell(row, 'Upper Result') or None)

    for line, message in errors:
        logger.warning("%s row %d skipped: %s", source or "cohort file", line, message)
    if strict and errors:
        raise CohortFileError(f"{len(errors)} invalid row(s); first at row {errors[0][0]}: {errors[0][1]}",
                              row_errors=errors)
    if not students:
        raise CohortFileError("No valid student rows found", row_errors=errors)

    return CohortFile(list(students.values()), errors, source=source)


def load_cohort_file(path, strict=False):
    df = _read_frame(path)
    cohort = parse_cohort_frame(df, strict=strict, source=os.path.basename(str(path)))
    logger.info("Loaded %d students from %s (%d rows skipped)",
                len(cohort.students), cohort.source, len(cohort.errors))
    return cohort
