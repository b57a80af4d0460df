"""
QTAC 2025 reference tables and the builder for the two scaling CSVs the
calculator loads.

Sources (2025 ATAR Report):
  Table 6  General subjects, raw/scaled at P25, P50, P75, P90, P99
  Table 7  Senior External Examination subjects (same layout)
  Table 8  Applied subjects, scaled value for a C, B and A
  Table 9  VET qualification scaled results

General curves are fitted as a logistic in raw result:
    logit(scaled / 100) = a * raw + k
by least squares over the published percentile points.
"""

import csv
import os

import numpy as np
from scipy.special import expit, logit

from . import config

# ============================================================
# 2025 Data from ATAR Report (Tables 6, 7, 8, 9)
# ============================================================

# Table 6: (code, name, P25X, P50X, P75X, P90X, P99X, P25Y, P50Y, P75Y, P90Y, P99Y)
# None rows had fewer than 50 students.
TABLE6_GENERAL = [
    ("0023", "Aboriginal and Torres Strait Islander Studies", 55, 65, 78, 88, 97, 21.91, 32.49, 49.26, 62.48, 73.02),
    ("0060", "Accounting", 62, 74, 86, 93, 99, 62.95, 77.94, 88.02, 91.84, 94.20),
    ("0055", "Aerospace Systems", 57, 72, 81, 87, 95, 50.87, 73.57, 83.44, 88.21, 92.69),
    ("0051", "Agricultural Science", 70, 77, 84, 88, 94, 43.21, 57.75, 71.06, 77.43, 85.00),
    ("0020", "Ancient History", 62, 74, 85, 92, 98, 48.72, 66.79, 80.00, 86.10, 90.01),
    ("0042", "Biology", 73, 81, 89, 94, 98, 59.25, 75.25, 86.40, 90.97, 93.58),
    ("0066", "Business", 60, 70, 80, 88, 97, 49.20, 62.70, 74.48, 81.94, 88.17),
    ("0040", "Chemistry", 76, 85, 92, 96, 99, 77.08, 90.36, 95.41, 97.04, 97.88),
    ("0011", "Chinese", 85, 91, 96, 98, 100, 79.34, 83.98, 87.17, 88.29, 89.32),
    ("0056", "Chinese Extension", None, None, None, None, None, None, None, None, None, None),
    ("0085", "Dance", 72, 82, 91, 97, 100, 42.54, 56.35, 68.04, 74.82, 77.83),
    ("0048", "Design", 60, 72, 84, 91, 99, 49.76, 63.28, 74.98, 80.54, 85.68),
    ("0049", "Digital Solutions", 65, 78, 89, 94, 98, 61.47, 80.34, 90.06, 92.86, 94.56),
    ("0088", "Drama", 68, 80, 89, 96, 100, 45.56, 63.83, 75.54, 82.68, 85.96),
    ("0043", "Earth and Environmental Science", 73, 80, 87, 92, 96, 49.02, 65.37, 78.74, 85.71, 89.81),
    ("0027", "Economics", 67, 79, 88, 94, 98, 72.53, 88.08, 94.11, 96.39, 97.41),
    ("0074", "Engineering", 62, 75, 86, 92, 97, 71.04, 86.87, 93.87, 96.03, 97.25),
    ("0001", "English", 61, 72, 83, 91, 99, 52.67, 70.12, 83.18, 89.48, 93.60),
    ("0002", "English and Literature Extension", 80, 90, 96, 99, 100, 82.40, 90.57, 93.66, 94.82, 95.16),
    ("0003", "English as an Additional Language", 62, 72, 81, 90, 98, 56.54, 73.29, 84.30, 91.31, 95.02),
    ("0093", "Film Television and New Media", 64, 75, 86, 93, 100, 41.55, 56.15, 69.76, 77.04, 82.99),
    ("0069", "Food and Nutrition", 58, 70, 82, 90, 97, 43.08, 58.12, 71.78, 79.21, 84.44),
    ("0005", "French", 77, 86, 93, 97, 100, 88.51, 94.98, 97.44, 98.27, 98.71),
    ("0015", "French Extension", 82, 86, 95, 97, 100, 87.62, 90.68, 95.23, 95.90, 96.74),
    ("0052", "General Mathematics", 60, 69, 79, 86, 94, 48.99, 59.54, 70.28, 76.72, 82.81),
    ("0024", "Geography", 60, 72, 83, 91, 98, 54.32, 71.88, 83.75, 89.57, 93.06),
    ("0006", "German", 72, 83, 91, 95, 100, 80.05, 91.49, 95.66, 96.92, 98.01),
    ("0016", "German Extension", 64, 81, 94, 98, 100, 68.53, 85.70, 92.85, 94.28, 94.89),
    ("0067", "Health", 59, 70, 81, 89, 98, 46.64, 59.87, 71.81, 78.98, 85.34),
    ("0008", "Italian", 75, 85, 92, 97, 100, 79.13, 88.85, 93.06, 95.11, 96.05),
    ("0009", "Japanese", 70, 83, 92, 96, 100, 73.17, 86.36, 91.90, 93.64, 95.02),
    ("0029", "Legal Studies", 59, 69, 81, 89, 96, 55.19, 68.57, 81.24, 87.25, 91.08),
    ("0026", "Literature", 72, 83, 91, 96, 100, 71.32, 85.99, 92.22, 94.70, 96.13),
    ("0047", "Marine Science", 68, 76, 84, 90, 95, 46.92, 61.41, 74.12, 81.66, 86.54),
    ("0053", "Mathematical Methods", 64, 76, 86, 93, 98, 79.43, 89.64, 94.43, 96.44, 97.43),
    ("0021", "Modern History", 64, 76, 87, 94, 99, 52.84, 71.82, 84.40, 89.73, 92.48),
    ("0091", "Music", 70, 83, 93, 98, 100, 52.97, 71.69, 82.53, 86.58, 87.96),
    ("0094c", "Music Extension (Composition)", 85, 94, 99, 100, 100, 68.03, 79.18, 84.00, 84.85, 84.85),
    ("0094m", "Music Extension (Musicology)", None, None, None, None, None, None, None, None, None, None),
    ("0094p", "Music Extension (Performance)", 86, 93, 98, 100, 100, 66.75, 76.40, 81.99, 83.92, 83.92),
    ("0033", "Philosophy and Reason", 67, 79, 88, 94, 99, 69.25, 84.53, 91.39, 94.30, 95.99),
    ("0068", "Physical Education", 63, 74, 84, 91, 98, 47.31, 61.57, 73.06, 79.68, 85.00),
    ("0041", "Physics", 78, 86, 93, 96, 100, 77.17, 89.79, 95.31, 96.67, 97.91),
    ("0079", "Psychology", 72, 80, 87, 92, 97, 54.79, 69.27, 79.51, 85.11, 89.39),
    ("0018", "Spanish", 71, 79, 86, 91, 97, 72.80, 83.94, 90.37, 93.44, 95.92),
    ("0054", "Specialist Mathematics", 70, 82, 90, 95, 99, 88.94, 95.27, 97.38, 98.20, 98.67),
    ("0086", "Study of Religion", 69, 79, 88, 94, 99, 65.98, 79.44, 87.78, 91.57, 93.87),
    ("0080", "Visual Art", 60, 73, 85, 94, 100, 46.99, 61.94, 74.03, 81.28, 85.18),
]

# Table 7: External exam subjects, same layout as Table 6
TABLE7_EXTERNAL = [
    ("4100", "Arabic", None, None, None, None, None, None, None, None, None, None),
    ("4011", "Chinese", 71, 83, 89, 93, 98, 74.37, 83.91, 87.49, 89.48, 91.57),
    ("4001", "English", None, None, None, None, None, None, None, None, None, None),
    ("4052", "General Mathematics", None, None, None, None, None, None, None, None, None, None),
    ("4007", "Indonesian", None, None, None, None, None, None, None, None, None, None),
    ("4013", "Korean", 81, 90, 95, 99, 100, 82.55, 88.02, 90.36, 91.94, 92.29),
    ("4017", "Latin", None, None, None, None, None, None, None, None, None, None),
    ("4014", "Modern Greek", None, None, None, None, None, None, None, None, None, None),
    ("4019", "Polish", None, None, None, None, None, None, None, None, None, None),
    ("4105", "Punjabi", None, None, None, None, None, None, None, None, None, None),
    ("4010", "Russian", None, None, None, None, None, None, None, None, None, None),
    ("4106", "Tamil", None, None, None, None, None, None, None, None, None, None),
    ("4012", "Vietnamese", 70, 78, 86, 92, 98, 73.42, 80.33, 85.80, 89.01, 91.57),
]

# Table 8: (code, name, C, B, A) scaled values
TABLE8_APPLIED = [
    ("6400", "Agricultural Practices", 6.94, 18.12, 39.66),
    ("6401", "Aquatic Practices", 7.83, 20.70, 44.51),
    ("6410", "Arts in Practice", 10.87, 26.65, 51.96),
    ("6416", "Building and Construction Skills", 6.84, 17.78, 38.91),
    ("6402", "Business Studies", 9.28, 23.09, 46.82),
    ("6411", "Dance in Practice", 8.36, 21.23, 44.33),
    ("6412", "Drama in Practice", 7.17, 21.62, 49.61),
    ("6403", "Early Childhood Studies", 9.42, 21.99, 43.29),
    ("6417", "Engineering Skills", 7.77, 19.51, 41.08),
    ("6121", "Essential English", 8.53, 19.59, 38.90),
    ("6140", "Essential Mathematics", 10.52, 22.34, 41.30),
    ("6404", "Fashion", 17.03, 37.58, 63.83),
    ("6418", "Furnishing Skills", 8.13, 21.25, 45.15),
    ("6405", "Hospitality Practices", 11.38, 25.97, 48.93),
    ("6419", "Industrial Graphics Skills", 10.92, 25.72, 49.42),
    ("6420", "Industrial Technology Skills", 11.38, 26.50, 50.29),
    ("6406", "Information and Communication Technology", 10.90, 28.00, 55.28),
    ("6413", "Media Arts in Practice", 10.73, 26.67, 52.40),
    ("6414", "Music in Practice", 8.79, 21.76, 44.52),
    ("6408", "Religion and Ethics", 44.01, 44.01, 72.49),
    ("6421", "Science in Practice", 7.59, 20.40, 44.42),
    ("6409", "Social and Community Studies", 6.33, 18.40, 42.92),
    ("6407", "Sport and Recreation", 8.21, 23.21, 50.53),
    ("6422", "Tourism", 9.42, 22.42, 44.55),
    ("6415", "Visual Arts in Practice", 10.96, 25.34, 48.34),
]

# Table 9: VET scaled result by qualification level
TABLE9_VET = {
    "CERTIII": 38.00,
    "CERTIV": 51.84,
    "DIPLOMA": 58.72,
}

# VET qualifications offered, by level
VET_QUALIFICATIONS = [
    ("Diploma in Business", "DIPLOMA"),
    ("Cert III Agriculture", "CERTIII"),
    ("Cert III Automotive Electrical Technology", "CERTIII"),
    ("Cert III Aviation", "CERTIII"),
    ("Cert III Business", "CERTIII"),
    ("Cert III Cabinet Making", "CERTIII"),
    ("Cert III Carpentry", "CERTIII"),
    ("Cert III Child Care", "CERTIII"),
    ("Cert III Early Childhood Education", "CERTIII"),
    ("Cert III Fitness", "CERTIII"),
    ("Cert III Health Services Assistance", "CERTIII"),
    ("Cert III Health Support Services", "CERTIII"),
    ("Cert III Hospitality", "CERTIII"),
    ("Cert III Lab Skills", "CERTIII"),
    ("Cert III Laboratory Skills", "CERTIII"),
    ("Cert III Light Vehicle Mechanical Tech", "CERTIII"),
    ("Cert III Retail", "CERTIII"),
]

GENERAL_FIELDS = ['Subject_name', 'Subject_display', 'Type', 'Validation', 'a', 'k']
APPLIED_VET_FIELDS = ['Subject', 'Result', 'Scaled Score']
NULL = 'null'
EXTERNAL_SUFFIX = ' (External Exam)'


# ============================================================
# Curve fitting
# ============================================================
def fit_logistic(x_pts, y_pts):
    """Least-squares fit of logit(y/100) = a*x + k. Returns (a, k)."""
    y = np.asarray(y_pts, dtype=float) / 100
    poly = np.polynomial.polynomial.Polynomial.fit(np.asarray(x_pts, dtype=float), logit(y), deg=1)
    k, a = poly.convert().coef  # [c0, c1]
    return float(a), float(k)


def eval_logistic(a, k, x):
    return 100 * expit(a * np.asarray(x, dtype=float) + k)


def fit_errors(a, k, x_pts, y_pts):
    """Absolute error of the fitted curve at each percentile point."""
    return np.abs(eval_logistic(a, k, x_pts) - np.asarray(y_pts, dtype=float))


def _coefficient(value):
    return NULL if value is None else f"{value:.6f}"


# ============================================================
# Row builders
# ============================================================
def process_general_subject(name, p25x, p50x, p75x, p90x, p99x, p25y, p50y, p75y, p90y, p99y):
    x = [p25x, p50x, p75x, p90x, p99x]
    y = [p25y, p50y, p75y, p90y, p99y]
    a, k = fit_logistic(x, y)
    return {
        'Subject_name': name,
        'Subject_display': name,
        'Type': 'General',
        'Validation': config.VALIDATION_NUMERIC,
        'a': _coefficient(a),
        'k': _coefficient(k),
        'max_error': float(fit_errors(a, k, x, y).max()),
    }


def process_no_data_subject(name):
    return {
        'Subject_name': name,
        'Subject_display': name,
        'Type': 'General',
        'Validation': config.VALIDATION_NUMERIC,
        'a': NULL,
        'k': NULL,
        'max_error': None,
    }


def _general_row(name, entry):
    if entry[2] is None:
        return process_no_data_subject(name)
    return process_general_subject(name, *entry[2:])


def build_general_rows(general=None, external=None):
    """General and External subjects, in table order."""
    if general is None:
        general = TABLE6_GENERAL
    if external is None:
        external = TABLE7_EXTERNAL
    rows = [_general_row(entry[1], entry) for entry in general]

    general_names = {entry[1] for entry in general}
    for entry in external:
        name = entry[1]
        if name in general_names:
            # Same subject as a General one: only keep it when it has its own data
            if entry[2] is None:
                continue
            name = name + EXTERNAL_SUFFIX
        rows.append(_general_row(name, entry))
    return rows


def build_applied_rows(applied=None):
    if applied is None:
        applied = TABLE8_APPLIED
    general_rows = []
    mapping_rows = []
    for _, name, c_val, b_val, a_val in applied:
        general_rows.append({
            'Subject_name': name,
            'Subject_display': name,
            'Type': 'Applied',
            'Validation': config.VALIDATION_GRADE,
            'a': NULL,
            'k': NULL,
        })
        for grade, value in (('A', a_val), ('B', b_val), ('C', c_val)):
            mapping_rows.append({'Subject': name, 'Result': grade, 'Scaled Score': f"{value:.2f}"})
    return general_rows, mapping_rows


def build_vet_rows(qualifications=None, scaled_by_level=None):
    if qualifications is None:
        qualifications = VET_QUALIFICATIONS
    if scaled_by_level is None:
        scaled_by_level = TABLE9_VET
    general_rows = []
    mapping_rows = []
    for name, level in qualifications:
        general_rows.append({
            'Subject_name': name,
            'Subject_display': name,
            'Type': 'VET',
            'Validation': config.VALIDATION_PASS,
            'a': NULL,
            'k': NULL,
        })
        mapping_rows.append({'Subject': name, 'Result': config.PASS_GRADE,
                             'Scaled Score': f"{scaled_by_level[level]:.2f}"})
    return general_rows, mapping_rows


def build_reference_tables():
    """(general_rows, applied_vet_rows) ready to write."""
    general_rows = build_general_rows()
    applied_general, applied_mapping = build_applied_rows()
    vet_general, vet_mapping = build_vet_rows()
    return general_rows + applied_general + vet_general, applied_mapping + vet_mapping


def write_reference_tables(out_dir):
    """Write both scaling CSVs into out_dir. Returns (general_path, applied_vet_path, general_rows)."""
    os.makedirs(out_dir, exist_ok=True)
    general_rows, mapping_rows = build_reference_tables()

    general_path = os.path.join(out_dir, config.GENERAL_SCALING_FILE)
    with open(general_path, 'w', newline='', encoding='utf-8') as f:
        writer = csv.DictWriter(f, fieldnames=GENERAL_FIELDS, extrasaction='ignore')
        writer.writeheader()
        for row in general_rows:
            writer.writerow(row)

    applied_vet_path = os.path.join(out_dir, config.APPLIED_VET_SCALING_FILE)
    with open(applied_vet_path, 'w', newline='', encoding='utf-8') as f:
        writer = csv.DictWriter(f, fieldnames=APPLIED_VET_FIELDS)
        writer.writeheader()
        for row in mapping_rows:
            writer.writerow(row)

    return general_path, applied_vet_path, general_rows
