"""
Subject scaling parameter store.

Two reference tables drive all scaling:

  Subject_type_and_general_scaling.csv
      Subject_name, Subject_display, Type, Validation, a, k
      One row per subject. General rows carry the logistic coefficients
      (or 'null' where QTAC published no percentiles).

  applied_and_vet_scaling.csv
      Subject, Result, Scaled Score
      One row per (Applied/VET subject, grade).

The store is built once and then only read; pass it to the calculators
explicitly.
"""

import logging
import os
from enum import Enum

import pandas as pd

from . import config
from .errors import ScalingDataError

logger = logging.getLogger(__name__)

GENERAL_COLUMNS = ['Subject_name', 'Subject_display', 'Type', 'Validation', 'a', 'k']
APPLIED_VET_COLUMNS = ['Subject', 'Result', 'Scaled Score']


class SubjectType(Enum):
    GENERAL = 'General'
    APPLIED = 'Applied'
    VET = 'VET'

    @classmethod
    def parse(cls, value):
        """Return the matching member, or None for an unrecognised category."""
        if isinstance(value, cls):
            return value
        text = str(value or '').strip().lower()
        for member in cls:
            if member.value.lower() == text:
                return member
        return None


def normalize_name(name):
    return str(name).strip().lower()


def _parse_coefficient(value):
    text = str(value).strip()
    if text == '' or text.lower() == 'null':
        return None
    try:
        return float(text)
    except ValueError:
        return None


class SubjectScalingEntry:
    def __init__(self, subject_name, subject_type, display_name=None, validation=None,
                 a=None, k=None, grade_map=None):
        self.subject_name = subject_name
        self.subject_type = subject_type
        self.display_name = display_name or subject_name
        self.validation = validation
        if subject_type == SubjectType.GENERAL:
            self.a = a
            self.k = k
            self.grade_map = None
        else:
            self.a = None
            self.k = None
            self.grade_map = dict(grade_map or {})

    @property
    def has_coefficients(self):
        return self.a is not None and self.k is not None

    def __repr__(self):
        return f"SubjectScalingEntry({self.subject_name!r}, {self.subject_type.value})"


class ScalingParameterStore:
    def __init__(self, entries):
        self._entries = {}
        self._by_display = {}
        for entry in entries:
            key = normalize_name(entry.subject_name)
            if key in self._entries:
                logger.warning("Duplicate scaling entry for %s; keeping the first", entry.subject_name)
                continue
            self._entries[key] = entry
            self._by_display.setdefault(normalize_name(entry.display_name), entry)

    # --- Construction ---
    @classmethod
    def from_frames(cls, general_df, applied_vet_df):
        general_df = _clean_frame(general_df, GENERAL_COLUMNS[:4], "general scaling table")
        applied_vet_df = _clean_frame(applied_vet_df, APPLIED_VET_COLUMNS, "Applied/VET scaling table")

        grade_maps = {}
        for _, row in applied_vet_df.iterrows():
            subject, result, scaled = row['Subject'], row['Result'], row['Scaled Score']
            if not subject or not result or not scaled:
                continue
            if scaled.lower() == 'null':
                score = 0
            else:
                try:
                    score = float(scaled)
                except ValueError:
                    logger.warning("Skipping %s %s: scaled score %r is not a number", subject, result, scaled)
                    continue
            grade_maps.setdefault(normalize_name(subject), {})[result.upper()] = score

        entries = []
        for _, row in general_df.iterrows():
            name, subject_type, validation = row['Subject_name'], row['Type'], row['Validation']
            if not name or not subject_type or not validation:
                continue
            parsed_type = SubjectType.parse(subject_type)
            if parsed_type is None:
                logger.warning("Skipping %s: unknown subject type %r", name, subject_type)
                continue
            entries.append(SubjectScalingEntry(
                subject_name=name,
                subject_type=parsed_type,
                display_name=row.get('Subject_display') or name,
                validation=validation,
                a=_parse_coefficient(row.get('a', '')),
                k=_parse_coefficient(row.get('k', '')),
                grade_map=grade_maps.get(normalize_name(name)),
            ))

        known = {normalize_name(e.subject_name) for e in entries}
        for key in grade_maps:
            if key not in known:
                logger.warning("Grade mapping for unknown subject %r ignored", key)

        return cls(entries)

    @classmethod
    def from_csv(cls, general_path, applied_vet_path):
        return cls.from_frames(_read_table(general_path), _read_table(applied_vet_path))

    @classmethod
    def default(cls, settings=None):
        """Load the bundled tables (or the ones under settings.data_dir)."""
        if settings is None:
            settings = config.Settings()
        return cls.from_csv(settings.general_scaling_path, settings.applied_vet_scaling_path)

    # --- Lookup ---
    def get(self, subject):
        if subject is None:
            return None
        return self._entries.get(normalize_name(subject))

    def get_by_display_name(self, display_name):
        if display_name is None:
            return None
        return self._by_display.get(normalize_name(display_name)) or self.get(display_name)

    def subject_type(self, subject):
        entry = self.get(subject)
        return entry.subject_type if entry else None

    def display_name(self, subject):
        entry = self.get(subject)
        return entry.display_name if entry else subject

    def validation_rule(self, subject):
        entry = self.get(subject)
        return entry.validation if entry else None

    def subjects(self, subject_type=None):
        """Entries sorted by display name, optionally of one category."""
        entries = [e for e in self._entries.values()
                   if subject_type is None or e.subject_type == subject_type]
        return sorted(entries, key=lambda e: e.display_name.lower())

    def __contains__(self, subject):
        return self.get(subject) is not None

    def __len__(self):
        return len(self._entries)

    def __iter__(self):
        return iter(self._entries.values())


def _read_table(path):
    if not os.path.isfile(path):
        raise ScalingDataError(f"Scaling table not found: {path}")
    try:
        return pd.read_csv(path, dtype=str, keep_default_na=False, skipinitialspace=True)
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
        raise ScalingDataError(f"Could not read scaling table {path}: {e}") from e


def _clean_frame(df, required, label):
    df = df.copy()
    df.columns = [str(c).strip() for c in df.columns]
    missing = [c for c in required if c not in df.columns]
    if missing:
        raise ScalingDataError(f"The {label} is missing columns: {', '.join(missing)}")
    df = df.fillna('').astype(str)
    for col in df.columns:
        df[col] = df[col].str.strip()
    return df
