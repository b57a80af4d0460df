import numpy as np
import pandas as pd
import pytest

from qld_atar import config
from qld_atar.reference import (EXTERNAL_SUFFIX, build_applied_rows, build_general_rows, build_reference_tables,
                                build_vet_rows, eval_logistic, fit_errors, fit_logistic, process_general_subject,
                                write_reference_tables)
from qld_atar.scaling_params import ScalingParameterStore, SubjectType

NO_DATA = (None,) * 10


class TestFit:

    def test_recovers_exact_curve(self):
        x = [10, 20, 30, 40, 50]
        y = eval_logistic(0.08, -2.0, x)
        a, k = fit_logistic(x, y)
        assert a == pytest.approx(0.08)
        assert k == pytest.approx(-2.0)
        assert fit_errors(a, k, x, y).max() < 1e-6

    def test_english(self):
        row = process_general_subject('English', 61, 72, 83, 91, 99, 52.67, 70.12, 83.18, 89.48, 93.60)
        assert float(row['a']) == pytest.approx(0.067784, abs=1e-5)
        assert float(row['k']) == pytest.approx(-4.027674, abs=1e-4)
        assert row['Validation'] == '0 - 100'
        assert row['max_error'] < 0.01

    def test_eval_is_vectorised(self):
        values = eval_logistic(0.1, -5, np.array([0, 50, 100]))
        assert values[1] == pytest.approx(50.0)
        assert values[0] < values[1] < values[2]


class TestRowBuilders:

    def test_no_data_subject_has_null_coefficients(self):
        rows = build_general_rows([('1', 'Rare', *NO_DATA)], [])
        assert rows[0]['a'] == 'null' and rows[0]['k'] == 'null'

    def test_external_duplicate_with_data_renamed(self):
        general = [('1', 'Chinese', 85, 91, 96, 98, 100, 79.34, 83.98, 87.17, 88.29, 89.32)]
        external = [('2', 'Chinese', 71, 83, 89, 93, 98, 74.37, 83.91, 87.49, 89.48, 91.57),
                    ('3', 'English', *NO_DATA)]
        names = [r['Subject_name'] for r in build_general_rows(general, external)]
        assert names == ['Chinese', 'Chinese' + EXTERNAL_SUFFIX, 'English']

    def test_external_duplicate_without_data_dropped(self):
        general = [('1', 'Latin', *NO_DATA)]
        external = [('2', 'Latin', *NO_DATA)]
        assert [r['Subject_name'] for r in build_general_rows(general, external)] == ['Latin']

    def test_applied_rows(self):
        general, mapping = build_applied_rows([('6422', 'Tourism', 9.42, 22.42, 44.55)])
        assert general[0]['Type'] == 'Applied'
        assert general[0]['Validation'] == 'A - E'
        assert mapping == [
            {'Subject': 'Tourism', 'Result': 'A', 'Scaled Score': '44.55'},
            {'Subject': 'Tourism', 'Result': 'B', 'Scaled Score': '22.42'},
            {'Subject': 'Tourism', 'Result': 'C', 'Scaled Score': '9.42'},
        ]

    def test_vet_rows(self):
        general, mapping = build_vet_rows([('Cert IV Fitness', 'CERTIV')])
        assert general[0]['Validation'] == 'Pass'
        assert mapping == [{'Subject': 'Cert IV Fitness', 'Result': 'PASS', 'Scaled Score': '51.84'}]


class TestWriteTables:

    def test_written_tables_load(self, tmp_path):
        general_path, mapping_path, _ = write_reference_tables(str(tmp_path / 'out'))
        store = ScalingParameterStore.from_csv(general_path, mapping_path)
        assert store.subject_type('Chinese (External Exam)') == SubjectType.GENERAL
        assert store.get('Tourism').grade_map['B'] == 22.42
        assert store.get('Diploma in Business').grade_map['PASS'] == 58.72

    def test_no_extra_columns(self, tmp_path):
        general_path, _, rows = write_reference_tables(str(tmp_path))
        df = pd.read_csv(general_path, dtype=str, keep_default_na=False)
        assert list(df.columns) == ['Subject_name', 'Subject_display', 'Type', 'Validation', 'a', 'k']
        assert len(df) == len(rows)

    def test_matches_bundled_tables(self):
        general_rows, mapping_rows = build_reference_tables()
        settings = config.load_settings(environ={})
        bundled = pd.read_csv(settings.general_scaling_path, dtype=str, keep_default_na=False)
        bundled_mapping = pd.read_csv(settings.applied_vet_scaling_path, dtype=str, keep_default_na=False)
        assert [r['Subject_name'] for r in general_rows] == list(bundled['Subject_name'])
        assert len(mapping_rows) == len(bundled_mapping)
        english = bundled[bundled['Subject_name'] == 'English'].iloc[0]
        built = next(r for r in general_rows if r['Subject_name'] == 'English')
        assert float(built['a']) == pytest.approx(float(english['a']), abs=1e-5)
        assert float(built['k']) == pytest.approx(float(english['k']), abs=1e-4)
