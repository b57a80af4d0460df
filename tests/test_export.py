import pandas as pd
import pytest

from qld_atar.cohort import Student, process_cohort
from qld_atar.export import (ATARS_COLUMNS, RANGED_ATARS_COLUMNS, RANGED_RESULTS_COLUMNS, RESULTS_COLUMNS,
                             atars_table, export_table, format_atar, ranged_atars_table, ranged_results_table,
                             results_table, te_range)
from qld_atar.status import Status
from qld_atar.te import TEResult

FULL = [('Maths A', '50'), ('Science B', '80'), ('History C', '60'), ('Art D', '55'), ('Music E', '45')]


@pytest.fixture
def cohort(store):
    ann = Student('Ann')
    for subject, raw in FULL:
        ann.add_result(subject, raw)
    ben = Student('Ben')
    ben.add_result('Maths A', '70')
    ben.add_result('Latin', '90')
    return process_cohort([ann, ben], store, variation=5)


class TestFormatting:

    def test_format_atar(self):
        assert format_atar(84.45) == '84.45'
        assert format_atar(66.4) == '66.40'
        assert format_atar(Status.INELIGIBLE) == 'ATAR Ineligible'

    def test_te_range(self):
        assert te_range(TEResult('300.0', '290.5', '310.2')) == '290.5 - 310.2'
        assert te_range(TEResult.ineligible()) == 'ATAR Ineligible'
        assert te_range(TEResult.not_available()) == 'N/A'


class TestTables:

    def test_results_table(self, cohort):
        df = results_table(cohort)
        assert list(df.columns) == RESULTS_COLUMNS
        assert len(df) == 7
        ann = df[df['Student Name'] == 'Ann']
        assert list(ann['Scaled']) == ['50.0', '88.1', '73.1', '62.2', '37.8']
        assert set(ann['TE']) == {'311.2'}
        latin = df[df['Subject'] == 'Latin'].iloc[0]
        assert latin['Scaled'] == 'Err'
        assert latin['ATAR'] == 'ATAR Ineligible'

    def test_ranged_results_table(self, cohort):
        df = ranged_results_table(cohort)
        assert list(df.columns) == RANGED_RESULTS_COLUMNS
        first = df.iloc[0]
        assert first['Result Range'] == '45 - 55'
        assert first['Scaled Range'] == '37.8 - 62.2'
        assert df[df['Subject'] == 'Latin'].iloc[0]['Scaled Range'] == 'Err'

    def test_atars_table(self, cohort):
        df = atars_table(cohort)
        assert list(df.columns) == ATARS_COLUMNS
        assert list(df['Student Name']) == ['Ann', 'Ben']
        assert df.iloc[1]['ATAR'] == 'ATAR Ineligible'

    def test_ranged_atars_table(self, cohort):
        df = ranged_atars_table(cohort)
        assert list(df.columns) == RANGED_ATARS_COLUMNS
        low, high = df.iloc[0]['TE Range'].split(' - ')
        assert float(low) < 311.2 < float(high)
        assert df.iloc[1]['TE Range'] == 'ATAR Ineligible'


class TestExport:

    def test_csv(self, cohort, tmp_path):
        path = str(tmp_path / 'atars.csv')
        assert export_table(atars_table(cohort), path) == path
        back = pd.read_csv(path, dtype=str)
        assert list(back.columns) == ATARS_COLUMNS
        assert back.iloc[0]['TE'] == '311.2'

    def test_xlsx(self, cohort, tmp_path):
        path = str(tmp_path / 'results.xlsx')
        export_table(results_table(cohort), path)
        back = pd.read_excel(path, dtype=str)
        assert len(back) == 7

    def test_unsupported(self, cohort, tmp_path):
        with pytest.raises(ValueError):
            export_table(atars_table(cohort), str(tmp_path / 'atars.json'))
