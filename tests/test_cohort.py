import pytest

from qld_atar import cohort as cohort_module
from qld_atar.cohort import (Student, SubjectResult, process_cohort, process_student, scale_subject,
                             variation_bounds)
from qld_atar.scaling_params import SubjectType
from qld_atar.status import Status

FIVE_GENERAL = [('Maths A', '50'), ('Science B', '80'), ('History C', '60'),
                ('Art D', '55'), ('Music E', '45')]


def make_student(name, results):
    student = Student(name)
    for subject, raw in results:
        student.add_result(subject, raw)
    return student


class TestVariationBounds:

    def test_symmetric(self):
        assert variation_bounds('70', 5) == (65, 75)

    def test_clamped(self):
        assert variation_bounds('98', 5) == (93, 100)
        assert variation_bounds(2, '5') == (0, 7)

    def test_fractional_raw_kept(self):
        assert variation_bounds('70.5', 2) == (68.5, 72.5)

    def test_non_numeric(self):
        assert variation_bounds('B', 5) == (None, None)

    def test_variation_clamped(self):
        assert variation_bounds('50', 500) == (0, 100)
        assert variation_bounds('50', -3) == (50, 50)


class TestScaleSubject:

    def test_general_with_variation(self, store):
        outcome = scale_subject(store, SubjectResult('Maths A', '50'), variation=10)
        assert outcome.scaled_score == 50.0
        assert outcome.lower_scaled == 26.9
        assert outcome.upper_scaled == 73.1
        assert outcome.result_range == '40 - 60'
        assert outcome.scaled_range == '26.9 - 73.1'

    def test_applied_uses_grade_for_bounds(self, store):
        outcome = scale_subject(store, SubjectResult('Tourism', 'B'), variation=10)
        assert outcome.subject_type == SubjectType.APPLIED
        assert (outcome.lower_scaled, outcome.scaled_score, outcome.upper_scaled) == (20, 20, 20)
        assert outcome.result_range == 'B'
        assert outcome.scaled_range == '20.0'

    def test_manual_range_wins(self, store):
        outcome = scale_subject(store, SubjectResult('Maths A', '50', '45', '55'), variation=10)
        assert outcome.lower_scaled == 37.8
        assert outcome.upper_scaled == 62.2

    def test_bad_bound_falls_back(self, store):
        outcome = scale_subject(store, SubjectResult('Tourism', 'B', 'Z', 'A'))
        assert outcome.lower_scaled == 20
        assert outcome.upper_scaled == 40

    def test_inverted_manual_range_pulled_to_result(self, store):
        outcome = scale_subject(store, SubjectResult('Drama F', '50', '90', '10'))
        assert (outcome.lower_result, outcome.upper_result) == ('50', '50')
        assert outcome.lower_scaled == outcome.upper_scaled == 50.0
        assert outcome.result_range == '50 - 50'

    def test_inverted_grade_range_pulled_to_result(self, store):
        outcome = scale_subject(store, SubjectResult('Tourism', 'C', 'A', 'E'))
        assert outcome.lower_scaled == outcome.upper_scaled == 10

    def test_failed_subject_excluded(self, store):
        outcome = scale_subject(store, SubjectResult('Latin', '80'))
        assert not outcome.included
        assert outcome.scaled_score is None
        assert outcome.scaled_range is None
        assert outcome.error == 'Missing scaling parameters for subject'

    def test_display_name(self, store):
        outcome = scale_subject(store, SubjectResult('Film Television and New Media', '50'))
        assert outcome.display_name == 'Film, TV & New Media'


class TestProcessStudent:

    def test_eligible_student(self, store):
        outcome = process_student(make_student('Ann', FIVE_GENERAL), store)
        # 50.0 + 88.1 + 73.1 + 62.2 + 37.8
        assert outcome.te == '311.2'
        assert outcome.te_result.lower_te == '311.2'
        assert outcome.has_numeric_atar
        assert outcome.atar_range.ok
        assert outcome.display_atar_range.count(' - ') == 1

    def test_variation_widens_range(self, store):
        outcome = process_student(make_student('Ann', FIVE_GENERAL), store, variation=5)
        assert float(outcome.te_result.lower_te) < 311.2 < float(outcome.te_result.upper_te)
        assert outcome.atar_range.lower_atar <= outcome.atar_range.nominal_atar <= outcome.atar_range.upper_atar

    def test_errored_subject_does_not_count(self, store):
        results = FIVE_GENERAL[:4] + [('Latin', '90')]
        outcome = process_student(make_student('Ben', results), store)
        assert outcome.te == Status.INELIGIBLE
        assert outcome.atar == 'ATAR Ineligible'
        assert outcome.display_atar_range == 'ATAR Ineligible'

    def test_four_general_plus_vet(self, store):
        results = FIVE_GENERAL[:4] + [('Cert III Business', 'Pass')]
        outcome = process_student(make_student('Cat', results), store)
        assert outcome.te == '311.4'

    def test_inverted_manual_range_keeps_te_range_ordered(self, store):
        student = make_student('Dee', [(s, '60') for s in ('Maths A', 'History C', 'Art D', 'Music E')])
        student.add_result('Drama F', '50', '90', '10')
        outcome = process_student(student, store)
        # 4 x 73.1 + 50.0
        assert outcome.te == '342.4'
        assert outcome.te_result.lower_te == outcome.te_result.upper_te == '342.4'
        assert outcome.atar_range.lower_atar == outcome.atar_range.upper_atar == outcome.atar

    def test_no_results(self, store):
        outcome = process_student(Student('Empty'), store)
        assert outcome.te == 'N/A'
        assert outcome.atar == Status.NOT_AVAILABLE
        assert outcome.display_atar_range == 'N/A'


class TestProcessCohort:

    def test_order_and_lookup(self, store):
        students = [make_student('Zed', FIVE_GENERAL), make_student('Amy', FIVE_GENERAL[:2])]
        result = process_cohort(students, store, variation='3')
        assert [o.name for o in result] == ['Zed', 'Amy']
        assert result.variation == 3
        assert result.get('Amy').te == Status.INELIGIBLE
        assert result.get('Nobody') is None

    def test_students_independent(self, store):
        a = make_student('A', FIVE_GENERAL)
        alone = process_student(a, store)
        together = process_cohort([make_student('B', FIVE_GENERAL[:1]), a], store).get('A')
        assert alone.te == together.te
        assert alone.atar == together.atar

    def test_failure_isolated(self, store, monkeypatch):
        real = cohort_module.process_student

        def flaky(student, store, variation=0):
            if student.name == 'Bad':
                raise RuntimeError('boom')
            return real(student, store, variation)

        monkeypatch.setattr(cohort_module, 'process_student', flaky)
        students = [make_student('Good', FIVE_GENERAL), make_student('Bad', FIVE_GENERAL)]
        result = process_cohort(students, store)
        assert len(result) == 2
        assert result.get('Good').has_numeric_atar
        bad = result.get('Bad')
        assert bad.error == 'boom'
        assert bad.atar == Status.CALCULATION_ERROR
        assert result.failures == [bad]

    def test_filter(self, store):
        students = [make_student(n, FIVE_GENERAL) for n in ('Ann', 'Ben', 'Cat')]
        result = process_cohort(students, store)
        assert [o.name for o in result.filter(['ben', ' Cat '])] == ['Ben', 'Cat']
        assert len(result.filter([])) == 3

    @pytest.mark.parametrize('variation', [None, '', 'lots'])
    def test_bad_variation_is_zero(self, store, variation):
        result = process_cohort([make_student('Ann', FIVE_GENERAL)], store, variation)
        assert result.variation == 0
        assert result.get('Ann').te_result.lower_te == result.get('Ann').te
