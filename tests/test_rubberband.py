import itertools

import pytest

from qld_atar.rubberband import RubberBandResult, apply_rubber_band_constraints


def banded(lower, result, upper, subject_type, changed):
    return apply_rubber_band_constraints(lower, result, upper, subject_type, changed).as_tuple()


class TestGeneralRubberBand:

    def test_lower_pushes_result_and_upper(self):
        assert banded('80', '70', '75', 'General', 'lower') == ('80', '80', '80')

    def test_lower_pushes_result_only(self):
        assert banded('72', '70', '90', 'General', 'lower') == ('72', '72', '90')

    def test_result_pushes_both_ends(self):
        assert banded('60', '50', '55', 'General', 'result') == ('50', '50', '55')
        assert banded('60', '95', '90', 'General', 'result') == ('60', '95', '95')

    def test_upper_pulls_result_and_lower(self):
        assert banded('70', '75', '60', 'General', 'upper') == ('60', '60', '60')

    def test_no_change_when_ordered(self):
        assert banded('60', '70', '80', 'General', 'result') == ('60', '70', '80')

    def test_decimals_kept(self):
        assert banded('75.5', '70', '90', 'General', 'lower') == ('75.5', '75.5', '90')

    def test_cleared_field_does_not_propagate(self):
        assert banded('', '70', '60', 'General', 'lower') == (None, '70', '60')

    def test_invalid_neighbours_render_as_none(self):
        assert banded('150', '70', 'abc', 'General', 'result') == (None, '70', None)

    def test_missing_upper_is_not_target(self):
        assert banded('80', '70', None, 'General', 'lower') == ('80', '80', None)


class TestAppliedRubberBand:

    def test_grade_only_result(self):
        result = apply_rubber_band_constraints(None, 'C', None, 'Applied', 'result')
        assert result == RubberBandResult(None, 'C', None)

    def test_lower_grade_raises_result(self):
        assert banded('b', 'C', 'C', 'Applied', 'lower') == ('B', 'B', 'B')

    def test_upper_grade_lowers_result(self):
        assert banded('C', 'B', 'd', 'Applied', 'upper') == ('D', 'D', 'D')

    def test_invalid_grade_dropped(self):
        assert banded('Q', 'C', 'A', 'Applied', 'result') == (None, 'C', 'A')


class TestPassThrough:

    @pytest.mark.parametrize('subject_type', ['VET', None, 'Unknown'])
    def test_unchanged(self, subject_type):
        assert banded('Pass', 'x', None, subject_type, 'lower') == ('Pass', 'x', None)

    def test_bad_changed_field(self):
        with pytest.raises(ValueError):
            apply_rubber_band_constraints('1', '2', '3', 'General', 'middle')


class TestOrderingKept:

    def test_general_triples(self):
        values = ['0', '25', '50', '75', '100']
        for lower, result, upper in itertools.product(values, repeat=3):
            for changed in ('lower', 'result', 'upper'):
                lo, mid, hi = banded(lower, result, upper, 'General', changed)
                assert float(lo) <= float(mid) <= float(hi)

    def test_applied_triples(self):
        order = {'E': 1, 'D': 2, 'C': 3, 'B': 4, 'A': 5}
        for lower, result, upper in itertools.product('ABCDE', repeat=3):
            for changed in ('lower', 'result', 'upper'):
                lo, mid, hi = banded(lower, result, upper, 'Applied', changed)
                assert order[lo] <= order[mid] <= order[hi]

    def test_changed_field_is_kept(self):
        for lower, result, upper in itertools.product(['10', '50', '90'], repeat=3):
            assert banded(lower, result, upper, 'General', 'lower')[0] == lower
            assert banded(lower, result, upper, 'General', 'result')[1] == result
            assert banded(lower, result, upper, 'General', 'upper')[2] == upper
