"""Unit tests for trimester and graduation-year helpers"""

from datetime import date

import pytest

from academic_calendar import (
    Trimester,
    grade_for_graduation_year,
    graduation_year_for_grade,
    resolve_trimester,
    school_year_label,
    school_year_start,
)


@pytest.mark.parametrize("month,trimester", [
    (8, Trimester.FALL),
    (11, Trimester.FALL),
    (12, Trimester.WINTER),
    (1, Trimester.WINTER),
    (2, Trimester.WINTER),
    (3, Trimester.SPRING),
    (6, Trimester.SPRING),
    (7, Trimester.SPRING),
])
def test_resolve_trimester(month, trimester):
    assert resolve_trimester(date(2025, month, 15)) is trimester


def test_trimester_display_name():
    assert Trimester.WINTER.display_name == "Winter"
    assert int(Trimester.SPRING) == 3


def test_school_year_rolls_over_in_august():
    assert school_year_start(date(2025, 7, 31)) == 2024
    assert school_year_start(date(2025, 8, 1)) == 2025
    assert school_year_label(date(2026, 1, 10)) == "2025-26"


class TestGraduationYear:
    def test_grade_9_in_fall(self):
        assert graduation_year_for_grade(9, date(2025, 9, 1)) == 2029

    def test_grade_12_in_spring(self):
        assert graduation_year_for_grade("12", date(2026, 4, 1)) == 2026

    @pytest.mark.parametrize("grade", [8, 13, "K", None, "", 10.5])
    def test_invalid_grades(self, grade):
        assert graduation_year_for_grade(grade, date(2025, 9, 1)) is None

    def test_round_trip(self):
        today = date(2025, 10, 1)
        for grade in (9, 10, 11, 12):
            assert grade_for_graduation_year(graduation_year_for_grade(grade, today), today) == grade
