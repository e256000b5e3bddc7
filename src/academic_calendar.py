#!/usr/bin/env python3
"""
Academic Calendar Helpers
Resolve dates to trimester ids and grade levels to graduation years.
Trimesters: Fall Aug-Nov, Winter Dec-Feb, Spring Mar-Jul (summer uses Spring)
"""

from datetime import date
from enum import IntEnum
from typing import Optional


class Trimester(IntEnum):
    FALL = 1
    WINTER = 2
    SPRING = 3

    @property
    def display_name(self) -> str:
        return self.name.title()


def resolve_trimester(on_date: date) -> Trimester:
    """Trimester in effect on a given date"""
    month = on_date.month
    if 8 <= month <= 11:
        return Trimester.FALL
    if month == 12 or month <= 2:
        return Trimester.WINTER
    return Trimester.SPRING


def school_year_start(on_date: date) -> int:
    """Calendar year in which the current school year began (August rollover)"""
    return on_date.year if on_date.month >= 8 else on_date.year - 1


def school_year_label(on_date: date) -> str:
    """Display label, e.g. '2025-26'"""
    start = school_year_start(on_date)
    return f"{start}-{str(start + 1)[-2:]}"


def graduation_year_for_grade(grade, on_date: date) -> Optional[int]:
    """
    Expected graduation year for a student currently in `grade`

    Grade 9 graduates four spring terms from now, grade 12 at the end of
    this school year. Non-numeric grades and grades outside 9-12 return None.
    """
    try:
        value = float(str(grade).strip())
    except (ValueError, TypeError):
        return None
    if not value.is_integer():
        return None
    grade_num = int(value)
    if grade_num < 9 or grade_num > 12:
        return None
    return school_year_start(on_date) + (13 - grade_num)


def grade_for_graduation_year(graduation_year: int, on_date: date) -> int:
    """Inverse of graduation_year_for_grade; may fall outside 9-12"""
    return 13 - (graduation_year - school_year_start(on_date))


__all__ = [
    "Trimester",
    "resolve_trimester",
    "school_year_start",
    "school_year_label",
    "graduation_year_for_grade",
    "grade_for_graduation_year",
]
