#!/usr/bin/env python3
"""
CREDIT EVALUATOR - Graduation credit progress against category requirements
Per-category credit totals, overall completion, deficiencies, and dual-credit subtotals

CALCULATION TYPES:
✅ Category Credits: Sum of course credits matched to a category by id
✅ Total Earned: Sum of ALL course credits (uncategorized included)
✅ Percentage: round-half-up(total earned / total required * 100)
✅ Deficiencies: Categories where earned < required, in display order
✅ Dual Credit: Associate (associate|both), Transfer (transfer|both), Total (all dual)

EDGE CASES HANDLED:
- Uncategorized courses: Count toward total earned, never toward a category
- Unknown category ids: Treated as uncategorized
- Negative credits: Passed through arithmetically, logged as a warning
- No categories / zero requirement: Percentage is 0
- Required = 0: Category can never be deficient
- Grades: Ignored; credit attainment is tracked, not GPA

Priority: CRITICAL - Core credit calculations
Dependencies: data_models.py for type definitions
"""

from typing import Dict, Iterable, List, Sequence
import math
import logging

from data_models import (
    CategoryProgress,
    Course,
    CreditCategory,
    Deficiency,
    ProgressSummary,
)

logger = logging.getLogger(__name__)

# Credit sums are rounded to this many places so repeated half-credit sums stay exact
CREDIT_PRECISION = 6


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves toward positive infinity"""
    return int(math.floor(value + 0.5))


def _sum_credits(courses: Iterable[Course]) -> float:
    return round(math.fsum(c.credits for c in courses), CREDIT_PRECISION)


def percent_of(earned: float, required: float) -> int:
    """Whole percent of required, rounded half up after stabilizing the quotient"""
    return round_half_up(round(earned * 100 / required, CREDIT_PRECISION))


class CreditEvaluator:
    """Evaluate a student's courses against a school's credit categories"""

    def __init__(self):
        self.calculation_log: List[str] = []

    def evaluate(
        self,
        courses: Sequence[Course],
        categories: Sequence[CreditCategory],
    ) -> ProgressSummary:
        """
        Compute credit progress for one student

        Args:
            courses: The student's courses (possibly empty)
            categories: Credit category definitions (possibly empty)

        Returns:
            ProgressSummary with category totals, percentage, deficiencies,
            and dual-credit subtotals
        """
        self.calculation_log = []
        self.calculation_log.append(
            f"📊 Evaluating {len(courses)} courses against {len(categories)} categories"
        )

        ordered_categories = sorted(categories, key=lambda cat: cat.display_order)
        known_ids = {cat.id for cat in ordered_categories}

        negative = [c for c in courses if c.credits < 0]
        for course in negative:
            self.calculation_log.append(
                f"⚠️ Warning: Negative credits ({course.credits}) on {course.name}"
            )
        if negative:
            logger.warning(f"{len(negative)} course(s) carry negative credits")

        uncategorized = [c for c in courses if c.category_id not in known_ids]
        if uncategorized:
            self.calculation_log.append(
                f"ℹ️ {len(uncategorized)} course(s) uncategorized - counted in total only"
            )

        credits_by_category = self._credits_by_category(courses, ordered_categories)

        total_earned = _sum_credits(courses)
        total_required = round(
            math.fsum(cat.required_credits for cat in ordered_categories), CREDIT_PRECISION
        )
        percentage = self._calculate_percentage(total_earned, total_required)

        deficiencies = self._find_deficiencies(credits_by_category, ordered_categories)
        category_progress = self._category_progress(credits_by_category, ordered_categories)

        associate_credits, transfer_credits, total_dual_credits = self._dual_credit_subtotals(
            courses
        )

        self.calculation_log.append("✅ Evaluation complete:")
        self.calculation_log.append(f"   Total Earned: {total_earned:g} / {total_required:g}")
        self.calculation_log.append(f"   Percentage: {percentage}%")
        self.calculation_log.append(f"   Deficiencies: {len(deficiencies)}")
        self.calculation_log.append(f"   Dual Credits: {total_dual_credits:g}")

        return ProgressSummary(
            credits_by_category=credits_by_category,
            category_progress=category_progress,
            total_earned=total_earned,
            total_required=total_required,
            percentage=percentage,
            deficiencies=deficiencies,
            associate_credits=associate_credits,
            transfer_credits=transfer_credits,
            total_dual_credits=total_dual_credits,
        )

    def _credits_by_category(
        self, courses: Sequence[Course], categories: Sequence[CreditCategory]
    ) -> Dict[str, float]:
        """Exact id match only; every configured category gets an entry"""
        buckets: Dict[str, List[Course]] = {cat.id: [] for cat in categories}
        for course in courses:
            if course.category_id in buckets:
                buckets[course.category_id].append(course)
        return {cat_id: _sum_credits(matched) for cat_id, matched in buckets.items()}

    def _calculate_percentage(self, total_earned: float, total_required: float) -> int:
        if total_required <= 0:
            return 0
        return max(0, percent_of(total_earned, total_required))

    def _find_deficiencies(
        self, credits_by_category: Dict[str, float], categories: Sequence[CreditCategory]
    ) -> List[Deficiency]:
        deficiencies = []
        for cat in categories:
            earned = credits_by_category.get(cat.id, 0.0)
            if earned < cat.required_credits:
                deficiencies.append(
                    Deficiency(
                        category_id=cat.id,
                        category_name=cat.name,
                        needed=round(cat.required_credits - earned, CREDIT_PRECISION),
                        earned=earned,
                        required=cat.required_credits,
                    )
                )
        return deficiencies

    def _category_progress(
        self, credits_by_category: Dict[str, float], categories: Sequence[CreditCategory]
    ) -> List[CategoryProgress]:
        progress = []
        for cat in categories:
            earned = credits_by_category.get(cat.id, 0.0)
            if cat.required_credits > 0:
                percent = percent_of(earned, cat.required_credits)
            else:
                percent = 100
            progress.append(
                CategoryProgress(
                    category_id=cat.id,
                    category_name=cat.name,
                    earned=earned,
                    required=cat.required_credits,
                    percent_complete=min(max(percent, 0), 100),
                )
            )
        return progress

    def _dual_credit_subtotals(self, courses: Sequence[Course]):
        """Return (associate, transfer, total); 'both' counts in each subtotal once"""
        dual_courses = [c for c in courses if c.is_dual_credit]

        associate = _sum_credits(
            c for c in dual_courses
            if c.dual_credit_type is not None and c.dual_credit_type.counts_toward_associate
        )
        transfer = _sum_credits(
            c for c in dual_courses
            if c.dual_credit_type is not None and c.dual_credit_type.counts_toward_transfer
        )
        total = _sum_credits(dual_courses)

        untyped = [c for c in dual_courses if c.dual_credit_type is None]
        if untyped:
            self.calculation_log.append(
                f"⚠️ Warning: {len(untyped)} dual-credit course(s) have no dual-credit type"
            )

        return associate, transfer, total


def evaluate(
    courses: Sequence[Course], categories: Sequence[CreditCategory]
) -> ProgressSummary:
    """Evaluate credit progress with a fresh evaluator (safe to call concurrently)"""
    return CreditEvaluator().evaluate(courses, categories)


__all__ = ["CreditEvaluator", "evaluate", "percent_of", "round_half_up", "CREDIT_PRECISION"]
