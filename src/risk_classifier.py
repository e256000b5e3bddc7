#!/usr/bin/env python3
"""
RISK CLASSIFIER - Credits-behind risk tiers against grade-level expectations
Compare a student's earned credits with the expected progress for their grade and trimester

METHODOLOGY:
✅ Expected %: Fixed grade x trimester policy table (percent of total requirement)
✅ Expected Credits: expected % * total required credits / 100
✅ Credits Behind: max(0, expected credits - total earned)
✅ Tiers: Critical (>= 3.0), At-Risk (>= 1.5), Watch (>= 0.5), On Track (< 0.5)

EXPECTED PROGRESS (2 credits per trimester, 6 per year, 24 total):
    Grade  9:  Fall 0%   Winter 8%   Spring 17%
    Grade 10:  Fall 25%  Winter 33%  Spring 42%
    Grade 11:  Fall 50%  Winter 58%  Spring 67%
    Grade 12:  Fall 75%  Winter 83%  Spring 92%

DEFAULTS:
- Grade outside 9-12: Not applicable, neutral On Track result
- Unknown period: Expected 0% (most lenient)
- Period is supplied by the caller; see academic_calendar.resolve_trimester

Priority: HIGH - Drives the at-risk report and dashboard alerts
Dependencies: data_models.py
"""

from types import MappingProxyType
from typing import List, Mapping, Optional, Sequence, Tuple
import logging

from credit_evaluator import CREDIT_PRECISION
from data_models import Alert, ProgressSummary, RiskAssessment, RiskTier

logger = logging.getLogger(__name__)

# Percent of the total requirement expected by (grade, trimester)
EXPECTED_PROGRESS: Mapping[int, Mapping[int, int]] = MappingProxyType({
    9: MappingProxyType({1: 0, 2: 8, 3: 17}),
    10: MappingProxyType({1: 25, 2: 33, 3: 42}),
    11: MappingProxyType({1: 50, 2: 58, 3: 67}),
    12: MappingProxyType({1: 75, 2: 83, 3: 92}),
})

# (minimum credits behind, tier), checked in order; lower bounds are inclusive
RISK_THRESHOLDS: Tuple[Tuple[float, RiskTier], ...] = (
    (3.0, RiskTier.CRITICAL),
    (1.5, RiskTier.AT_RISK),
    (0.5, RiskTier.WATCH),
)

# Dual credits needed for the "on track with dual credits" alert
DUAL_CREDIT_ALERT_MINIMUM = 3.0

# Lead over expectation (fraction of the requirement) for the "ahead" alert
AHEAD_OF_SCHEDULE_MARGIN = 0.10

TRIMESTER_NAMES = {1: "Fall", 2: "Winter", 3: "Spring"}


def classify_tier(
    credits_behind: float,
    thresholds: Sequence[Tuple[float, RiskTier]] = RISK_THRESHOLDS,
) -> RiskTier:
    """Map a credits-behind magnitude onto a risk tier"""
    for minimum, tier in thresholds:
        if credits_behind >= minimum:
            return tier
    return RiskTier.ON_TRACK


class RiskClassifier:
    """Classify students into risk tiers using a grade x period expectation table"""

    def __init__(
        self,
        expected_progress: Optional[Mapping[int, Mapping[int, int]]] = None,
        thresholds: Optional[Sequence[Tuple[float, RiskTier]]] = None,
    ):
        self.expected_progress = expected_progress if expected_progress is not None else EXPECTED_PROGRESS
        self.thresholds = tuple(
            sorted(thresholds if thresholds is not None else RISK_THRESHOLDS, key=lambda t: t[0], reverse=True)
        )

    def is_applicable(self, grade_level: int) -> bool:
        return grade_level in self.expected_progress

    def expected_percentage(self, grade_level: int, period: int) -> int:
        """Expected percent for (grade, period); 0 for any pair not in the table"""
        return self.expected_progress.get(grade_level, {}).get(period, 0)

    def classify(
        self,
        grade_level: int,
        current_period: int,
        summary: ProgressSummary,
        total_required_credits: Optional[float] = None,
    ) -> RiskAssessment:
        """
        Classify one student

        Args:
            grade_level: Current grade (9-12 evaluated, others not applicable)
            current_period: Already-resolved trimester id (1-3)
            summary: Output of the credit evaluator
            total_required_credits: Requirement total; defaults to summary.total_required

        Returns:
            RiskAssessment with tier, credits behind, and the figures used
        """
        if not self.is_applicable(grade_level):
            logger.debug(f"Grade {grade_level} has no expectation baseline - not applicable")
            return RiskAssessment(
                tier=RiskTier.ON_TRACK,
                credits_behind=0.0,
                expected_credits=0.0,
                expected_percentage=0,
                actual_credits=summary.total_earned,
                credit_gap=0.0,
                grade_level=grade_level,
                period=current_period,
                is_applicable=False,
            )

        if total_required_credits is None:
            total_required_credits = summary.total_required

        expected_percent = self.expected_percentage(grade_level, current_period)
        expected_credits = round(
            expected_percent * total_required_credits / 100, CREDIT_PRECISION
        )
        actual_credits = summary.total_earned
        credit_gap = round(actual_credits - expected_credits, CREDIT_PRECISION)
        credits_behind = max(0.0, -credit_gap)

        tier = classify_tier(credits_behind, self.thresholds)
        if tier is RiskTier.ON_TRACK:
            credits_behind = 0.0

        return RiskAssessment(
            tier=tier,
            credits_behind=credits_behind,
            expected_credits=expected_credits,
            expected_percentage=expected_percent,
            actual_credits=actual_credits,
            credit_gap=credit_gap,
            grade_level=grade_level,
            period=current_period,
            is_applicable=True,
        )

    def generate_alerts(
        self, assessment: RiskAssessment, summary: ProgressSummary
    ) -> List[Alert]:
        """Dashboard alerts derived from the credits-behind tier"""
        alerts = []
        if not assessment.is_applicable:
            return alerts

        period_name = TRIMESTER_NAMES.get(assessment.period, "current")

        if assessment.tier in (RiskTier.CRITICAL, RiskTier.AT_RISK):
            alerts.append(Alert(
                level="critical",
                message=(
                    f"Behind on credits ({assessment.credits_behind:g} credits behind, "
                    f"{summary.percentage}% vs expected {assessment.expected_percentage}% "
                    f"for {period_name} of grade {assessment.grade_level})"
                ),
            ))
        elif assessment.tier is RiskTier.WATCH:
            alerts.append(Alert(
                level="warning",
                message=f"Slightly behind expected progress for {period_name} trimester",
            ))
        elif summary.total_dual_credits >= DUAL_CREDIT_ALERT_MINIMUM:
            alerts.append(Alert(
                level="success",
                message=f"On track with {summary.total_dual_credits:g} dual credits!",
            ))
        elif summary.total_required > 0 and (
            assessment.credit_gap >= AHEAD_OF_SCHEDULE_MARGIN * summary.total_required
        ):
            alerts.append(Alert(level="success", message="Ahead of schedule! Great progress!"))

        return alerts


_default_classifier = RiskClassifier()


def classify(
    grade_level: int,
    current_period: int,
    summary: ProgressSummary,
    total_required_credits: Optional[float] = None,
) -> RiskAssessment:
    """Classify with the standard expectation table and thresholds"""
    return _default_classifier.classify(
        grade_level, current_period, summary, total_required_credits
    )


def generate_alerts(assessment: RiskAssessment, summary: ProgressSummary) -> List[Alert]:
    return _default_classifier.generate_alerts(assessment, summary)


__all__ = [
    "EXPECTED_PROGRESS",
    "RISK_THRESHOLDS",
    "TRIMESTER_NAMES",
    "RiskClassifier",
    "classify",
    "classify_tier",
    "generate_alerts",
]
