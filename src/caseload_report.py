#!/usr/bin/env python3
"""
CASELOAD REPORTS - At-risk and CTE pathway reports for a counselor caseload
Run the credit evaluator and risk classifier over many students and tabulate the results

REPORTS:
✅ At-Risk Report: Students not on track, most severe first
✅ Tier Summary: Counts per risk tier
✅ Pathway Report: Students with CTE progress and their primary pathway

Each student is evaluated independently; a thread pool may be used for large caseloads.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

import pandas as pd

from credit_evaluator import evaluate
from data_models import Alert, CreditCategory, ProgressSummary, RiskAssessment, RiskTier, Student
from pathway_calculator import PathwayCalculator, PathwayProgress, primary_pathway
from risk_classifier import RiskClassifier

logger = logging.getLogger(__name__)

AT_RISK_COLUMNS = [
    "Student ID",
    "Name",
    "Grade",
    "Risk Level",
    "Progress %",
    "Credits Earned",
    "Expected Credits",
    "Credits Behind",
    "Categories Short",
]

# Summary key for students outside the graded expectation table
NOT_APPLICABLE = "not-applicable"

PATHWAY_COLUMNS = [
    "Student ID",
    "Name",
    "Grade",
    "Primary Pathway",
    "Credits Earned",
    "Credits Required",
    "Progress %",
    "Status",
    "Completed Courses",
    "Pathways Started",
]


@dataclass
class StudentRiskRecord:
    """Evaluation result for one student in a caseload"""
    student: Student
    summary: ProgressSummary
    risk: RiskAssessment
    alerts: List[Alert] = field(default_factory=list)

    @property
    def is_behind(self) -> bool:
        return self.risk.is_applicable and self.risk.tier is not RiskTier.ON_TRACK


def evaluate_student(
    student: Student,
    categories: Sequence[CreditCategory],
    period: int,
    classifier: Optional[RiskClassifier] = None,
) -> StudentRiskRecord:
    classifier = classifier or RiskClassifier()
    summary = evaluate(student.courses, categories)
    risk = classifier.classify(student.grade_level, period, summary)
    return StudentRiskRecord(
        student=student,
        summary=summary,
        risk=risk,
        alerts=classifier.generate_alerts(risk, summary),
    )


def evaluate_caseload(
    students: Sequence[Student],
    categories: Sequence[CreditCategory],
    period: int,
    classifier: Optional[RiskClassifier] = None,
    max_workers: Optional[int] = None,
) -> List[StudentRiskRecord]:
    """
    Evaluate every student in a caseload

    Args:
        students: Students with their courses
        categories: The school's credit categories
        period: Already-resolved trimester id
        classifier: Optional configured classifier
        max_workers: Thread pool size; sequential when None or 1

    Returns:
        One StudentRiskRecord per student, in input order
    """
    classifier = classifier or RiskClassifier()
    logger.info(f"📊 Evaluating caseload of {len(students)} students (period {period})")

    if max_workers is None or max_workers <= 1:
        return [evaluate_student(s, categories, period, classifier) for s in students]

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        return list(
            executor.map(lambda s: evaluate_student(s, categories, period, classifier), students)
        )


def build_at_risk_report(records: Sequence[StudentRiskRecord]) -> pd.DataFrame:
    """Students behind expectation, sorted by tier severity then credits behind"""
    rows = []
    for record in records:
        if not record.is_behind:
            continue
        rows.append({
            "Student ID": record.student.id,
            "Name": record.student.full_name,
            "Grade": record.student.grade_level,
            "Risk Level": record.risk.tier.label,
            "Progress %": record.summary.percentage,
            "Credits Earned": record.summary.total_earned,
            "Expected Credits": record.risk.expected_credits,
            "Credits Behind": record.risk.credits_behind,
            "Categories Short": "; ".join(record.summary.deficient_category_names),
            "_rank": record.risk.tier.rank,
        })

    if not rows:
        return pd.DataFrame(columns=AT_RISK_COLUMNS)

    df = pd.DataFrame(rows)
    df = df.sort_values(["_rank", "Credits Behind"], ascending=[False, False], kind="mergesort")
    return df[AT_RISK_COLUMNS].reset_index(drop=True)


def summarize_tiers(records: Sequence[StudentRiskRecord]) -> Dict[str, int]:
    """Count of students per tier, plus not-applicable grades and caseload total"""
    counts = {tier.value: 0 for tier in RiskTier}
    counts[NOT_APPLICABLE] = 0
    for record in records:
        if not record.risk.is_applicable:
            counts[NOT_APPLICABLE] += 1
        else:
            counts[record.risk.tier.value] += 1
    counts["total"] = len(records)
    return counts


def build_pathway_report(
    students: Sequence[Student], calculator: PathwayCalculator
) -> pd.DataFrame:
    """One row per student with CTE progress, ordered by primary pathway progress"""
    rows = []
    for student in students:
        progress: List[PathwayProgress] = calculator.calculate_started(student.courses)
        primary = primary_pathway(progress)
        if primary is None:
            continue
        rows.append({
            "Student ID": student.id,
            "Name": student.full_name,
            "Grade": student.grade_level,
            "Primary Pathway": primary.pathway_name,
            "Credits Earned": primary.earned_credits,
            "Credits Required": primary.required_credits,
            "Progress %": primary.percentage,
            "Status": primary.status_label,
            "Completed Courses": "; ".join(c.name for c in primary.completed_courses),
            "Pathways Started": len(progress),
        })

    if not rows:
        return pd.DataFrame(columns=PATHWAY_COLUMNS)

    df = pd.DataFrame(rows, columns=PATHWAY_COLUMNS)
    df = df.sort_values(["Progress %", "Credits Earned"], ascending=[False, False], kind="mergesort")
    return df.reset_index(drop=True)


__all__ = [
    "StudentRiskRecord",
    "evaluate_student",
    "evaluate_caseload",
    "build_at_risk_report",
    "summarize_tiers",
    "NOT_APPLICABLE",
    "build_pathway_report",
]
