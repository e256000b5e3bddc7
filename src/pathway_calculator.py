#!/usr/bin/env python3
"""
CTE PATHWAY CALCULATOR - Career pathway credit progress
Determine how far each student has progressed through the school's CTE pathways

MATCHING:
✅ Canonical: Course ids linked to a pathway (course -> pathway link table)
✅ Legacy: Case-insensitive course title match against the pathway's mapped titles,
           used only for pathways that have no id links

STATUS LEVELS:
- Complete: earned >= required
- Near Complete: 67%+
- In Progress: 33%+
- Started: anything earned below 33%

Priority: MEDIUM - Pathway report and student dashboard
Dependencies: data_models.py, credit_evaluator.py
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple
import logging

from credit_evaluator import CREDIT_PRECISION, percent_of
from data_models import Course, CTEPathway

logger = logging.getLogger(__name__)

DEFAULT_PATHWAY_CREDITS = 3.0

# (minimum percent, status), checked in order after the completion check
PATHWAY_STATUS_THRESHOLDS: Tuple[Tuple[int, str], ...] = (
    (67, "near"),
    (33, "in-progress"),
)

STATUS_LABELS = {
    "complete": "Complete",
    "near": "Near Complete",
    "in-progress": "In Progress",
    "started": "Started",
}


@dataclass
class PathwayProgress:
    """Progress through one CTE pathway"""
    pathway_id: str
    pathway_name: str
    earned_credits: float
    required_credits: float
    percentage: int  # capped at 100
    is_complete: bool
    status: str
    completed_courses: List[Course] = field(default_factory=list)
    missing_courses: List[str] = field(default_factory=list)

    @property
    def status_label(self) -> str:
        return STATUS_LABELS.get(self.status, self.status)

    @property
    def has_progress(self) -> bool:
        return self.earned_credits > 0


def pathway_status(
    is_complete: bool,
    percentage: int,
    thresholds: Sequence[Tuple[int, str]] = PATHWAY_STATUS_THRESHOLDS,
) -> str:
    if is_complete:
        return "complete"
    for minimum, status in thresholds:
        if percentage >= minimum:
            return status
    return "started"


class PathwayCalculator:
    """Calculate CTE pathway progress from a student's courses"""

    def __init__(
        self,
        pathways: Sequence[CTEPathway],
        course_links: Optional[Mapping[str, Iterable[str]]] = None,
        status_thresholds: Sequence[Tuple[int, str]] = PATHWAY_STATUS_THRESHOLDS,
    ):
        """
        Args:
            pathways: Pathway definitions for the school
            course_links: pathway id -> linked course record ids
            status_thresholds: (minimum percent, status) pairs, highest first
        """
        self.status_thresholds = tuple(sorted(status_thresholds, reverse=True))
        self.pathways = sorted(pathways, key=lambda p: p.display_order)
        self.course_links: Dict[str, set] = {
            str(pid): {str(cid) for cid in cids}
            for pid, cids in (course_links or {}).items()
        }

    def _matching_courses(self, pathway: CTEPathway, courses: Sequence[Course]) -> List[Course]:
        linked_ids = self.course_links.get(pathway.id)
        if linked_ids:
            return [c for c in courses if c.id is not None and c.id in linked_ids]

        mapped_names = {name.strip().lower() for name in pathway.course_names}
        matched = [c for c in courses if c.name.strip().lower() in mapped_names]
        if matched:
            logger.debug(f"Pathway {pathway.name}: matched {len(matched)} course(s) by title")
        return matched

    def _missing_courses(self, pathway: CTEPathway, courses: Sequence[Course]) -> List[str]:
        taken = {c.name.strip().lower() for c in courses}
        return [name for name in pathway.course_names if name.strip().lower() not in taken]

    def calculate(self, courses: Sequence[Course]) -> List[PathwayProgress]:
        """Progress for every configured pathway, in display order"""
        results = []
        for pathway in self.pathways:
            completed = self._matching_courses(pathway, courses)
            earned = round(sum(c.credits for c in completed), CREDIT_PRECISION)
            required = pathway.required_credits or DEFAULT_PATHWAY_CREDITS
            percentage = min(max(percent_of(earned, required), 0), 100)
            is_complete = earned >= required

            results.append(PathwayProgress(
                pathway_id=pathway.id,
                pathway_name=pathway.name,
                earned_credits=earned,
                required_credits=required,
                percentage=percentage,
                is_complete=is_complete,
                status=pathway_status(is_complete, percentage, self.status_thresholds),
                completed_courses=completed,
                missing_courses=self._missing_courses(pathway, courses),
            ))
        return results

    def calculate_started(self, courses: Sequence[Course]) -> List[PathwayProgress]:
        """Only pathways with credit earned"""
        return [p for p in self.calculate(courses) if p.has_progress]


def primary_pathway(progress: Sequence[PathwayProgress]) -> Optional[PathwayProgress]:
    """Pathway with the most earned credits; first wins ties; None if nothing earned"""
    best = None
    for item in progress:
        if not item.has_progress:
            continue
        if best is None or item.earned_credits > best.earned_credits:
            best = item
    return best


__all__ = [
    "DEFAULT_PATHWAY_CREDITS",
    "PATHWAY_STATUS_THRESHOLDS",
    "PathwayProgress",
    "PathwayCalculator",
    "pathway_status",
    "primary_pathway",
]
