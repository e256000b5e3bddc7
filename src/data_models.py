#!/usr/bin/env python3
"""
DATA MODELS - Pydantic schemas for credit tracking and risk classification
Type-safe data structures for courses, credit categories, students, and derived progress

COMPREHENSIVE DATA VALIDATION:
✅ Credit Categories: Required-credit thresholds and display order
✅ Courses: Credits, category reference, term, dual-credit flags
✅ Students: Grade level, graduation year, course list
✅ Derived Views: Progress summaries and risk assessments (frozen)

VALIDATION RULES:
- Category requirements must be non-negative
- Credits must be numeric (negative values are tolerated and passed through)
- Dual-credit types are normalized to a closed enum at load time
- A course that is not dual credit never carries a dual-credit type
- Grade level is NOT range-checked; out-of-range grades are classified as not applicable

Priority: CRITICAL - Foundation for all credit evaluation
Dependencies: Pydantic for validation
"""

from typing import Optional, List, Dict
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from enum import Enum


class DualCreditType(str, Enum):
    """Degree a dual-credit course applies toward"""
    ASSOCIATE = "associate"
    TRANSFER = "transfer"
    BOTH = "both"

    @classmethod
    def parse(cls, value) -> Optional["DualCreditType"]:
        """Case-insensitive parse; unknown or blank values become None"""
        if value is None:
            return None
        if isinstance(value, cls):
            return value
        text = str(value).strip().lower()
        for member in cls:
            if member.value == text:
                return member
        return None

    @property
    def counts_toward_associate(self) -> bool:
        return self in (DualCreditType.ASSOCIATE, DualCreditType.BOTH)

    @property
    def counts_toward_transfer(self) -> bool:
        return self in (DualCreditType.TRANSFER, DualCreditType.BOTH)


class RiskTier(str, Enum):
    """Discrete risk classification, most severe first"""
    CRITICAL = "critical"
    AT_RISK = "at-risk"
    WATCH = "watch"
    ON_TRACK = "on-track"

    @property
    def rank(self) -> int:
        """Sort key: higher is more severe"""
        return {
            RiskTier.CRITICAL: 3,
            RiskTier.AT_RISK: 2,
            RiskTier.WATCH: 1,
            RiskTier.ON_TRACK: 0,
        }[self]

    @property
    def label(self) -> str:
        return {
            RiskTier.CRITICAL: "Critical",
            RiskTier.AT_RISK: "At-Risk",
            RiskTier.WATCH: "Watch",
            RiskTier.ON_TRACK: "On Track",
        }[self]


class CreditCategory(BaseModel):
    """Graduation requirement bucket configured per school"""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Category identifier")
    name: str = Field(..., description="Display name (e.g. Mathematics)")
    required_credits: float = Field(0.0, ge=0.0, description="Credits required to satisfy the category")
    display_order: int = Field(0, description="Position in category listings")

    @field_validator('id', mode='before')
    @classmethod
    def coerce_id(cls, v):
        """Database ids arrive as ints or UUIDs; compare them as strings"""
        return str(v).strip() if v is not None else v


class Course(BaseModel):
    """A single completed or in-progress course on a student's record"""

    id: Optional[str] = Field(None, description="Course record identifier")
    name: str = Field(..., description="Course title")
    credits: float = Field(0.0, description="Credit value (negative values pass through)")
    category_id: Optional[str] = Field(None, description="Credit category reference, None if uncategorized")
    term: str = Field("", description="Term label (e.g. Fall 2024)")
    grade: Optional[str] = Field(None, description="Letter grade if posted")
    is_dual_credit: bool = Field(False, description="Earns college credit as well")
    dual_credit_type: Optional[DualCreditType] = Field(None, description="Degree the college credit applies to")

    @field_validator('id', 'category_id', mode='before')
    @classmethod
    def coerce_reference(cls, v):
        """Normalize ids to stripped strings; blanks become None"""
        if v is None:
            return None
        text = str(v).strip()
        return text or None

    @field_validator('grade', mode='before')
    @classmethod
    def normalize_grade(cls, v):
        if v is None:
            return None
        text = str(v).strip().upper()
        return text or None

    @field_validator('dual_credit_type', mode='before')
    @classmethod
    def parse_dual_credit_type(cls, v):
        return DualCreditType.parse(v)

    @model_validator(mode='after')
    def clear_type_when_not_dual(self):
        """A course that is not dual credit never carries a dual-credit type"""
        if not self.is_dual_credit and self.dual_credit_type is not None:
            self.dual_credit_type = None
        return self

    @property
    def is_categorized(self) -> bool:
        return self.category_id is not None


class Student(BaseModel):
    """Student with the course list the engine evaluates"""

    id: Optional[str] = Field(None, description="Student identifier")
    full_name: str = Field("", description="Display name")
    grade_level: int = Field(..., description="Current grade level (9-12 evaluated)")
    graduation_year: Optional[int] = Field(None, description="Expected graduation year")
    courses: List[Course] = Field(default_factory=list)

    @field_validator('id', mode='before')
    @classmethod
    def coerce_id(cls, v):
        return str(v).strip() if v is not None else v

    def courses_by_term(self) -> List[Course]:
        """Courses sorted for display: by term label, then course name"""
        return sorted(self.courses, key=lambda c: (c.term, c.name))


class CTEPathway(BaseModel):
    """Career and technical education pathway configured per school"""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Pathway identifier")
    name: str = Field(..., description="Pathway name (e.g. Health Sciences)")
    required_credits: float = Field(3.0, description="Credits to complete the pathway")
    display_order: int = Field(0, description="Position in pathway listings")
    course_names: List[str] = Field(default_factory=list, description="Mapped course titles (legacy matching)")

    @field_validator('id', mode='before')
    @classmethod
    def coerce_id(cls, v):
        return str(v).strip() if v is not None else v

    @field_validator('required_credits', mode='before')
    @classmethod
    def default_required(cls, v):
        """Missing or non-positive requirements fall back to 3.0 credits"""
        try:
            value = float(v)
        except (ValueError, TypeError):
            return 3.0
        if value != value or value <= 0:
            return 3.0
        return value


class Deficiency(BaseModel):
    """A category where earned credits fall short of the requirement"""

    model_config = ConfigDict(frozen=True)

    category_id: str
    category_name: str
    needed: float
    earned: float
    required: float


class CategoryProgress(BaseModel):
    """Per-category progress with display completion capped at 100"""

    model_config = ConfigDict(frozen=True)

    category_id: str
    category_name: str
    earned: float
    required: float
    percent_complete: int = Field(..., ge=0, le=100)

    @property
    def is_satisfied(self) -> bool:
        return self.earned >= self.required


class ProgressSummary(BaseModel):
    """Credit progress computed from a course set and a category set"""

    model_config = ConfigDict(frozen=True)

    credits_by_category: Dict[str, float] = Field(default_factory=dict)
    category_progress: List[CategoryProgress] = Field(default_factory=list)
    total_earned: float = 0.0
    total_required: float = 0.0
    percentage: int = Field(0, ge=0, description="Overall completion, not capped at 100")
    deficiencies: List[Deficiency] = Field(default_factory=list)

    # Dual credit subtotals
    associate_credits: float = 0.0
    transfer_credits: float = 0.0
    total_dual_credits: float = 0.0

    @property
    def deficient_category_names(self) -> List[str]:
        return [d.category_name for d in self.deficiencies]


class RiskAssessment(BaseModel):
    """Risk tier with the expected/actual figures used to derive it"""

    model_config = ConfigDict(frozen=True)

    tier: RiskTier
    credits_behind: float = Field(0.0, ge=0.0)
    expected_credits: float = 0.0
    expected_percentage: int = 0
    actual_credits: float = 0.0
    credit_gap: float = Field(0.0, description="Actual minus expected credits (signed)")
    grade_level: int
    period: int
    is_applicable: bool = True


class Alert(BaseModel):
    """Counselor-facing alert derived from a risk assessment"""

    model_config = ConfigDict(frozen=True)

    level: str = Field(..., description="critical, warning, or success")
    message: str


# Export all models
__all__ = [
    'DualCreditType',
    'RiskTier',
    'CreditCategory',
    'Course',
    'Student',
    'CTEPathway',
    'Deficiency',
    'CategoryProgress',
    'ProgressSummary',
    'RiskAssessment',
    'Alert',
]
