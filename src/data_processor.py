#!/usr/bin/env python3
"""
DATA PROCESSOR - CSV loading, validation, and student record assembly
Load counseling data exports and normalize them into validated engine models

DATA SOURCES:
✅ Students CSV - Grade level, graduation year, display name
✅ Courses CSV - Credits, category reference, term, dual-credit flags
✅ Credit Categories CSV - Required credits and display order per category
✅ CTE Pathways CSV (optional) - Pathway requirements
✅ Course Pathways CSV (optional) - Course id / course title links to pathways

VALIDATION STRATEGY:
1. Schema Validation: Required columns must exist
2. Row Validation: Each row goes through its pydantic model; bad rows are skipped
3. Category Resolution: Exact id first, legacy credit-type codes / names as degraded mode
4. Cross-Reference Validation: Courses without students, unknown category references

Priority: CRITICAL - Boundary between raw exports and the credit engine
Dependencies: pandas, pydantic for type-safe validation
"""

import math
import pandas as pd
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple
from datetime import date
import logging

from pydantic import ValidationError

from academic_calendar import graduation_year_for_grade
from data_models import Course, CreditCategory, CTEPathway, Student

logger = logging.getLogger(__name__)

# Import credit type codes -> category names (legacy exports)
LEGACY_CREDIT_TYPE_CODES: Dict[str, Optional[str]] = {
    "MA": "Mathematics",
    "LA": "English Language Arts",
    "SC": "Science",
    "SS": "Social Studies",
    "CV": "Civics",
    "PE": "Physical Education",
    "HE": "Health",
    "RE": "CTE/Art/Language",
    "PF": "Personal Financial Education",
    "CC": "Higher Ed & Career Path Skills",
    "EL": "Electives",
    "MS": None,  # Middle school - don't count
}

STUDENTS_FILE = "Students.csv"
COURSES_FILE = "Courses.csv"
CATEGORIES_FILE = "Credit Categories.csv"
PATHWAYS_FILE = "CTE Pathways.csv"
COURSE_PATHWAYS_FILE = "Course Pathways.csv"

TRUE_STRINGS = {"TRUE", "YES", "Y", "1", "T"}


def clean_value(val):
    """Helper to handle NaN values"""
    if val is None:
        return None
    if isinstance(val, float) and math.isnan(val):
        return None
    if isinstance(val, str) and not val.strip():
        return None
    return val


def parse_flag(val) -> bool:
    """Parse Yes/No, TRUE/FALSE, 1/0 style flags"""
    val = clean_value(val)
    if val is None:
        return False
    if isinstance(val, str):
        return val.strip().upper() in TRUE_STRINGS
    return bool(val)


def resolve_category_id(
    raw_reference,
    categories: Sequence[CreditCategory],
    legacy_codes: Mapping[str, Optional[str]] = LEGACY_CREDIT_TYPE_CODES,
) -> Tuple[Optional[str], bool]:
    """
    Resolve a raw category reference to a category id

    Args:
        raw_reference: Category id, legacy credit-type code, or category name
        categories: The school's categories
        legacy_codes: Credit-type code -> category name (None = never counted)

    Returns:
        (category_id or None, degraded) where degraded is True when the id was
        found through a legacy code or a name match instead of an exact id
    """
    raw_reference = clean_value(raw_reference)
    if raw_reference is None:
        return None, False

    reference = str(raw_reference).strip()
    by_id = {cat.id: cat for cat in categories}
    if reference in by_id:
        return reference, False

    code = reference.upper()
    if code in legacy_codes:
        category_name = legacy_codes[code]
        if category_name is None:
            return None, True
    else:
        category_name = reference

    wanted = category_name.lower()
    for cat in categories:
        if cat.name.strip().lower() == wanted:
            return cat.id, True

    return None, False


def category_from_record(record: Dict[str, Any]) -> CreditCategory:
    """Build a CreditCategory from a database row / CSV row"""
    required = clean_value(record.get("credits_required", record.get("required_credits")))
    order = clean_value(record.get("display_order"))
    return CreditCategory(
        id=record["id"],
        name=str(record["name"]).strip(),
        required_credits=float(required) if required is not None else 0.0,
        display_order=int(float(order)) if order is not None else 0,
    )


def category_reference(record: Dict[str, Any]):
    """Raw category reference of a course row; legacy credit_type when category_id is blank"""
    reference = clean_value(record.get("category_id"))
    if reference is None:
        reference = clean_value(record.get("credit_type"))
    return reference


def course_from_record(
    record: Dict[str, Any],
    categories: Sequence[CreditCategory],
    legacy_codes: Mapping[str, Optional[str]] = LEGACY_CREDIT_TYPE_CODES,
) -> Tuple[Course, bool]:
    """
    Build a Course from a database row / CSV row

    Returns:
        (course, degraded) where degraded marks a legacy category resolution
    """
    category_id, degraded = resolve_category_id(
        category_reference(record), categories, legacy_codes
    )
    credits = clean_value(record.get("credits"))
    is_dual = parse_flag(record.get("is_dual_credit"))
    return Course(
        id=clean_value(record.get("id")),
        name=str(clean_value(record.get("name")) or "").strip(),
        credits=credits if credits is not None else 0.0,
        category_id=category_id,
        term=str(clean_value(record.get("term")) or ""),
        grade=clean_value(record.get("grade")),
        is_dual_credit=is_dual,
        dual_credit_type=clean_value(record.get("dual_credit_type")) if is_dual else None,
    ), degraded


def pathway_from_record(
    record: Dict[str, Any], course_names: Optional[List[str]] = None
) -> CTEPathway:
    order = clean_value(record.get("display_order"))
    return CTEPathway(
        id=record["id"],
        name=str(record["name"]).strip(),
        required_credits=clean_value(record.get("credits_required")),
        display_order=int(float(order)) if order is not None else 0,
        course_names=course_names or [],
    )


def student_from_record(
    record: Dict[str, Any], courses: List[Course], on_date: Optional[date] = None
) -> Student:
    """Build a Student; graduation year is derived from grade when missing"""
    grade_level = int(float(record["grade"]))
    graduation_year = clean_value(record.get("graduation_year"))
    if graduation_year is None:
        graduation_year = graduation_year_for_grade(grade_level, on_date or date.today())
    return Student(
        id=clean_value(record.get("id")),
        full_name=str(clean_value(record.get("full_name")) or "").strip(),
        grade_level=grade_level,
        graduation_year=int(float(graduation_year)) if graduation_year is not None else None,
        courses=courses,
    )


class CounselingDataProcessor:
    """Process and validate counseling CSV exports for the credit engine"""

    def __init__(
        self,
        data_dir: Path = None,
        legacy_codes: Optional[Mapping[str, Optional[str]]] = None,
    ):
        if data_dir is None:
            self.data_dir = Path(__file__).parent.parent / "data"
        else:
            self.data_dir = Path(data_dir)

        self.legacy_codes = {
            code.upper(): name
            for code, name in (legacy_codes if legacy_codes is not None else LEGACY_CREDIT_TYPE_CODES).items()
        }

        # Raw data storage
        self.students_df: pd.DataFrame = None
        self.courses_df: pd.DataFrame = None
        self.categories_df: pd.DataFrame = None
        self.pathways_df: pd.DataFrame = None
        self.course_pathways_df: pd.DataFrame = None

        # Validated models
        self.categories: List[CreditCategory] = []
        self.students: List[Student] = []
        self.pathways: List[CTEPathway] = []
        self.course_links: Dict[str, List[str]] = {}

        # Validation results
        self.validation_errors: List[str] = []
        self.validation_warnings: List[str] = []
        self.degraded_category_matches = 0
        self.unknown_category_references: Dict[str, int] = {}

    def load_all_data(self, on_date: Optional[date] = None) -> bool:
        """Load all CSV data sources with validation"""

        logger.info("🔍 LOADING COUNSELING DATA SOURCES")
        logger.info("=" * 60)

        success = True
        success &= self._load_categories()
        success &= self._load_students()
        success &= self._load_courses()

        # Optional - won't fail if missing
        self._load_pathways()

        if success:
            self._build_categories()
            self._build_pathways()
            self._build_students(on_date or date.today())
            self._perform_cross_validation()
            logger.info("✅ All data sources loaded successfully")
        else:
            logger.error("❌ Data loading failed - check validation errors")

        return success

    def _read_csv(self, file_name: str, required_columns: List[str], label: str) -> Optional[pd.DataFrame]:
        file_path = self.data_dir / file_name
        try:
            logger.info(f"📊 Loading {label} from: {file_path}")
            df = pd.read_csv(file_path, encoding="utf-8-sig", dtype=str)
        except (OSError, pd.errors.ParserError, pd.errors.EmptyDataError) as e:
            self.validation_errors.append(f"Failed to load {label}: {e}")
            logger.error(f"  ❌ Failed to load {label}: {e}")
            return None

        missing_columns = [col for col in required_columns if col not in df.columns]
        if missing_columns:
            self.validation_errors.append(f"{label} missing columns: {missing_columns}")
            logger.error(f"  ❌ {label} missing columns: {missing_columns}")
            return None

        logger.info(f"  ✅ Loaded {len(df)} {label} records")
        return df

    def _load_categories(self) -> bool:
        self.categories_df = self._read_csv(
            CATEGORIES_FILE, ["id", "name", "credits_required"], "credit categories"
        )
        return self.categories_df is not None

    def _load_students(self) -> bool:
        self.students_df = self._read_csv(STUDENTS_FILE, ["id", "grade"], "students")
        if self.students_df is None:
            return False

        duplicates = self.students_df["id"].duplicated()
        if duplicates.any():
            self.validation_errors.append(
                f"Duplicate student ids: {self.students_df[duplicates]['id'].tolist()}"
            )
            return False
        return True

    def _load_courses(self) -> bool:
        self.courses_df = self._read_csv(
            COURSES_FILE, ["student_id", "name", "credits"], "courses"
        )
        return self.courses_df is not None

    def _load_pathways(self) -> bool:
        """Load optional pathway definitions and course links"""
        if not (self.data_dir / PATHWAYS_FILE).exists():
            logger.info("  ℹ️  No CTE pathway export found - skipping pathways")
            self.pathways_df = pd.DataFrame()
            self.course_pathways_df = pd.DataFrame()
            return True

        self.pathways_df = self._read_csv(PATHWAYS_FILE, ["id", "name"], "CTE pathways")
        if (self.data_dir / COURSE_PATHWAYS_FILE).exists():
            self.course_pathways_df = self._read_csv(
                COURSE_PATHWAYS_FILE, ["pathway_id"], "course pathway links"
            )
        if self.pathways_df is None:
            self.pathways_df = pd.DataFrame()
        if self.course_pathways_df is None:
            self.course_pathways_df = pd.DataFrame()
        return True

    def _build_categories(self):
        self.categories = []
        for record in self.categories_df.to_dict("records"):
            try:
                self.categories.append(category_from_record(record))
            except (ValidationError, ValueError, TypeError, KeyError) as e:
                self.validation_warnings.append(f"Skipped credit category {record.get('id')}: {e}")

    def _build_pathways(self):
        self.pathways = []
        self.course_links = {}
        if self.pathways_df is None or self.pathways_df.empty:
            return

        names_by_pathway: Dict[str, List[str]] = {}
        if self.course_pathways_df is not None and not self.course_pathways_df.empty:
            for record in self.course_pathways_df.to_dict("records"):
                pathway_id = str(clean_value(record.get("pathway_id")))
                course_id = clean_value(record.get("course_id"))
                course_name = clean_value(record.get("course_name"))
                if course_id is not None:
                    self.course_links.setdefault(pathway_id, []).append(str(course_id))
                if course_name is not None:
                    names_by_pathway.setdefault(pathway_id, []).append(str(course_name))

        for record in self.pathways_df.to_dict("records"):
            try:
                pathway = pathway_from_record(
                    record, names_by_pathway.get(str(record.get("id")), [])
                )
                self.pathways.append(pathway)
            except (ValidationError, ValueError, TypeError, KeyError) as e:
                self.validation_warnings.append(f"Skipped CTE pathway {record.get('id')}: {e}")

    def _build_students(self, on_date: date):
        courses_by_student: Dict[str, List[Course]] = {}
        for record in self.courses_df.to_dict("records"):
            student_id = str(clean_value(record.get("student_id")))
            try:
                course, degraded = course_from_record(record, self.categories, self.legacy_codes)
            except (ValidationError, ValueError, TypeError) as e:
                self.validation_warnings.append(
                    f"Skipped course '{record.get('name')}' for student {student_id}: {e}"
                )
                continue
            if degraded:
                self.degraded_category_matches += 1
            elif course.category_id is None:
                reference = category_reference(record)
                if reference is not None:
                    reference = str(reference).strip()
                    self.unknown_category_references[reference] = (
                        self.unknown_category_references.get(reference, 0) + 1
                    )
            courses_by_student.setdefault(student_id, []).append(course)

        if self.degraded_category_matches:
            logger.warning(
                f"  ⚠️ {self.degraded_category_matches} course(s) matched to categories by legacy code/name"
            )
            self.validation_warnings.append(
                f"Courses matched by legacy credit-type code or category name: {self.degraded_category_matches}"
            )

        if self.unknown_category_references:
            unknown_count = sum(self.unknown_category_references.values())
            references = ", ".join(sorted(self.unknown_category_references))
            logger.warning(f"  ⚠️ {unknown_count} course(s) reference unknown categories: {references}")
            self.validation_warnings.append(
                f"Courses with unknown category reference (counted as uncategorized): {unknown_count} ({references})"
            )

        self.students = []
        for record in self.students_df.to_dict("records"):
            student_id = str(clean_value(record.get("id")))
            try:
                student = student_from_record(
                    record, courses_by_student.get(student_id, []), on_date
                )
            except (ValidationError, ValueError, TypeError) as e:
                self.validation_warnings.append(f"Skipped student {student_id}: {e}")
                continue
            self.students.append(student)

    def _perform_cross_validation(self):
        """Perform cross-validation between data sources"""

        logger.info("🔍 Performing cross-validation between data sources")

        student_ids = set(self.students_df["id"].astype(str))
        course_student_ids = set(self.courses_df["student_id"].astype(str))
        orphaned = course_student_ids - student_ids
        if orphaned:
            self.validation_warnings.append(
                f"Courses found for non-existent students: {len(orphaned)} student ids"
            )

        out_of_range = [s for s in self.students if s.grade_level < 9 or s.grade_level > 12]
        if out_of_range:
            self.validation_warnings.append(
                f"Students outside grades 9-12 (not evaluated for risk): {len(out_of_range)}"
            )

        if not self.categories:
            self.validation_warnings.append("No credit categories configured - progress will be 0%")

    def get_student(self, student_id: str) -> Optional[Student]:
        for student in self.students:
            if student.id == str(student_id):
                return student
        return None

    def generate_validation_report(self) -> str:
        """Generate comprehensive validation report"""

        report = ["🔍 DATA VALIDATION REPORT", "=" * 50, ""]

        if not self.validation_errors and not self.validation_warnings:
            report.append("✅ All validation checks passed!")
        else:
            if self.validation_errors:
                report.append("❌ ERRORS (Must be fixed):")
                for error in self.validation_errors:
                    report.append(f"  • {error}")
                report.append("")

            if self.validation_warnings:
                report.append("⚠️ WARNINGS (Review recommended):")
                for warning in self.validation_warnings:
                    report.append(f"  • {warning}")
                report.append("")

        if self.students_df is not None:
            report.append("📊 DATA SUMMARY:")
            report.append(f"  Students: {len(self.students)}")
            report.append(f"  Course Records: {sum(len(s.courses) for s in self.students)}")
            report.append(f"  Credit Categories: {len(self.categories)}")
            report.append(f"  CTE Pathways: {len(self.pathways)}")

        return "\n".join(report)


__all__ = [
    "LEGACY_CREDIT_TYPE_CODES",
    "CounselingDataProcessor",
    "clean_value",
    "parse_flag",
    "resolve_category_id",
    "category_from_record",
    "category_reference",
    "course_from_record",
    "pathway_from_record",
    "student_from_record",
]
