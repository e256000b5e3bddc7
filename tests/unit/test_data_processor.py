"""
Unit Tests for Data Processor

Tests for:
- Category resolution (exact id, legacy code, legacy name)
- Row conversion helpers
- CSV loading, validation errors and warnings
"""

from datetime import date

import pytest

from data_models import CreditCategory, DualCreditType
from data_processor import (
    CounselingDataProcessor,
    clean_value,
    course_from_record,
    parse_flag,
    resolve_category_id,
    student_from_record,
)


@pytest.fixture
def categories():
    return [
        CreditCategory(id="1", name="Mathematics", required_credits=4),
        CreditCategory(id="2", name="Science", required_credits=3),
        CreditCategory(id="3", name="Electives", required_credits=5),
    ]


class TestResolveCategory:
    def test_exact_id(self, categories):
        assert resolve_category_id("2", categories) == ("2", False)

    def test_legacy_code(self, categories):
        assert resolve_category_id("ma", categories) == ("1", True)

    def test_legacy_name(self, categories):
        assert resolve_category_id(" electives ", categories) == ("3", True)

    def test_middle_school_code_uncategorized(self, categories):
        assert resolve_category_id("MS", categories) == (None, True)

    def test_code_for_unconfigured_category(self, categories):
        assert resolve_category_id("PE", categories) == (None, False)

    def test_missing(self, categories):
        assert resolve_category_id(None, categories) == (None, False)
        assert resolve_category_id(float("nan"), categories) == (None, False)


class TestRecordHelpers:
    @pytest.mark.parametrize("raw,expected", [
        ("TRUE", True), ("yes", True), ("1", True), (True, True),
        ("FALSE", False), ("no", False), (None, False), (float("nan"), False),
    ])
    def test_parse_flag(self, raw, expected):
        assert parse_flag(raw) is expected

    def test_clean_value(self):
        assert clean_value(float("nan")) is None
        assert clean_value("  ") is None
        assert clean_value("x") == "x"

    def test_course_from_record(self, categories):
        course, degraded = course_from_record({
            "id": 7, "name": " Chemistry ", "credits": "1", "category_id": "SC",
            "term": "Fall 2024", "grade": "b", "is_dual_credit": "TRUE",
            "dual_credit_type": "Both",
        }, categories)

        assert degraded
        assert course.id == "7"
        assert course.name == "Chemistry"
        assert course.category_id == "2"
        assert course.grade == "B"
        assert course.dual_credit_type is DualCreditType.BOTH

    def test_blank_category_id_falls_back_to_credit_type(self, categories):
        course, degraded = course_from_record(
            {"name": "Algebra 1", "credits": "1", "category_id": float("nan"), "credit_type": "MA"},
            categories,
        )

        assert course.category_id == "1"
        assert degraded

    def test_category_id_wins_over_credit_type(self, categories):
        course, degraded = course_from_record(
            {"name": "Biology", "credits": "1", "category_id": "2", "credit_type": "MA"},
            categories,
        )

        assert course.category_id == "2"
        assert not degraded

    def test_course_missing_credits_is_zero(self, categories):
        course, _ = course_from_record({"name": "Advisory", "credits": float("nan")}, categories)

        assert course.credits == 0

    def test_student_graduation_year_derived(self):
        student = student_from_record(
            {"id": "s1", "full_name": "A B", "grade": "10", "graduation_year": None},
            [],
            on_date=date(2025, 9, 1),
        )

        assert student.grade_level == 10
        assert student.graduation_year == 2028


class TestCounselingDataProcessor:
    def test_load_all_data(self, export_dir):
        processor = CounselingDataProcessor(export_dir)

        assert processor.load_all_data(on_date=date(2025, 9, 1))
        assert len(processor.categories) == 4
        assert [s.id for s in processor.students] == ["s1", "s2", "s3", "s4"]
        assert len(processor.get_student("s1").courses) == 9
        assert processor.get_student("s2").graduation_year == 2029
        assert processor.get_student("missing") is None

    def test_degraded_matches_and_warnings(self, export_dir):
        processor = CounselingDataProcessor(export_dir)
        processor.load_all_data(on_date=date(2025, 9, 1))

        assert processor.degraded_category_matches == 3
        warnings = "\n".join(processor.validation_warnings)
        assert "Broken Row" in warnings
        assert "non-existent students" in warnings
        assert "outside grades 9-12" in warnings
        assert len(processor.get_student("s3").courses) == 1

    def test_pathways_loaded(self, export_dir):
        processor = CounselingDataProcessor(export_dir)
        processor.load_all_data(on_date=date(2025, 9, 1))

        assert [p.name for p in processor.pathways] == ["Health Sciences", "Information Technology"]
        assert processor.pathways[0].course_names == ["Medical Terminology", "Anatomy", "Health Careers"]
        assert processor.pathways[1].required_credits == 3.0
        assert processor.course_links == {}

    def test_missing_file_fails(self, tmp_path):
        processor = CounselingDataProcessor(tmp_path)

        assert processor.load_all_data() is False
        assert any("credit categories" in e for e in processor.validation_errors)
        assert "ERRORS" in processor.generate_validation_report()

    def test_missing_columns_fail(self, export_dir):
        (export_dir / "Courses.csv").write_text("student_id,name\ns1,Algebra\n")
        processor = CounselingDataProcessor(export_dir)

        assert processor.load_all_data() is False
        assert any("missing columns" in e for e in processor.validation_errors)

    def test_duplicate_student_ids_fail(self, export_dir):
        (export_dir / "Students.csv").write_text("id,full_name,grade\ns1,A,9\ns1,B,10\n")
        processor = CounselingDataProcessor(export_dir)

        assert processor.load_all_data() is False

    def test_pathways_optional(self, export_dir):
        (export_dir / "CTE Pathways.csv").unlink()
        (export_dir / "Course Pathways.csv").unlink()
        processor = CounselingDataProcessor(export_dir)

        assert processor.load_all_data()
        assert processor.pathways == []

    def test_validation_report_summary(self, export_dir):
        processor = CounselingDataProcessor(export_dir)
        processor.load_all_data(on_date=date(2025, 9, 1))
        report = processor.generate_validation_report()

        assert "WARNINGS" in report
        assert "Students: 4" in report
        assert "CTE Pathways: 2" in report

    def test_custom_legacy_codes(self, export_dir):
        """A school-specific code table replaces the default one"""
        processor = CounselingDataProcessor(export_dir, legacy_codes={"sc": "Science"})
        processor.load_all_data(on_date=date(2025, 9, 1))

        # SC and the "Electives" name still resolve; MS is now unknown and not degraded
        assert processor.degraded_category_matches == 2

    def test_unknown_category_reference_reported(self, export_dir):
        with open(export_dir / "Courses.csv", "a") as f:
            f.write("110,s1,Woodshop,1,ZZ,Fall 2024,A,FALSE,\n")
            f.write("111,s1,Metalshop,1,ZZ,Fall 2024,A,FALSE,\n")
        processor = CounselingDataProcessor(export_dir)

        assert processor.load_all_data(on_date=date(2025, 9, 1))
        assert processor.unknown_category_references == {"ZZ": 2}
        assert any(
            "unknown category reference" in w and "2 (ZZ)" in w
            for w in processor.validation_warnings
        )
        woodshop = [c for c in processor.get_student("s1").courses if c.name == "Woodshop"][0]
        assert woodshop.category_id is None

    def test_no_unknown_references_in_clean_export(self, export_dir):
        processor = CounselingDataProcessor(export_dir)
        processor.load_all_data(on_date=date(2025, 9, 1))

        assert processor.unknown_category_references == {}
        assert not any("unknown category" in w for w in processor.validation_warnings)
