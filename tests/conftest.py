"""
Pytest Configuration and Fixtures

Provides common fixtures for all tests including:
- Credit category configuration (24-credit diploma)
- Course and student factories
- CSV export directories for loader tests
"""

import pytest

# Add src to path
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from data_models import Course, CreditCategory, CTEPathway, Student


@pytest.fixture
def sample_categories():
    """Standard 24-credit diploma categories"""
    rows = [
        ("math", "Mathematics", 4.0),
        ("ela", "English Language Arts", 4.0),
        ("sci", "Science", 3.0),
        ("ss", "Social Studies", 2.5),
        ("civ", "Civics", 0.5),
        ("pe", "Physical Education", 1.0),
        ("hea", "Health", 0.5),
        ("cte", "CTE/Art/Language", 2.0),
        ("pf", "Personal Financial Education", 0.5),
        ("cc", "Higher Ed & Career Path Skills", 0.5),
        ("elec", "Electives", 5.5),
    ]
    return [
        CreditCategory(id=cat_id, name=name, required_credits=required, display_order=i)
        for i, (cat_id, name, required) in enumerate(rows, start=1)
    ]


@pytest.fixture
def make_course():
    """Factory for Course records with sensible defaults"""
    counter = {"n": 0}

    def _make(credits=1.0, category_id=None, name=None, **kwargs):
        counter["n"] += 1
        return Course(
            id=kwargs.pop("id", f"c{counter['n']}"),
            name=name or f"Course {counter['n']}",
            credits=credits,
            category_id=category_id,
            term=kwargs.pop("term", "Fall 2024"),
            **kwargs,
        )

    return _make


@pytest.fixture
def sample_courses(make_course):
    """A grade-10 style record: 8 credits across core categories"""
    return [
        make_course(1.0, "math", "Algebra 1"),
        make_course(1.0, "math", "Geometry"),
        make_course(1.0, "ela", "English 9"),
        make_course(1.0, "ela", "English 10"),
        make_course(1.0, "sci", "Biology"),
        make_course(1.0, "ss", "World History"),
        make_course(0.5, "pe", "PE 1"),
        make_course(0.5, None, "Study Skills"),
        make_course(
            1.0, "elec", "Intro to Psychology",
            is_dual_credit=True, dual_credit_type="transfer",
        ),
    ]


@pytest.fixture
def sample_student(sample_courses):
    return Student(
        id="1001",
        full_name="Test Student",
        grade_level=10,
        graduation_year=2027,
        courses=sample_courses,
    )


@pytest.fixture
def sample_pathways():
    return [
        CTEPathway(id="p-health", name="Health Sciences", required_credits=3.0, display_order=1,
                   course_names=["Medical Terminology", "Anatomy", "Health Careers"]),
        CTEPathway(id="p-it", name="Information Technology", required_credits=3.0, display_order=2,
                   course_names=["Computer Science Principles", "Networking", "Cybersecurity"]),
    ]


@pytest.fixture
def export_dir(tmp_path):
    """Directory of CSV exports as produced by the dashboard database"""
    (tmp_path / "Credit Categories.csv").write_text(
        "id,name,credits_required,display_order\n"
        "1,Mathematics,4,1\n"
        "2,English Language Arts,4,2\n"
        "3,Science,3,3\n"
        "4,Electives,13,4\n"
    )
    (tmp_path / "Students.csv").write_text(
        "id,full_name,grade,graduation_year\n"
        "s1,Ada Lovelace,11,2027\n"
        "s2,Grace Hopper,9,\n"
        "s3,Alan Turing,12,2026\n"
        "s4,Middle Schooler,8,\n"
    )
    (tmp_path / "Courses.csv").write_text(
        "id,student_id,name,credits,category_id,term,grade,is_dual_credit,dual_credit_type\n"
        "101,s1,Algebra 1,1,1,Fall 2023,A,FALSE,\n"
        "102,s1,English 9,1,2,Fall 2023,B,FALSE,\n"
        "103,s1,Biology,1,SC,Fall 2023,B,FALSE,\n"
        "104,s1,Medical Terminology,1,4,Spring 2024,A,TRUE,Both\n"
        "105,s1,Anatomy,1,,Spring 2024,A,TRUE,associate\n"
        "106,s1,Health Careers,1,Electives,Fall 2024,B,FALSE,\n"
        "107,s1,Geometry,1,1,Fall 2024,C,FALSE,\n"
        "108,s1,English 10,1,2,Fall 2024,B,FALSE,\n"
        "109,s1,Chemistry,1,3,Fall 2024,B,FALSE,\n"
        "201,s2,Algebra 1,1,1,Fall 2025,A,FALSE,\n"
        "301,s3,Calculus,1,1,Fall 2025,A,TRUE,transfer\n"
        "302,s3,Broken Row,lots,1,Fall 2025,A,FALSE,\n"
        "401,s4,Math 8,1,MS,Fall 2025,A,FALSE,\n"
        "901,ghost,Orphan Course,1,1,Fall 2025,A,FALSE,\n"
    )
    (tmp_path / "CTE Pathways.csv").write_text(
        "id,name,credits_required,display_order\n"
        "p1,Health Sciences,3,1\n"
        "p2,Information Technology,,2\n"
    )
    (tmp_path / "Course Pathways.csv").write_text(
        "pathway_id,course_id,course_name\n"
        "p1,,Medical Terminology\n"
        "p1,,Anatomy\n"
        "p1,,Health Careers\n"
        "p2,,Networking\n"
    )
    return tmp_path
