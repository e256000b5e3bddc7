#!/usr/bin/env python3
"""
Simple wrapper to print credit progress and risk for a given student ID
Usage: python3 generate_student_report.py <data_dir> <student_id> [period]
"""

import sys
from datetime import date
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent / "src"))

if len(sys.argv) < 3:
    print("ERROR: Missing arguments")
    print("Usage: python3 generate_student_report.py <data_dir> <student_id> [period]")
    sys.exit(1)

data_dir = Path(sys.argv[1]).expanduser()
student_id = sys.argv[2]

# Import after adding to path
from academic_calendar import Trimester, resolve_trimester
from credit_evaluator import CreditEvaluator
from data_processor import CounselingDataProcessor
from pathway_calculator import PathwayCalculator, primary_pathway
from risk_classifier import RiskClassifier

period = Trimester(int(sys.argv[3])) if len(sys.argv) > 3 else resolve_trimester(date.today())

print("Loading all data...")
processor = CounselingDataProcessor(data_dir)
if not processor.load_all_data():
    print(processor.generate_validation_report())
    sys.exit(1)

student = processor.get_student(student_id)
if student is None:
    print(f"ERROR: Student {student_id} not found")
    sys.exit(1)

evaluator = CreditEvaluator()
summary = evaluator.evaluate(student.courses, processor.categories)
classifier = RiskClassifier()
risk = classifier.classify(student.grade_level, int(period), summary)

print(f"\n🎓 {student.full_name} - Grade {student.grade_level}, Class of {student.graduation_year or 'N/A'}")
print("\n".join(evaluator.calculation_log))

print("\nCATEGORY PROGRESS:")
for item in summary.category_progress:
    mark = "✅" if item.is_satisfied else "❌"
    print(f"  {mark} {item.category_name}: {item.earned:g} / {item.required:g} ({item.percent_complete}%)")

print(f"\nDual Credit: Associate {summary.associate_credits:g} | Transfer {summary.transfer_credits:g} | Total {summary.total_dual_credits:g}")

if risk.is_applicable:
    print(
        f"\nRISK ({period.display_name}): {risk.tier.label} - expected {risk.expected_credits:g} credits "
        f"({risk.expected_percentage}%), earned {risk.actual_credits:g}, behind {risk.credits_behind:g}"
    )
else:
    print(f"\nRISK: Not applicable for grade {student.grade_level}")

for alert in classifier.generate_alerts(risk, summary):
    print(f"  [{alert.level.upper()}] {alert.message}")

if processor.pathways:
    calculator = PathwayCalculator(processor.pathways, processor.course_links)
    primary = primary_pathway(calculator.calculate(student.courses))
    if primary:
        print(
            f"\nPrimary CTE Pathway: {primary.pathway_name} - {primary.earned_credits:g} / "
            f"{primary.required_credits:g} ({primary.status_label})"
        )
