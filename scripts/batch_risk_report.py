#!/usr/bin/env python3
"""
BATCH RISK REPORT
Evaluates every student in a counseling export and writes the at-risk and CTE pathway reports.

Input directory (CSV exports):
    Students.csv, Courses.csv, Credit Categories.csv
    CTE Pathways.csv, Course Pathways.csv (optional)

Output:
    at-risk-report-YYYY-MM-DD.csv
    cte-pathway-report-YYYY-MM-DD.csv

Usage:
    python3 scripts/batch_risk_report.py <data_dir> <output_dir> [--period 1|2|3] [--no-progress]
"""

import argparse
import logging
import sys
from datetime import date
from pathlib import Path

from tqdm import tqdm

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from academic_calendar import Trimester, resolve_trimester, school_year_label
from caseload_report import (
    build_at_risk_report,
    build_pathway_report,
    evaluate_student,
    summarize_tiers,
)
from data_processor import CounselingDataProcessor
from pathway_calculator import PathwayCalculator
from risk_classifier import RiskClassifier


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Generate at-risk and CTE pathway reports")
    parser.add_argument("data_dir", type=Path, help="Directory holding the CSV exports")
    parser.add_argument("output_dir", type=Path, help="Directory for the generated reports")
    parser.add_argument(
        "--period",
        type=int,
        choices=[t.value for t in Trimester],
        help="Trimester id (default: resolved from today's date)",
    )
    parser.add_argument("--no-progress", action="store_true", help="Disable the progress bar")
    return parser.parse_args(argv)


def print_summary(counts, period: Trimester, today: date):
    print("\n" + "=" * 70)
    print(f"AT-RISK SUMMARY - {period.display_name} Trimester, {school_year_label(today)}")
    print("=" * 70)
    print(f"  Students evaluated: {counts['total']}")
    print(f"  🚨 Critical (3+ credits behind):     {counts['critical']}")
    print(f"  ⚠️  At-Risk (1.5-2.9 credits behind): {counts['at-risk']}")
    print(f"  👀 Watch (0.5-1.4 credits behind):   {counts['watch']}")
    print(f"  ✅ On Track:                          {counts['on-track']}")
    print(f"  ➖ Not evaluated (outside grades 9-12): {counts['not-applicable']}")


def main(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=logging.INFO)

    today = date.today()
    period = Trimester(args.period) if args.period else resolve_trimester(today)

    print("=" * 70)
    print("BATCH RISK REPORT")
    print("=" * 70)

    processor = CounselingDataProcessor(args.data_dir)
    if not processor.load_all_data(on_date=today):
        print(processor.generate_validation_report())
        print("❌ Failed to load data!")
        return 1

    print(processor.generate_validation_report())

    classifier = RiskClassifier()
    students = processor.students
    iterator = tqdm(students, desc="Evaluating", unit="student") if not args.no_progress else students

    records = [
        evaluate_student(student, processor.categories, int(period), classifier)
        for student in iterator
    ]

    counts = summarize_tiers(records)
    print_summary(counts, period, today)

    args.output_dir.mkdir(parents=True, exist_ok=True)
    stamp = today.isoformat()

    at_risk = build_at_risk_report(records)
    at_risk_path = args.output_dir / f"at-risk-report-{stamp}.csv"
    at_risk.to_csv(at_risk_path, index=False)
    print(f"\n📁 At-risk report ({len(at_risk)} students): {at_risk_path}")

    if processor.pathways:
        calculator = PathwayCalculator(processor.pathways, processor.course_links)
        pathway_report = build_pathway_report(students, calculator)
        pathway_path = args.output_dir / f"cte-pathway-report-{stamp}.csv"
        pathway_report.to_csv(pathway_path, index=False)
        print(f"📁 CTE pathway report ({len(pathway_report)} students): {pathway_path}")

    print("\n✅ Reports generated successfully!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
