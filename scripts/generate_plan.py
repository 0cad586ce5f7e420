"""
Generate a term plan from a course table and print it.

Usage:
    python scripts/generate_plan.py
    python scripts/generate_plan.py --path data/courses.csv --terms 8 --max-credits 18
    python scripts/generate_plan.py --electives 2 --seed 7 --json
"""

import argparse
import json
import os
import random
import sys

sys.path.insert(0, os.path.join(os.path.dirname(os.path.abspath(__file__)), "..", "backend"))

from data_loader import load_data
from semester_planner import run_plan


def format_plan(plan: dict) -> str:
    """Plain-text rendering of a plan result."""
    lines = []
    for term in plan["semesters"]:
        lines.append(f"Term {term['number']} ({term['label']}): {term['total_credits']} credits")
        if not term["courses"]:
            lines.append("  (no courses)")
        for course in term["courses"]:
            tag = " [GE]" if course.get("is_elective") else ""
            lines.append(f"  {course['course_code']:<10} {course['title']} ({course['credits']}){tag}")
    lines.append("")
    lines.append(f"Total: {plan['total_courses']} courses, {plan['total_credits']} credits")
    if plan["unplaced"]:
        lines.append("Unplaced:")
        for course in plan["unplaced"]:
            lines.append(f"  {course['title']}: {course['reason_text'] or course['reason']}")
    for warning in plan["warnings"]:
        lines.append(f"[WARN] {warning}")
    return "\n".join(lines)


def main(args=None):
    parser = argparse.ArgumentParser(description="Generate a multi-term course plan.")
    parser.add_argument(
        "--path", type=str,
        default=os.path.join(os.path.dirname(__file__), "..", "data", "courses.csv"),
        help="Path to the course table (CSV, CSV directory or .xlsx).",
    )
    parser.add_argument("--terms", type=int, default=None, help="Number of terms to plan.")
    parser.add_argument("--target-credits", type=int, default=None, help="Target credits per term.")
    parser.add_argument("--max-credits", type=int, default=None, help="Maximum credits per term.")
    parser.add_argument("--min-credits", type=int, default=None, help="Minimum floor credits per term.")
    parser.add_argument("--electives", type=int, default=0, help="General-education electives to add.")
    parser.add_argument("--seed", type=int, default=None, help="Seed for elective selection.")
    parser.add_argument("--json", action="store_true", help="Print the plan as JSON.")
    opts = parser.parse_args(args)

    data = load_data(opts.path)
    limits = {
        "term_count": opts.terms,
        "target_credits": opts.target_credits,
        "max_credits": opts.max_credits,
        "min_credits": opts.min_credits,
    }
    try:
        plan = run_plan(
            data["courses"],
            limits=limits,
            elective_menu=data["elective_menu"],
            elective_count=opts.electives,
            rng=random.Random(opts.seed) if opts.seed is not None else None,
        )
    except ValueError as exc:
        print(f"[ERROR] {exc}", file=sys.stderr)
        return 2

    if opts.json:
        print(json.dumps(plan, indent=2))
    else:
        print(format_plan(plan))
    return 0 if not plan["unplaced"] else 1


if __name__ == "__main__":
    sys.exit(main())
