"""
Publish gate validator for a course table.

Checks data-quality rules that should pass before a course table is used for
plan generation. Importable for tests and runnable as a standalone CLI.

Usage:
    python scripts/validate_catalog.py
    python scripts/validate_catalog.py --path path/to/courses.csv
    python scripts/validate_catalog.py --path catalog.xlsx --max-credits 16
"""

import argparse
import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(os.path.abspath(__file__)), "..", "backend"))

from plan_config import DEFAULT_MAX_CREDITS
from validators import (
    coerce_credits,
    find_duplicate_titles,
    find_prereq_cycles,
    find_unresolved_prereqs,
)


# ── Validation result ─────────────────────────────────────────────────────────

class ValidationResult:
    """Collects errors and warnings for a single catalog validation run."""

    def __init__(self, source: str):
        self.source = source
        self.errors: list[str] = []
        self.warnings: list[str] = []

    def error(self, msg: str) -> None:
        self.errors.append(msg)

    def warn(self, msg: str) -> None:
        self.warnings.append(msg)

    @property
    def passed(self) -> bool:
        return len(self.errors) == 0

    def summary(self) -> str:
        status = "PASS" if self.passed else "FAIL"
        lines = [f"[{status}] Catalog '{self.source}'"]
        for e in self.errors:
            lines.append(f"  [ERROR] {e}")
        for w in self.warnings:
            lines.append(f"  [WARN]  {w}")
        if self.passed and not self.warnings:
            lines.append("  All checks passed.")
        return "\n".join(lines)


# ── Individual checks ─────────────────────────────────────────────────────────

def check_not_empty(courses: list[dict], result: ValidationResult) -> None:
    """The table must hold at least one required course."""
    if not courses:
        result.error("No required courses found.")


def check_credits(courses: list[dict], max_credits: int, result: ValidationResult) -> None:
    """Credits must be positive whole numbers that fit inside one term."""
    for course in courses:
        credits = coerce_credits(course.get("credits"))
        if credits is None:
            result.error(f"'{course.get('title')}' has invalid credits {course.get('credits')!r}.")
        elif credits > max_credits:
            result.warn(
                f"'{course.get('title')}' carries {credits} credits, above the {max_credits}-credit term "
                "maximum; it will never be placed."
            )


def check_unique_titles(courses: list[dict], result: ValidationResult) -> None:
    """Titles are the lookup key within a plan, so they must be unique."""
    dupes = find_duplicate_titles(courses)
    if dupes:
        result.error(f"{len(dupes)} duplicate title(s): {dupes}")


def check_prereq_references(courses: list[dict], result: ValidationResult) -> None:
    """Every prerequisite should name a course in the same table."""
    for item in find_unresolved_prereqs(courses):
        result.warn(
            f"'{item['title']}' lists prerequisite '{item['prerequisite']}', which is not in the table."
        )


def check_no_cycles(courses: list[dict], result: ValidationResult) -> None:
    """Prerequisite links must not loop."""
    members = find_prereq_cycles(courses)
    if members:
        result.error(f"Prerequisite cycle between: {members}")


def validate_catalog(
    courses: list[dict],
    source: str = "catalog",
    max_credits: int = DEFAULT_MAX_CREDITS,
) -> ValidationResult:
    """Run every check against one course list."""
    result = ValidationResult(source)
    check_not_empty(courses, result)
    check_credits(courses, max_credits, result)
    check_unique_titles(courses, result)
    check_prereq_references(courses, result)
    check_no_cycles(courses, result)
    return result


def main(args=None):
    parser = argparse.ArgumentParser(
        description="Validate a course table before using it for plan generation.",
    )
    parser.add_argument(
        "--path", type=str,
        default=os.path.join(os.path.dirname(__file__), "..", "data", "courses.csv"),
        help="Path to the course table (CSV, CSV directory or .xlsx).",
    )
    parser.add_argument(
        "--max-credits", type=int, default=DEFAULT_MAX_CREDITS,
        help="Per-term credit maximum used for the fit check.",
    )
    opts = parser.parse_args(args)

    from data_loader import load_data

    data = load_data(opts.path)
    result = validate_catalog(
        data["courses"] + data["elective_menu"],
        source=os.path.basename(os.path.normpath(opts.path)),
        max_credits=opts.max_credits,
    )
    print(result.summary())
    return 0 if result.passed else 1


if __name__ == "__main__":
    sys.exit(main())
