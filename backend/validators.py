"""
Pure data-quality helpers for a course list.
No Flask or data-loader imports.
"""

from typing import Dict, List, Optional

from normalizer import title_key
from prereq_parser import prereq_ref
from unlocks import build_course_lookup, course_prereq, resolve_prereq, walk_prereq_chain


def coerce_credits(raw) -> Optional[int]:
    """
    Return credits as a positive int, or None when the value is unusable.

    Accepts ints, whole floats (3.0) and numeric strings ("3", " 4 ").
    """
    if raw is None or isinstance(raw, bool):
        return None
    try:
        value = float(str(raw).strip())
    except (TypeError, ValueError):
        return None
    if value != value or value <= 0 or not value.is_integer():
        return None
    return int(value)


def find_duplicate_titles(courses: List[dict]) -> List[str]:
    """Titles that appear more than once (case-insensitive), in first-seen order."""
    seen: set = set()
    dupes: List[str] = []
    for course in courses:
        key = title_key(course.get("title"))
        if key in seen and course.get("title") not in dupes:
            dupes.append(course.get("title"))
        seen.add(key)
    return dupes


def find_unresolved_prereqs(courses: List[dict]) -> List[Dict[str, str]]:
    """
    Courses whose prerequisite names something outside the course list.

    Returns: [{"title": "Capstone", "prerequisite": "CSCI 499"}, ...]
    """
    lookup = build_course_lookup(courses)
    unresolved = []
    for course in courses:
        ref = prereq_ref(course_prereq(course))
        if ref and resolve_prereq(ref, lookup) is None:
            unresolved.append({"title": course["title"], "prerequisite": ref})
    return unresolved


def find_prereq_cycles(courses: List[dict]) -> List[str]:
    """
    Titles of courses whose prerequisite chain leads back to themselves.

    A course that merely depends on a cycle is not listed; it can never be
    scheduled either, but its own data is not at fault.
    """
    lookup = build_course_lookup(courses)
    members: List[str] = []
    for course in courses:
        _, revisited = walk_prereq_chain(course, lookup)
        if revisited is not None and title_key(revisited) == title_key(course["title"]):
            members.append(course["title"])
    return members


def find_invalid_credits(courses: List[dict]) -> List[dict]:
    """Course records whose credits cannot be used for planning."""
    return [c for c in courses if coerce_credits(c.get("credits")) is None]


def collect_data_warnings(courses: List[dict]) -> List[str]:
    """Human-readable data-quality warnings for one planning run."""
    warnings: List[str] = []
    for course in find_invalid_credits(courses):
        raw = course.get("raw_credits", course.get("credits"))
        warnings.append(
            f"{course.get('title') or '(untitled)'}: credits value {raw!r} "
            "is not a positive whole number."
        )
    for title in find_duplicate_titles(courses):
        warnings.append(f"{title}: title appears more than once; only the first row is planned.")
    for item in find_unresolved_prereqs(courses):
        warnings.append(
            f"{item['title']}: prerequisite '{item['prerequisite']}' does not match any course in this plan."
        )
    cycle = find_prereq_cycles(courses)
    if cycle:
        warnings.append(f"Prerequisite cycle between: {', '.join(cycle)}.")
    return warnings
