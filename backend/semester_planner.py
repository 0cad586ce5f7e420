import math
import random

from allocator import allocate_terms
from electives import pick_electives
from normalizer import normalize_code, normalize_title, title_key
from plan_config import UNPLACED_REASONS, resolve_limits
from prereq_parser import describe_prereq, parse_prereq, prereq_ref
from timeline import estimate_timeline
from unlocks import (
    build_course_lookup,
    build_prerequisite_map,
    build_reverse_prereq_map,
    calculate_priority,
    course_prereq,
    get_direct_unlocks,
    resolve_prereq,
)
from validators import coerce_credits, collect_data_warnings, find_prereq_cycles


def _prepare_course(raw: dict) -> dict:
    """Copy a raw course row into a planning record with parsed fields."""
    raw_code = raw.get("course_code")
    code = normalize_code(raw_code) or normalize_title(raw_code)
    parsed = raw.get("prereq")
    if not (isinstance(parsed, dict) and parsed.get("type")):
        parsed = parse_prereq(raw.get("prerequisite"))
    return {
        **raw,
        "title": normalize_title(raw.get("title")),
        "course_code": code,
        "credits": coerce_credits(raw.get("credits")),
        "raw_credits": raw.get("credits"),
        "prereq": parsed,
        "priority": 0,
    }


def _split_valid(courses: list[dict]) -> tuple[list[dict], list[dict]]:
    """
    Separate records the planner can use from malformed ones.

    Rejected records carry an "unplaced_reason".
    """
    valid: list[dict] = []
    rejected: list[dict] = []
    seen_titles: set[str] = set()
    for course in courses:
        key = title_key(course["title"])
        if not key:
            rejected.append({**course, "unplaced_reason": "missing_title"})
            continue
        if course["credits"] is None:
            rejected.append({**course, "unplaced_reason": "invalid_credits"})
            continue
        if key in seen_titles:
            rejected.append({**course, "unplaced_reason": "duplicate_title"})
            continue
        seen_titles.add(key)
        valid.append(course)

    cycle_keys = {title_key(t) for t in find_prereq_cycles(valid)}
    if cycle_keys:
        rejected.extend(
            {**c, "unplaced_reason": "prereq_cycle"}
            for c in valid if title_key(c["title"]) in cycle_keys
        )
        valid = [c for c in valid if title_key(c["title"]) not in cycle_keys]
    return valid, rejected


def _unplaced_reason(course: dict, lookup: dict, max_credits: int) -> str:
    if course["credits"] > max_credits:
        return "exceeds_max_credits"
    parsed = course_prereq(course)
    if parsed.get("type") == "final_term":
        return "final_term_only"
    ref = prereq_ref(parsed)
    if ref and resolve_prereq(ref, lookup) is None:
        return "prereq_missing"
    return "out_of_terms"


def _format_course(course: dict, reverse_map: dict | None = None) -> dict:
    title = course.get("title", "")
    out = {
        "course_code": course.get("course_code", ""),
        "title": title,
        "credits": course.get("credits"),
        "prerequisite": describe_prereq(course_prereq(course)),
        "priority": course.get("priority", 0),
        "instructor": course.get("instructor") or "",
        "meeting_time": course.get("meeting_time") or "",
        "is_elective": bool(course.get("is_elective", False)),
    }
    if reverse_map is not None:
        out["unlocks"] = get_direct_unlocks(title, reverse_map, limit=3)
    return out


def _format_unplaced(course: dict) -> dict:
    reason = course.get("unplaced_reason", "out_of_terms")
    out = _format_course(course)
    if out["credits"] is None:
        raw = course.get("raw_credits")
        out["credits"] = None if isinstance(raw, float) and math.isnan(raw) else raw
    out["reason"] = reason
    out["reason_text"] = UNPLACED_REASONS.get(reason, "")
    return out


def run_plan(
    courses: list[dict],
    limits: dict | None = None,
    elective_menu: list[dict] | None = None,
    elective_count: int = 0,
    rng: random.Random | None = None,
) -> dict:
    """
    Run the full planning pipeline for one student.

    courses → prerequisite chains → priorities → term allocation → output.
    `limits` overrides term_count/target_credits/max_credits/min_credits.
    Malformed rows and courses that never fit end up in "unplaced".
    """
    resolved = resolve_limits(limits)

    electives = pick_electives(
        elective_menu or [],
        elective_count,
        rng=rng,
        exclude_titles={str(c.get("title", "")) for c in courses},
    )
    prepared = [_prepare_course(c) for c in list(courses) + electives]
    warnings = collect_data_warnings(prepared)

    valid, rejected = _split_valid(prepared)

    prereq_map = build_prerequisite_map(valid)
    priority_map = calculate_priority(prereq_map)
    reverse_map = build_reverse_prereq_map(prereq_map)
    for course in valid:
        course["priority"] = priority_map.get(course["title"], 0)

    alloc = allocate_terms(
        valid,
        term_count=resolved["term_count"],
        target_credits=resolved["target_credits"],
        max_credits=resolved["max_credits"],
        min_credits=resolved["min_credits"],
    )

    lookup = build_course_lookup(valid)
    unplaced = [_format_unplaced(c) for c in rejected]
    unplaced.extend(
        _format_unplaced({**c, "unplaced_reason": _unplaced_reason(c, lookup, resolved["max_credits"])})
        for c in alloc["unplaced"]
    )

    semesters = [
        {
            **{k: v for k, v in term.items() if k != "courses"},
            "courses": [_format_course(c, reverse_map) for c in term["courses"]],
        }
        for term in alloc["semesters"]
    ]

    return {
        "semesters": semesters,
        "total_credits": alloc["total_credits"],
        "total_courses": alloc["total_courses"],
        "unplaced": unplaced,
        "warnings": warnings,
        "limits": resolved,
        "timeline": estimate_timeline(
            sum(c["credits"] for c in valid),
            resolved["max_credits"],
            resolved["term_count"],
        ),
    }
