from normalizer import title_key
from packer import best_credit_subset
from prereq_parser import prereq_ref
from timeline import new_term
from unlocks import build_course_lookup, course_prereq, resolve_prereq


def prereq_satisfied(
    course: dict,
    completed_keys: set[str],
    is_final_term: bool,
    lookup: dict,
) -> bool:
    """
    True when the course may be taken this term.

    completed_keys holds title keys of courses finished in earlier terms only;
    courses placed in the current term never count.
    """
    parsed = course_prereq(course)
    t = parsed.get("type")
    if t == "none":
        return True
    if t == "final_term":
        return is_final_term
    parent = resolve_prereq(prereq_ref(parsed), lookup)
    if parent is None:
        return False
    return title_key(parent["title"]) in completed_keys


def group_by_priority(courses: list[dict]) -> list[tuple[int, list[dict]]]:
    """
    Group courses into tiers by priority, highest first.
    Courses keep their input order inside each tier.
    """
    tiers: dict[int, list[dict]] = {}
    for course in courses:
        tiers.setdefault(int(course.get("priority", 0) or 0), []).append(course)
    return sorted(tiers.items(), key=lambda kv: -kv[0])


def select_for_term(
    schedulable: list[dict],
    target_credits: int,
    max_credits: int,
    min_credits: int,
) -> list[dict]:
    """
    Choose the courses for one term from a read-only schedulable snapshot.

    Tiers are taken whole when they fit, otherwise packed exactly with
    best_credit_subset(). Once the target load is reached no further tier is
    opened. If the term is still under min_credits, the leftovers are added
    one at a time in their existing order.
    """
    selected: list[dict] = []
    selected_ids: set[int] = set()
    total = 0

    for _, tier in group_by_priority(schedulable):
        if total >= target_credits:
            break
        room = max_credits - total
        fitting = [c for c in tier if int(c["credits"]) <= room]
        if not fitting:
            continue
        tier_total = sum(int(c["credits"]) for c in fitting)
        chosen = fitting if tier_total <= room else best_credit_subset(fitting, room)
        for course in chosen:
            selected.append(course)
            selected_ids.add(id(course))
            total += int(course["credits"])

    if total < min_credits:
        for course in schedulable:
            if total >= min_credits:
                break
            if id(course) in selected_ids:
                continue
            credits = int(course["credits"])
            if total + credits > max_credits:
                continue
            selected.append(course)
            selected_ids.add(id(course))
            total += credits

    return selected


def allocate_terms(
    courses: list[dict],
    term_count: int,
    target_credits: int,
    max_credits: int,
    min_credits: int = 0,
) -> dict:
    """
    Place prioritized courses into `term_count` terms.

    Each course record needs title, course_code, credits, a parsed or raw
    prerequisite and a priority. Courses still remaining after the last term
    come back in "unplaced"; that is a partial plan, not an error.
    """
    if term_count < 1:
        raise ValueError("term_count must be at least 1.")
    if max_credits < 1:
        raise ValueError("max_credits must be at least 1.")

    lookup = build_course_lookup(courses)
    completed_keys: set[str] = set()
    in_progress: list[dict] = []
    remaining: list[dict] = list(courses)
    semesters: list[dict] = []

    for number in range(1, term_count + 1):
        # Courses from last term unlock their dependents starting now.
        completed_keys.update(title_key(c["title"]) for c in in_progress)
        in_progress = []

        term = new_term(number)
        is_final = number == term_count
        schedulable = [
            c for c in remaining
            if prereq_satisfied(c, completed_keys, is_final, lookup)
        ]

        placed = select_for_term(schedulable, target_credits, max_credits, min_credits) if schedulable else []

        for course in placed:
            term["courses"].append(course)
            term["total_credits"] += int(course["credits"])
        placed_ids = {id(c) for c in placed}
        remaining = [c for c in remaining if id(c) not in placed_ids]
        in_progress = placed
        semesters.append(term)

    return {
        "semesters": semesters,
        "unplaced": remaining,
        "total_credits": sum(t["total_credits"] for t in semesters),
        "total_courses": sum(len(t["courses"]) for t in semesters),
    }
