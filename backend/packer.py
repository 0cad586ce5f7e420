"""
Exact credit packing for a single priority tier.

best_credit_subset() returns the subset of courses whose summed credits is the
largest value not exceeding the budget. Small tiers use backtracking; large
tiers switch to a subset-sum table with the same result total.
"""

from plan_config import DP_TIER_THRESHOLD


def _credits(course: dict) -> int:
    return int(course["credits"])


def best_credit_subset(courses: list[dict], budget: int) -> list[dict]:
    """
    Maximum-credit subset of `courses` whose total is <= `budget`.

    When several subsets reach the same total, the first one found in
    depth-first order is returned. Courses keep their input order.
    """
    if budget <= 0 or not courses:
        return []
    if len(courses) > DP_TIER_THRESHOLD:
        return best_credit_subset_dp(courses, budget)

    best_combo: list[int] = []
    best_total = 0
    combo: list[int] = []

    def backtrack(start: int, total: int) -> bool:
        nonlocal best_combo, best_total
        if total > best_total:
            best_total = total
            best_combo = list(combo)
            if best_total == budget:
                return True
        for i in range(start, len(courses)):
            credits = _credits(courses[i])
            if total + credits > budget:
                continue
            combo.append(i)
            if backtrack(i + 1, total + credits):
                return True
            combo.pop()
        return False

    backtrack(0, 0)
    return [courses[i] for i in best_combo]


def best_credit_subset_dp(courses: list[dict], budget: int) -> list[dict]:
    """
    Subset-sum table over credit totals 0..budget.

    reachable[s] holds the index of the course that first reached total s,
    so the chosen subset is rebuilt by walking back from the best total.
    """
    if budget <= 0 or not courses:
        return []

    reachable: dict[int, tuple[int, int]] = {0: (-1, -1)}
    for idx, course in enumerate(courses):
        credits = _credits(course)
        if credits <= 0 or credits > budget:
            continue
        # Iterate a snapshot so each course is used at most once.
        for total in sorted(reachable, reverse=True):
            new_total = total + credits
            if new_total <= budget and new_total not in reachable:
                reachable[new_total] = (idx, total)
        if budget in reachable:
            break

    best_total = max(reachable)
    picked: list[int] = []
    total = best_total
    while total > 0:
        idx, prev_total = reachable[total]
        picked.append(idx)
        total = prev_total
    picked.sort()
    return [courses[i] for i in picked]


def subset_credits(courses: list[dict]) -> int:
    return sum(_credits(c) for c in courses)
