import os

# Planner defaults. Each can be overridden through the environment
# (PLAN_TERM_COUNT, PLAN_TARGET_CREDITS, PLAN_MAX_CREDITS, PLAN_MIN_CREDITS)
# and again per request.
DEFAULT_TERM_COUNT = 8
DEFAULT_TARGET_CREDITS = 15
DEFAULT_MAX_CREDITS = 18
DEFAULT_MIN_CREDITS = 12

# Upper bounds accepted from request bodies / CLI flags.
MAX_TERM_COUNT = 12
MAX_CREDIT_LIMIT = 30
MAX_ELECTIVE_COUNT = 4

# Tiers above this size are packed with the subset-sum DP instead of
# backtracking.
DP_TIER_THRESHOLD = 20

# Values of the prerequisite column that mean "no prerequisite".
NONE_VALUES = {"", "none", "null", "n/a", "na", "no prerequisite", "no prerequisites", "none listed"}

# Values that restrict a course to the last term of the plan.
FINAL_TERM_VALUES = {"final term only", "final term", "final semester", "final semester only"}

YEAR_NAMES = ["Freshman", "Sophomore", "Junior", "Senior"]
SEASONS = ["Fall", "Spring"]

UNPLACED_REASONS = {
    "invalid_credits": "Credits value is missing or not a positive whole number.",
    "missing_title": "Course row has no title.",
    "duplicate_title": "Another course in the plan already uses this title.",
    "prereq_cycle": "Prerequisite chain loops back to this course.",
    "prereq_missing": "Prerequisite is not part of this plan.",
    "final_term_only": "Restricted to the final term, which had no room.",
    "exceeds_max_credits": "Course credits exceed the per-term maximum.",
    "out_of_terms": "Ran out of terms before this course could be placed.",
}


def _env_int(name: str, default: int, minimum: int = 1) -> int:
    raw = os.environ.get(name, "")
    try:
        return max(minimum, int(raw))
    except (TypeError, ValueError):
        return default


def default_limits() -> dict:
    """Planner limits from the environment, falling back to module defaults."""
    return {
        "term_count": _env_int("PLAN_TERM_COUNT", DEFAULT_TERM_COUNT),
        "target_credits": _env_int("PLAN_TARGET_CREDITS", DEFAULT_TARGET_CREDITS),
        "max_credits": _env_int("PLAN_MAX_CREDITS", DEFAULT_MAX_CREDITS),
        "min_credits": _env_int("PLAN_MIN_CREDITS", DEFAULT_MIN_CREDITS, minimum=0),
    }


def resolve_limits(overrides: dict | None = None) -> dict:
    """
    Merge per-call overrides onto the environment defaults.

    Keeps min_credits <= target_credits <= max_credits. Raises ValueError for
    a term count or maximum below 1.
    """
    limits = default_limits()
    for key, value in (overrides or {}).items():
        if key in limits and value is not None:
            limits[key] = int(value)

    if limits["term_count"] < 1:
        raise ValueError("term_count must be at least 1.")
    if limits["max_credits"] < 1:
        raise ValueError("max_credits must be at least 1.")

    limits["target_credits"] = max(1, min(limits["target_credits"], limits["max_credits"]))
    limits["min_credits"] = max(0, min(limits["min_credits"], limits["target_credits"]))
    return limits
