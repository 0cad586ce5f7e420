import pandas as pd

from normalizer import normalize_title
from plan_config import FINAL_TERM_VALUES, NONE_VALUES


def _is_missing(raw) -> bool:
    if raw is None:
        return True
    try:
        return bool(pd.isna(raw))
    except (TypeError, ValueError):
        return False


def parse_prereq(prereq_str) -> dict:
    """
    Parses the single-prerequisite field of a course row.

    Supported grammar:
      empty / NULL / none        → {"type": "none"}
      final term only            → {"type": "final_term"}
      CODE or course title       → {"type": "course", "ref": "<text>"}

    The reference is kept as free text. Whether it names a course code or a
    title is decided later, against the course set of one planning run.
    """
    if _is_missing(prereq_str):
        return {"type": "none"}

    s = normalize_title(prereq_str)

    if s.lower() in NONE_VALUES:
        return {"type": "none"}
    if s.lower() in FINAL_TERM_VALUES:
        return {"type": "final_term"}

    return {"type": "course", "ref": s}


def prereq_ref(parsed_prereq: dict) -> str | None:
    """Return the referenced course text, or None for none/final_term."""
    if parsed_prereq.get("type") == "course":
        ref = parsed_prereq.get("ref")
        return ref if ref else None
    return None


def describe_prereq(parsed_prereq: dict) -> str:
    """
    Human-readable prerequisite label.
    Examples:
      "No prerequisites"
      "Final term only"
      "CSCI 101"
    """
    t = parsed_prereq.get("type")
    if t == "final_term":
        return "Final term only"
    if t == "course":
        return parsed_prereq.get("ref", "")
    return "No prerequisites"
