import re

# Matches: DEPT NNN, DEPT-NNNN, DEPTNNN, CSCI 101L, MATH 1450, etc.
CANONICAL = re.compile(r'^([A-Za-z]{2,6})\s*[-]?\s*(\d{3,4}[A-Za-z]?)$')


def normalize_code(raw) -> str | None:
    """
    Normalizes a course code to canonical 'DEPT NNN' format.
    Handles: 'csci101', 'CSCI-101', 'CSCI 101', 'MATH 1450', 'BIOL 110L'
    Returns None if the string cannot be parsed as a course code.
    """
    if raw is None:
        return None
    s = str(raw).strip()
    if not s:
        return None
    m = CANONICAL.match(s)
    if m:
        dept = m.group(1).upper()
        num = m.group(2).upper()
        return f"{dept} {num}"
    return None


def normalize_title(raw) -> str:
    """Collapse internal whitespace so 'Data  Structures ' matches 'Data Structures'."""
    if raw is None:
        return ""
    return " ".join(str(raw).split())


def title_key(raw) -> str:
    """Case-insensitive lookup key for a course title."""
    return normalize_title(raw).casefold()
