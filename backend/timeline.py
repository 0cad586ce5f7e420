import math

from plan_config import SEASONS, YEAR_NAMES


def term_label(number: int) -> dict:
    """
    Class-year/season label for the 1-based term `number`.

    Two terms per year, Fall first:
      1 → Freshman Fall, 2 → Freshman Spring, 3 → Sophomore Fall, ...
    Plans longer than four years continue as "Year 5", "Year 6", ...
    """
    year_idx = (number - 1) // 2
    year = YEAR_NAMES[year_idx] if year_idx < len(YEAR_NAMES) else f"Year {year_idx + 1}"
    season = SEASONS[(number - 1) % len(SEASONS)]
    return {"year": year, "season": season, "label": f"{year} {season}"}


def new_term(number: int) -> dict:
    return {
        "number": number,
        **term_label(number),
        "courses": [],
        "total_credits": 0,
    }


def estimate_timeline(
    total_credits: int,
    max_credits: int,
    term_count: int,
) -> dict:
    """
    Rough lower bound on terms needed, ignoring prerequisite ordering.

    Returns:
        {
          "estimated_min_terms": 7,
          "fits_term_count": True,
          "disclaimer": "..."
        }
    """
    estimated = math.ceil(total_credits / max_credits) if total_credits > 0 and max_credits > 0 else 0
    return {
        "estimated_min_terms": estimated,
        "fits_term_count": estimated <= term_count,
        "disclaimer": (
            f"Rough estimate. Assumes every term can be filled to {max_credits} credits "
            "and ignores prerequisite chains."
        ),
    }
