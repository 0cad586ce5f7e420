import random

from normalizer import title_key


def pick_electives(
    menu: list[dict],
    count: int,
    rng: random.Random | None = None,
    exclude_titles: set[str] | None = None,
) -> list[dict]:
    """
    Draw up to `count` distinct general-education courses from `menu`.

    Courses whose title is already in the plan are skipped. Pass a seeded
    random.Random for repeatable picks.
    """
    if count <= 0 or not menu:
        return []
    rng = rng or random.Random()
    excluded = {title_key(t) for t in (exclude_titles or set())}

    pool: list[dict] = []
    seen: set[str] = set()
    for course in menu:
        key = title_key(course.get("title"))
        if not key or key in excluded or key in seen:
            continue
        seen.add(key)
        pool.append(course)

    picked = rng.sample(pool, min(count, len(pool)))
    return [{**course, "is_elective": True} for course in picked]
