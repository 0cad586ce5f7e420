from normalizer import normalize_code, normalize_title, title_key
from prereq_parser import parse_prereq, prereq_ref


def course_prereq(course: dict) -> dict:
    """Parsed prerequisite of a course record, parsing the raw text if needed."""
    parsed = course.get("prereq")
    if isinstance(parsed, dict) and parsed.get("type"):
        return parsed
    return parse_prereq(course.get("prerequisite"))


def build_course_lookup(courses: list[dict]) -> dict:
    """
    Index a course list by title and by course code.

    Returns: {"by_title": {"data structures": {...}}, "by_code": {"CSCI 201": {...}}}

    Codes are keyed in canonical form, so "csci-201" and "CSCI 201" share a
    slot. The first course wins when two records share a title or a code.
    """
    by_title: dict[str, dict] = {}
    by_code: dict[str, dict] = {}
    for course in courses:
        tkey = title_key(course.get("title"))
        if tkey and tkey not in by_title:
            by_title[tkey] = course
        raw_code = course.get("course_code")
        code = normalize_code(raw_code) or normalize_title(raw_code)
        if code and code not in by_code:
            by_code[code] = course
    return {"by_title": by_title, "by_code": by_code}


def resolve_prereq(ref: str | None, lookup: dict) -> dict | None:
    """
    Resolve a free-text prerequisite reference to a course in the lookup.

    A title match takes precedence over a course-code match.
    Returns None when nothing matches.
    """
    if not ref:
        return None
    by_title = lookup["by_title"].get(title_key(ref))
    if by_title is not None:
        return by_title
    code = normalize_code(ref) or normalize_title(ref)
    return lookup["by_code"].get(code)


def walk_prereq_chain(course: dict, lookup: dict) -> tuple[list[str], str | None]:
    """
    Follow single-prerequisite links backward from `course`.

    Returns (chain, revisited) where chain lists ancestor titles nearest first
    and revisited is the title that stopped the walk because it had already
    been seen (None when the walk ended normally).
    """
    chain: list[str] = []
    visited = {title_key(course.get("title"))}
    current = course
    while True:
        parent = resolve_prereq(prereq_ref(course_prereq(current)), lookup)
        if parent is None:
            return chain, None
        key = title_key(parent["title"])
        if key in visited:
            return chain, parent["title"]  # cycle guard
        visited.add(key)
        chain.append(parent["title"])
        current = parent


def build_prerequisite_map(courses: list[dict]) -> dict[str, list[str]]:
    """
    Builds the prerequisite chain for every course in one planning run.

    Returns: {"Algorithms": ["Data Structures", "Intro to Programming"], ...}

    Unresolvable references end a chain silently.
    """
    lookup = build_course_lookup(courses)
    prereq_map: dict[str, list[str]] = {}
    for course in courses:
        chain, _ = walk_prereq_chain(course, lookup)
        prereq_map[course["title"]] = chain
    return prereq_map


def calculate_priority(prereq_map: dict[str, list[str]]) -> dict[str, int]:
    """
    Score each course by how many courses list it as their direct prerequisite.

    Only the first entry of each chain counts. Returned in descending score
    order; callers that group by score must still sort on their own.
    """
    priority = {title: 0 for title in prereq_map}
    for chain in prereq_map.values():
        if not chain:
            continue
        direct = chain[0]
        priority[direct] = priority.get(direct, 0) + 1
    return dict(sorted(priority.items(), key=lambda kv: -kv[1]))


def build_reverse_prereq_map(prereq_map: dict[str, list[str]]) -> dict[str, list[str]]:
    """
    Builds a reverse prerequisite map: for each course, which courses directly
    list it as a prerequisite.

    Returns: {"Intro to Programming": ["Data Structures", "Web Development"], ...}

    Only direct prerequisites (one level deep).
    """
    reverse: dict[str, list[str]] = {}
    for title, chain in prereq_map.items():
        if not chain:
            continue
        dependents = reverse.setdefault(chain[0], [])
        if title not in dependents:
            dependents.append(title)
    return reverse


def get_direct_unlocks(
    title: str,
    reverse_map: dict[str, list[str]],
    limit: int = 3,
) -> list[str]:
    """
    Returns up to `limit` courses directly unlocked by completing `title`.
    """
    return reverse_map.get(title, [])[:limit]
