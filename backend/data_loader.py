import os
import sys

import pandas as pd

from normalizer import normalize_code
from prereq_parser import parse_prereq
from validators import coerce_credits


_BOOL_TRUTHY = {"true", "1", "yes", "y"}

COURSE_COLUMNS = [
    "title",
    "course_code",
    "credits",
    "prerequisite",
    "instructor",
    "meeting_time",
    "elective_menu",
]

# Column spellings seen in exported course tables.
_COLUMN_ALIASES = {
    "course_title": "title",
    "name": "title",
    "course_name": "title",
    "code": "course_code",
    "prerequisites": "prerequisite",
    "prereq": "prerequisite",
    "prereq_hard": "prerequisite",
    "credit_hours": "credits",
    "units": "credits",
    "professor": "instructor",
    "time": "meeting_time",
    "schedule": "meeting_time",
    "ge_elective": "elective_menu",
}


def _safe_bool_col(df: pd.DataFrame, col: str) -> pd.DataFrame:
    """Normalize a boolean column to Python bool regardless of Excel format.

    Handles: Python bool, Excel int/float (1/0), and string variants
    (TRUE/FALSE, true/false, 1/0, yes/no, y/n). NaN → False.
    """
    def _coerce(x):
        if pd.isna(x):
            return False
        if isinstance(x, bool):
            return x
        if isinstance(x, (int, float)):
            return bool(x)
        return str(x).strip().lower() in _BOOL_TRUTHY

    if col in df.columns:
        df[col] = df[col].apply(_coerce)
    return df


def _read_courses_frame(data_path: str) -> pd.DataFrame:
    """Read the raw course table from a CSV file, a CSV directory or a workbook."""
    if os.path.isdir(data_path):
        csv_path = os.path.join(data_path, "courses.csv")
        if not os.path.isfile(csv_path):
            raise FileNotFoundError(csv_path)
        return pd.read_csv(csv_path, dtype=str, keep_default_na=False)
    if data_path.lower().endswith((".xlsx", ".xlsm")):
        xl = pd.ExcelFile(data_path)
        sheet = "courses" if "courses" in xl.sheet_names else xl.sheet_names[0]
        return xl.parse(sheet, dtype=str).fillna("")
    return pd.read_csv(data_path, dtype=str, keep_default_na=False)


def normalize_courses_df(courses_df: pd.DataFrame) -> pd.DataFrame:
    """
    Rename known column aliases and make sure every expected column exists.

    A split department_ID/course_id pair (e.g. "CSCI" + "101") is joined
    into course_code when no course_code column is present.
    """
    df = courses_df.copy()
    df.columns = [str(c).strip() for c in df.columns]

    rename_map = {}
    for col in df.columns:
        key = col.lower().replace(" ", "_")
        target = _COLUMN_ALIASES.get(key, key)
        if target != col and target not in df.columns and target not in rename_map.values():
            rename_map[col] = target
    if rename_map:
        df = df.rename(columns=rename_map)

    if "course_code" not in df.columns:
        dept_col = next((c for c in df.columns if c.lower() in {"department_id", "department"}), None)
        num_col = next((c for c in df.columns if c.lower() in {"course_id", "number"}), None)
        if dept_col and num_col:
            df["course_code"] = (
                df[dept_col].fillna("").astype(str).str.strip()
                + " "
                + df[num_col].fillna("").astype(str).str.strip()
            ).str.strip()

    for col in COURSE_COLUMNS:
        if col not in df.columns:
            df[col] = False if col == "elective_menu" else ""

    for col in ["title", "course_code", "prerequisite", "instructor", "meeting_time"]:
        df[col] = df[col].fillna("").astype(str).str.strip()
    df["course_code"] = df["course_code"].apply(lambda c: normalize_code(c) or c)
    df = _safe_bool_col(df, "elective_menu")

    return df[COURSE_COLUMNS + [c for c in df.columns if c not in COURSE_COLUMNS]]


def _row_to_course(row: pd.Series) -> dict:
    return {
        "title": row["title"],
        "course_code": row["course_code"],
        "credits": row["credits"],
        "prerequisite": row["prerequisite"],
        "prereq": parse_prereq(row["prerequisite"]),
        "instructor": row["instructor"],
        "meeting_time": row["meeting_time"],
    }


def load_data(data_path: str) -> dict:
    """Load and normalize the course table. Raises on file errors."""
    courses_df = normalize_courses_df(_read_courses_frame(data_path))
    courses_df = courses_df[courses_df["title"] != ""].reset_index(drop=True)

    is_menu = courses_df["elective_menu"].astype(bool)
    required_df = courses_df[~is_menu]
    menu_df = courses_df[is_menu]
    courses = [_row_to_course(row) for _, row in required_df.iterrows()]
    elective_menu = [_row_to_course(row) for _, row in menu_df.iterrows()]

    catalog_codes = set(c for c in courses_df["course_code"].tolist() if c)

    # ── Startup data integrity checks ──────────────────────────────────────
    invalid_rows = [
        {"title": row["title"], "course_code": row["course_code"], "credits": row["credits"]}
        for _, row in courses_df.iterrows()
        if coerce_credits(row["credits"]) is None
    ]
    if invalid_rows:
        print(
            f"[WARN] {len(invalid_rows)} course(s) have non-numeric credits and will be left unplaced: "
            f"{sorted(r['title'] for r in invalid_rows)}",
            file=sys.stderr,
        )

    print(f"[INFO] Course table: {len(courses)} required, {len(elective_menu)} elective menu entries")

    return {
        "courses_df": courses_df,
        "courses": courses,
        "elective_menu": elective_menu,
        "catalog_codes": catalog_codes,
        "invalid_rows": invalid_rows,
    }
