import os

import pandas as pd
import pytest
from data_loader import load_data, normalize_courses_df


DATA_CSV = os.path.join(os.path.dirname(__file__), "..", "data", "courses.csv")


def _write_csv(path, text):
    path.write_text(text.strip() + "\n", encoding="utf-8")
    return str(path)


@pytest.fixture
def small_csv(tmp_path):
    return _write_csv(tmp_path / "courses.csv", """
course_code,title,credits,prerequisite,instructor,meeting_time,elective_menu
csci101,Intro to Programming,4,,Dr. Alvarez,MWF 09:00,
CSCI-102,Programming II,4,CSCI 101,Dr. Alvarez,MWF 11:00,false
HIST 110,World History,3,,Prof. Okafor,MWF 08:00,TRUE
,,3,,,,
""")


class TestLoadData:
    def test_splits_required_and_menu(self, small_csv):
        data = load_data(small_csv)
        assert [c["title"] for c in data["courses"]] == ["Intro to Programming", "Programming II"]
        assert [c["title"] for c in data["elective_menu"]] == ["World History"]

    def test_codes_normalized(self, small_csv):
        data = load_data(small_csv)
        assert data["courses"][0]["course_code"] == "CSCI 101"
        assert data["courses"][1]["course_code"] == "CSCI 102"
        assert data["catalog_codes"] == {"CSCI 101", "CSCI 102", "HIST 110"}

    def test_blank_title_rows_dropped(self, small_csv):
        assert len(load_data(small_csv)["courses_df"]) == 3

    def test_prereq_parsed(self, small_csv):
        data = load_data(small_csv)
        assert data["courses"][0]["prereq"] == {"type": "none"}
        assert data["courses"][1]["prereq"] == {"type": "course", "ref": "CSCI 101"}

    def test_record_fields(self, small_csv):
        course = load_data(small_csv)["courses"][0]
        assert course["instructor"] == "Dr. Alvarez"
        assert course["meeting_time"] == "MWF 09:00"
        assert course["credits"] == "4"

    def test_directory_path(self, small_csv, tmp_path):
        data = load_data(str(tmp_path))
        assert len(data["courses"]) == 2

    def test_directory_without_csv(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_data(str(tmp_path))

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_data(str(tmp_path / "nope.csv"))

    def test_bad_credits_warns(self, tmp_path, capsys):
        path = _write_csv(tmp_path / "bad.csv", """
title,credits
Seminar,TBD
Ethics,3
""")
        data = load_data(path)
        assert len(data["courses"]) == 2
        assert data["invalid_rows"] == [{"title": "Seminar", "course_code": "", "credits": "TBD"}]
        assert "[WARN] 1 course(s) have non-numeric credits" in capsys.readouterr().err

    def test_clean_table_has_no_invalid_rows(self, small_csv):
        assert load_data(small_csv)["invalid_rows"] == []

    def test_info_line(self, small_csv, capsys):
        load_data(small_csv)
        assert "[INFO] Course table: 2 required, 1 elective menu entries" in capsys.readouterr().out

    def test_workbook(self, tmp_path):
        path = tmp_path / "catalog.xlsx"
        with pd.ExcelWriter(path) as writer:
            pd.DataFrame([
                {"course_code": "MATH 151", "title": "Calculus I", "credits": 4, "prerequisite": ""},
                {"course_code": "MATH 152", "title": "Calculus II", "credits": 4, "prerequisite": "Calculus I"},
            ]).to_excel(writer, sheet_name="courses", index=False)
        data = load_data(str(path))
        assert [c["course_code"] for c in data["courses"]] == ["MATH 151", "MATH 152"]
        assert data["courses"][1]["prereq"] == {"type": "course", "ref": "Calculus I"}

    def test_bundled_catalog(self):
        data = load_data(DATA_CSV)
        assert len(data["courses"]) == 22
        assert len(data["elective_menu"]) == 5


class TestNormalizeCoursesDf:
    def test_aliases(self):
        df = pd.DataFrame([{"Course Title": "Ethics", "Credit Hours": "3", "Prereq": "none", "Professor": "Laurent"}])
        out = normalize_courses_df(df)
        assert out.loc[0, "title"] == "Ethics"
        assert out.loc[0, "credits"] == "3"
        assert out.loc[0, "prerequisite"] == "none"
        assert out.loc[0, "instructor"] == "Laurent"

    def test_department_and_number_joined(self):
        df = pd.DataFrame([{"department_ID": "CSCI", "course_id": "101", "title": "Intro", "credits": "4"}])
        assert normalize_courses_df(df).loc[0, "course_code"] == "CSCI 101"

    def test_missing_columns_filled(self):
        out = normalize_courses_df(pd.DataFrame([{"title": "Ethics", "credits": "3"}]))
        assert out.loc[0, "meeting_time"] == ""
        assert bool(out.loc[0, "elective_menu"]) is False

    def test_expected_columns_first(self):
        df = pd.DataFrame([{"notes": "x", "title": "Ethics", "credits": "3"}])
        assert list(normalize_courses_df(df).columns)[-1] == "notes"

    @pytest.mark.parametrize("raw, expected", [
        ("TRUE", True), ("yes", True), ("1", True), ("y", True),
        ("false", False), ("", False), ("no", False),
    ])
    def test_elective_flag(self, raw, expected):
        df = pd.DataFrame([{"title": "Ethics", "credits": "3", "elective_menu": raw}])
        assert bool(normalize_courses_df(df).loc[0, "elective_menu"]) is expected

    def test_does_not_mutate_input(self):
        df = pd.DataFrame([{"Course Title": "Ethics", "credits": "3"}])
        normalize_courses_df(df)
        assert list(df.columns) == ["Course Title", "credits"]
