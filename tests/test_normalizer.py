import pytest
from normalizer import normalize_code, normalize_title, title_key


class TestNormalizeCode:
    def test_canonical(self):
        assert normalize_code("CSCI 101") == "CSCI 101"

    def test_lowercase(self):
        assert normalize_code("csci101") == "CSCI 101"

    def test_hyphen(self):
        assert normalize_code("CSCI-101") == "CSCI 101"

    def test_no_space(self):
        assert normalize_code("MATH151") == "MATH 151"

    def test_spaces_around_hyphen(self):
        assert normalize_code("CSCI - 201") == "CSCI 201"

    def test_four_digit_number(self):
        assert normalize_code("FINA 3001") == "FINA 3001"

    def test_lab_suffix(self):
        assert normalize_code("biol 110l") == "BIOL 110L"

    def test_invalid_no_digits(self):
        assert normalize_code("CSCI") is None

    def test_invalid_title(self):
        assert normalize_code("Data Structures") is None

    def test_invalid_empty(self):
        assert normalize_code("") is None

    def test_invalid_none(self):
        assert normalize_code(None) is None


class TestTitleHelpers:
    def test_collapses_whitespace(self):
        assert normalize_title("  Data   Structures ") == "Data Structures"

    def test_none_is_empty(self):
        assert normalize_title(None) == ""

    def test_title_key_case_insensitive(self):
        assert title_key("Data Structures") == title_key("data  STRUCTURES")
