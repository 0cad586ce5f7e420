import pytest
from timeline import estimate_timeline, new_term, term_label


class TestTermLabel:
    @pytest.mark.parametrize("number, label", [
        (1, "Freshman Fall"),
        (2, "Freshman Spring"),
        (3, "Sophomore Fall"),
        (6, "Junior Spring"),
        (8, "Senior Spring"),
        (9, "Year 5 Fall"),
        (12, "Year 6 Spring"),
    ])
    def test_labels(self, number, label):
        assert term_label(number)["label"] == label

    def test_parts(self):
        assert term_label(4) == {"year": "Sophomore", "season": "Spring", "label": "Sophomore Spring"}


class TestNewTerm:
    def test_empty_term(self):
        term = new_term(1)
        assert term["number"] == 1
        assert term["courses"] == []
        assert term["total_credits"] == 0
        assert term["label"] == "Freshman Fall"


class TestEstimateTimeline:
    def test_rounds_up(self):
        result = estimate_timeline(total_credits=72, max_credits=18, term_count=8)
        assert result["estimated_min_terms"] == 4
        assert result["fits_term_count"] is True

    def test_partial_term(self):
        assert estimate_timeline(19, 18, 8)["estimated_min_terms"] == 2

    def test_does_not_fit(self):
        result = estimate_timeline(total_credits=150, max_credits=15, term_count=8)
        assert result["estimated_min_terms"] == 10
        assert result["fits_term_count"] is False

    def test_zero_credits(self):
        assert estimate_timeline(0, 18, 8)["estimated_min_terms"] == 0

    def test_disclaimer_mentions_limit(self):
        assert "18 credits" in estimate_timeline(36, 18, 8)["disclaimer"]
