import pytest
from plan_config import (
    DEFAULT_MAX_CREDITS,
    DEFAULT_MIN_CREDITS,
    DEFAULT_TARGET_CREDITS,
    DEFAULT_TERM_COUNT,
    UNPLACED_REASONS,
    default_limits,
    resolve_limits,
)


@pytest.fixture(autouse=True)
def _clear_plan_env(monkeypatch):
    for name in ("PLAN_TERM_COUNT", "PLAN_TARGET_CREDITS", "PLAN_MAX_CREDITS", "PLAN_MIN_CREDITS"):
        monkeypatch.delenv(name, raising=False)


class TestDefaultLimits:
    def test_module_defaults(self):
        assert default_limits() == {
            "term_count": DEFAULT_TERM_COUNT,
            "target_credits": DEFAULT_TARGET_CREDITS,
            "max_credits": DEFAULT_MAX_CREDITS,
            "min_credits": DEFAULT_MIN_CREDITS,
        }

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("PLAN_MAX_CREDITS", "21")
        monkeypatch.setenv("PLAN_TERM_COUNT", "10")
        limits = default_limits()
        assert limits["max_credits"] == 21
        assert limits["term_count"] == 10

    def test_bad_env_falls_back(self, monkeypatch):
        monkeypatch.setenv("PLAN_TARGET_CREDITS", "lots")
        assert default_limits()["target_credits"] == DEFAULT_TARGET_CREDITS

    def test_min_credits_may_be_zero(self, monkeypatch):
        monkeypatch.setenv("PLAN_MIN_CREDITS", "0")
        assert default_limits()["min_credits"] == 0


class TestResolveLimits:
    def test_no_overrides(self):
        assert resolve_limits() == default_limits()

    def test_override_applied(self):
        assert resolve_limits({"term_count": 4})["term_count"] == 4

    def test_none_override_ignored(self):
        assert resolve_limits({"max_credits": None})["max_credits"] == DEFAULT_MAX_CREDITS

    def test_unknown_keys_ignored(self):
        assert "color" not in resolve_limits({"color": "blue"})

    def test_target_clamped_to_max(self):
        limits = resolve_limits({"max_credits": 6})
        assert limits["target_credits"] == 6
        assert limits["min_credits"] == 6

    def test_min_clamped_to_target(self):
        limits = resolve_limits({"target_credits": 9, "min_credits": 15})
        assert limits["min_credits"] == 9

    def test_zero_term_count(self):
        with pytest.raises(ValueError):
            resolve_limits({"term_count": 0})

    def test_zero_max_credits(self):
        with pytest.raises(ValueError):
            resolve_limits({"max_credits": 0})


class TestUnplacedReasons:
    def test_every_reason_has_text(self):
        assert all(UNPLACED_REASONS.values())
        assert "out_of_terms" in UNPLACED_REASONS
