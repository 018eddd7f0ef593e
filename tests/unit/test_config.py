"""Tests for settings and calorie-target resolution."""
import pytest

from coach import config
from coach.config import Settings, get_settings, resolve_calorie_target


class TestSettings:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("COACH_DEFAULT_CALORIE_TARGET", raising=False)
        settings = Settings(_env_file=None)
        assert settings.default_calorie_target == 2000
        assert settings.weight_trend_window_days == 30

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("COACH_DEFAULT_CALORIE_TARGET", "2400")
        assert Settings(_env_file=None).default_calorie_target == 2400

    def test_get_settings_is_cached(self, monkeypatch):
        monkeypatch.setattr(config, "_settings", None)
        assert get_settings() is get_settings()


class TestResolveCalorieTarget:
    def test_keeps_profile_target(self, settings):
        assert resolve_calorie_target(2500, settings) == 2500

    @pytest.mark.parametrize("unset", [None, 0])
    def test_unset_falls_back_to_default(self, settings, unset):
        assert resolve_calorie_target(unset, settings) == 2000

    def test_custom_default(self):
        assert resolve_calorie_target(None, Settings(default_calorie_target=1800, _env_file=None)) == 1800
