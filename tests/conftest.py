"""Shared test fixtures."""
from datetime import datetime

import pytest

from coach.config import Settings


@pytest.fixture(name="now")
def now_fixture() -> datetime:
    """Fixed reference instant (Jan 15 2025, 20:00); analyzers never read the clock."""
    return datetime(2025, 1, 15, 20, 0)


@pytest.fixture(name="settings")
def settings_fixture() -> Settings:
    """Settings with defaults pinned, independent of the environment."""
    return Settings(
        default_calorie_target=2000,
        weight_trend_window_days=30,
        log_level="INFO",
        _env_file=None,
    )


@pytest.fixture(name="snapshot")
def snapshot_fixture() -> dict:
    """Raw rows for one user, shaped as the persistence layer returns them."""
    return {
        "daily_calorie_target": 2000,
        "sessions": [
            {"started_at": "2025-01-15T07:30:00", "completed_at": "2025-01-15T08:20:00"},
            {"started_at": "2025-01-14T07:30:00", "completed_at": "2025-01-14T08:15:00"},
            {"started_at": "2025-01-13T18:00:00", "completed_at": None},
            {"started_at": "2025-01-12T07:30:00", "completed_at": "2025-01-12T08:10:00"},
        ],
        "activities": [
            {"date": "2025-01-14", "activity_type": "bjj", "intensity": "hard", "duration_minutes": 90},
            {"date": "2025-01-11", "activity_type": "softball", "intensity": "moderate", "duration_minutes": 120},
        ],
        "nutrition": [
            {"date": "2025-01-13", "calories": 900, "protein": 60, "meal_name": "Lunch"},
            {"date": "2025-01-13", "calories": 1100, "protein": 70, "meal_name": "Dinner"},
            {"date": "2025-01-14", "calories": 1500, "protein": 90, "carbs": None},
        ],
        "measurements": [
            {"measured_at": "2025-01-01T07:00:00Z", "weight": 200.0},
            {"measured_at": "2025-01-08T07:00:00Z", "weight": 198.5},
            {"measured_at": "2025-01-15T07:00:00Z", "weight": 197.0},
        ],
    }
