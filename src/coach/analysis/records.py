"""
Input record dataclasses for the analysis layer.

These are the universal in-memory shapes consumed by every analyzer. They are
plain Python dataclasses with no persistence or HTTP dependencies; raw rows are
converted into them by coach.normalizer before any analysis runs.
"""
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Optional


class ActivityType(str, Enum):
    BJJ = "bjj"
    SOFTBALL = "softball"
    OTHER = "other"


class Intensity(str, Enum):
    LIGHT = "light"
    MODERATE = "moderate"
    HARD = "hard"


@dataclass(frozen=True)
class SessionRecord:
    """One workout attempt. Only completed sessions count toward streaks."""
    started_at: datetime                   # already in the user's local day
    completed_at: Optional[datetime] = None

    @property
    def is_completed(self) -> bool:
        return self.completed_at is not None


@dataclass(frozen=True)
class ActivityRecord:
    """A non-workout activity logged for recovery purposes."""
    date: date
    activity_type: ActivityType
    intensity: Intensity
    duration_minutes: Optional[int] = None


@dataclass(frozen=True)
class NutritionRecord:
    """One logged meal. Several records may share a date."""
    date: date
    calories: int
    protein: Optional[float] = None   # grams
    carbs: Optional[float] = None     # grams
    fats: Optional[float] = None      # grams
    meal_name: Optional[str] = None


@dataclass(frozen=True)
class MeasurementRecord:
    """One body-weight measurement."""
    measured_at: datetime
    weight: float                     # lbs
