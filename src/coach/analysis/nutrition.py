"""
Nutrition adherence against a daily calorie target.

A day is "on track" when its total calories land within ±10% of the target,
inclusive at both bounds. Weekly adherence only counts days that have at least
one logged meal: an unlogged day is absent, not a 0-calorie day.

The target must already be resolved by the caller (see
coach.config.resolve_calorie_target); these functions never substitute one.
"""
import math
from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum
from typing import Dict, Iterable, Sequence, Tuple

from coach.analysis.records import NutritionRecord

TARGET_TOLERANCE = 0.10
WEEK_DAYS = 7


class TargetStatus(str, Enum):
    UNDER = "under"
    ON_TRACK = "on_track"
    OVER = "over"


@dataclass(frozen=True)
class DailyNutritionSummary:
    """Macro totals for one calendar day."""
    date: date
    total_calories: int
    total_protein: float
    total_carbs: float
    total_fats: float
    meal_count: int
    target_status: TargetStatus
    target_calories: int
    meals: Tuple[str, ...] = ()   # named meals only


@dataclass(frozen=True)
class WeeklyAdherence:
    """Adherence over the days of a week that have logged meals."""
    days_on_track: int
    days_under: int
    days_over: int
    total_days: int
    adherence_pct: int     # 0-100; 0 when total_days == 0
    avg_calories: int
    avg_protein: int


def round_half_up(value: float) -> int:
    """Round .5 away from zero for non-negative values (not banker's rounding)."""
    return int(math.floor(value + 0.5))


def _require_target(target_calories: int) -> None:
    if target_calories <= 0:
        raise ValueError(f"target_calories must be positive, got {target_calories}")


def classify_calories(total_calories: float, target_calories: int) -> TargetStatus:
    """Band a day's calories against the target with a symmetric 10% tolerance."""
    if total_calories < target_calories * (1 - TARGET_TOLERANCE):
        return TargetStatus.UNDER
    if total_calories > target_calories * (1 + TARGET_TOLERANCE):
        return TargetStatus.OVER
    return TargetStatus.ON_TRACK


def daily_summary(
    records: Iterable[NutritionRecord],
    day: date,
    target_calories: int,
) -> DailyNutritionSummary:
    """
    Sum every meal logged on `day` and classify the total.

    Args:
        records: Nutrition records; only those dated `day` are used.
        day: Calendar date to summarise.
        target_calories: Resolved daily calorie target (> 0).

    Returns:
        DailyNutritionSummary. A day with no meals is all zeros and "under".
    """
    _require_target(target_calories)
    meals = [r for r in records if r.date == day]

    total_calories = sum(m.calories for m in meals)
    return DailyNutritionSummary(
        date=day,
        total_calories=total_calories,
        total_protein=sum(m.protein or 0.0 for m in meals),
        total_carbs=sum(m.carbs or 0.0 for m in meals),
        total_fats=sum(m.fats or 0.0 for m in meals),
        meal_count=len(meals),
        target_status=classify_calories(total_calories, target_calories),
        target_calories=target_calories,
        meals=tuple(m.meal_name for m in meals if m.meal_name),
    )


def _group_by_day(records: Sequence[NutritionRecord]) -> Dict[str, Dict[str, float]]:
    totals: Dict[str, Dict[str, float]] = {}
    for r in records:
        day = totals.setdefault(r.date.isoformat(), {"calories": 0.0, "protein": 0.0})
        day["calories"] += r.calories
        day["protein"] += r.protein or 0.0
    return totals


def weekly_adherence(
    records: Iterable[NutritionRecord],
    target_calories: int,
    window_start: date,
) -> WeeklyAdherence:
    """
    Classify each logged day in the 7-day window starting at `window_start`.

    Args:
        records: Nutrition records; those outside
                 [window_start, window_start + 7 days) are ignored.
        target_calories: Resolved daily calorie target (> 0).
        window_start: First day of the window (inclusive).

    Returns:
        WeeklyAdherence with rounded percentages and per-day averages.
    """
    _require_target(target_calories)
    window_end = window_start + timedelta(days=WEEK_DAYS)
    in_window = [r for r in records if window_start <= r.date < window_end]

    counts = {status: 0 for status in TargetStatus}
    daily_totals = _group_by_day(in_window)
    for totals in daily_totals.values():
        counts[classify_calories(totals["calories"], target_calories)] += 1

    total_days = len(daily_totals)
    if total_days == 0:
        return WeeklyAdherence(
            days_on_track=0,
            days_under=0,
            days_over=0,
            total_days=0,
            adherence_pct=0,
            avg_calories=0,
            avg_protein=0,
        )

    total_calories = sum(t["calories"] for t in daily_totals.values())
    total_protein = sum(t["protein"] for t in daily_totals.values())
    return WeeklyAdherence(
        days_on_track=counts[TargetStatus.ON_TRACK],
        days_under=counts[TargetStatus.UNDER],
        days_over=counts[TargetStatus.OVER],
        total_days=total_days,
        adherence_pct=round_half_up(100 * counts[TargetStatus.ON_TRACK] / total_days),
        avg_calories=round_half_up(total_calories / total_days),
        avg_protein=round_half_up(total_protein / total_days),
    )
