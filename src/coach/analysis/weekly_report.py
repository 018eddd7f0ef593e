"""
WeeklyReport assembler.

Runs every analyzer over one snapshot of a user's logs and bundles the results
into a WeeklyReport, the single object a report job forwards to the coaching
narrative service. The records are supplied by the caller; nothing here touches
storage or reads a clock.
"""
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import List, Optional, Sequence

from coach.analysis.nutrition import WeeklyAdherence, weekly_adherence
from coach.analysis.records import (
    ActivityRecord,
    MeasurementRecord,
    NutritionRecord,
    SessionRecord,
)
from coach.analysis.recovery import (
    RecoveryContext,
    WeeklyActivityStats,
    recovery_context,
    weekly_activity_stats,
)
from coach.analysis.streaks import StreakResult, calculate_streaks
from coach.analysis.weight import WeightTrend, filter_window, weight_trend


@dataclass(frozen=True)
class WeeklyReport:
    """
    Complete derived metrics for one week.

    Produced by build_weekly_report() and consumed by the narrative layer.
    """
    week_start: date
    week_end: date                      # exclusive
    workouts_completed: int
    streaks: StreakResult
    nutrition: WeeklyAdherence
    recovery: RecoveryContext
    activity_stats: WeeklyActivityStats
    weight_trend: WeightTrend

    # Weight change across measurements taken inside the week (None if none)
    week_start_weight: Optional[float] = None
    week_end_weight: Optional[float] = None

    @property
    def week_weight_change(self) -> float:
        if self.week_start_weight is None or self.week_end_weight is None:
            return 0.0
        return self.week_end_weight - self.week_start_weight


def _in_week(moment: datetime, week_start: date, week_end: date) -> bool:
    return week_start <= moment.date() < week_end


def build_weekly_report(
    sessions: Sequence[SessionRecord],
    activities: Sequence[ActivityRecord],
    nutrition: Sequence[NutritionRecord],
    measurements: Sequence[MeasurementRecord],
    week_start: date,
    now: datetime,
    target_calories: int,
    weight_window_days: int = 30,
) -> WeeklyReport:
    """
    Assemble a WeeklyReport for the week beginning `week_start`.

    Args:
        sessions, activities, nutrition, measurements: The user's raw logs,
            already normalized into records.
        week_start: First day of the reporting week.
        now: Reference instant for streak, recovery and weight-trend windows.
        target_calories: Resolved daily calorie target.
        weight_window_days: Length of the weight-trend window ending at `now`.

    Returns:
        WeeklyReport with every analyzer's result.
    """
    week_end = week_start + timedelta(days=7)

    workouts_completed = sum(
        1 for s in sessions
        if s.is_completed and _in_week(s.started_at, week_start, week_end)
    )

    week_weights: List[MeasurementRecord] = sorted(
        (m for m in measurements if _in_week(m.measured_at, week_start, week_end)),
        key=lambda m: m.measured_at,
    )
    trend_window = filter_window(measurements, now, weight_window_days)

    return WeeklyReport(
        week_start=week_start,
        week_end=week_end,
        workouts_completed=workouts_completed,
        streaks=calculate_streaks(sessions, now.date()),
        nutrition=weekly_adherence(nutrition, target_calories, week_start),
        recovery=recovery_context(activities, now),
        activity_stats=weekly_activity_stats(activities, now),
        weight_trend=weight_trend(trend_window, weight_window_days),
        week_start_weight=week_weights[0].weight if week_weights else None,
        week_end_weight=week_weights[-1].weight if week_weights else None,
    )
