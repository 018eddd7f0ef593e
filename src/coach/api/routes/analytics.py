"""Analytics routes: one POST endpoint per analyzer.

Request bodies carry raw rows plus the explicit reference dates the analyzers
need. Rows are validated by coach.normalizer; an unset calorie target is
resolved from settings here, before any analyzer runs.
"""
from datetime import date, datetime, time
from typing import Any, Callable, Dict, List, Optional, TypeVar

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from coach.analysis.nutrition import (
    DailyNutritionSummary,
    WeeklyAdherence,
    daily_summary,
    weekly_adherence,
)
from coach.analysis.recovery import (
    RecoveryContext,
    WeeklyActivityStats,
    recovery_context,
    weekly_activity_stats,
)
from coach.analysis.streaks import StreakResult, calculate_streaks
from coach.analysis.weekly_report import WeeklyReport, build_weekly_report
from coach.analysis.weight import WeightTrend, filter_window, weight_trend
from coach.config import Settings, get_settings, resolve_calorie_target
from coach.normalizer import (
    InvalidRecordError,
    normalize_activities,
    normalize_measurements,
    normalize_nutrition_logs,
    normalize_sessions,
    parse_timestamp,
)

router = APIRouter()

Rows = List[Dict[str, Any]]
T = TypeVar("T")


class StreaksRequest(BaseModel):
    sessions: Rows = Field(default_factory=list)
    today: date


class DailyNutritionRequest(BaseModel):
    records: Rows = Field(default_factory=list)
    date: date
    target_calories: Optional[int] = None


class WeeklyAdherenceRequest(BaseModel):
    records: Rows = Field(default_factory=list)
    window_start: date
    target_calories: Optional[int] = None


class RecoveryRequest(BaseModel):
    activities: Rows = Field(default_factory=list)
    now: datetime


class WeightTrendRequest(BaseModel):
    measurements: Rows = Field(default_factory=list)
    now: datetime
    window_days: Optional[int] = Field(default=None, gt=0)


class WeeklyReportRequest(BaseModel):
    sessions: Rows = Field(default_factory=list)
    activities: Rows = Field(default_factory=list)
    nutrition: Rows = Field(default_factory=list)
    measurements: Rows = Field(default_factory=list)
    week_start: date
    now: datetime
    target_calories: Optional[int] = None
    weight_window_days: Optional[int] = Field(default=None, gt=0)


def _validated(compute: Callable[[], T]) -> T:
    """Run `compute`, turning rejected rows or parameters into a 422."""
    try:
        return compute()
    except (InvalidRecordError, ValueError) as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc


def _reference_instant(now: datetime) -> datetime:
    """`now` as naive UTC, comparable with normalized row timestamps."""
    return parse_timestamp(now, "now")


@router.post("/streaks", response_model=StreakResult)
def post_streaks(payload: StreaksRequest):
    """Current and longest workout streaks."""
    end_of_today = datetime.combine(payload.today, time.max)
    return _validated(lambda: calculate_streaks(
        normalize_sessions(payload.sessions, now=end_of_today),
        payload.today,
    ))


@router.post("/nutrition/daily", response_model=DailyNutritionSummary)
def post_daily_nutrition(
    payload: DailyNutritionRequest,
    settings: Settings = Depends(get_settings),
):
    """Macro totals and target status for one day."""
    target = resolve_calorie_target(payload.target_calories, settings)
    return _validated(lambda: daily_summary(
        normalize_nutrition_logs(payload.records),
        payload.date,
        target,
    ))


@router.post("/nutrition/weekly", response_model=WeeklyAdherence)
def post_weekly_adherence(
    payload: WeeklyAdherenceRequest,
    settings: Settings = Depends(get_settings),
):
    """Calorie adherence over the 7 days starting at window_start."""
    target = resolve_calorie_target(payload.target_calories, settings)
    return _validated(lambda: weekly_adherence(
        normalize_nutrition_logs(payload.records),
        target,
        payload.window_start,
    ))


@router.post("/recovery", response_model=RecoveryContext)
def post_recovery(payload: RecoveryRequest):
    """Weekly intensity score and recovery recommendation."""
    now = _reference_instant(payload.now)
    return _validated(lambda: recovery_context(
        normalize_activities(payload.activities, now=now),
        now,
    ))


@router.post("/activity-stats", response_model=WeeklyActivityStats)
def post_activity_stats(payload: RecoveryRequest):
    """Session counts and average intensity for the trailing week."""
    now = _reference_instant(payload.now)
    return _validated(lambda: weekly_activity_stats(
        normalize_activities(payload.activities, now=now),
        now,
    ))


@router.post("/weight-trend", response_model=WeightTrend)
def post_weight_trend(
    payload: WeightTrendRequest,
    settings: Settings = Depends(get_settings),
):
    """Weekly rate of weight change over the trailing window."""
    window_days = payload.window_days or settings.weight_trend_window_days
    now = _reference_instant(payload.now)

    def compute() -> WeightTrend:
        measurements = normalize_measurements(payload.measurements, now=now)
        return weight_trend(filter_window(measurements, now, window_days), window_days)

    return _validated(compute)


@router.post("/weekly-report", response_model=WeeklyReport)
def post_weekly_report(
    payload: WeeklyReportRequest,
    settings: Settings = Depends(get_settings),
):
    """Every derived metric for one week, bundled for the narrative service."""
    now = _reference_instant(payload.now)

    def compute() -> WeeklyReport:
        return build_weekly_report(
            sessions=normalize_sessions(payload.sessions, now=now),
            activities=normalize_activities(payload.activities, now=now),
            nutrition=normalize_nutrition_logs(payload.nutrition, now=now),
            measurements=normalize_measurements(payload.measurements, now=now),
            week_start=payload.week_start,
            now=now,
            target_calories=resolve_calorie_target(payload.target_calories, settings),
            weight_window_days=payload.weight_window_days or settings.weight_trend_window_days,
        )

    return _validated(compute)
