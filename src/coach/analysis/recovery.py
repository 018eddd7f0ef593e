"""
Recovery scoring from side activities (BJJ, softball, ...).

Each activity in the trailing 7-day window contributes an intensity score
(light=1, moderate=2, hard=3). Two independent triggers flag the athlete as
needing recovery:

  - a hard session less than one full day ago
  - a cumulative weekly score above 15

Either alone is sufficient. When both hold, the same-day message wins.
"""
import logging
import math
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Dict, Iterable, List, Optional, Tuple, Union

from coach.analysis.nutrition import round_half_up
from coach.analysis.records import ActivityRecord, ActivityType, Intensity

logger = logging.getLogger(__name__)

INTENSITY_SCORES: Dict[Intensity, int] = {
    Intensity.LIGHT: 1,
    Intensity.MODERATE: 2,
    Intensity.HARD: 3,
}

WINDOW_DAYS = 7
WEEKLY_SCORE_LIMIT = 15     # strictly greater than this needs recovery
HARD_SESSION_MIN_DAYS = 1   # hard session fewer than this many days ago

RECENT_HARD_MESSAGE = "Recent hard session detected. Consider lower intensity or rest."
HIGH_LOAD_MESSAGE = "High weekly intensity. Consider a deload or active recovery."
RECOVERED_MESSAGE = "Recovery looks good. Ready for normal training intensity."


@dataclass(frozen=True)
class RecoveryContext:
    """Recovery state derived from the last 7 days of activities."""
    days_since_last_hard: Optional[int]    # None if no hard session in window
    weekly_intensity_score: int
    needs_recovery: bool
    recommendation: str
    recent_activities: Tuple[ActivityRecord, ...] = ()   # newest first


@dataclass(frozen=True)
class WeeklyActivityStats:
    """Session counts and average intensity for the trailing week."""
    total_sessions: int
    bjj_sessions: int
    softball_sessions: int
    total_minutes: int
    avg_intensity: float     # 1.0-3.0, one decimal; 0.0 when no sessions
    intensity_label: str     # "Hard", "Moderate", "Light" or "None"


def _as_datetime(now: Union[date, datetime]) -> datetime:
    if isinstance(now, datetime):
        return now
    return datetime.combine(now, time.min)


def activities_in_window(
    activities: Iterable[ActivityRecord],
    now: Union[date, datetime],
    window_days: int = WINDOW_DAYS,
) -> List[ActivityRecord]:
    """Activities dated within `window_days` before `now`, newest first."""
    today = _as_datetime(now).date()
    start = today - timedelta(days=window_days)
    return sorted(
        (a for a in activities if start <= a.date <= today),
        key=lambda a: a.date,
        reverse=True,
    )


def days_since(activity_date: date, now: Union[date, datetime]) -> int:
    """Whole days elapsed between midnight of `activity_date` and `now`."""
    elapsed = _as_datetime(now) - datetime.combine(activity_date, time.min)
    return math.floor(elapsed / timedelta(days=1))


def _recommendation(recent_hard: bool, high_load: bool) -> str:
    if recent_hard:
        return RECENT_HARD_MESSAGE
    if high_load:
        return HIGH_LOAD_MESSAGE
    return RECOVERED_MESSAGE


def recovery_context(
    activities: Iterable[ActivityRecord],
    now: Union[date, datetime],
) -> RecoveryContext:
    """
    Score the trailing week of activities and decide whether to back off.

    Args:
        activities: Activity records in any order; only the trailing 7-day
                    window relative to `now` is scored.
        now: Reference instant. A plain date is treated as its midnight.

    Returns:
        RecoveryContext. An empty window scores 0 and needs no recovery.
    """
    window = activities_in_window(activities, now)

    score = sum(INTENSITY_SCORES[a.intensity] for a in window)
    hard_dates = [a.date for a in window if a.intensity == Intensity.HARD]
    days_since_hard = days_since(max(hard_dates), now) if hard_dates else None

    recent_hard = days_since_hard is not None and days_since_hard < HARD_SESSION_MIN_DAYS
    high_load = score > WEEKLY_SCORE_LIMIT
    logger.debug(
        "Recovery: %d activities, score=%d, days_since_hard=%s",
        len(window), score, days_since_hard,
    )

    return RecoveryContext(
        days_since_last_hard=days_since_hard,
        weekly_intensity_score=score,
        needs_recovery=recent_hard or high_load,
        recommendation=_recommendation(recent_hard, high_load),
        recent_activities=tuple(window),
    )


def _intensity_label(avg: float) -> str:
    if avg >= 2.5:
        return "Hard"
    if avg >= 1.5:
        return "Moderate"
    if avg > 0:
        return "Light"
    return "None"


def weekly_activity_stats(
    activities: Iterable[ActivityRecord],
    now: Union[date, datetime],
) -> WeeklyActivityStats:
    """Count sessions per type and average intensity over the trailing week."""
    window = activities_in_window(activities, now)
    total = len(window)
    avg = sum(INTENSITY_SCORES[a.intensity] for a in window) / total if total else 0.0

    return WeeklyActivityStats(
        total_sessions=total,
        bjj_sessions=sum(1 for a in window if a.activity_type == ActivityType.BJJ),
        softball_sessions=sum(1 for a in window if a.activity_type == ActivityType.SOFTBALL),
        total_minutes=sum(a.duration_minutes or 0 for a in window),
        avg_intensity=round_half_up(avg * 10) / 10,
        intensity_label=_intensity_label(avg),
    )
