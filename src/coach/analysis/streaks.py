"""
Workout streaks: consecutive calendar days with at least one completed session.

The current streak stays alive while the most recent workout day is today or
yesterday, so a user who has not trained yet today still sees yesterday's
streak. The longest-streak walk gets no such grace: it only measures runs of
consecutive days actually present in the log.

"today" is always passed in by the caller; nothing here reads a clock.
"""
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, List, Optional

from coach.analysis.records import SessionRecord

ONE_DAY = timedelta(days=1)


@dataclass(frozen=True)
class StreakResult:
    """Current and longest workout streaks."""
    current_streak: int
    longest_streak: int                 # always >= current_streak
    last_active_date: Optional[date]    # None if no completed sessions


def completed_workout_dates(sessions: Iterable[SessionRecord]) -> List[date]:
    """Distinct calendar dates with a completed session, newest first."""
    return sorted(
        {s.started_at.date() for s in sessions if s.is_completed},
        reverse=True,
    )


def _current_streak(dates: List[date], today: date) -> int:
    if not dates or dates[0] not in (today, today - ONE_DAY):
        return 0

    streak = 1
    for previous, current in zip(dates, dates[1:]):
        if previous - current != ONE_DAY:
            break
        streak += 1
    return streak


def _longest_run(dates: List[date]) -> int:
    if not dates:
        return 0

    longest = run = 1
    for previous, current in zip(dates, dates[1:]):
        run = run + 1 if previous - current == ONE_DAY else 1
        longest = max(longest, run)
    return longest


def calculate_streaks(sessions: Iterable[SessionRecord], today: date) -> StreakResult:
    """
    Compute current and longest streaks from workout sessions.

    Args:
        sessions: Session records in any order. Incomplete sessions are ignored.
        today: The user's current local date.

    Returns:
        StreakResult; (0, 0, None) when there are no completed sessions.
    """
    dates = completed_workout_dates(sessions)
    if not dates:
        return StreakResult(current_streak=0, longest_streak=0, last_active_date=None)

    current = _current_streak(dates, today)
    return StreakResult(
        current_streak=current,
        longest_streak=max(_longest_run(dates), current),
        last_active_date=dates[0],
    )
