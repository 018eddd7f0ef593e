"""
Raw row normalizer.

Converts row dicts, as the persistence layer returns them (snake_case keys,
ISO 8601 strings for dates and timestamps), into the typed records consumed by
coach.analysis. This is the only place input is validated: the analyzers
assume every record they receive has already passed through here.

Rejected rows raise InvalidRecordError:
  - missing required field or unparseable date/timestamp
  - unknown activity type or intensity
  - negative duration, calories or macros
  - non-finite or non-positive body weight
  - dated after the caller-supplied `now`

Timestamps carrying a UTC offset are converted to naive UTC, matching how
naive timestamps are interpreted everywhere else in the package.
"""
import logging
import math
from datetime import date, datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, Optional, TypeVar

from coach.analysis.records import (
    ActivityRecord,
    ActivityType,
    Intensity,
    MeasurementRecord,
    NutritionRecord,
    SessionRecord,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class InvalidRecordError(ValueError):
    """Raised when a raw row cannot be turned into a valid record."""


# ── Field parsers ─────────────────────────────────────────────────────────────

def _require(raw: Dict[str, Any], key: str) -> Any:
    value = raw.get(key)
    if value is None:
        raise InvalidRecordError(
            f"Missing required field '{key}'. Keys present: {sorted(raw.keys())}"
        )
    return value


def parse_timestamp(value: Any, key: str = "timestamp") -> datetime:
    """Parse an ISO 8601 timestamp (a trailing 'Z' is accepted)."""
    if isinstance(value, datetime):
        parsed = value
    else:
        try:
            parsed = datetime.fromisoformat(str(value).strip().replace("Z", "+00:00"))
        except ValueError as exc:
            raise InvalidRecordError(f"Invalid timestamp for '{key}': {value!r}") from exc

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def _parse_date(value: Any, key: str) -> date:
    """Parse "YYYY-MM-DD"; a full timestamp is reduced to its date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    try:
        return datetime.strptime(text[:10], "%Y-%m-%d").date()
    except ValueError as exc:
        raise InvalidRecordError(f"Invalid date for '{key}': {value!r}") from exc


def _parse_number(value: Any, key: str, allow_negative: bool = False) -> float:
    if isinstance(value, bool):
        raise InvalidRecordError(f"Field '{key}' must be a number, got {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidRecordError(f"Field '{key}' must be a number, got {value!r}") from exc
    if not math.isfinite(number):
        raise InvalidRecordError(f"Field '{key}' must be finite, got {value!r}")
    if number < 0 and not allow_negative:
        raise InvalidRecordError(f"Field '{key}' must not be negative, got {value!r}")
    return number


def _optional_number(raw: Dict[str, Any], key: str) -> Optional[float]:
    value = raw.get(key)
    return None if value is None else _parse_number(value, key)


def _parse_enum(enum_cls, value: Any, key: str):
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError as exc:
        allowed = ", ".join(m.value for m in enum_cls)
        raise InvalidRecordError(
            f"Field '{key}' must be one of {allowed}; got {value!r}"
        ) from exc


def _reject_future(moment: date, now: Optional[datetime], key: str) -> None:
    if now is None:
        return
    limit = now if isinstance(moment, datetime) else now.date()
    if moment > limit:
        raise InvalidRecordError(f"Field '{key}' is in the future: {moment.isoformat()}")


# ── Record normalizers ────────────────────────────────────────────────────────

def normalize_session(raw: Dict[str, Any], now: Optional[datetime] = None) -> SessionRecord:
    """
    Normalize a workout session row into a SessionRecord.

    Args:
        raw: Row with 'started_at' and optional 'completed_at'.
        now: When given, sessions starting after it are rejected.
    """
    started_at = parse_timestamp(_require(raw, "started_at"), "started_at")
    _reject_future(started_at, now, "started_at")

    completed_raw = raw.get("completed_at")
    completed_at = None
    if completed_raw is not None:
        completed_at = parse_timestamp(completed_raw, "completed_at")
        if completed_at < started_at:
            raise InvalidRecordError("Session 'completed_at' is before 'started_at'")

    return SessionRecord(started_at=started_at, completed_at=completed_at)


def normalize_activity(raw: Dict[str, Any], now: Optional[datetime] = None) -> ActivityRecord:
    """Normalize an activity log row into an ActivityRecord."""
    activity_date = _parse_date(_require(raw, "date"), "date")
    _reject_future(activity_date, now, "date")

    duration = _optional_number(raw, "duration_minutes")
    return ActivityRecord(
        date=activity_date,
        activity_type=_parse_enum(ActivityType, _require(raw, "activity_type"), "activity_type"),
        intensity=_parse_enum(Intensity, _require(raw, "intensity"), "intensity"),
        duration_minutes=int(duration) if duration is not None else None,
    )


def normalize_nutrition(raw: Dict[str, Any], now: Optional[datetime] = None) -> NutritionRecord:
    """Normalize a meal log row into a NutritionRecord."""
    meal_date = _parse_date(_require(raw, "date"), "date")
    _reject_future(meal_date, now, "date")

    meal_name = raw.get("meal_name")
    return NutritionRecord(
        date=meal_date,
        calories=int(round(_parse_number(_require(raw, "calories"), "calories"))),
        protein=_optional_number(raw, "protein"),
        carbs=_optional_number(raw, "carbs"),
        fats=_optional_number(raw, "fats"),
        meal_name=str(meal_name) if meal_name else None,
    )


def normalize_measurement(raw: Dict[str, Any], now: Optional[datetime] = None) -> MeasurementRecord:
    """Normalize a body measurement row into a MeasurementRecord."""
    measured_at = parse_timestamp(_require(raw, "measured_at"), "measured_at")
    _reject_future(measured_at, now, "measured_at")

    weight = _parse_number(_require(raw, "weight"), "weight")
    if weight <= 0:
        raise InvalidRecordError(f"Field 'weight' must be positive, got {weight!r}")
    return MeasurementRecord(measured_at=measured_at, weight=weight)


def _normalize_rows(
    rows: Iterable[Dict[str, Any]],
    normalize: Callable[[Dict[str, Any], Optional[datetime]], T],
    now: Optional[datetime],
) -> List[T]:
    records = []
    for index, raw in enumerate(rows):
        try:
            records.append(normalize(raw, now))
        except InvalidRecordError as exc:
            logger.warning("Rejected %s row %d: %s", normalize.__name__, index, exc)
            raise InvalidRecordError(f"Row {index}: {exc}") from exc
    return records


def normalize_sessions(rows: Iterable[Dict[str, Any]], now: Optional[datetime] = None) -> List[SessionRecord]:
    return _normalize_rows(rows, normalize_session, now)


def normalize_activities(rows: Iterable[Dict[str, Any]], now: Optional[datetime] = None) -> List[ActivityRecord]:
    return _normalize_rows(rows, normalize_activity, now)


def normalize_nutrition_logs(rows: Iterable[Dict[str, Any]], now: Optional[datetime] = None) -> List[NutritionRecord]:
    return _normalize_rows(rows, normalize_nutrition, now)


def normalize_measurements(rows: Iterable[Dict[str, Any]], now: Optional[datetime] = None) -> List[MeasurementRecord]:
    return _normalize_rows(rows, normalize_measurement, now)
