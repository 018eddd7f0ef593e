"""
Command-line entrypoint: run the analyzers over a JSON snapshot of a user's logs.

The snapshot is a JSON object with any of the keys `sessions`, `activities`,
`nutrition`, `measurements` (lists of raw rows) and `daily_calorie_target`.

Usage:
    python -m coach streaks snapshot.json
    python -m coach nutrition snapshot.json --week-start 2026-10-12
    python -m coach recovery snapshot.json --now 2026-10-18T20:00:00
    python -m coach weight snapshot.json --window-days 30
    python -m coach report snapshot.json
    uvicorn coach.api.main:app --host 0.0.0.0 --port 8000  # starts API
"""
import argparse
import dataclasses
import json
import logging
import sys
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Any, Dict, List, Optional

from coach.analysis.nutrition import weekly_adherence
from coach.analysis.recovery import recovery_context
from coach.analysis.streaks import calculate_streaks
from coach.analysis.weekly_report import build_weekly_report
from coach.analysis.weight import filter_window, weight_trend
from coach.config import get_settings, resolve_calorie_target
from coach.normalizer import (
    normalize_activities,
    normalize_measurements,
    normalize_nutrition_logs,
    normalize_sessions,
    parse_timestamp,
)

logger = logging.getLogger(__name__)

COMMANDS = ("streaks", "nutrition", "recovery", "weight", "report")


def _json_default(value: Any) -> Any:
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _to_json(result: Any) -> str:
    return json.dumps(dataclasses.asdict(result), default=_json_default, indent=2)


def _load_snapshot(path: Path) -> Dict[str, Any]:
    with path.open(encoding="utf-8") as f:
        snapshot = json.load(f)
    if not isinstance(snapshot, dict):
        raise ValueError(f"Snapshot {path} must contain a JSON object")
    return snapshot


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="python -m coach", description=__doc__.splitlines()[1])
    parser.add_argument("command", choices=COMMANDS)
    parser.add_argument("snapshot", type=Path, help="JSON snapshot of raw rows")
    parser.add_argument(
        "--now",
        type=parse_timestamp,
        default=None,
        help="Reference instant (ISO 8601). Defaults to the current local time.",
    )
    parser.add_argument(
        "--week-start",
        type=date.fromisoformat,
        default=None,
        help="First day of the 7-day window. Defaults to six days before --now.",
    )
    parser.add_argument(
        "--window-days",
        type=int,
        default=None,
        help="Weight-trend window in days. Defaults to COACH_WEIGHT_TREND_WINDOW_DAYS.",
    )
    return parser


def run(command: str, snapshot: Dict[str, Any], now: datetime,
        week_start: date, window_days: int) -> Any:
    """Normalize the snapshot rows and run the analyzer named by `command`."""

    def rows(key: str) -> List[Dict[str, Any]]:
        return snapshot.get(key) or []

    target = resolve_calorie_target(snapshot.get("daily_calorie_target"))

    if command == "streaks":
        return calculate_streaks(normalize_sessions(rows("sessions"), now), now.date())
    if command == "nutrition":
        return weekly_adherence(normalize_nutrition_logs(rows("nutrition"), now), target, week_start)
    if command == "recovery":
        return recovery_context(normalize_activities(rows("activities"), now), now)
    if command == "weight":
        measurements = normalize_measurements(rows("measurements"), now)
        return weight_trend(filter_window(measurements, now, window_days), window_days)

    return build_weekly_report(
        sessions=normalize_sessions(rows("sessions"), now),
        activities=normalize_activities(rows("activities"), now),
        nutrition=normalize_nutrition_logs(rows("nutrition"), now),
        measurements=normalize_measurements(rows("measurements"), now),
        week_start=week_start,
        now=now,
        target_calories=target,
        weight_window_days=window_days,
    )


def main(argv: Optional[List[str]] = None) -> int:
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    args = build_parser().parse_args(argv)

    now = args.now or datetime.now()
    week_start = args.week_start or (now.date() - timedelta(days=6))
    window_days = args.window_days or settings.weight_trend_window_days

    try:
        snapshot = _load_snapshot(args.snapshot)
        result = run(args.command, snapshot, now, week_start, window_days)
    except (OSError, ValueError) as exc:
        logger.error("Could not run %s on %s: %s", args.command, args.snapshot, exc)
        return 1

    logger.info("Computed %s for %s", args.command, args.snapshot)
    print(_to_json(result))
    return 0


if __name__ == "__main__":
    sys.exit(main())
