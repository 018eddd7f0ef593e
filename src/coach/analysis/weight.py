"""
Body-weight trend over a window of measurements.

The weekly rate is a straight line through the first and last measurement of
the window, scaled to 7 days. Intermediate readings do not affect it, so a
noisy week with the same endpoints reports the same rate as a smooth one.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Tuple

from coach.analysis.records import MeasurementRecord

MAINTAIN_THRESHOLD = 0.1    # lbs/week either side of zero


class TrendDirection(str, Enum):
    LOSING = "losing"
    GAINING = "gaining"
    MAINTAINING = "maintaining"
    INSUFFICIENT_DATA = "insufficient_data"


@dataclass(frozen=True)
class WeightTrend:
    """Linear weekly rate of weight change with a readable label."""
    weekly_rate_of_change: float     # lbs/week, negative when losing
    label: str
    direction: TrendDirection
    start_weight: Optional[float] = None
    end_weight: Optional[float] = None
    measurement_count: int = 0


def filter_window(
    measurements: Iterable[MeasurementRecord],
    now: datetime,
    window_days: int,
) -> List[MeasurementRecord]:
    """Measurements taken within `window_days` before `now`, oldest first."""
    start = now - timedelta(days=window_days)
    return sorted(
        (m for m in measurements if start <= m.measured_at <= now),
        key=lambda m: m.measured_at,
    )


def _label(rate: float) -> Tuple[TrendDirection, str]:
    if rate < -MAINTAIN_THRESHOLD:
        return TrendDirection.LOSING, f"losing {abs(rate):.1f} lbs/week"
    if rate > MAINTAIN_THRESHOLD:
        return TrendDirection.GAINING, f"gaining {rate:.1f} lbs/week"
    return TrendDirection.MAINTAINING, f"maintaining {abs(rate):.1f} lbs/week"


def weight_trend(measurements: Sequence[MeasurementRecord], window_days: int) -> WeightTrend:
    """
    Compute the weekly rate of change across a measurement window.

    Args:
        measurements: Measurements already filtered to the window and sorted
                      ascending by measured_at (see filter_window).
        window_days: Length of the window the measurements were drawn from.

    Returns:
        WeightTrend. Fewer than two measurements gives rate 0.0 and an
        "insufficient data" label.
    """
    if window_days <= 0:
        raise ValueError(f"window_days must be positive, got {window_days}")

    if len(measurements) < 2:
        return WeightTrend(
            weekly_rate_of_change=0.0,
            label="insufficient data",
            direction=TrendDirection.INSUFFICIENT_DATA,
            measurement_count=len(measurements),
        )

    first, last = measurements[0].weight, measurements[-1].weight
    rate = (last - first) / window_days * 7
    direction, label = _label(rate)
    return WeightTrend(
        weekly_rate_of_change=rate,
        label=label,
        direction=direction,
        start_weight=first,
        end_weight=last,
        measurement_count=len(measurements),
    )
