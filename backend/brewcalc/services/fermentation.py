from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Literal

from brewcalc.core.config import DEFAULTS, CalculationDefaults

ReadingSource = Literal["manual", "device"]

_SECONDS_PER_DAY = 86400
_PLATEAU_WINDOW = 0.0015
_PLATEAU_MIN_GRAVITY = 1.020
_LOW_TEMP_C = 16.0
_HIGH_TEMP_C = 24.0


@dataclass(frozen=True)
class GravityReading:
    timestamp: datetime
    gravity: float
    temperature_c: float | None = None
    source: ReadingSource = "manual"


@dataclass(frozen=True)
class FermentationPrediction:
    days_remaining: int
    estimated_completion: datetime
    daily_gravity_drop: float
    latest_gravity: float
    target_gravity: float


@dataclass(frozen=True)
class FermentationTrend:
    reading_count: int
    first_recorded_at: datetime | None
    latest_recorded_at: datetime | None
    latest_gravity: float | None
    latest_temperature_c: float | None
    gravity_drop: float | None
    average_hourly_gravity_drop: float | None
    plateau_risk: bool
    temperature_warning: bool
    alerts: tuple[str, ...]


def _utc(timestamp: datetime) -> datetime:
    # Naive timestamps are taken to be UTC so device and manual readings compare.
    if timestamp.tzinfo is None:
        return timestamp.replace(tzinfo=timezone.utc)
    return timestamp.astimezone(timezone.utc)


def sort_readings(readings: Sequence[GravityReading]) -> list[GravityReading]:
    return sorted(readings, key=lambda reading: _utc(reading.timestamp))


def _elapsed_seconds(start: GravityReading, end: GravityReading) -> float:
    return (_utc(end.timestamp) - _utc(start.timestamp)).total_seconds()


def _extrapolate(
    readings: Sequence[GravityReading],
    target_gravity: float,
    defaults: CalculationDefaults,
) -> tuple[int, float, GravityReading] | None:
    if len(readings) < 2:
        return None

    ordered = sort_readings(readings)
    second_last, last = ordered[-2], ordered[-1]
    elapsed_days = _elapsed_seconds(second_last, last) / _SECONDS_PER_DAY
    if elapsed_days <= 0:
        return None

    daily_drop = (second_last.gravity - last.gravity) / elapsed_days
    if daily_drop <= 0 or daily_drop < defaults.min_daily_gravity_drop:
        return None

    remaining = last.gravity - target_gravity
    days_remaining = 0 if remaining <= 0 else math.ceil(remaining / daily_drop)
    return days_remaining, daily_drop, last


def predict_days_remaining(
    readings: Sequence[GravityReading],
    target_gravity: float,
    *,
    defaults: CalculationDefaults = DEFAULTS,
) -> int | None:
    """Extrapolate the last two readings to the day fermentation reaches target.

    Returns ``None`` when fewer than two readings exist, when both share a
    timestamp, or when gravity is rising or falling by less than the stall
    threshold (0.001 per day). Only the two most recent readings are used.
    """
    extrapolated = _extrapolate(readings, target_gravity, defaults)
    return extrapolated[0] if extrapolated else None


def estimate_completion_date(
    readings: Sequence[GravityReading],
    target_gravity: float,
    *,
    defaults: CalculationDefaults = DEFAULTS,
) -> datetime | None:
    prediction = predict_completion(readings, target_gravity, defaults=defaults)
    return prediction.estimated_completion if prediction else None


def predict_completion(
    readings: Sequence[GravityReading],
    target_gravity: float,
    *,
    defaults: CalculationDefaults = DEFAULTS,
) -> FermentationPrediction | None:
    extrapolated = _extrapolate(readings, target_gravity, defaults)
    if extrapolated is None:
        return None

    days_remaining, daily_drop, latest = extrapolated
    return FermentationPrediction(
        days_remaining=days_remaining,
        estimated_completion=latest.timestamp + timedelta(days=days_remaining),
        daily_gravity_drop=round(daily_drop, 5),
        latest_gravity=latest.gravity,
        target_gravity=target_gravity,
    )


def build_fermentation_trend(readings: Sequence[GravityReading]) -> FermentationTrend:
    ordered = sort_readings(readings)
    latest = ordered[-1] if ordered else None

    gravity_drop: float | None = None
    average_hourly_gravity_drop: float | None = None
    if len(ordered) >= 2:
        first, last = ordered[0], ordered[-1]
        raw_drop = first.gravity - last.gravity
        gravity_drop = round(raw_drop, 4)

        elapsed_hours = _elapsed_seconds(first, last) / 3600
        if elapsed_hours > 0:
            average_hourly_gravity_drop = round(raw_drop / elapsed_hours, 5)

    plateau_risk = False
    if len(ordered) >= 3:
        window = [reading.gravity for reading in ordered[-3:]]
        plateau_risk = max(window) - min(window) <= _PLATEAU_WINDOW and window[-1] > _PLATEAU_MIN_GRAVITY

    latest_temp = latest.temperature_c if latest else None
    temperature_warning = latest_temp is not None and (latest_temp < _LOW_TEMP_C or latest_temp > _HIGH_TEMP_C)

    alerts: list[str] = []
    if not ordered:
        alerts.append("No gravity readings logged yet.")
    else:
        if plateau_risk:
            alerts.append("Gravity has flattened recently while still high. Check yeast health and fermentation conditions.")

        if latest_temp is not None and latest_temp > _HIGH_TEMP_C:
            alerts.append("Latest fermentation temperature is high for many ale profiles.")
        elif latest_temp is not None and latest_temp < _LOW_TEMP_C:
            alerts.append("Latest fermentation temperature is low and may slow yeast activity.")

        if not alerts:
            alerts.append("Fermentation trend appears stable.")

    return FermentationTrend(
        reading_count=len(ordered),
        first_recorded_at=ordered[0].timestamp if ordered else None,
        latest_recorded_at=latest.timestamp if latest else None,
        latest_gravity=latest.gravity if latest else None,
        latest_temperature_c=latest_temp,
        gravity_drop=gravity_drop,
        average_hourly_gravity_drop=average_hourly_gravity_drop,
        plateau_risk=plateau_risk,
        temperature_warning=temperature_warning,
        alerts=tuple(alerts),
    )
