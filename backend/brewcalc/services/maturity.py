from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Literal

MaturityStatus = Literal["maturing", "optimal", "overaged"]

_DEFAULT_WINDOW = (28, 90)

# Checked in order; the first matching pattern wins.
_STYLE_WINDOWS: tuple[tuple[re.Pattern[str], tuple[int, int]], ...] = (
    (re.compile(r"pale ale|ipa|wheat|wit|hefeweizen|kölsch|cream ale|blonde"), (14, 60)),
    (re.compile(r"amber|brown|porter|stout|esb|bitter"), (21, 90)),
    (re.compile(r"lager|pilsner|bock|doppelbock|marzen|oktoberfest"), (28, 120)),
    (re.compile(r"barleywine|imperial|double|triple|quad|belgian strong|old ale"), (70, 180)),
    (re.compile(r"sour|wild|lambic|gueuze|berliner weisse"), (90, 365)),
)


@dataclass(frozen=True)
class MaturityInfo:
    days_min: int
    days_max: int
    ready_on: date
    expires_on: date
    days_since_bottling: int
    days_until_ready: int
    days_until_expiry: int
    status: MaturityStatus


def maturity_days_for_style(style: str | None) -> tuple[int, int]:
    """Conditioning window in days for recipes that do not declare one."""
    if not style:
        return _DEFAULT_WINDOW
    lowered = style.lower()
    for pattern, window in _STYLE_WINDOWS:
        if pattern.search(lowered):
            return window
    return _DEFAULT_WINDOW


def calculate_maturity(
    bottled_on: date | None,
    *,
    conditioning_days_min: int | None = None,
    conditioning_days_max: int | None = None,
    style: str | None = None,
    today: date | None = None,
) -> MaturityInfo | None:
    if bottled_on is None:
        return None

    if conditioning_days_min is not None and conditioning_days_max is not None:
        days_min, days_max = conditioning_days_min, conditioning_days_max
    else:
        days_min, days_max = maturity_days_for_style(style)

    today = today or date.today()
    days_since = (today - bottled_on).days

    status: MaturityStatus
    if days_since < days_min:
        status = "maturing"
    elif days_since <= days_max:
        status = "optimal"
    else:
        status = "overaged"

    return MaturityInfo(
        days_min=days_min,
        days_max=days_max,
        ready_on=bottled_on + timedelta(days=days_min),
        expires_on=bottled_on + timedelta(days=days_max),
        days_since_bottling=days_since,
        days_until_ready=days_min - days_since,
        days_until_expiry=days_max - days_since,
        status=status,
    )
