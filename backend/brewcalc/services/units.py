"""Parsers for the free-form quantities brewers type into recipes.

Recipes arrive from many tools, so every parser degrades to a documented
default instead of raising. Each ``parse_*`` function returns a
:class:`ParseResult` (:class:`TemperatureResult` for temperatures) whose
``defaulted`` flag tells callers whether the value was read from the input or
substituted.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Literal

from brewcalc.core.config import DEFAULTS, CalculationDefaults

UnitSystem = Literal["metric", "imperial"]
GravityScale = Literal["SG", "Plato", "Brix"]

LITERS_PER_GALLON = 3.78541
KG_PER_POUND = 0.453592
KG_PER_OUNCE = 0.0283495
EBC_PER_SRM = 1.97

_LEADING_NUMBER = re.compile(r"^\s*([+-]?(?:\d+(?:\.\d*)?|\.\d+))")
_VOLUME = re.compile(r"([\d.]+)\s*(liters|liter|l|gallons|gallon|gal)")
_WEIGHT = re.compile(r"([\d.]+)\s*(kilograms|kilogram|kg|grams|gram|g|pounds|pound|lbs|lb|ounces|ounce|oz)")
_TEMPERATURE = re.compile(r"([\d.]+)\s*°?\s*(celsius|fahrenheit|c|f)", re.IGNORECASE)
_DURATION = re.compile(r"([\d.]+)\s*(minutes|minute|min|hours|hour|h)")
_PLATO = re.compile(r"([\d.]+)\s*°?\s*(plato|brix|bx|p)", re.IGNORECASE)
_SPECIFIC_GRAVITY = re.compile(r"(1\.\d{3})")

_WEIGHT_FACTORS_KG = {
    "kilograms": 1.0,
    "kilogram": 1.0,
    "kg": 1.0,
    "grams": 0.001,
    "gram": 0.001,
    "g": 0.001,
    "pounds": KG_PER_POUND,
    "pound": KG_PER_POUND,
    "lbs": KG_PER_POUND,
    "lb": KG_PER_POUND,
    "ounces": KG_PER_OUNCE,
    "ounce": KG_PER_OUNCE,
    "oz": KG_PER_OUNCE,
}


@dataclass(frozen=True)
class ParseResult:
    value: float
    defaulted: bool = False


@dataclass(frozen=True)
class TemperatureResult:
    """Temperatures have no absolute fallback; relative entries stay ``None``."""

    value: float | None
    defaulted: bool = False


def leading_float(text: str) -> float | None:
    """Read the numeric prefix of ``text`` the way a lenient form field would."""
    match = _LEADING_NUMBER.match(text)
    if not match:
        return None
    try:
        return float(match.group(1))
    except ValueError:
        return None


def _coerce_text(value: str | float | int | None) -> str:
    if value is None:
        return ""
    return str(value).strip()


def parse_volume(
    text: str | float | int | None,
    unit_system: UnitSystem = "metric",
    *,
    defaults: CalculationDefaults = DEFAULTS,
) -> ParseResult:
    cleaned = _coerce_text(text).lower()
    if not cleaned:
        return ParseResult(defaults.volume_liters, defaulted=True)

    match = _VOLUME.search(cleaned)
    if match:
        value = leading_float(match.group(1))
        if value is not None:
            if match.group(2).startswith("gal"):
                return ParseResult(value * LITERS_PER_GALLON)
            return ParseResult(value)

    number = leading_float(cleaned)
    if number is not None:
        if unit_system == "imperial":
            return ParseResult(number * LITERS_PER_GALLON)
        return ParseResult(number)

    return ParseResult(defaults.volume_liters, defaulted=True)


def parse_weight(value: str | float | int | None) -> ParseResult:
    # Plain numbers are always grams.
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return ParseResult(float(value) / 1000)

    cleaned = _coerce_text(value).lower()
    if not cleaned:
        return ParseResult(0.0, defaulted=True)

    match = _WEIGHT.search(cleaned)
    if match:
        amount = leading_float(match.group(1))
        if amount is not None:
            return ParseResult(amount * _WEIGHT_FACTORS_KG[match.group(2)])

    number = leading_float(cleaned)
    if number is not None:
        return ParseResult(number / 1000)

    return ParseResult(0.0, defaulted=True)


def _valid_celsius(value: float) -> float | None:
    if 0 < value < 200:
        return value
    return None


def parse_temperature(text: str | float | int | None) -> TemperatureResult:
    """Parse an absolute temperature in Celsius.

    Relative entries such as ``"+3°C"`` or ``"Target Mash Temp + 3°C"`` yield
    ``None`` so the caller can apply them to its own base temperature.
    """
    cleaned = _coerce_text(text)
    if not cleaned:
        return TemperatureResult(None, defaulted=True)

    if cleaned.startswith(("+", "-")):
        return TemperatureResult(None, defaulted=True)
    if "target" in cleaned.lower() or "+" in cleaned:
        return TemperatureResult(None, defaulted=True)

    match = _TEMPERATURE.search(cleaned)
    if match:
        value = leading_float(match.group(1))
        if value is None:
            return TemperatureResult(None, defaulted=True)
        if match.group(2).lower().startswith("f"):
            value = (value - 32) * 5 / 9
        celsius = _valid_celsius(value)
        return TemperatureResult(celsius, defaulted=celsius is None)

    number = leading_float(cleaned)
    if number is None:
        return TemperatureResult(None, defaulted=True)
    celsius = _valid_celsius(number)
    return TemperatureResult(celsius, defaulted=celsius is None)


def parse_duration(text: str | float | int | None) -> ParseResult:
    cleaned = _coerce_text(text).lower()
    if not cleaned:
        return ParseResult(0.0, defaulted=True)

    match = _DURATION.search(cleaned)
    if match:
        value = leading_float(match.group(1))
        if value is not None:
            if match.group(2).startswith("h"):
                return ParseResult(value * 60)
            return ParseResult(value)

    number = leading_float(cleaned)
    if number is not None:
        return ParseResult(number)
    return ParseResult(0.0, defaulted=True)


def plato_to_specific_gravity(plato: float) -> float:
    return 1 + (plato / (258.6 - (plato / 258.2) * 227.1))


def gravity_to_specific_gravity(
    text: str | float | int | None,
    *,
    defaults: CalculationDefaults = DEFAULTS,
) -> ParseResult:
    cleaned = _coerce_text(text)
    if not cleaned:
        return ParseResult(defaults.original_gravity, defaulted=True)

    plato_match = _PLATO.search(cleaned)
    if plato_match:
        plato = leading_float(plato_match.group(1))
        if plato is not None:
            return ParseResult(plato_to_specific_gravity(plato))

    sg_match = _SPECIFIC_GRAVITY.search(cleaned)
    if sg_match:
        return ParseResult(float(sg_match.group(1)))

    number = leading_float(cleaned)
    if number is not None:
        if 1 < number < 2:
            return ParseResult(number)
        if number < 30:
            return ParseResult(plato_to_specific_gravity(number))

    return ParseResult(defaults.original_gravity, defaulted=True)


def measurement_to_specific_gravity(value: float, scale: GravityScale = "SG") -> float:
    """Convert a brew-day hydrometer or refractometer reading to SG.

    Uses the quick ``1 + reading / 250`` rule for Plato and Brix.
    """
    if scale == "SG":
        return value
    return 1 + (value / 250)


def srm_to_ebc(srm: float) -> float:
    return srm * EBC_PER_SRM


def format_beer_color(srm: str | float | int | None, unit_system: UnitSystem = "metric") -> str:
    try:
        value = float(_coerce_text(srm))
    except ValueError:
        return "N/A"
    if not math.isfinite(value):
        return "N/A"

    if unit_system == "imperial":
        return f"{_round_half_up(value)} SRM"
    return f"{_round_half_up(srm_to_ebc(value))} EBC"


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def volume_to_liters(
    text: str | float | int | None,
    unit_system: UnitSystem = "metric",
    *,
    defaults: CalculationDefaults = DEFAULTS,
) -> float:
    return parse_volume(text, unit_system, defaults=defaults).value


def weight_to_kilograms(value: str | float | int | None) -> float:
    return parse_weight(value).value


def temperature_to_celsius(text: str | float | int | None) -> float | None:
    return parse_temperature(text).value


def duration_to_minutes(text: str | float | int | None) -> float:
    return parse_duration(text).value
