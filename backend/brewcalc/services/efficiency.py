from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Literal

from brewcalc.core.config import DEFAULTS, CalculationDefaults
from brewcalc.services.recipe_calculator import gravity_points
from brewcalc.services.recipe_normalizer import FermentableItem
from brewcalc.services.units import GravityScale, leading_float, measurement_to_specific_gravity

EfficiencyStatus = Literal["good", "ok", "poor"]

_KG = re.compile(r"([\d.]+)\s*kg", re.IGNORECASE)
_GRAMS = re.compile(r"([\d.]+)\s*g", re.IGNORECASE)
_NON_NUMERIC = re.compile(r"[^\d.]")


@dataclass(frozen=True)
class EfficiencyResult:
    efficiency_pct: float
    status: EfficiencyStatus
    total_grain_kg: float
    potential_points: float
    actual_points: float
    measured_sg: float


def total_grain_kg(fermentables: Sequence[FermentableItem]) -> float:
    total = 0.0
    for item in fermentables:
        text = item.amount if isinstance(item.amount, str) else ""
        kg_match = _KG.search(text)
        grams_match = _GRAMS.search(text)
        kg = leading_float(kg_match.group(1)) if kg_match else None
        grams = leading_float(grams_match.group(1)) if grams_match else None
        if kg is not None:
            total += kg
        elif grams is not None:
            total += grams / 1000
        elif item.amount_grams:
            total += item.amount_grams / 1000
    return total


def _reading(value: str | float | None) -> float | None:
    if value is None or value == "":
        return None
    if isinstance(value, (int, float)):
        return float(value)
    return leading_float(_NON_NUMERIC.sub("", value))


def classify_efficiency(efficiency_pct: float, *, defaults: CalculationDefaults = DEFAULTS) -> EfficiencyStatus:
    if efficiency_pct >= defaults.efficiency_good_pct:
        return "good"
    if efficiency_pct < defaults.efficiency_poor_pct:
        return "poor"
    return "ok"


def calculate_efficiency(
    fermentables: Sequence[FermentableItem],
    volume_liters: str | float | None,
    *,
    measured_sg: str | float | None = None,
    measured_plato: str | float | None = None,
    measured_brix: str | float | None = None,
    defaults: CalculationDefaults = DEFAULTS,
) -> EfficiencyResult | None:
    """Brewhouse efficiency from one post-boil gravity and volume reading.

    The gravity is taken from the first reading supplied in the order SG,
    Plato, Brix. Returns ``None`` when no usable reading, volume or grain
    weight is available.
    """
    scale: GravityScale = "SG"
    reading = _reading(measured_sg)
    if reading is None and measured_plato not in (None, ""):
        reading, scale = _reading(measured_plato), "Plato"
    if reading is None and measured_brix not in (None, ""):
        reading, scale = _reading(measured_brix), "Brix"

    if not reading or reading <= 0:
        return None

    sg = measurement_to_specific_gravity(reading, scale)
    if sg < 1:
        return None

    volume = leading_float(volume_liters) if isinstance(volume_liters, str) else volume_liters
    if volume is None or volume <= 0:
        return None

    grain_kg = total_grain_kg(fermentables)
    if grain_kg == 0:
        return None

    potential = grain_kg * defaults.potential_points_per_kg
    actual = volume * gravity_points(sg)
    efficiency = actual / potential * 100

    return EfficiencyResult(
        efficiency_pct=round(efficiency, 1),
        status=classify_efficiency(efficiency, defaults=defaults),
        total_grain_kg=round(grain_kg, 3),
        potential_points=round(potential, 1),
        actual_points=round(actual, 1),
        measured_sg=round(sg, 4),
    )
