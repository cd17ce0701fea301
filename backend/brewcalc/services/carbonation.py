from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum

from brewcalc.core.config import DEFAULTS, CalculationDefaults, settings
from brewcalc.services.units import leading_float


class ResidualModel(str, Enum):
    LEGACY = "legacy"
    CURRENT = "current"


class CarbonationMethod(str, Enum):
    SUGAR = "sugar"
    DEXTROSE = "dextrose"
    SPEISE = "speise"
    DROPS = "drops"


class CarbonationUnit(str, Enum):
    GRAMS_PER_LITER = "g/L"
    VOLUMES = "volumes"


CO2_G_PER_L_PER_VOLUME = 1.96
SUCROSE_CO2_YIELD = 0.495
DEXTROSE_CO2_YIELD = 0.50
SPEISE_EXTRACT_CO2_YIELD = 0.5
PLATO_PER_GRAVITY_POINT = 250


@dataclass(frozen=True)
class CarbonationRequest:
    target_co2: float | str | None = None
    temperature_c: float | str | None = None
    volume_liters: float | str | None = None
    method: CarbonationMethod = CarbonationMethod.SUGAR
    target_unit: CarbonationUnit = CarbonationUnit.GRAMS_PER_LITER
    measured_og: float | None = None


@dataclass(frozen=True)
class CarbonationResult:
    method: CarbonationMethod
    model: ResidualModel
    target_co2_g_per_l: float
    temperature_c: float
    volume_liters: float
    residual_co2_g_per_l: float
    needed_co2_g_per_l: float
    amount: float
    unit: str
    speise_equivalent_liters: float | None = None
    dosing_rate_g_per_l: float | None = None


def residual_co2_legacy(temperature_c: float) -> float:
    return 3.0378 - 0.05007 * temperature_c + 0.00026555 * temperature_c**2


def residual_co2_current(temperature_c: float) -> float:
    return 1.57 * 0.97**temperature_c


def residual_co2(temperature_c: float, model: ResidualModel = ResidualModel.CURRENT) -> float:
    """CO2 already dissolved in the beer (g/L) at the given temperature."""
    if model is ResidualModel.LEGACY:
        return residual_co2_legacy(temperature_c)
    return residual_co2_current(temperature_c)


def needed_co2(target_g_per_l: float, temperature_c: float, model: ResidualModel = ResidualModel.CURRENT) -> float:
    return max(0.0, target_g_per_l - residual_co2(temperature_c, model))


def speise_extract_plato(measured_og: float) -> float:
    return (measured_og - 1) * PLATO_PER_GRAVITY_POINT


def sugar_grams(needed_g_per_l: float, volume_liters: float) -> float:
    return round(needed_g_per_l * volume_liters / SUCROSE_CO2_YIELD, 1)


def dextrose_grams(needed_g_per_l: float, volume_liters: float) -> float:
    return round(needed_g_per_l * volume_liters / DEXTROSE_CO2_YIELD, 1)


def speise_liters(
    needed_g_per_l: float,
    volume_liters: float,
    measured_og: float | None = None,
    *,
    defaults: CalculationDefaults = DEFAULTS,
) -> float:
    og = measured_og if measured_og is not None and measured_og > 1 else defaults.original_gravity
    extract = speise_extract_plato(og)
    return round(needed_g_per_l * volume_liters / (extract * SPEISE_EXTRACT_CO2_YIELD), 2)


def carbonation_drops(volume_liters: float, *, defaults: CalculationDefaults = DEFAULTS) -> int:
    return math.ceil(volume_liters * 1000 / defaults.bottle_volume_ml)


def _number_or_default(value: float | str | None, fallback: float, *, positive: bool = False) -> float:
    if value is None:
        return fallback
    number = leading_float(value) if isinstance(value, str) else float(value)
    if number is None or not math.isfinite(number):
        return fallback
    if positive and number <= 0:
        return fallback
    return number


def default_residual_model() -> ResidualModel:
    return ResidualModel(settings.residual_co2_model)


def calculate_carbonation(
    request: CarbonationRequest,
    *,
    model: ResidualModel | None = None,
    defaults: CalculationDefaults = DEFAULTS,
) -> CarbonationResult:
    """Work out the priming dose for a bottling run.

    Never raises: missing or garbled inputs fall back to the configured
    defaults (5.0 g/L target, 20 °C, 20 L).
    """
    model = model or default_residual_model()

    raw_target = _number_or_default(request.target_co2, math.nan, positive=True)
    if math.isnan(raw_target):
        target = defaults.co2_target_g_per_l
    elif request.target_unit is CarbonationUnit.VOLUMES:
        target = raw_target * CO2_G_PER_L_PER_VOLUME
    else:
        target = raw_target
    temperature = _number_or_default(request.temperature_c, defaults.beer_temp_c)
    volume = _number_or_default(request.volume_liters, defaults.volume_liters, positive=True)

    residual = residual_co2(temperature, model)
    needed = max(0.0, target - residual)

    speise_equivalent: float | None = None
    dosing_rate: float | None = None
    if request.method is CarbonationMethod.DEXTROSE:
        amount, unit = dextrose_grams(needed, volume), "g"
        dosing_rate = dextrose_grams(needed, 1.0)
    elif request.method is CarbonationMethod.SPEISE:
        amount, unit = speise_liters(needed, volume, request.measured_og, defaults=defaults), "L"
    elif request.method is CarbonationMethod.DROPS:
        amount, unit = float(carbonation_drops(volume, defaults=defaults)), "drops"
    else:
        amount, unit = sugar_grams(needed, volume), "g"
        dosing_rate = sugar_grams(needed, 1.0)
        if request.measured_og is not None:
            speise_equivalent = speise_liters(needed, volume, request.measured_og, defaults=defaults)

    return CarbonationResult(
        method=request.method,
        model=model,
        target_co2_g_per_l=round(target, 2),
        temperature_c=temperature,
        volume_liters=volume,
        residual_co2_g_per_l=round(residual, 3),
        needed_co2_g_per_l=round(needed, 3),
        amount=amount,
        unit=unit,
        speise_equivalent_liters=speise_equivalent,
        dosing_rate_g_per_l=dosing_rate,
    )
