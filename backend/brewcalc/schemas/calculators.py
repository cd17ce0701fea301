from datetime import date, datetime
from typing import Any, Literal

from pydantic import BaseModel, Field

from brewcalc.services.carbonation import CarbonationMethod, CarbonationUnit, ResidualModel


class UnitParseRequest(BaseModel):
    text: str | float | None = None
    unit_system: Literal["metric", "imperial"] = "metric"


class UnitParseRead(BaseModel):
    value: float | None
    unit: str
    defaulted: bool


class CarbonationRequestBody(BaseModel):
    target_co2: float | str | None = None
    target_unit: CarbonationUnit = CarbonationUnit.GRAMS_PER_LITER
    temperature_c: float | str | None = None
    volume_liters: float | str | None = None
    method: CarbonationMethod = CarbonationMethod.SUGAR
    measured_og: float | None = Field(default=None, gt=0.99, lt=1.2)
    model: ResidualModel | None = None


class CarbonationRead(BaseModel):
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


class EfficiencyRequest(BaseModel):
    recipe: dict[str, Any] = Field(default_factory=dict)
    volume_liters: float | str | None = None
    measured_sg: float | str | None = None
    measured_plato: float | str | None = None
    measured_brix: float | str | None = None


class EfficiencyRead(BaseModel):
    available: bool
    efficiency_pct: float | None = None
    status: Literal["good", "ok", "poor"] | None = None
    total_grain_kg: float | None = None
    potential_points: float | None = None
    actual_points: float | None = None
    measured_sg: float | None = None


class GravityReadingInput(BaseModel):
    timestamp: datetime
    gravity: float = Field(gt=0.98, lt=1.2)
    temperature_c: float | None = Field(default=None, gt=-10, lt=60)
    source: Literal["manual", "device"] = "manual"


class FermentationPredictionRequest(BaseModel):
    readings: list[GravityReadingInput] = Field(default_factory=list)
    target_gravity: float | None = Field(default=None, gt=0.98, lt=1.2)


class FermentationPredictionRead(BaseModel):
    available: bool
    days_remaining: int | None = None
    estimated_completion: datetime | None = None
    daily_gravity_drop: float | None = None
    latest_gravity: float | None = None
    target_gravity: float


class MaturityRequest(BaseModel):
    bottled_on: date
    conditioning_days_min: int | None = Field(default=None, ge=0)
    conditioning_days_max: int | None = Field(default=None, ge=0)
    style: str | None = None
    today: date | None = None


class MaturityRead(BaseModel):
    days_min: int
    days_max: int
    ready_on: date
    expires_on: date
    days_since_bottling: int
    days_until_ready: int
    days_until_expiry: int
    status: Literal["maturing", "optimal", "overaged"]
