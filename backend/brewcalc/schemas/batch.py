from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from brewcalc.schemas.calculators import FermentationPredictionRead


class BatchBase(BaseModel):
    name: str = Field(min_length=1, max_length=140)
    recipe_name: str | None = Field(default=None, max_length=140)
    style: str | None = Field(default=None, max_length=80)
    status: Literal["brewing", "fermenting", "conditioning", "completed"] = "fermenting"
    volume_liters: float = Field(gt=0)
    measured_og: float | None = Field(default=None, gt=1.0, lt=1.2)
    target_fg: float | None = Field(default=None, gt=0.98, lt=1.2)
    bottled_on: date | None = None
    conditioning_days_min: int | None = Field(default=None, ge=0)
    conditioning_days_max: int | None = Field(default=None, ge=0)
    notes: str = ""


class BatchCreate(BatchBase):
    pass


class BatchUpdate(BaseModel):
    status: Literal["brewing", "fermenting", "conditioning", "completed"] | None = None
    measured_og: float | None = Field(default=None, gt=1.0, lt=1.2)
    target_fg: float | None = Field(default=None, gt=0.98, lt=1.2)
    bottled_on: date | None = None
    conditioning_days_min: int | None = Field(default=None, ge=0)
    conditioning_days_max: int | None = Field(default=None, ge=0)
    notes: str | None = None


class BatchRead(BatchBase):
    id: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class FermentationReadingBase(BaseModel):
    gravity: float = Field(gt=0.98, lt=1.2)
    temp_c: float | None = Field(default=None, gt=-10, lt=60)
    source: Literal["manual", "device"] = "manual"
    notes: str = ""


class FermentationReadingCreate(FermentationReadingBase):
    recorded_at: datetime | None = None


class FermentationReadingRead(FermentationReadingBase):
    id: int
    batch_id: int
    recorded_at: datetime

    model_config = ConfigDict(from_attributes=True)


class FermentationTrendRead(BaseModel):
    batch_id: int
    reading_count: int
    first_recorded_at: datetime | None
    latest_recorded_at: datetime | None
    latest_gravity: float | None
    latest_temp_c: float | None
    gravity_drop: float | None
    average_hourly_gravity_drop: float | None
    apparent_attenuation_pct: float | None
    current_abv: float | None
    plateau_risk: bool
    temperature_warning: bool
    alerts: list[str] = Field(default_factory=list)
    prediction: FermentationPredictionRead
    readings: list[FermentationReadingRead] = Field(default_factory=list)
