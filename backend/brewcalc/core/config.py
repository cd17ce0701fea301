from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "BrewCalc API"
    api_prefix: str = "/api/v1"
    database_url: str = "sqlite:///./brewcalc.db"
    auto_create_tables: bool = True
    log_level: str = "INFO"

    residual_co2_model: Literal["current", "legacy"] = "current"

    default_volume_liters: float = 20.0
    default_original_gravity: float = 1.050
    default_final_gravity: float = 1.010
    default_co2_target_g_per_l: float = 5.0
    default_beer_temp_c: float = 20.0
    default_mash_temp_c: float = 68.0

    model_config = SettingsConfigDict(env_prefix="BREWCALC_", env_file=".env", env_file_encoding="utf-8")


settings = Settings()


@dataclass(frozen=True)
class CalculationDefaults:
    """Fallback values used when user input cannot be parsed.

    Downstream numbers are compared against reference brewing software, so
    these values are part of the observable behaviour of every calculator.
    """

    volume_liters: float = 20.0
    original_gravity: float = 1.050
    final_gravity: float = 1.010
    co2_target_g_per_l: float = 5.0
    beer_temp_c: float = 20.0
    mash_temp_c: float = 68.0
    strike_temp_offset_c: float = 3.0
    min_reportable_amount: float = 0.5
    bottle_volume_ml: float = 330.0
    potential_points_per_kg: float = 300.0
    efficiency_good_pct: float = 70.0
    efficiency_poor_pct: float = 60.0
    min_daily_gravity_drop: float = 0.001


def build_defaults(source: Settings = settings) -> CalculationDefaults:
    return CalculationDefaults(
        volume_liters=source.default_volume_liters,
        original_gravity=source.default_original_gravity,
        final_gravity=source.default_final_gravity,
        co2_target_g_per_l=source.default_co2_target_g_per_l,
        beer_temp_c=source.default_beer_temp_c,
        mash_temp_c=source.default_mash_temp_c,
    )


DEFAULTS = build_defaults()
