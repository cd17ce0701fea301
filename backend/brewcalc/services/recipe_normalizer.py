"""Single adapter from loosely-shaped recipe documents to one internal model.

Stored recipes come from several generations of the recipe wizard and carry
overlapping field names (``og`` vs ``original_gravity``, top-level ``malts``
vs ``ingredients.malts`` ...). Every alias is resolved here, once, so the
calculators only ever see :class:`RecipeExportModel`.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from brewcalc.services.units import leading_float


@dataclass(frozen=True)
class FermentableItem:
    name: str
    amount: str | float | None = None
    amount_grams: float | None = None


@dataclass(frozen=True)
class HopItem:
    name: str
    amount: str | float | None = None
    amount_grams: float | None = None
    alpha: float = 5.0
    boil_time: float | None = None
    time: str = ""
    notes: str = ""


@dataclass(frozen=True)
class YeastItem:
    name: str
    notes: str = ""


@dataclass(frozen=True)
class MashStepItem:
    name: str
    temp: str = ""
    time: str = ""
    description: str = ""


@dataclass(frozen=True)
class RecipeExportModel:
    name: str = "Untitled Recipe"
    description: str = ""
    style: str | None = None
    # Left blank when absent; calculators fill them from CalculationDefaults.
    batch_volume: str = ""
    original_gravity: str = ""
    final_gravity: str = ""
    predicted_fg: float | None = None
    abv: float = 5.0
    ibu: float = 30.0
    srm: float = 8.0
    conditioning_days_min: int | None = None
    conditioning_days_max: int | None = None
    fermentables: tuple[FermentableItem, ...] = field(default_factory=tuple)
    hops: tuple[HopItem, ...] = field(default_factory=tuple)
    yeast: YeastItem | None = None
    mash_steps: tuple[MashStepItem, ...] = field(default_factory=tuple)


def _first(*values: Any) -> Any:
    # Empty strings count as missing, matching how the wizard stores blanks.
    for value in values:
        if value is not None and value != "":
            return value
    return None


def _number(value: Any, fallback: float) -> float:
    if value is None:
        return fallback
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        number: float | None = float(value)
    else:
        number = leading_float(str(value))
    if not number:
        return fallback
    return number


def _optional_number(value: Any) -> float | None:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    if isinstance(value, str):
        return leading_float(value)
    return None


def _optional_int(value: Any) -> int | None:
    number = _optional_number(value)
    return int(number) if number is not None else None


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _items(value: Any) -> Sequence[Mapping[str, Any]]:
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
        return [item for item in value if isinstance(item, Mapping)]
    return []


def _fermentable(raw: Mapping[str, Any]) -> FermentableItem:
    return FermentableItem(
        name=_text(raw.get("name")) or "Unknown Malt",
        amount=raw.get("amount"),
        amount_grams=_optional_number(raw.get("amount_grams")),
    )


def _hop(raw: Mapping[str, Any]) -> HopItem:
    return HopItem(
        name=_text(raw.get("name")) or "Unknown Hop",
        amount=raw.get("amount"),
        amount_grams=_optional_number(raw.get("amount_grams")),
        alpha=_number(raw.get("alpha"), 5.0),
        boil_time=_optional_number(raw.get("boil_time")),
        time=_text(raw.get("time")),
        notes=_text(_first(raw.get("explanation"), raw.get("time"))),
    )


def _mash_step(raw: Mapping[str, Any]) -> MashStepItem:
    return MashStepItem(
        name=_text(raw.get("step")),
        temp=_text(raw.get("temp")),
        time=_text(raw.get("time")),
        description=_text(raw.get("description")),
    )


def normalize_recipe(raw: Mapping[str, Any]) -> RecipeExportModel:
    specs = _mapping(raw.get("specs"))
    ingredients = _mapping(raw.get("ingredients"))

    malts = raw.get("malts") or ingredients.get("malts")
    hops = raw.get("hops") or ingredients.get("hops")
    yeast = _mapping(raw.get("yeast") or ingredients.get("yeast"))
    mash_steps = raw.get("mash_schedule") or raw.get("mash_steps")

    return RecipeExportModel(
        name=_text(raw.get("name")) or "Untitled Recipe",
        description=_text(raw.get("description")),
        style=_first(raw.get("style"), raw.get("beerStyle"), specs.get("style")),
        batch_volume=_text(_first(specs.get("mash_water_volume"), specs.get("mash_water"))),
        original_gravity=_text(_first(specs.get("original_gravity"), specs.get("og"), raw.get("originalGravity"))),
        final_gravity=_text(_first(specs.get("final_gravity"), specs.get("fg"), raw.get("finalGravity"))),
        predicted_fg=_optional_number(raw.get("predictedFG")),
        abv=_number(_first(specs.get("abv"), raw.get("abv")), 5.0),
        ibu=_number(_first(specs.get("ibu"), raw.get("ibu")), 30.0),
        srm=_number(_first(specs.get("srm"), raw.get("srm")), 8.0),
        conditioning_days_min=_optional_int(raw.get("conditioning_days_min")),
        conditioning_days_max=_optional_int(raw.get("conditioning_days_max")),
        fermentables=tuple(_fermentable(item) for item in _items(malts)),
        hops=tuple(_hop(item) for item in _items(hops)),
        yeast=YeastItem(name=_text(yeast.get("name")) or "Unknown Yeast", notes=_text(yeast.get("explanation"))) if yeast else None,
        mash_steps=tuple(_mash_step(item) for item in _items(mash_steps)),
    )
