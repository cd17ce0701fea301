"""BeerXML v1 export for Grainfather, Brewfather and similar tools.

The document is assembled as text so the element order and number
formatting stay byte-for-byte stable between releases.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from brewcalc.core.config import DEFAULTS, CalculationDefaults
from brewcalc.core.errors import BeerXMLExportError
from brewcalc.services.recipe_normalizer import MashStepItem, RecipeExportModel, normalize_recipe
from brewcalc.services.units import (
    UnitSystem,
    duration_to_minutes,
    gravity_to_specific_gravity,
    temperature_to_celsius,
    volume_to_liters,
    weight_to_kilograms,
)

logger = logging.getLogger("brewcalc.beerxml")

XML_PROLOG = '<?xml version="1.0" encoding="ISO-8859-1"?>'
BREWER_NAME = "Craft Beer Wizard"
MAX_BATCH_LITERS = 10000.0
MAX_HOP_KG = 100.0

_MASH_IN_NAMES = ("mash in", "einmaischen")
_MASH_OUT_NAMES = ("mash out", "abmaischen")


def escape_xml(unsafe: str) -> str:
    return (
        unsafe.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&apos;")
    )


def _number(value: float) -> str:
    # Integral values print without a decimal point, e.g. <TIME>60</TIME>.
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def _is_mash_in(step_name: str) -> bool:
    return any(name in step_name for name in _MASH_IN_NAMES)


def _is_mash_out(step_name: str) -> bool:
    return any(name in step_name for name in _MASH_OUT_NAMES)


def resolve_mash_base_temp(steps: tuple[MashStepItem, ...], *, defaults: CalculationDefaults = DEFAULTS) -> float:
    """Temperature of the first main rest, used to derive relative steps."""
    for step in steps:
        name = step.name.lower()
        if _is_mash_in(name) or _is_mash_out(name):
            continue
        temp = temperature_to_celsius(step.temp)
        if temp is not None:
            return temp

    for step in steps:
        temp = temperature_to_celsius(step.temp)
        if temp is not None:
            return temp

    return defaults.mash_temp_c


def resolve_step_temp(step: MashStepItem, base_temp: float, *, defaults: CalculationDefaults = DEFAULTS) -> float:
    parsed = temperature_to_celsius(step.temp)
    if _is_mash_in(step.name.lower()):
        step_temp = parsed if parsed is not None else base_temp + defaults.strike_temp_offset_c
    else:
        step_temp = parsed if parsed is not None else base_temp

    if step_temp < 0 or step_temp > 200:
        step_temp = base_temp
    return step_temp


def _style_block(name: str, og: float, fg: float, ibu: float, srm: float, abv: float) -> list[str]:
    return [
        "    <STYLE>",
        f"      <NAME>{name}</NAME>",
        "      <CATEGORY>Ale</CATEGORY>",
        "      <CATEGORY_NUMBER>1</CATEGORY_NUMBER>",
        "      <STYLE_LETTER>A</STYLE_LETTER>",
        "      <STYLE_GUIDE>BJCP 2021</STYLE_GUIDE>",
        "      <TYPE>Ale</TYPE>",
        f"      <OG_MIN>{og - 0.010:.3f}</OG_MIN>",
        f"      <OG_MAX>{og + 0.010:.3f}</OG_MAX>",
        f"      <FG_MIN>{fg - 0.005:.3f}</FG_MIN>",
        f"      <FG_MAX>{fg + 0.005:.3f}</FG_MAX>",
        f"      <IBU_MIN>{max(0, ibu - 10):.1f}</IBU_MIN>",
        f"      <IBU_MAX>{ibu + 10:.1f}</IBU_MAX>",
        f"      <COLOR_MIN>{max(0, srm - 2):.1f}</COLOR_MIN>",
        f"      <COLOR_MAX>{srm + 2:.1f}</COLOR_MAX>",
        f"      <ABV_MIN>{max(0, abv - 1):.1f}</ABV_MIN>",
        f"      <ABV_MAX>{abv + 1:.1f}</ABV_MAX>",
        "      <CARB_MIN>2.0</CARB_MIN>",
        "      <CARB_MAX>2.6</CARB_MAX>",
        "    </STYLE>",
    ]


def _fermentable_blocks(recipe: RecipeExportModel) -> list[str]:
    lines = ["    <FERMENTABLES>"]
    for malt in recipe.fermentables:
        amount_kg = weight_to_kilograms(malt.amount_grams or malt.amount)
        lines += [
            "      <FERMENTABLE>",
            f"        <NAME>{escape_xml(malt.name)}</NAME>",
            "        <VERSION>1</VERSION>",
            "        <TYPE>Grain</TYPE>",
            f"        <AMOUNT>{amount_kg:.4f}</AMOUNT>",
            "        <YIELD>78.0</YIELD>",
            "        <COLOR>3.0</COLOR>",
            "        <ADD_AFTER_BOIL>N</ADD_AFTER_BOIL>",
            "        <ORIGIN></ORIGIN>",
            "        <SUPPLIER></SUPPLIER>",
            "        <NOTES></NOTES>",
            "        <COARSE_FINE_DIFF>0.0</COARSE_FINE_DIFF>",
            "        <MOISTURE>4.0</MOISTURE>",
            "        <DIASTATIC_POWER>0.0</DIASTATIC_POWER>",
            "        <PROTEIN>0.0</PROTEIN>",
            "        <MAX_IN_BATCH>100.0</MAX_IN_BATCH>",
            "        <RECOMMEND_MASH>Y</RECOMMEND_MASH>",
            "        <IBU_GAL_PER_LB>0.0</IBU_GAL_PER_LB>",
            "      </FERMENTABLE>",
        ]
    lines.append("    </FERMENTABLES>")
    return lines


def hop_use(time_minutes: float, time_text: str) -> str:
    if time_minutes > 0:
        return "Boil"
    if "dry" in time_text.lower():
        return "Dry Hop"
    return "Aroma"


def _hop_blocks(recipe: RecipeExportModel) -> list[str]:
    lines = ["    <HOPS>"]
    for hop in recipe.hops:
        amount_kg = weight_to_kilograms(hop.amount_grams or hop.amount)
        if amount_kg <= 0 or amount_kg > MAX_HOP_KG:
            logger.warning("Invalid hop weight: %s kg. Skipping hop: %s", amount_kg, hop.name)
            continue

        time = hop.boil_time or duration_to_minutes(hop.time)
        lines += [
            "      <HOP>",
            f"        <NAME>{escape_xml(hop.name)}</NAME>",
            "        <VERSION>1</VERSION>",
            f"        <ALPHA>{hop.alpha:.1f}</ALPHA>",
            f"        <AMOUNT>{amount_kg:.4f}</AMOUNT>",
            f"        <USE>{hop_use(time, hop.time)}</USE>",
            f"        <TIME>{_number(time)}</TIME>",
            f"        <NOTES>{escape_xml(hop.notes)}</NOTES>",
            "        <TYPE>Pellet</TYPE>",
            "        <FORM>Pellet</FORM>",
            "        <BETA>0.0</BETA>",
            "        <HSI>0.0</HSI>",
            "        <ORIGIN></ORIGIN>",
            "        <SUBSTITUTES></SUBSTITUTES>",
            "        <HUMULENE>0.0</HUMULENE>",
            "        <CARYOPHYLLENE>0.0</CARYOPHYLLENE>",
            "        <COHUMULONE>0.0</COHUMULONE>",
            "        <MYRCENE>0.0</MYRCENE>",
            "      </HOP>",
        ]
    lines.append("    </HOPS>")
    return lines


def _yeast_block(recipe: RecipeExportModel) -> list[str]:
    if recipe.yeast is None:
        return []
    return [
        "    <YEASTS>",
        "      <YEAST>",
        f"        <NAME>{escape_xml(recipe.yeast.name)}</NAME>",
        "        <VERSION>1</VERSION>",
        "        <TYPE>Ale</TYPE>",
        "        <FORM>Liquid</FORM>",
        "        <AMOUNT>0.0</AMOUNT>",
        "        <AMOUNT_IS_WEIGHT>N</AMOUNT_IS_WEIGHT>",
        "        <LABORATORY></LABORATORY>",
        "        <PRODUCT_ID></PRODUCT_ID>",
        "        <MIN_TEMPERATURE>18.0</MIN_TEMPERATURE>",
        "        <MAX_TEMPERATURE>22.0</MAX_TEMPERATURE>",
        "        <FLOCCULATION>Medium</FLOCCULATION>",
        "        <ATTENUATION>75.0</ATTENUATION>",
        f"        <NOTES>{escape_xml(recipe.yeast.notes)}</NOTES>",
        "        <BEST_FOR></BEST_FOR>",
        "        <MAX_REUSE>0</MAX_REUSE>",
        "      </YEAST>",
        "    </YEASTS>",
    ]


def _mash_block(recipe: RecipeExportModel, description: str, defaults: CalculationDefaults) -> list[str]:
    if not recipe.mash_steps:
        return []

    base_temp = resolve_mash_base_temp(recipe.mash_steps, defaults=defaults)
    lines = [
        "    <MASH>",
        "      <NAME>Temperature Mash</NAME>",
        "      <VERSION>1</VERSION>",
        "      <GRAIN_TEMP>20.0</GRAIN_TEMP>",
        "      <MASH_STEPS>",
    ]
    for step in recipe.mash_steps:
        step_temp = resolve_step_temp(step, base_temp, defaults=defaults)
        lines += [
            "        <MASH_STEP>",
            f"          <NAME>{escape_xml(step.name or 'Mash Step')}</NAME>",
            "          <VERSION>1</VERSION>",
            "          <TYPE>Infusion</TYPE>",
            "          <AMOUNT>0.0</AMOUNT>",
            f"          <STEP_TEMP>{step_temp:.1f}</STEP_TEMP>",
            f"          <STEP_TIME>{_number(duration_to_minutes(step.time))}</STEP_TIME>",
            "          <RAMP_TIME>2</RAMP_TIME>",
            f"          <END_TEMP>{step_temp:.1f}</END_TEMP>",
            f"          <DESCRIPTION>{escape_xml(step.description)}</DESCRIPTION>",
            "        </MASH_STEP>",
        ]
    lines += [
        "      </MASH_STEPS>",
        f"      <NOTES>{description}</NOTES>",
        "      <TUN_TEMP>20.0</TUN_TEMP>",
        "      <SPARGE_TEMP>75.6</SPARGE_TEMP>",
        "      <PH>5.4</PH>",
        "      <TUN_WEIGHT>0.0</TUN_WEIGHT>",
        "      <TUN_SPECIFIC_HEAT>0.0</TUN_SPECIFIC_HEAT>",
        "      <EQUIP_ADJUST>false</EQUIP_ADJUST>",
        "    </MASH>",
    ]
    return lines


def export_to_beerxml(
    recipe: RecipeExportModel | Mapping[str, Any],
    unit_system: UnitSystem = "metric",
    *,
    defaults: CalculationDefaults = DEFAULTS,
) -> str:
    """Serialize a recipe into a BeerXML v1 document.

    Volumes are written in liters and weights in kilograms whatever the
    display unit. Raises :class:`BeerXMLExportError` when the batch size is
    not within (0, 10000] liters.
    """
    if not isinstance(recipe, RecipeExportModel):
        recipe = normalize_recipe(recipe)

    name = escape_xml(recipe.name)
    description = escape_xml(recipe.description)

    batch_size = volume_to_liters(recipe.batch_volume, unit_system, defaults=defaults)
    if batch_size <= 0 or batch_size > MAX_BATCH_LITERS:
        raise BeerXMLExportError(
            f"Invalid batch size: {batch_size}L. Must be between 0 and {MAX_BATCH_LITERS:.0f} liters."
        )

    # A missing FG falls back to the expected FG; a garbled one still parses to the OG default.
    og = defaults.original_gravity
    if recipe.original_gravity:
        og = gravity_to_specific_gravity(recipe.original_gravity, defaults=defaults).value
    fg = defaults.final_gravity
    if recipe.final_gravity:
        fg = gravity_to_specific_gravity(recipe.final_gravity, defaults=defaults).value

    lines = [
        XML_PROLOG,
        "<RECIPES>",
        "  <RECIPE>",
        f"    <NAME>{name}</NAME>",
        "    <VERSION>1</VERSION>",
        "    <TYPE>All Grain</TYPE>",
        f"    <BREWER>{escape_xml(BREWER_NAME)}</BREWER>",
        "    <ASST_BREWER></ASST_BREWER>",
        f"    <BATCH_SIZE>{batch_size:.2f}</BATCH_SIZE>",
        f"    <BOIL_SIZE>{batch_size * 1.1:.2f}</BOIL_SIZE>",
        "    <BOIL_TIME>60</BOIL_TIME>",
        "    <EFFICIENCY>75.0</EFFICIENCY>",
    ]
    lines += _style_block(name, og, fg, recipe.ibu, recipe.srm, recipe.abv)
    lines += _fermentable_blocks(recipe)
    lines += _hop_blocks(recipe)
    lines += _yeast_block(recipe)
    lines += _mash_block(recipe, description, defaults)
    lines += [
        f"    <NOTES>{description}</NOTES>",
        "    <TASTE_NOTES></TASTE_NOTES>",
        "    <TASTE_RATING>0</TASTE_RATING>",
        f"    <OG>{og:.3f}</OG>",
        f"    <FG>{fg:.3f}</FG>",
        "    <FERMENTATION_STAGES>1</FERMENTATION_STAGES>",
        "    <PRIMARY_AGE>7</PRIMARY_AGE>",
        "    <PRIMARY_TEMP>20.0</PRIMARY_TEMP>",
        "    <SECONDARY_AGE>14</SECONDARY_AGE>",
        "    <SECONDARY_TEMP>20.0</SECONDARY_TEMP>",
        "    <TERTIARY_AGE>0</TERTIARY_AGE>",
        "    <TERTIARY_TEMP>0.0</TERTIARY_TEMP>",
        "    <AGE>21</AGE>",
        "    <AGE_TEMP>20.0</AGE_TEMP>",
        "    <CARBONATION>2.4</CARBONATION>",
        "    <FORCED_CARBONATION>false</FORCED_CARBONATION>",
        "    <PRIMING_SUGAR_NAME></PRIMING_SUGAR_NAME>",
        "    <CARBONATION_TEMP>20.0</CARBONATION_TEMP>",
        "    <PRIMING_SUGAR_EQUIV>0.0</PRIMING_SUGAR_EQUIV>",
        "    <KEG_PRIMING_FACTOR>0.5</KEG_PRIMING_FACTOR>",
        "  </RECIPE>",
        "</RECIPES>",
    ]

    logger.info("Exported BeerXML recipe %r (%.2f L, %d hops)", recipe.name, batch_size, len(recipe.hops))
    return "\n".join(lines) + "\n"
