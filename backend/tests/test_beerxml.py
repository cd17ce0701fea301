import logging
import xml.etree.ElementTree as ET
from typing import Any

import pytest

from brewcalc.core.config import CalculationDefaults
from brewcalc.core.errors import BeerXMLExportError
from brewcalc.services.beerxml import XML_PROLOG, escape_xml, export_to_beerxml


def _recipe(**overrides: Any) -> dict[str, Any]:
    recipe: dict[str, Any] = {
        "name": "Hop & Glory",
        "description": "<b>Bright</b> & bitter",
        "specs": {
            "mash_water_volume": "20L",
            "og": "1.055",
            "fg": "1.012",
            "abv": "5.6%",
            "ibu": "40",
            "srm": "6",
        },
        "malts": [
            {"name": "Pale Ale Malt", "amount": "4.5 kg"},
            {"name": "Crystal 60", "amount": "300g"},
        ],
        "hops": [
            {"name": "Citra", "amount": "30g", "time": "60 min", "boil_time": 60, "alpha": 12},
            {"name": "Whirlpool Amarillo", "amount": "20g", "time": "0 min"},
            {"name": "Mosaic", "amount": "50 g", "time": "Dry hop day 3"},
        ],
        "yeast": {"name": "US-05", "explanation": "Clean American ale strain"},
        "mash_schedule": [
            {"step": "Mash In", "temp": "+3°C", "time": "10 min"},
            {"step": "Saccharification", "temp": "67°C", "time": "60 min"},
            {"step": "Mash Out", "temp": "78°C", "time": "10 min"},
        ],
    }
    recipe.update(overrides)
    return recipe


def _parse(xml: str) -> ET.Element:
    return ET.fromstring(xml)


def test_export_writes_prolog_and_batch_size() -> None:
    xml = export_to_beerxml(_recipe())

    assert xml.startswith(XML_PROLOG + "\n<RECIPES>\n")
    assert xml.endswith("</RECIPES>\n")

    root = _parse(xml)
    recipe = root.find("RECIPE")
    assert recipe is not None
    assert recipe.findtext("NAME") == "Hop & Glory"
    assert recipe.findtext("BATCH_SIZE") == "20.00"
    assert recipe.findtext("BOIL_SIZE") == "22.00"
    assert recipe.findtext("OG") == "1.055"
    assert recipe.findtext("FG") == "1.012"
    assert recipe.findtext("STYLE/OG_MIN") == "1.045"
    assert recipe.findtext("STYLE/IBU_MAX") == "50.0"
    assert recipe.findtext("STYLE/ABV_MIN") == "4.6"


def test_special_characters_are_escaped_once() -> None:
    xml = export_to_beerxml(_recipe())

    assert "<NAME>Hop &amp; Glory</NAME>" in xml
    assert "&amp;amp;" not in xml
    recipe = _parse(xml).find("RECIPE")
    assert recipe is not None
    assert recipe.findtext("NOTES") == "<b>Bright</b> & bitter"
    assert recipe.findtext("MASH/NOTES") == "<b>Bright</b> & bitter"


def test_weights_are_kilograms() -> None:
    recipe = _parse(export_to_beerxml(_recipe())).find("RECIPE")
    assert recipe is not None

    amounts = [node.text for node in recipe.iterfind("FERMENTABLES/FERMENTABLE/AMOUNT")]
    assert amounts == ["4.5000", "0.3000"]
    assert recipe.findtext("HOPS/HOP/AMOUNT") == "0.0300"


def test_hop_use_from_timing() -> None:
    recipe = _parse(export_to_beerxml(_recipe())).find("RECIPE")
    assert recipe is not None

    hops = {hop.findtext("NAME"): hop for hop in recipe.iterfind("HOPS/HOP")}
    assert hops["Citra"].findtext("USE") == "Boil"
    assert hops["Citra"].findtext("TIME") == "60"
    assert hops["Citra"].findtext("ALPHA") == "12.0"
    assert hops["Whirlpool Amarillo"].findtext("USE") == "Aroma"
    assert hops["Whirlpool Amarillo"].findtext("TIME") == "0"
    assert hops["Mosaic"].findtext("USE") == "Dry Hop"
    assert hops["Mosaic"].findtext("ALPHA") == "5.0"
    assert hops["Mosaic"].findtext("NOTES") == "Dry hop day 3"


def test_implausible_hop_weight_is_skipped(caplog: pytest.LogCaptureFixture) -> None:
    hops = _recipe()["hops"] + [{"name": "Typo Hop", "amount": "500 kg", "time": "60 min"}]

    with caplog.at_level(logging.WARNING, logger="brewcalc.beerxml"):
        xml = export_to_beerxml(_recipe(hops=hops))

    assert "Typo Hop" not in xml
    assert "Skipping hop: Typo Hop" in caplog.text


def test_mash_in_is_three_degrees_above_main_rest() -> None:
    recipe = _parse(export_to_beerxml(_recipe())).find("RECIPE")
    assert recipe is not None

    steps = {step.findtext("NAME"): step for step in recipe.iterfind("MASH/MASH_STEPS/MASH_STEP")}
    assert steps["Mash In"].findtext("STEP_TEMP") == "70.0"
    assert steps["Saccharification"].findtext("STEP_TEMP") == "67.0"
    assert steps["Saccharification"].findtext("STEP_TIME") == "60"
    assert steps["Mash Out"].findtext("STEP_TEMP") == "78.0"


def test_relative_only_schedule_uses_default_mash_temp() -> None:
    xml = export_to_beerxml(
        _recipe(
            mash_schedule=[
                {"step": "Mash In", "temp": "Target Mash Temp + 3°C", "time": "5 min"},
                {"step": "Rest", "temp": "hot", "time": "60 min"},
            ]
        )
    )
    recipe = _parse(xml).find("RECIPE")
    assert recipe is not None

    temps = [node.text for node in recipe.iterfind("MASH/MASH_STEPS/MASH_STEP/STEP_TEMP")]
    assert temps == ["71.0", "68.0"]


def test_no_mash_block_without_steps() -> None:
    xml = export_to_beerxml(_recipe(mash_schedule=[]))

    assert "<MASH>" not in xml


def test_gallon_batches_are_converted_to_liters() -> None:
    gallons = _recipe(specs={"mash_water_volume": "5 gal"})
    bare = _recipe(specs={"mash_water_volume": "5"})

    assert "<BATCH_SIZE>18.93</BATCH_SIZE>" in export_to_beerxml(gallons)
    assert "<BATCH_SIZE>18.93</BATCH_SIZE>" in export_to_beerxml(bare, "imperial")
    assert "<BATCH_SIZE>5.00</BATCH_SIZE>" in export_to_beerxml(bare, "metric")


@pytest.mark.parametrize("volume", ["0", "15000L"])
def test_invalid_batch_size_raises(volume: str) -> None:
    with pytest.raises(BeerXMLExportError, match="Invalid batch size"):
        export_to_beerxml(_recipe(specs={"mash_water_volume": volume}))


def test_minimal_recipe_uses_defaults() -> None:
    recipe = _parse(export_to_beerxml({})).find("RECIPE")
    assert recipe is not None

    assert recipe.findtext("NAME") == "Untitled Recipe"
    assert recipe.findtext("BATCH_SIZE") == "20.00"
    assert recipe.findtext("OG") == "1.050"
    assert recipe.find("YEASTS") is None


def test_escape_xml() -> None:
    assert escape_xml("""<a href="x">Tom's & Jerry's</a>""") == (
        "&lt;a href=&quot;x&quot;&gt;Tom&apos;s &amp; Jerry&apos;s&lt;/a&gt;"
    )


@pytest.mark.parametrize(
    ("volume", "batch_size"),
    [("0.5", "0.50"), ("10000", "10000.00")],
)
def test_batch_size_bounds_are_inclusive_at_ten_thousand(volume: str, batch_size: str) -> None:
    xml = export_to_beerxml(_recipe(specs={"mash_water_volume": volume}))

    assert f"<BATCH_SIZE>{batch_size}</BATCH_SIZE>" in xml


def test_just_above_ten_thousand_liters_raises() -> None:
    with pytest.raises(BeerXMLExportError):
        export_to_beerxml(_recipe(specs={"mash_water_volume": "10000.01"}))


def test_injected_defaults_fill_missing_volume_and_gravities() -> None:
    defaults = CalculationDefaults(volume_liters=25.0, original_gravity=1.060, final_gravity=1.015, mash_temp_c=65.0)

    xml = export_to_beerxml(
        {"specs": {"mash_water_volume": "a carboy"}, "mash_schedule": [{"step": "Mash In", "temp": "+3°C"}]},
        defaults=defaults,
    )
    recipe = _parse(xml).find("RECIPE")
    assert recipe is not None

    assert recipe.findtext("BATCH_SIZE") == "25.00"
    assert recipe.findtext("OG") == "1.060"
    assert recipe.findtext("FG") == "1.015"
    assert recipe.findtext("MASH/MASH_STEPS/MASH_STEP/STEP_TEMP") == "68.0"


def test_missing_final_gravity_uses_expected_fg() -> None:
    recipe = _parse(export_to_beerxml(_recipe(specs={"og": "1.060"}))).find("RECIPE")
    assert recipe is not None

    assert recipe.findtext("OG") == "1.060"
    assert recipe.findtext("FG") == "1.010"
