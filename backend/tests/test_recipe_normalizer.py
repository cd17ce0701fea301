from brewcalc.services.recipe_normalizer import RecipeExportModel, normalize_recipe


def test_empty_document_uses_defaults() -> None:
    assert normalize_recipe({}) == RecipeExportModel()

    recipe = normalize_recipe({})
    assert (recipe.batch_volume, recipe.original_gravity, recipe.final_gravity) == ("", "", "")


def test_specs_take_precedence_over_legacy_fields() -> None:
    recipe = normalize_recipe(
        {
            "name": "Dunkel",
            "specs": {"original_gravity": "1.052", "og": "1.060", "mash_water": "25L"},
            "originalGravity": "1.070",
            "finalGravity": "1.014",
            "abv": "5.1%",
        }
    )

    assert recipe.original_gravity == "1.052"
    assert recipe.final_gravity == "1.014"
    assert recipe.batch_volume == "25L"
    assert recipe.abv == 5.1


def test_blank_values_fall_through_to_next_alias() -> None:
    recipe = normalize_recipe({"specs": {"original_gravity": "", "og": "13°P", "ibu": ""}, "ibu": 22})

    assert recipe.original_gravity == "13°P"
    assert recipe.ibu == 22.0


def test_ingredient_lists_from_nested_document() -> None:
    recipe = normalize_recipe(
        {
            "ingredients": {
                "malts": [{"name": "Pilsner", "amount": "4kg"}, "not-a-malt"],
                "hops": [{"name": "Saaz", "amount": 40, "time": "60 min", "explanation": "Bittering"}],
                "yeast": {"name": "W-34/70"},
            },
            "mash_steps": [{"step": "Protein Rest", "temp": "52°C", "time": "15 min"}],
        }
    )

    assert [malt.name for malt in recipe.fermentables] == ["Pilsner"]
    hop = recipe.hops[0]
    assert hop.amount == 40
    assert hop.alpha == 5.0
    assert hop.notes == "Bittering"
    assert recipe.yeast is not None and recipe.yeast.name == "W-34/70"
    assert recipe.mash_steps[0].name == "Protein Rest"
    assert recipe.mash_steps[0].temp == "52°C"


def test_top_level_lists_win_over_ingredients() -> None:
    recipe = normalize_recipe(
        {
            "malts": [{"name": "Maris Otter", "amount": "5kg"}],
            "ingredients": {"malts": [{"name": "Ignored", "amount": "1kg"}]},
            "mash_schedule": [{"step": "Mash In", "temp": "+3°C"}],
            "mash_steps": [{"step": "Ignored"}],
        }
    )

    assert [malt.name for malt in recipe.fermentables] == ["Maris Otter"]
    assert [step.name for step in recipe.mash_steps] == ["Mash In"]


def test_conditioning_and_style_fields() -> None:
    recipe = normalize_recipe(
        {"beerStyle": "Helles", "conditioning_days_min": "21", "conditioning_days_max": 60, "predictedFG": "1.011"}
    )

    assert recipe.style == "Helles"
    assert recipe.conditioning_days_min == 21
    assert recipe.conditioning_days_max == 60
    assert recipe.predicted_fg == 1.011
