import pytest

from brewcalc.core.config import CalculationDefaults
from brewcalc.services.efficiency import calculate_efficiency, classify_efficiency, total_grain_kg
from brewcalc.services.recipe_normalizer import FermentableItem


def test_total_grain_accepts_kg_grams_and_numeric_amounts() -> None:
    fermentables = [
        FermentableItem(name="Pale", amount="4 kg"),
        FermentableItem(name="Crystal", amount="500 g"),
        FermentableItem(name="Munich", amount_grams=500),
    ]

    assert total_grain_kg(fermentables) == pytest.approx(5.0)


def test_efficiency_from_specific_gravity() -> None:
    result = calculate_efficiency([FermentableItem(name="Pale", amount="5kg")], 20, measured_sg=1.050)

    assert result is not None
    assert result.efficiency_pct == 66.7
    assert result.status == "ok"
    assert result.potential_points == 1500.0
    assert result.actual_points == 1000.0


def test_efficiency_from_plato_reading() -> None:
    result = calculate_efficiency([FermentableItem(name="Pale", amount="5kg")], "20", measured_plato="12.5")

    assert result is not None
    assert result.efficiency_pct == 66.7


def test_sg_reading_wins_over_plato() -> None:
    result = calculate_efficiency(
        [FermentableItem(name="Pale", amount="4kg")],
        20,
        measured_sg="1.050 SG",
        measured_plato=20,
    )

    assert result is not None
    assert result.measured_sg == 1.05
    assert result.status == "good"


@pytest.mark.parametrize(
    ("pct", "status"),
    [(70.0, "good"), (69.9, "ok"), (60.0, "ok"), (59.9, "poor")],
)
def test_classify_efficiency_thresholds(pct: float, status: str) -> None:
    assert classify_efficiency(pct) == status


def test_efficiency_unavailable_without_inputs() -> None:
    grain = [FermentableItem(name="Pale", amount="5kg")]

    assert calculate_efficiency(grain, 20) is None
    assert calculate_efficiency(grain, 0, measured_sg=1.050) is None
    assert calculate_efficiency([FermentableItem(name="Pale", amount="some")], 20, measured_sg=1.050) is None


def test_negative_volume_is_rejected() -> None:
    grain = [FermentableItem(name="Pale", amount="5kg")]

    assert calculate_efficiency(grain, "-20", measured_sg=1.050) is None
    assert calculate_efficiency(grain, "20 L", measured_sg=1.050) is not None


def test_classification_follows_injected_thresholds() -> None:
    defaults = CalculationDefaults(efficiency_good_pct=65.0, potential_points_per_kg=250.0)

    result = calculate_efficiency([FermentableItem(name="Pale", amount="5kg")], 20, measured_sg=1.050, defaults=defaults)

    assert result is not None
    assert result.efficiency_pct == 80.0
    assert result.status == "good"
