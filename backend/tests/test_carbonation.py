import pytest

from brewcalc.core.config import CalculationDefaults
from brewcalc.services.carbonation import (
    CarbonationMethod,
    CarbonationRequest,
    CarbonationUnit,
    ResidualModel,
    calculate_carbonation,
    carbonation_drops,
    residual_co2,
    residual_co2_current,
    residual_co2_legacy,
)


def test_residual_co2_models_at_20c() -> None:
    assert residual_co2_current(20) == pytest.approx(0.8538, abs=1e-3)
    assert residual_co2_legacy(20) == pytest.approx(2.1426, abs=1e-3)
    assert residual_co2(20, ResidualModel.LEGACY) == residual_co2_legacy(20)


def test_residual_co2_decreases_with_temperature() -> None:
    temperatures = [1, 5, 10, 15, 20, 25, 30]
    for model in ResidualModel:
        values = [residual_co2(temp, model) for temp in temperatures]
        assert values == sorted(values, reverse=True)


def test_sucrose_dose_for_twenty_liters() -> None:
    result = calculate_carbonation(
        CarbonationRequest(target_co2=5.0, temperature_c=20, volume_liters=20),
        model=ResidualModel.CURRENT,
    )

    assert result.needed_co2_g_per_l == pytest.approx(4.146, abs=1e-3)
    assert result.amount == pytest.approx(167.5, abs=0.1)
    assert result.unit == "g"
    assert result.speise_equivalent_liters is None


def test_dextrose_needs_slightly_less_than_sucrose() -> None:
    result = calculate_carbonation(
        CarbonationRequest(target_co2=5.0, temperature_c=20, volume_liters=20, method=CarbonationMethod.DEXTROSE),
        model=ResidualModel.CURRENT,
    )

    assert result.amount == pytest.approx(165.8, abs=0.1)


def test_legacy_model_leaves_more_residual_co2() -> None:
    result = calculate_carbonation(
        CarbonationRequest(target_co2=5.0, temperature_c=20, volume_liters=20),
        model=ResidualModel.LEGACY,
    )

    assert result.model is ResidualModel.LEGACY
    assert result.amount == pytest.approx(115.4, abs=0.1)


def test_speise_volume_uses_measured_og() -> None:
    result = calculate_carbonation(
        CarbonationRequest(
            target_co2=5.0,
            temperature_c=20,
            volume_liters=20,
            method=CarbonationMethod.SPEISE,
            measured_og=1.050,
        ),
        model=ResidualModel.CURRENT,
    )

    assert result.unit == "L"
    assert result.amount == pytest.approx(13.27, abs=0.01)


def test_speise_without_og_assumes_1050() -> None:
    with_og = calculate_carbonation(
        CarbonationRequest(method=CarbonationMethod.SPEISE, measured_og=1.050),
        model=ResidualModel.CURRENT,
    )
    without_og = calculate_carbonation(
        CarbonationRequest(method=CarbonationMethod.SPEISE),
        model=ResidualModel.CURRENT,
    )

    assert with_og.amount == without_og.amount


def test_sugar_reports_speise_equivalent_when_og_known() -> None:
    result = calculate_carbonation(
        CarbonationRequest(target_co2=5.0, temperature_c=20, volume_liters=20, measured_og=1.050),
        model=ResidualModel.CURRENT,
    )

    assert result.speise_equivalent_liters == pytest.approx(13.27, abs=0.01)


def test_carbonation_drops_one_per_bottle() -> None:
    assert carbonation_drops(20) == 61

    result = calculate_carbonation(
        CarbonationRequest(volume_liters=20, method=CarbonationMethod.DROPS),
    )
    assert result.amount == 61
    assert result.unit == "drops"


def test_needed_co2_never_negative() -> None:
    result = calculate_carbonation(
        CarbonationRequest(target_co2=0.5, temperature_c=20, volume_liters=20),
        model=ResidualModel.CURRENT,
    )

    assert result.needed_co2_g_per_l == 0.0
    assert result.amount == 0.0


def test_garbled_inputs_fall_back_to_defaults() -> None:
    result = calculate_carbonation(
        CarbonationRequest(target_co2="lots", temperature_c="cold-ish", volume_liters=None),
        model=ResidualModel.CURRENT,
    )

    assert result.target_co2_g_per_l == 5.0
    assert result.temperature_c == 20.0
    assert result.volume_liters == 20.0
    assert result.amount == pytest.approx(167.5, abs=0.1)


def test_target_in_volumes_is_converted() -> None:
    result = calculate_carbonation(
        CarbonationRequest(target_co2=2.5, target_unit=CarbonationUnit.VOLUMES, temperature_c=20, volume_liters=20),
        model=ResidualModel.CURRENT,
    )

    assert result.target_co2_g_per_l == pytest.approx(4.9)


def test_dosing_rate_per_liter_for_sugars() -> None:
    sucrose = calculate_carbonation(
        CarbonationRequest(target_co2=5.0, temperature_c=20, volume_liters=20),
        model=ResidualModel.CURRENT,
    )
    dextrose = calculate_carbonation(
        CarbonationRequest(target_co2=5.0, temperature_c=20, volume_liters=7, method=CarbonationMethod.DEXTROSE),
        model=ResidualModel.CURRENT,
    )
    drops = calculate_carbonation(CarbonationRequest(method=CarbonationMethod.DROPS))

    assert sucrose.dosing_rate_g_per_l == 8.4
    assert dextrose.dosing_rate_g_per_l == 8.3
    assert drops.dosing_rate_g_per_l is None


def test_injected_defaults_replace_missing_inputs() -> None:
    defaults = CalculationDefaults(co2_target_g_per_l=6.0, beer_temp_c=10.0, volume_liters=10.0)

    result = calculate_carbonation(CarbonationRequest(), model=ResidualModel.CURRENT, defaults=defaults)

    assert result.target_co2_g_per_l == 6.0
    assert result.temperature_c == 10.0
    assert result.volume_liters == 10.0
