from dataclasses import asdict

from fastapi import APIRouter

from brewcalc.core.config import DEFAULTS
from brewcalc.schemas.calculators import (
    CarbonationRead,
    CarbonationRequestBody,
    EfficiencyRead,
    EfficiencyRequest,
    FermentationPredictionRead,
    FermentationPredictionRequest,
    MaturityRead,
    MaturityRequest,
    UnitParseRead,
    UnitParseRequest,
)
from brewcalc.schemas.water import (
    SaltAdditionRead,
    WaterAdditionsRead,
    WaterAdditionsRequest,
    WaterIonSnapshotRead,
)
from brewcalc.services.carbonation import CarbonationRequest, calculate_carbonation
from brewcalc.services.efficiency import calculate_efficiency
from brewcalc.services.fermentation import GravityReading, predict_completion
from brewcalc.services.maturity import calculate_maturity
from brewcalc.services.recipe_normalizer import normalize_recipe
from brewcalc.services.units import (
    gravity_to_specific_gravity,
    parse_duration,
    parse_temperature,
    parse_volume,
    parse_weight,
)
from brewcalc.services.water_chemistry import WaterProfile, calculate_water_additions

router = APIRouter(prefix="/calculators", tags=["calculators"])


@router.post("/units/volume", response_model=UnitParseRead)
def convert_volume(payload: UnitParseRequest) -> UnitParseRead:
    result = parse_volume(payload.text, payload.unit_system)
    return UnitParseRead(value=result.value, unit="L", defaulted=result.defaulted)


@router.post("/units/weight", response_model=UnitParseRead)
def convert_weight(payload: UnitParseRequest) -> UnitParseRead:
    result = parse_weight(payload.text)
    return UnitParseRead(value=result.value, unit="kg", defaulted=result.defaulted)


@router.post("/units/temperature", response_model=UnitParseRead)
def convert_temperature(payload: UnitParseRequest) -> UnitParseRead:
    result = parse_temperature(payload.text)
    return UnitParseRead(value=result.value, unit="C", defaulted=result.defaulted)


@router.post("/units/duration", response_model=UnitParseRead)
def convert_duration(payload: UnitParseRequest) -> UnitParseRead:
    result = parse_duration(payload.text)
    return UnitParseRead(value=result.value, unit="min", defaulted=result.defaulted)


@router.post("/units/gravity", response_model=UnitParseRead)
def convert_gravity(payload: UnitParseRequest) -> UnitParseRead:
    result = gravity_to_specific_gravity(payload.text)
    return UnitParseRead(value=result.value, unit="SG", defaulted=result.defaulted)


@router.post("/carbonation", response_model=CarbonationRead)
def calculate_priming(payload: CarbonationRequestBody) -> CarbonationRead:
    result = calculate_carbonation(
        CarbonationRequest(
            target_co2=payload.target_co2,
            target_unit=payload.target_unit,
            temperature_c=payload.temperature_c,
            volume_liters=payload.volume_liters,
            method=payload.method,
            measured_og=payload.measured_og,
        ),
        model=payload.model,
    )
    return CarbonationRead(**asdict(result))


@router.post("/water", response_model=WaterAdditionsRead)
def recommend_water_additions(payload: WaterAdditionsRequest) -> WaterAdditionsRead:
    result = calculate_water_additions(
        WaterProfile(**payload.source.model_dump()),
        WaterProfile(**payload.target.model_dump()),
        payload.batch_volume_liters,
    )
    return WaterAdditionsRead(
        batch_volume_liters=round(result.batch_volume_liters, 2),
        source_profile=WaterIonSnapshotRead(**asdict(result.source_profile)),
        target_profile=WaterIonSnapshotRead(**asdict(result.target_profile)),
        projected_profile=WaterIonSnapshotRead(**asdict(result.projected_profile)),
        additions=[SaltAdditionRead(**asdict(item)) for item in result.additions],
        remaining_calcium_ppm=result.remaining_calcium_ppm,
        notes=list(result.notes),
    )


@router.post("/fermentation/prediction", response_model=FermentationPredictionRead)
def predict_fermentation(payload: FermentationPredictionRequest) -> FermentationPredictionRead:
    target_gravity = payload.target_gravity if payload.target_gravity is not None else DEFAULTS.final_gravity
    readings = [
        GravityReading(
            timestamp=item.timestamp,
            gravity=item.gravity,
            temperature_c=item.temperature_c,
            source=item.source,
        )
        for item in payload.readings
    ]
    prediction = predict_completion(readings, target_gravity)
    if prediction is None:
        return FermentationPredictionRead(available=False, target_gravity=target_gravity)
    return FermentationPredictionRead(available=True, **asdict(prediction))


@router.post("/efficiency", response_model=EfficiencyRead)
def calculate_brewhouse_efficiency(payload: EfficiencyRequest) -> EfficiencyRead:
    recipe = normalize_recipe(payload.recipe)
    result = calculate_efficiency(
        recipe.fermentables,
        payload.volume_liters,
        measured_sg=payload.measured_sg,
        measured_plato=payload.measured_plato,
        measured_brix=payload.measured_brix,
    )
    if result is None:
        return EfficiencyRead(available=False)
    return EfficiencyRead(available=True, **asdict(result))


@router.post("/maturity", response_model=MaturityRead)
def calculate_bottle_maturity(payload: MaturityRequest) -> MaturityRead:
    info = calculate_maturity(
        payload.bottled_on,
        conditioning_days_min=payload.conditioning_days_min,
        conditioning_days_max=payload.conditioning_days_max,
        style=payload.style,
        today=payload.today,
    )
    return MaturityRead(**asdict(info))  # type: ignore[arg-type]
