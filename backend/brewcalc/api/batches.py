import logging
from dataclasses import asdict
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from brewcalc.core.config import DEFAULTS
from brewcalc.core.database import get_db
from brewcalc.models.batch import Batch, FermentationReading
from brewcalc.schemas.batch import (
    BatchCreate,
    BatchRead,
    BatchUpdate,
    FermentationReadingCreate,
    FermentationReadingRead,
    FermentationTrendRead,
)
from brewcalc.schemas.calculators import FermentationPredictionRead, MaturityRead
from brewcalc.services.fermentation import GravityReading, build_fermentation_trend, predict_completion
from brewcalc.services.maturity import calculate_maturity
from brewcalc.services.recipe_calculator import attenuation_pct, estimate_abv

logger = logging.getLogger("brewcalc.batches")

router = APIRouter(prefix="/batches", tags=["batches"])

# Columns that cannot be cleared through a PATCH.
_REQUIRED_BATCH_FIELDS = ("status", "notes")


def _get_batch_or_404(db: Session, batch_id: int) -> Batch:
    batch = db.query(Batch).filter(Batch.id == batch_id).first()
    if not batch:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Batch not found")
    return batch


def _list_readings(db: Session, batch_id: int) -> list[FermentationReading]:
    return (
        db.query(FermentationReading)
        .filter(FermentationReading.batch_id == batch_id)
        .order_by(FermentationReading.recorded_at.asc(), FermentationReading.id.asc())
        .all()
    )


def _to_gravity_reading(reading: FermentationReading) -> GravityReading:
    return GravityReading(
        timestamp=reading.recorded_at,
        gravity=reading.gravity,
        temperature_c=reading.temp_c,
        source=reading.source,  # type: ignore[arg-type]
    )


@router.post("", response_model=BatchRead, status_code=status.HTTP_201_CREATED)
def create_batch(payload: BatchCreate, db: Session = Depends(get_db)) -> Batch:
    batch = Batch(**payload.model_dump())
    db.add(batch)
    db.commit()
    db.refresh(batch)
    logger.info("Created batch %s (%s)", batch.id, batch.name)
    return batch


@router.get("", response_model=list[BatchRead])
def list_batches(db: Session = Depends(get_db)) -> list[Batch]:
    return db.query(Batch).order_by(Batch.created_at.desc(), Batch.id.desc()).all()


@router.get("/{batch_id}", response_model=BatchRead)
def get_batch(batch_id: int, db: Session = Depends(get_db)) -> Batch:
    return _get_batch_or_404(db, batch_id)


@router.patch("/{batch_id}", response_model=BatchRead)
def update_batch(batch_id: int, payload: BatchUpdate, db: Session = Depends(get_db)) -> Batch:
    batch = _get_batch_or_404(db, batch_id)

    updates = payload.model_dump(exclude_unset=True)
    for field in _REQUIRED_BATCH_FIELDS:
        if field in updates and updates[field] is None:
            del updates[field]

    for field, value in updates.items():
        setattr(batch, field, value)

    db.add(batch)
    db.commit()
    db.refresh(batch)
    logger.info("Updated batch %s: %s", batch.id, ", ".join(sorted(updates)) or "no changes")
    return batch


@router.post("/{batch_id}/readings",response_model=FermentationReadingRead, status_code=status.HTTP_201_CREATED)
def add_reading(
    batch_id: int,
    payload: FermentationReadingCreate,
    db: Session = Depends(get_db),
) -> FermentationReading:
    _get_batch_or_404(db, batch_id)

    reading = FermentationReading(
        batch_id=batch_id,
        recorded_at=payload.recorded_at or datetime.utcnow(),
        gravity=payload.gravity,
        temp_c=payload.temp_c,
        source=payload.source,
        notes=payload.notes,
    )
    db.add(reading)
    db.commit()
    db.refresh(reading)
    logger.info("Recorded gravity %.4f for batch %s (%s)", reading.gravity, batch_id, reading.source)
    return reading


@router.get("/{batch_id}/readings", response_model=list[FermentationReadingRead])
def list_readings(batch_id: int, db: Session = Depends(get_db)) -> list[FermentationReading]:
    _get_batch_or_404(db, batch_id)
    return _list_readings(db, batch_id)


@router.get("/{batch_id}/fermentation", response_model=FermentationTrendRead)
def get_fermentation_trend(batch_id: int, db: Session = Depends(get_db)) -> FermentationTrendRead:
    batch = _get_batch_or_404(db, batch_id)
    rows = _list_readings(db, batch_id)
    readings = [_to_gravity_reading(row) for row in rows]

    trend = build_fermentation_trend(readings)
    target_gravity = batch.target_fg if batch.target_fg is not None else DEFAULTS.final_gravity
    prediction = predict_completion(readings, target_gravity)
    if prediction is None:
        prediction_read = FermentationPredictionRead(available=False, target_gravity=target_gravity)
    else:
        prediction_read = FermentationPredictionRead(available=True, **asdict(prediction))

    attenuation: float | None = None
    abv: float | None = None
    if batch.measured_og is not None and trend.latest_gravity is not None:
        attenuation = attenuation_pct(batch.measured_og, trend.latest_gravity)
        abv = estimate_abv(batch.measured_og, trend.latest_gravity)

    return FermentationTrendRead(
        batch_id=batch.id,
        reading_count=trend.reading_count,
        first_recorded_at=trend.first_recorded_at,
        latest_recorded_at=trend.latest_recorded_at,
        latest_gravity=trend.latest_gravity,
        latest_temp_c=trend.latest_temperature_c,
        gravity_drop=trend.gravity_drop,
        average_hourly_gravity_drop=trend.average_hourly_gravity_drop,
        apparent_attenuation_pct=attenuation,
        current_abv=abv,
        plateau_risk=trend.plateau_risk,
        temperature_warning=trend.temperature_warning,
        alerts=list(trend.alerts),
        prediction=prediction_read,
        readings=[FermentationReadingRead.model_validate(row) for row in rows],
    )


@router.get("/{batch_id}/maturity", response_model=MaturityRead)
def get_batch_maturity(batch_id: int, db: Session = Depends(get_db)) -> MaturityRead:
    batch = _get_batch_or_404(db, batch_id)
    info = calculate_maturity(
        batch.bottled_on,
        conditioning_days_min=batch.conditioning_days_min,
        conditioning_days_max=batch.conditioning_days_max,
        style=batch.style,
    )
    if info is None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Batch has not been bottled yet")
    return MaturityRead(**asdict(info))
