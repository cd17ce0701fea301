from fastapi import APIRouter

from brewcalc.core.config import settings
from brewcalc.schemas.observability import HealthRead, ObservabilityMetricsResponse
from brewcalc.services.observability import observability_tracker

router = APIRouter(tags=["observability"])


@router.get("/health", response_model=HealthRead)
def health() -> HealthRead:
    return HealthRead(status="ok", app_name=settings.app_name, residual_co2_model=settings.residual_co2_model)


@router.get("/observability/metrics", response_model=ObservabilityMetricsResponse)
def get_metrics() -> ObservabilityMetricsResponse:
    return ObservabilityMetricsResponse(**observability_tracker.snapshot())
