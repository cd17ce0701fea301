from fastapi import FastAPI

from brewcalc import models  # noqa: F401
from brewcalc.api.batches import router as batch_router
from brewcalc.api.calculators import router as calculator_router
from brewcalc.api.observability import router as observability_router
from brewcalc.api.recipes import router as recipe_router
from brewcalc.core.config import settings
from brewcalc.core.database import Base, engine
from brewcalc.core.logging_config import configure_logging
from brewcalc.core.observability_middleware import ObservabilityMiddleware


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(title=settings.app_name)
    app.add_middleware(ObservabilityMiddleware)

    if settings.auto_create_tables:
        Base.metadata.create_all(bind=engine)

    app.include_router(observability_router, prefix=settings.api_prefix)
    app.include_router(calculator_router, prefix=settings.api_prefix)
    app.include_router(recipe_router, prefix=settings.api_prefix)
    app.include_router(batch_router, prefix=settings.api_prefix)
    return app


app = create_app()
