"""FastAPI application entry point."""

from __future__ import annotations

import logging

from fastapi import FastAPI

from .api.routes import couriers, health, intake, lockers, shipments
from .config import settings


def create_app() -> FastAPI:
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = FastAPI(title=settings.app_name)

    app.include_router(intake.router)
    app.include_router(couriers.router)
    app.include_router(lockers.router)
    app.include_router(shipments.router)
    app.include_router(health.router)

    logging.getLogger(__name__).info(f"Agent console ready; backend API base: {settings.api_base_url}")
    return app


app = create_app()
