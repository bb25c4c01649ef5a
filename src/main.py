from fastapi import FastAPI
from pydantic_settings import BaseSettings
from contextlib import asynccontextmanager
import os
import logging

from routers.api import router as api_router
from schemas import AppHealthOK
from core.service_manager import service_manager
from core.config_loader import config_loader

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    app_name: str = "Soil Monitor API"
    debug: bool = True
    # Where readings come from: the built-in feed emulator (true) or sensor
    # nodes pushing snapshots to PUT /api/feed/sensors (false).
    # EMULATION_MODE overrides config/app_config.json
    emulation_mode: bool = os.getenv("EMULATION_MODE", "").lower() == "true" \
        if os.getenv("EMULATION_MODE") else config_loader.get_emulation_mode()


settings = Settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the feed views and the chart refresher, and the emulator when emulating."""
    try:
        logger.info(
            "Starting chart services, readings from %s",
            "the feed emulator" if settings.emulation_mode else "PUT /api/feed/sensors",
        )
        await service_manager.start_services(emulation=settings.emulation_mode)
    except Exception as e:
        logger.error("Failed to start chart services: %s", e)
        raise

    try:
        yield
    finally:
        logger.info("Stopping chart services")
        service_manager.stop_services()


app = FastAPI(title=settings.app_name, debug=settings.debug, lifespan=lifespan)


@app.get("/", tags=["meta"])
async def read_root() -> dict[str, str]:
    return {"message": settings.app_name}


@app.get("/health", tags=["meta"], response_model=AppHealthOK)
async def healthcheck() -> AppHealthOK:
    return AppHealthOK(status="ok", app=settings.app_name)


# mount API router under /api
app.include_router(api_router, prefix="/api")
logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
