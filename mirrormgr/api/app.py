from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from mirrormgr.api.routes.health import router as health_router
from mirrormgr.api.routes.jobs import get_command_relay, get_job_service
from mirrormgr.api.routes.jobs import router as jobs_router
from mirrormgr.core.config import get_settings
from mirrormgr.core.logging import configure_logging
from mirrormgr.db.init_db import initialize_database

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    settings = get_settings()
    configure_logging(settings.log_level)
    initialize_database()
    logger.info("Run %s manager server.", settings.app_name)
    yield
    logger.info("Shutting down apiserver")
    if get_command_relay.cache_info().currsize:
        get_command_relay().close()
    get_job_service.cache_clear()
    get_command_relay.cache_clear()


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(title=settings.app_name, lifespan=lifespan)
    app.include_router(health_router, prefix="/api/v1")
    app.include_router(jobs_router, prefix="/api/v1")
    return app
