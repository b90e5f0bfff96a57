"""Entry point for the Twilio call-flow webhook service."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from api.routes import build_router
from config.settings import get_cookie_secret, get_settings
from twism.errors import ConfigurationError

LOGGER = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        get_cookie_secret()
    except ConfigurationError as exc:
        LOGGER.warning("%s; webhook requests will fail until it is set.", exc.detail)
    yield


settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)

app = FastAPI(
    title="Twism Call Flows",
    description="Cookie-backed Twilio call-flow state machines.",
    lifespan=lifespan,
)
app.include_router(build_router(settings.twism_mount_path))
