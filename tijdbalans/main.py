# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from tijdbalans import __version__
from tijdbalans.config import settings
from tijdbalans.database import engine
from tijdbalans.models import Base

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup and shutdown events."""
    logger.info(f"Preparing database at {engine.url.render_as_string()}")
    Base.metadata.create_all(bind=engine)

    yield

    logger.info("Shutting down...")
    engine.dispose()


app = FastAPI(
    title="Tijdbalans",
    description="Time balance, overtime and compensation engine",
    version=__version__,
    lifespan=lifespan,
)


@app.get("/health")
def health_check() -> dict:
    """Health check endpoint."""
    return {"status": "healthy"}


# Import and include API router after it's created
from tijdbalans.api.v1.router import api_router  # noqa: E402

app.include_router(api_router, prefix="/api/v1")
