# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Main API router for v1 endpoints."""

from fastapi import APIRouter

from tijdbalans.api.v1 import time_tracking

api_router = APIRouter()

# Time balance and compensation routes
api_router.include_router(
    time_tracking.router, prefix="/time-tracking", tags=["time-tracking"]
)
