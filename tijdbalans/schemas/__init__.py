# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Pydantic schemas for request/response validation."""

from tijdbalans.schemas.balance import (
    NotificationRunResponse,
    ShortageAlertResponse,
    ShortageOverviewResponse,
    TeamReportResponse,
    TimeBalanceResponse,
    WeeklyOvertimeResponse,
)
from tijdbalans.schemas.compensation import (
    BulkCompensationCreate,
    BulkCompensationResponse,
    CompensationOverviewResponse,
    CompensationRequestResponse,
    CompensationUseRequest,
)

__all__ = [
    "BulkCompensationCreate",
    "BulkCompensationResponse",
    "CompensationOverviewResponse",
    "CompensationRequestResponse",
    "CompensationUseRequest",
    "NotificationRunResponse",
    "ShortageAlertResponse",
    "ShortageOverviewResponse",
    "TeamReportResponse",
    "TimeBalanceResponse",
    "WeeklyOvertimeResponse",
]
