# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Compensation (time-for-time) schemas."""

import datetime

from pydantic import BaseModel, ConfigDict, Field

from tijdbalans.engine.enums import ApprovalStatus, CompensationType


class CompensationUseRequest(BaseModel):
    """Schema for taking compensation time on one day.

    Hours are checked by the ledger so that a non-positive value is
    reported like any other invalid request.
    """

    date: datetime.date
    hours: float
    type: CompensationType = CompensationType.CUSTOM
    reason: str | None = Field(None, max_length=500)


class BulkCompensationCreate(BaseModel):
    """Schema for taking compensation time on several days."""

    dates: list[datetime.date]
    hours_per_day: float
    type: CompensationType = CompensationType.CUSTOM
    reason: str | None = Field(None, max_length=500)


class CompensationRequestResponse(BaseModel):
    """Schema for a stored compensation request."""

    model_config = ConfigDict(from_attributes=True)

    id: str | None = None
    user_id: str
    date: datetime.date
    hours: float
    type: str
    reason: str | None = None
    status: ApprovalStatus
    requires_approval: bool
    remaining_balance: float


class BulkCompensationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    requests: list[CompensationRequestResponse]
    total_hours: float
    remaining_balance: float
    message: str


class CompensationOverviewResponse(BaseModel):
    """Schema for a person's compensation ledger."""

    user_id: str
    earned: float
    used: float
    balance: float
    can_use_compensation: bool
    max_usable_hours: float
    max_accrual_hours: float
    capped_hours: float
    weekend_hours: float
    evening_hours: float
    formatted_balance: str
    recommendations: list[str]
    pending_requests: list[CompensationRequestResponse]
