# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Time balance, shortage and report schemas."""

import datetime

from pydantic import BaseModel, ConfigDict

from tijdbalans.engine.enums import EscalationLevel, Severity


class PeriodResponse(BaseModel):
    """Inclusive evaluation period."""

    model_config = ConfigDict(from_attributes=True)

    start: datetime.date
    end: datetime.date


class EntryWarningResponse(BaseModel):
    """Non-fatal problem with a single entry."""

    model_config = ConfigDict(from_attributes=True)

    entry_id: str
    code: str
    message: str


class PersonalAlertResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    type: str
    message: str
    action: str
    priority: str


class FormattedBalance(BaseModel):
    """Display strings for the main balance figures."""

    expected: str
    actual: str
    overtime: str
    shortage: str
    compensation: str
    net_compensation: str


class TimeBalanceResponse(BaseModel):
    """Schema for a person's time balance over a period."""

    model_config = ConfigDict(from_attributes=True)

    user_id: str
    period: PeriodResponse
    expected_hours: float
    actual_hours: float
    regular_hours: float
    overtime_hours: float
    shortage_hours: float
    compensation_hours: float
    used_compensation_hours: float
    net_compensation_hours: float
    break_hours: float
    weekend_hours: float
    evening_hours: float
    night_hours: float
    holiday_hours: float
    auto_break_deducted: float
    daily_overtime_hours: float
    open_entry_count: int
    invalid_entry_count: int
    warnings: list[EntryWarningResponse]

    # Derived presentation data
    productivity: int | None = None
    formatted: FormattedBalance | None = None
    summary: str | None = None
    recommendations: list[str] = []
    alerts: list[PersonalAlertResponse] = []


class ShortageAlertResponse(BaseModel):
    """Schema for a shortage alert."""

    model_config = ConfigDict(from_attributes=True)

    user_id: str
    user_name: str | None = None
    period: PeriodResponse
    expected_hours: float
    actual_hours: float
    shortage_hours: float
    severity: Severity
    consecutive_weeks_short: int
    escalation_level: EscalationLevel
    action_required: bool
    manager_notified: bool
    auto_notification_sent: bool
    suggested_actions: list[str]


class ShortageOverviewResponse(BaseModel):
    """Shortage alerts with team-level advice."""

    period: PeriodResponse
    alerts: list[ShortageAlertResponse]
    critical_count: int
    warning_count: int
    recommendations: list[str]


class ShortageNotificationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: str
    type: str
    message: str
    severity: Severity


class NotificationRunResponse(BaseModel):
    """Result of an automatic notification pass."""

    notifications_sent: int
    notifications: list[ShortageNotificationResponse]


class DailyOvertimeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    entry_id: str
    work_date: datetime.date
    total_hours: float
    overtime_hours: float
    is_weekend: bool
    is_evening: bool
    is_night: bool


class WeeklyOvertimeResponse(BaseModel):
    """Schema for the weekly overtime calculation."""

    model_config = ConfigDict(from_attributes=True)

    user_id: str
    week: PeriodResponse
    total_worked_hours: float
    weekly_overtime_threshold: float
    weekly_overtime: float
    daily_overtime_total: float
    compensation_earned: float
    daily_breakdown: list[DailyOvertimeResponse]
    auto_approval_eligible: bool
    needs_approval: bool


class TeamSummaryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total_employees: int
    total_hours_worked: float
    total_regular_hours: float
    total_overtime_hours: float
    total_compensation_balance: float
    total_shortage_hours: float
    average_productivity: int | None


class TeamInsightResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    type: str
    title: str
    value: str
    details: str
    trend: str


class TeamReportResponse(BaseModel):
    """Schema for the team time report."""

    model_config = ConfigDict(from_attributes=True)

    period: PeriodResponse
    summary: TeamSummaryResponse
    alerts: list[ShortageAlertResponse]
    recommendations: list[str]
    insights: list[TeamInsightResponse]


class ComplianceWarningResponse(BaseModel):
    """Schema for a working-time compliance finding."""

    model_config = ConfigDict(from_attributes=True)

    level: str
    code: str
    message: str
    entry_id: str | None = None
    law_reference: str | None = None
