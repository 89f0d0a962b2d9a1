# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Time balance, shortage and compensation API routes."""

from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from tijdbalans.api.deps import get_db
from tijdbalans.engine.aggregator import TimeBalance
from tijdbalans.engine.enums import ApprovalStatus, Severity
from tijdbalans.engine.errors import (
    InsufficientBalance,
    InvalidRequest,
    NotFound,
    RequestAlreadyDecided,
)
from tijdbalans.engine.formatting import (
    format_duration,
    format_time_balance,
    safe_percentage,
)
from tijdbalans.engine.ledger import CompensationRequest
from tijdbalans.engine.period import Period, PeriodPreset
from tijdbalans.engine.reporting import (
    generate_compensation_recommendations,
    generate_personal_alerts,
    generate_personal_recommendations,
    generate_team_shortage_recommendations,
)
from tijdbalans.engine.shortage import ShortageAlert
from tijdbalans.models import User
from tijdbalans.schemas.balance import (
    ComplianceWarningResponse,
    FormattedBalance,
    NotificationRunResponse,
    PeriodResponse,
    PersonalAlertResponse,
    ShortageAlertResponse,
    ShortageNotificationResponse,
    ShortageOverviewResponse,
    TeamInsightResponse,
    TeamReportResponse,
    TeamSummaryResponse,
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
from tijdbalans.services.compensation_service import CompensationService
from tijdbalans.services.time_balance_service import TimeBalanceService

router = APIRouter()


# --- Helper functions ---


def _resolve_period(
    preset: PeriodPreset,
    start: date | None,
    end: date | None,
) -> Period:
    """Explicit start/end win over the named period."""
    if start is None and end is None:
        return Period.from_preset(preset)
    if start is None or end is None:
        raise HTTPException(
            status_code=400,
            detail="Both 'from' and 'to' are required for a custom period",
        )
    try:
        return Period(start, end)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from None


def _balance_to_response(balance: TimeBalance) -> TimeBalanceResponse:
    """Convert a TimeBalance to a response schema."""
    response = TimeBalanceResponse.model_validate(balance)
    response.productivity = safe_percentage(
        balance.actual_hours, balance.expected_hours
    )
    response.formatted = FormattedBalance(
        expected=format_duration(balance.expected_hours),
        actual=format_duration(balance.actual_hours),
        overtime=format_duration(balance.overtime_hours),
        shortage=format_duration(balance.shortage_hours),
        compensation=format_duration(balance.compensation_hours),
        net_compensation=format_duration(balance.net_compensation_hours),
    )
    response.summary = format_time_balance(balance)
    response.recommendations = generate_personal_recommendations(balance)
    response.alerts = [
        PersonalAlertResponse.model_validate(a)
        for a in generate_personal_alerts(balance)
    ]
    return response


def _alerts_to_response(
    db: Session, alerts: list[ShortageAlert]
) -> list[ShortageAlertResponse]:
    """Convert alerts to response schemas with user names."""
    user_ids = {UUID(a.user_id) for a in alerts}
    users = db.query(User).filter(User.id.in_(user_ids)).all() if user_ids else []
    names = {str(u.id): u.name for u in users}

    responses = []
    for alert in alerts:
        response = ShortageAlertResponse.model_validate(alert)
        response.user_name = names.get(alert.user_id)
        responses.append(response)
    return responses


def _request_to_response(request: CompensationRequest) -> CompensationRequestResponse:
    """Convert a CompensationRequest to a response schema."""
    return CompensationRequestResponse.model_validate(request)


def _insufficient_detail(e: InsufficientBalance) -> dict:
    return {
        "message": str(e),
        "requested": e.requested,
        "available": e.available,
        "shortfall": e.shortfall,
    }


# --- Time balance ---


@router.get("/balance", response_model=TimeBalanceResponse)
def get_balance(
    user_id: UUID = Query(...),
    period: PeriodPreset = Query(PeriodPreset.CURRENT_MONTH),
    start: date | None = Query(None, alias="from"),
    end: date | None = Query(None, alias="to"),
    db: Session = Depends(get_db),
) -> TimeBalanceResponse:
    """Get the time balance of a user over a period."""
    evaluation = _resolve_period(period, start, end)
    service = TimeBalanceService(db)
    try:
        balance = service.get_balance(user_id, evaluation)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e)) from None

    return _balance_to_response(balance)


@router.get("/weekly-overtime", response_model=WeeklyOvertimeResponse)
def get_weekly_overtime(
    user_id: UUID = Query(...),
    week_of: date = Query(default_factory=date.today),
    db: Session = Depends(get_db),
) -> WeeklyOvertimeResponse:
    """Get daily and weekly overtime for the week containing a date."""
    service = TimeBalanceService(db)
    try:
        summary = service.get_weekly_overtime(user_id, week_of)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e)) from None

    return WeeklyOvertimeResponse.model_validate(summary)


@router.get("/compliance", response_model=list[ComplianceWarningResponse])
def get_compliance(
    user_id: UUID = Query(...),
    period: PeriodPreset = Query(PeriodPreset.CURRENT_WEEK),
    start: date | None = Query(None, alias="from"),
    end: date | None = Query(None, alias="to"),
    db: Session = Depends(get_db),
) -> list[ComplianceWarningResponse]:
    """Check break, shift, rest and weekly limits for a user."""
    evaluation = _resolve_period(period, start, end)
    service = TimeBalanceService(db)
    try:
        warnings = service.check_compliance(user_id, evaluation)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e)) from None

    return [ComplianceWarningResponse.model_validate(w) for w in warnings]


# --- Shortages ---


@router.get("/shortages", response_model=ShortageOverviewResponse)
def list_shortages(
    period: PeriodPreset = Query(PeriodPreset.CURRENT_WEEK),
    start: date | None = Query(None, alias="from"),
    end: date | None = Query(None, alias="to"),
    db: Session = Depends(get_db),
) -> ShortageOverviewResponse:
    """List shortage alerts of all active users, most severe first."""
    evaluation = _resolve_period(period, start, end)
    service = TimeBalanceService(db)
    alerts = service.detect_shortages(evaluation)

    return ShortageOverviewResponse(
        period=PeriodResponse.model_validate(evaluation),
        alerts=_alerts_to_response(db, alerts),
        critical_count=sum(1 for a in alerts if a.severity == Severity.CRITICAL),
        warning_count=sum(1 for a in alerts if a.severity == Severity.WARNING),
        recommendations=generate_team_shortage_recommendations(alerts),
    )


@router.post("/shortages/notify", response_model=NotificationRunResponse)
def notify_shortages(
    period: PeriodPreset = Query(PeriodPreset.CURRENT_WEEK),
    start: date | None = Query(None, alias="from"),
    end: date | None = Query(None, alias="to"),
    db: Session = Depends(get_db),
) -> NotificationRunResponse:
    """Notify users with a critical shortage who were not notified yet."""
    evaluation = _resolve_period(period, start, end)
    service = TimeBalanceService(db)
    notifications = service.send_shortage_notifications(evaluation)

    return NotificationRunResponse(
        notifications_sent=len(notifications),
        notifications=[
            ShortageNotificationResponse.model_validate(n) for n in notifications
        ],
    )


# --- Team report ---


@router.get("/report", response_model=TeamReportResponse)
def get_team_report(
    period: PeriodPreset = Query(PeriodPreset.CURRENT_MONTH),
    start: date | None = Query(None, alias="from"),
    end: date | None = Query(None, alias="to"),
    db: Session = Depends(get_db),
) -> TeamReportResponse:
    """Get the team time report with recommendations."""
    evaluation = _resolve_period(period, start, end)
    service = TimeBalanceService(db)
    report = service.generate_report(evaluation)

    return TeamReportResponse(
        period=PeriodResponse.model_validate(evaluation),
        summary=TeamSummaryResponse.model_validate(report.summary),
        alerts=_alerts_to_response(db, report.alerts),
        recommendations=report.recommendations,
        insights=[TeamInsightResponse.model_validate(i) for i in report.insights],
    )


# --- Compensation ---


@router.get("/compensation", response_model=CompensationOverviewResponse)
def get_compensation(
    user_id: UUID = Query(...),
    db: Session = Depends(get_db),
) -> CompensationOverviewResponse:
    """Get the compensation ledger of a user."""
    service = CompensationService(db)
    try:
        ledger = service.get_ledger(user_id)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e)) from None

    pending = service.list_requests(user_id, status=ApprovalStatus.PENDING)
    return CompensationOverviewResponse(
        user_id=ledger.user_id,
        earned=ledger.earned,
        used=ledger.used,
        balance=ledger.balance,
        can_use_compensation=ledger.can_use_compensation,
        max_usable_hours=ledger.max_usable_hours,
        max_accrual_hours=ledger.policy.max_accrual_hours,
        capped_hours=ledger.capped_hours,
        weekend_hours=ledger.weekend_hours,
        evening_hours=ledger.evening_hours,
        formatted_balance=format_duration(ledger.balance),
        recommendations=generate_compensation_recommendations(ledger),
        pending_requests=[_request_to_response(r) for r in pending],
    )


@router.post(
    "/compensation/use",
    response_model=CompensationRequestResponse,
    status_code=201,
)
def use_compensation(
    data: CompensationUseRequest,
    user_id: UUID = Query(...),
    db: Session = Depends(get_db),
) -> CompensationRequestResponse:
    """Request compensation time for one day."""
    service = CompensationService(db)
    try:
        request = service.request_compensation(
            user_id=user_id,
            request_date=data.date,
            hours=data.hours,
            compensation_type=data.type,
            reason=data.reason,
        )
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e)) from None
    except InsufficientBalance as e:
        raise HTTPException(status_code=400, detail=_insufficient_detail(e)) from None
    except InvalidRequest as e:
        raise HTTPException(status_code=400, detail=str(e)) from None

    return _request_to_response(request)


@router.post(
    "/compensation/bulk",
    response_model=BulkCompensationResponse,
    status_code=201,
)
def use_compensation_bulk(
    data: BulkCompensationCreate,
    user_id: UUID = Query(...),
    db: Session = Depends(get_db),
) -> BulkCompensationResponse:
    """Request compensation time for several days at once."""
    service = CompensationService(db)
    try:
        result = service.request_bulk_compensation(
            user_id=user_id,
            dates=data.dates,
            hours_per_day=data.hours_per_day,
            compensation_type=data.type,
            reason=data.reason,
        )
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e)) from None
    except InsufficientBalance as e:
        raise HTTPException(status_code=400, detail=_insufficient_detail(e)) from None
    except InvalidRequest as e:
        raise HTTPException(status_code=400, detail=str(e)) from None

    return BulkCompensationResponse.model_validate(result)


def _decide(
    request_id: UUID, approve: bool, approver_id: UUID | None, db: Session
) -> CompensationRequestResponse:
    service = CompensationService(db)
    try:
        request = service.decide(request_id, approve, decided_by=approver_id)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e)) from None
    except RequestAlreadyDecided as e:
        raise HTTPException(status_code=409, detail=str(e)) from None

    return _request_to_response(request)


@router.post(
    "/compensation/{request_id}/approve",
    response_model=CompensationRequestResponse,
)
def approve_compensation(
    request_id: UUID,
    approver_id: UUID | None = Query(None),
    db: Session = Depends(get_db),
) -> CompensationRequestResponse:
    """Approve a pending compensation request."""
    return _decide(request_id, True, approver_id, db)


@router.post(
    "/compensation/{request_id}/reject",
    response_model=CompensationRequestResponse,
)
def reject_compensation(
    request_id: UUID,
    approver_id: UUID | None = Query(None),
    db: Session = Depends(get_db),
) -> CompensationRequestResponse:
    """Reject a pending compensation request."""
    return _decide(request_id, False, approver_id, db)
