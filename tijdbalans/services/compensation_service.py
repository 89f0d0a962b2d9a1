# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Compensation (time-for-time) services."""

import logging
from collections.abc import Sequence
from dataclasses import replace
from datetime import date, datetime, time, timedelta
from uuid import UUID

from sqlalchemy import or_
from sqlalchemy.orm import Session

from tijdbalans.config import settings
from tijdbalans.engine.calendar import HolidayCalendar
from tijdbalans.engine.classifier import classify_entries
from tijdbalans.engine.enums import ApprovalStatus, CompensationType, WorkType
from tijdbalans.engine.errors import InvalidRequest, NotFound, TimeBalanceError
from tijdbalans.engine.ledger import (
    LEDGER_TYPES,
    BulkCompensationResult,
    CompensationLedger,
    CompensationRequest,
    decide_request,
)
from tijdbalans.models import TimeEntry, User
from tijdbalans.services.time_balance_service import (
    default_holiday_calendar,
    get_labor_policy,
    get_user,
)

logger = logging.getLogger(__name__)

# Compensation days are booked as a block starting at this local time
COMPENSATION_START = time(9, 0)


def entry_to_request(
    entry: TimeEntry, remaining_balance: float
) -> CompensationRequest:
    """Convert a stored compensation-usage entry to a request."""
    hours = 0.0
    if entry.end_time is not None:
        hours = (entry.end_time - entry.start_time).total_seconds() / 3600
    status = ApprovalStatus(entry.approval_status)
    return CompensationRequest(
        id=str(entry.id),
        user_id=str(entry.user_id),
        date=entry.start_time.date(),
        hours=hours,
        type=entry.compensation_type or CompensationType.CUSTOM.value,
        reason=entry.notes,
        requires_approval=status == ApprovalStatus.PENDING,
        remaining_balance=remaining_balance,
        status=status,
    )


class CompensationService:
    """Service for the compensation ledger and its requests."""

    def __init__(
        self, db: Session, holiday_calendar: HolidayCalendar | None = None
    ) -> None:
        """Initialize the service.

        Args:
            db: Database session.
            holiday_calendar: Calendar used for entries without a holiday
                flag; the configured public holidays when omitted.
        """
        self.db = db
        self.holiday_calendar = holiday_calendar or default_holiday_calendar()

    def _lock_user(self, user_id: UUID) -> User:
        """Load a user and lock its row until the transaction ends.

        Every balance-changing operation of a user takes this lock first,
        so concurrent requests of one user are applied one after another.
        """
        user = (
            self.db.query(User).filter(User.id == user_id).with_for_update().first()
        )
        if not user:
            raise NotFound(f"User {user_id} not found")
        return user

    def _ledger_entries(self, user_id: UUID, lookback: int) -> list[TimeEntry]:
        """Most recent closed ledger entries, untagged legacy rows included."""
        return (
            self.db.query(TimeEntry)
            .filter(
                TimeEntry.user_id == user_id,
                or_(
                    TimeEntry.work_type.in_([t.value for t in LEDGER_TYPES]),
                    TimeEntry.work_type.is_(None),
                ),
                TimeEntry.end_time.isnot(None),
                TimeEntry.approval_status != ApprovalStatus.REJECTED.value,
            )
            .order_by(TimeEntry.start_time.desc())
            .limit(lookback)
            .all()
        )

    def _build_ledger(self, user: User) -> CompensationLedger:
        policy = get_labor_policy(user)
        lookback = settings.compensation_lookback_entries
        rows = self._ledger_entries(user.id, lookback)
        classified = classify_entries(
            [r.to_raw() for r in rows], policy, self.holiday_calendar
        )
        return CompensationLedger.from_entries(
            str(user.id), classified, policy, lookback=lookback
        )

    def get_ledger(self, user_id: UUID) -> CompensationLedger:
        """Get the compensation ledger of a user.

        Args:
            user_id: The user ID.

        Returns:
            The ledger.

        Raises:
            NotFound: If the user does not exist.
        """
        return self._build_ledger(get_user(self.db, user_id))

    def list_requests(
        self,
        user_id: UUID,
        status: ApprovalStatus | None = None,
    ) -> list[CompensationRequest]:
        """List compensation requests of a user, newest first.

        Args:
            user_id: The user ID.
            status: Optional status filter.

        Returns:
            The requests.
        """
        query = self.db.query(TimeEntry).filter(
            TimeEntry.user_id == user_id,
            TimeEntry.work_type == WorkType.COMPENSATION_USED.value,
        )
        if status:
            query = query.filter(TimeEntry.approval_status == status.value)
        entries = query.order_by(TimeEntry.start_time.desc()).all()

        balance = self.get_ledger(user_id).balance
        return [entry_to_request(e, balance) for e in entries]

    def _validate_dates(
        self, user_id: UUID, dates: Sequence[date], today: date
    ) -> None:
        """Reject past dates and dates that already have compensation."""
        for day in dates:
            if day < today:
                raise InvalidRequest(
                    "Kan geen compensatie aanvragen voor een datum in het verleden"
                )

        start = datetime.combine(min(dates), time.min)
        end = datetime.combine(max(dates) + timedelta(days=1), time.min)
        existing = (
            self.db.query(TimeEntry)
            .filter(
                TimeEntry.user_id == user_id,
                TimeEntry.work_type == WorkType.COMPENSATION_USED.value,
                TimeEntry.approval_status != ApprovalStatus.REJECTED.value,
                TimeEntry.start_time >= start,
                TimeEntry.start_time < end,
            )
            .all()
        )
        taken = sorted(set(dates) & {e.start_time.date() for e in existing})
        if taken:
            raise InvalidRequest(
                "Er is al compensatie aangevraagd voor "
                f"{taken[0].strftime('%d-%m-%Y')}"
            )

    def _store(self, request: CompensationRequest) -> TimeEntry:
        start = datetime.combine(request.date, COMPENSATION_START)
        entry = TimeEntry(
            user_id=UUID(request.user_id),
            start_time=start,
            end_time=start + timedelta(hours=request.hours),
            total_break_minutes=0,
            work_type=WorkType.COMPENSATION_USED.value,
            approval_status=request.status.value,
            compensation_type=request.type,
            description=f"Compensatie opgenomen ({request.type})",
            notes=request.reason,
        )
        if request.status == ApprovalStatus.APPROVED:
            entry.decided_at = datetime.now()
        self.db.add(entry)
        return entry

    def request_compensation(
        self,
        user_id: UUID,
        request_date: date,
        hours: float,
        compensation_type: CompensationType = CompensationType.CUSTOM,
        reason: str | None = None,
        today: date | None = None,
    ) -> CompensationRequest:
        """Request compensation time for one day.

        Reading the balance, validating and storing run in one transaction
        while the user's row is locked.

        Args:
            user_id: The user ID.
            request_date: The day off.
            hours: Hours to take.
            compensation_type: Reason category.
            reason: Optional free-text reason.
            today: Reference date for the past-date check.

        Returns:
            The stored request.

        Raises:
            NotFound: If the user does not exist.
            InvalidRequest: For past or already booked dates or bad hours.
            InsufficientBalance: If the balance does not cover the hours.
        """
        today = today or date.today()
        try:
            user = self._lock_user(user_id)
            self._validate_dates(user.id, [request_date], today)
            ledger = self._build_ledger(user)
            request = ledger.request(
                request_date, hours, CompensationType(compensation_type).value, reason
            )
            entry = self._store(request)
            self.db.commit()
        except TimeBalanceError:
            self.db.rollback()
            raise

        self.db.refresh(entry)
        logger.info(
            f"User {user_id} requested {hours:.2f}h compensation on "
            f"{request_date} ({request.status.value})"
        )
        return replace(request, id=str(entry.id))

    def request_bulk_compensation(
        self,
        user_id: UUID,
        dates: Sequence[date],
        hours_per_day: float,
        compensation_type: CompensationType = CompensationType.CUSTOM,
        reason: str | None = None,
        today: date | None = None,
    ) -> BulkCompensationResult:
        """Request compensation time for several days at once.

        Either every day is stored or none is.

        Args:
            user_id: The user ID.
            dates: The days off.
            hours_per_day: Hours to take on each day.
            compensation_type: Reason category shared by all days.
            reason: Optional free-text reason shared by all days.
            today: Reference date for the past-date check.

        Returns:
            The stored requests and the remaining balance.

        Raises:
            NotFound: If the user does not exist.
            InvalidRequest: For empty, duplicate, past or booked dates.
            InsufficientBalance: If the balance does not cover the total.
        """
        today = today or date.today()
        try:
            user = self._lock_user(user_id)
            ledger = self._build_ledger(user)
            result = ledger.request_bulk(
                dates,
                hours_per_day,
                CompensationType(compensation_type).value,
                reason,
            )
            self._validate_dates(user.id, dates, today)
            entries = [self._store(r) for r in result.requests]
            self.db.commit()
        except TimeBalanceError:
            self.db.rollback()
            raise

        stored = []
        for request, entry in zip(result.requests, entries, strict=True):
            self.db.refresh(entry)
            stored.append(replace(request, id=str(entry.id)))

        logger.info(
            f"User {user_id} requested {result.total_hours:.2f}h compensation "
            f"over {len(stored)} days"
        )
        return replace(result, requests=tuple(stored))

    def _get_request_entry(
        self, request_id: UUID, fresh: bool = False
    ) -> TimeEntry:
        query = self.db.query(TimeEntry).filter(
            TimeEntry.id == request_id,
            TimeEntry.work_type == WorkType.COMPENSATION_USED.value,
        )
        if fresh:
            # Overwrite any copy already loaded in this session
            query = query.populate_existing().with_for_update()
        entry = query.first()
        if not entry:
            raise NotFound(f"Compensation request {request_id} not found")
        return entry

    def decide(
        self,
        request_id: UUID,
        approve: bool,
        decided_by: UUID | None = None,
    ) -> CompensationRequest:
        """Approve or reject a pending compensation request.

        Args:
            request_id: The request ID.
            approve: True to approve, False to reject.
            decided_by: Optional ID of the approving manager.

        Returns:
            The decided request.

        Raises:
            NotFound: If the request does not exist.
            AlreadyApproved: If the request was approved before.
            RequestAlreadyDecided: If the request was rejected before.
        """
        entry = self._get_request_entry(request_id)
        try:
            self._lock_user(entry.user_id)
            entry = self._get_request_entry(request_id, fresh=True)
            decided = decide_request(entry_to_request(entry, 0.0), approve)
            entry.approval_status = decided.status.value
            entry.approved_by = decided_by
            entry.decided_at = datetime.now()
            self.db.commit()
        except TimeBalanceError:
            self.db.rollback()
            raise

        self.db.refresh(entry)
        logger.info(
            f"Compensation request {request_id} {decided.status.value.lower()}"
        )
        balance = self.get_ledger(entry.user_id).balance
        return replace(decided, remaining_balance=balance)
