# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Time balance, shortage and team report services."""

import logging
from collections import defaultdict
from dataclasses import replace
from datetime import date, datetime, time, timedelta
from uuid import UUID

from sqlalchemy.orm import Session

from tijdbalans.config import settings
from tijdbalans.engine.aggregator import (
    TimeBalance,
    WeeklyOvertimeSummary,
    calculate_time_balance,
    calculate_weekly_overtime,
)
from tijdbalans.engine.calendar import HolidayCalendar, PublicHolidayCalendar
from tijdbalans.engine.classifier import ClassifiedEntry, classify_entries
from tijdbalans.engine.compliance import ComplianceWarning, DutchComplianceValidator
from tijdbalans.engine.enums import ApprovalStatus
from tijdbalans.engine.errors import NotFound
from tijdbalans.engine.period import Period, previous_weeks
from tijdbalans.engine.policy import LaborPolicy
from tijdbalans.engine.reporting import TimeReport, generate_time_report
from tijdbalans.engine.shortage import (
    ShortageAlert,
    ShortageNotification,
    detect_shortages,
    process_auto_notifications,
)
from tijdbalans.models import Notification, TimeEntry, User

logger = logging.getLogger(__name__)

SHORTAGE_NOTIFICATION_TYPE = "SHORTAGE_ALERT"


def period_bounds(period: Period) -> tuple[datetime, datetime]:
    """Half-open datetime range covering every day of a period."""
    return (
        datetime.combine(period.start, time.min),
        datetime.combine(period.end + timedelta(days=1), time.min),
    )


def default_holiday_calendar() -> PublicHolidayCalendar:
    """Holiday calendar for the configured country and region."""
    return PublicHolidayCalendar(settings.holiday_country, settings.holiday_region)


def get_user(db: Session, user_id: UUID) -> User:
    """Get a user by ID.

    Raises:
        NotFound: If the user does not exist.
    """
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFound(f"User {user_id} not found")
    return user


def get_labor_policy(user: User) -> LaborPolicy:
    """Labor policy of a user: contract defaults plus work pattern overrides.

    Work pattern settings that cannot be applied are logged and skipped, so
    the user keeps the defaults of their contract type.
    """
    policy = settings.labor_policy(user.contract_type)
    try:
        overrides = user.policy_overrides
        if overrides:
            policy = policy.with_overrides(**overrides)
    except ValueError as e:
        logger.warning(f"Ignoring work pattern settings of user {user.id}: {e}")
    return policy


class TimeBalanceService:
    """Service computing balances and shortages from stored entries."""

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

    def load_entries(
        self,
        user_ids: list[UUID],
        period: Period,
    ) -> dict[UUID, list[TimeEntry]]:
        """Load non-rejected entries starting inside a period.

        Args:
            user_ids: Users to load entries for.
            period: The period.

        Returns:
            Entries per user ID, ordered by start time.
        """
        start, end = period_bounds(period)
        rows = (
            self.db.query(TimeEntry)
            .filter(
                TimeEntry.user_id.in_(user_ids),
                TimeEntry.start_time >= start,
                TimeEntry.start_time < end,
                TimeEntry.approval_status != ApprovalStatus.REJECTED.value,
            )
            .order_by(TimeEntry.start_time)
            .all()
        )
        result: dict[UUID, list[TimeEntry]] = defaultdict(list)
        for row in rows:
            result[row.user_id].append(row)
        return result

    def classify(
        self, entries: list[TimeEntry], policy: LaborPolicy
    ) -> list[ClassifiedEntry]:
        """Snapshot entries and classify them under a policy."""
        return classify_entries(
            [e.to_raw() for e in entries], policy, self.holiday_calendar
        )

    def _balance_for(
        self, user: User, entries: list[TimeEntry], period: Period
    ) -> TimeBalance:
        policy = get_labor_policy(user)
        return calculate_time_balance(
            str(user.id), self.classify(entries, policy), period, policy
        )

    def get_balance(self, user_id: UUID, period: Period) -> TimeBalance:
        """Calculate the time balance of one user.

        Args:
            user_id: The user ID.
            period: The evaluation period.

        Returns:
            The time balance.

        Raises:
            NotFound: If the user does not exist.
        """
        user = get_user(self.db, user_id)
        entries = self.load_entries([user.id], period).get(user.id, [])
        balance = self._balance_for(user, entries, period)
        if balance.invalid_entry_count:
            logger.warning(
                f"User {user_id}: {balance.invalid_entry_count} invalid entries "
                f"in {period.label()}"
            )
        return balance

    def get_weekly_overtime(
        self, user_id: UUID, week_of: date
    ) -> WeeklyOvertimeSummary:
        """Calculate daily and weekly overtime for the week containing a date.

        Args:
            user_id: The user ID.
            week_of: Any date in the week.

        Returns:
            The weekly overtime summary.

        Raises:
            NotFound: If the user does not exist.
        """
        user = get_user(self.db, user_id)
        week = Period.week_of(week_of)
        policy = get_labor_policy(user)
        entries = self.load_entries([user.id], week).get(user.id, [])
        return calculate_weekly_overtime(
            str(user.id), self.classify(entries, policy), week, policy
        )

    def check_compliance(
        self, user_id: UUID, period: Period
    ) -> list[ComplianceWarning]:
        """Check the working-time rules for a user's entries in a period.

        Args:
            user_id: The user ID.
            period: The period.

        Returns:
            Per-shift findings in shift order, then one weekly finding per
            week that exceeds a limit.

        Raises:
            NotFound: If the user does not exist.
        """
        user = get_user(self.db, user_id)
        policy = get_labor_policy(user)
        entries = self.load_entries([user.id], period).get(user.id, [])
        classified = [
            c for c in self.classify(entries, policy) if period.contains(c.work_date)
        ]

        validator = DutchComplianceValidator(policy)
        warnings = validator.validate_entries(classified)

        weeks: dict[date, list[ClassifiedEntry]] = defaultdict(list)
        for entry in classified:
            weeks[Period.week_of(entry.work_date).start].append(entry)
        for week_start in sorted(weeks):
            warnings.extend(validator.validate_weekly_hours(weeks[week_start]))
        return warnings

    def list_active_users(self) -> list[User]:
        """Get all non-archived users ordered by name."""
        return (
            self.db.query(User)
            .filter(User.archived.is_(False))
            .order_by(User.name)
            .all()
        )

    def get_team_balances(
        self, period: Period, users: list[User] | None = None
    ) -> list[TimeBalance]:
        """Calculate balances for every active user."""
        users = self.list_active_users() if users is None else users
        if not users:
            return []
        entries = self.load_entries([u.id for u in users], period)
        return [self._balance_for(u, entries.get(u.id, []), period) for u in users]

    def get_weekly_history(
        self,
        users: list[User],
        period: Period,
        weeks: int | None = None,
    ) -> dict[str, list[TimeBalance]]:
        """Calculate the weekly balances preceding a period.

        Args:
            users: The users.
            period: The current period.
            weeks: Number of prior weeks, the configured history by default.

        Returns:
            Weekly balances per user ID string, oldest first. Weeks that
            ended before the user was created are left out.
        """
        weeks = settings.shortage_history_weeks if weeks is None else weeks
        history: dict[str, list[TimeBalance]] = {str(u.id): [] for u in users}
        prior = previous_weeks(period, weeks)
        if not users or not prior:
            return history

        span = Period(prior[0].start, prior[-1].end)
        entries = self.load_entries([u.id for u in users], span)
        for user in users:
            policy = get_labor_policy(user)
            classified = self.classify(entries.get(user.id, []), policy)
            history[str(user.id)] = [
                calculate_time_balance(str(user.id), classified, week, policy)
                for week in prior
                if user.created_at is None or week.end >= user.created_at.date()
            ]
        return history

    def detect_shortages(self, period: Period) -> list[ShortageAlert]:
        """Detect shortages of all active users, most severe first.

        Consecutive short weeks are counted over the configured number of
        weeks before the period. Alerts of users that were already notified
        about this period are marked as such.

        Args:
            period: The evaluation period.

        Returns:
            Shortage alerts sorted by shortage hours, descending.
        """
        users = self.list_active_users()
        balances = self.get_team_balances(period, users)
        history = self.get_weekly_history(users, period)
        alerts = detect_shortages(balances, history)

        notified = self._notified_user_ids(period)
        alerts = [
            _mark_notified(a) if a.user_id in notified else a for a in alerts
        ]
        alerts.sort(key=lambda a: a.shortage_hours, reverse=True)
        logger.info(f"Detected {len(alerts)} shortages in {period.label()}")
        return alerts

    def _notified_user_ids(self, period: Period) -> set[str]:
        rows = (
            self.db.query(Notification.user_id)
            .filter(
                Notification.type == SHORTAGE_NOTIFICATION_TYPE,
                Notification.period_start == period.start,
                Notification.period_end == period.end,
            )
            .all()
        )
        return {str(row.user_id) for row in rows}

    def send_shortage_notifications(
        self, period: Period
    ) -> list[ShortageNotification]:
        """Notify users with a critical shortage who were not notified yet.

        Args:
            period: The evaluation period.

        Returns:
            The notifications that were stored.
        """
        alerts = self.detect_shortages(period)
        _, notifications = process_auto_notifications(alerts)

        for notification in notifications:
            self.db.add(
                Notification(
                    user_id=UUID(notification.user_id),
                    type=notification.type,
                    message=notification.message,
                    severity=notification.severity.value,
                    period_start=period.start,
                    period_end=period.end,
                )
            )
        self.db.commit()
        return notifications

    def generate_report(self, period: Period) -> TimeReport:
        """Build the team report for a period."""
        users = self.list_active_users()
        balances = self.get_team_balances(period, users)
        alerts = detect_shortages(balances, self.get_weekly_history(users, period))
        alerts.sort(key=lambda a: a.shortage_hours, reverse=True)
        return generate_time_report(balances, alerts)


def _mark_notified(alert: ShortageAlert) -> ShortageAlert:
    return replace(alert, auto_notification_sent=True)
