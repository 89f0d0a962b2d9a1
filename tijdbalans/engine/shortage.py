# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Shortage detection with consecutive-week escalation."""

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field, replace

from .aggregator import TimeBalance
from .enums import EscalationLevel, Severity
from .formatting import format_duration
from .period import Period

logger = logging.getLogger(__name__)

CRITICAL_SHORTAGE_HOURS = 8.0
MEDIUM_ESCALATION_WEEKS = 2
HIGH_ESCALATION_WEEKS = 3


@dataclass(frozen=True)
class ShortageAlert:
    """Shortage of one person in one evaluation window."""

    user_id: str
    period: Period
    expected_hours: float
    actual_hours: float
    shortage_hours: float
    severity: Severity
    consecutive_weeks_short: int
    escalation_level: EscalationLevel
    action_required: bool
    manager_notified: bool = False
    auto_notification_sent: bool = False
    suggested_actions: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class ShortageNotification:
    """Notification sent automatically for a critical shortage."""

    user_id: str
    type: str
    message: str
    severity: Severity


def classify_severity(shortage_hours: float) -> Severity:
    """A full missed workday or more is critical."""
    if shortage_hours >= CRITICAL_SHORTAGE_HOURS:
        return Severity.CRITICAL
    return Severity.WARNING


def classify_escalation(consecutive_weeks: int) -> EscalationLevel:
    if consecutive_weeks >= HIGH_ESCALATION_WEEKS:
        return EscalationLevel.HIGH
    if consecutive_weeks >= MEDIUM_ESCALATION_WEEKS:
        return EscalationLevel.MEDIUM
    return EscalationLevel.LOW


def count_consecutive_short_weeks(history: Sequence[TimeBalance]) -> int:
    """Count trailing short weeks, scanning back from the newest.

    Args:
        history: Weekly balances ordered oldest to newest.

    Returns:
        Number of consecutive short weeks at the end of the history.
    """
    consecutive = 0
    for balance in reversed(history):
        if balance.shortage_hours <= 0:
            break
        consecutive += 1
    return consecutive


def generate_shortage_actions(
    shortage_hours: float, consecutive_weeks: int
) -> list[str]:
    """Suggest follow-up actions for a shortage."""
    actions = []

    if shortage_hours <= 4:
        actions.append("Plan extra uren deze week")
        actions.append("Overleg met manager over flexibele uren")
    elif shortage_hours <= 8:
        actions.append("Plan inhaaldag deze week")
        actions.append("Gebruik compensatie uren indien beschikbaar")
        actions.append("Overleg met planning over extra shifts")
    else:
        actions.append("Urgent: Plan meerdere inhaaldagen")
        actions.append("Manager gesprek vereist")
        actions.append("Evalueer werkbelasting en planning")

    if consecutive_weeks >= MEDIUM_ESCALATION_WEEKS:
        actions.append("Structureel probleem: evalueer contract uren")
        actions.append("Bespreek werkdruk met HR")

    if consecutive_weeks >= HIGH_ESCALATION_WEEKS:
        actions.append("Escalatie naar management")
        actions.append("Mogelijk contract aanpassing nodig")

    return actions


def build_shortage_alert(
    balance: TimeBalance, history: Sequence[TimeBalance] = ()
) -> ShortageAlert | None:
    """Build the alert for one balance.

    The streak counts the current window plus the trailing short weeks
    of its history. Missing history just shortens the streak.

    Args:
        balance: The current balance.
        history: Prior weekly balances of the same user, oldest first,
            not including the current window.

    Returns:
        The alert, or None when there is no shortage.
    """
    if balance.shortage_hours <= 0:
        return None

    consecutive = 1 + count_consecutive_short_weeks(history)
    return ShortageAlert(
        user_id=balance.user_id,
        period=balance.period,
        expected_hours=balance.expected_hours,
        actual_hours=balance.actual_hours,
        shortage_hours=balance.shortage_hours,
        severity=classify_severity(balance.shortage_hours),
        consecutive_weeks_short=consecutive,
        escalation_level=classify_escalation(consecutive),
        action_required=consecutive >= MEDIUM_ESCALATION_WEEKS,
        manager_notified=consecutive >= HIGH_ESCALATION_WEEKS,
        suggested_actions=tuple(
            generate_shortage_actions(balance.shortage_hours, consecutive)
        ),
    )


def detect_shortages(
    balances: Iterable[TimeBalance],
    history: Mapping[str, Sequence[TimeBalance]] | None = None,
) -> list[ShortageAlert]:
    """Produce shortage alerts for a set of current balances.

    Alerts are returned in input order; consumers sort as needed.

    Args:
        balances: One current balance per user.
        history: Prior weekly balances per user id, oldest first.

    Returns:
        Alerts for every user with a shortage.
    """
    history = history or {}
    alerts = []
    for balance in balances:
        alert = build_shortage_alert(balance, history.get(balance.user_id, ()))
        if alert is not None:
            alerts.append(alert)
    return alerts


def process_auto_notifications(
    alerts: Iterable[ShortageAlert],
) -> tuple[list[ShortageAlert], list[ShortageNotification]]:
    """Notify users with a critical shortage that were not notified yet.

    Args:
        alerts: Current shortage alerts.

    Returns:
        Tuple of (alerts with the notification state updated,
        notifications sent).
    """
    updated: list[ShortageAlert] = []
    notifications: list[ShortageNotification] = []

    for alert in alerts:
        if alert.severity == Severity.CRITICAL and not alert.auto_notification_sent:
            logger.info(
                f"Auto notification for user {alert.user_id}: "
                f"{alert.shortage_hours:.2f} hours short"
            )
            notifications.append(
                ShortageNotification(
                    user_id=alert.user_id,
                    type="SHORTAGE_ALERT",
                    message=(
                        f"Je hebt {format_duration(alert.shortage_hours)} "
                        "te kort gewerkt"
                    ),
                    severity=alert.severity,
                )
            )
            alert = replace(alert, auto_notification_sent=True)
        updated.append(alert)

    return updated, notifications
