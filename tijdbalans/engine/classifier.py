# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Entry classification: temporal categories and net worked duration."""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from zoneinfo import ZoneInfo

from .calendar import HolidayCalendar
from .enums import WORKED_TYPES, WorkType
from .policy import LaborPolicy

logger = logging.getLogger(__name__)

EVENING_START_HOUR = 18
NIGHT_START_HOUR = 22
NIGHT_END_HOUR = 6

# Substrings used to tag legacy entries that were stored without a work type.
LEGACY_OVERTIME_MARKERS = ("overtime",)
LEGACY_COMPENSATION_MARKERS = ("compensatie opgenomen",)


@dataclass(frozen=True)
class RawTimeEntry:
    """One clock session as recorded by the clock-in/out flow."""

    id: str
    user_id: str
    clock_in: datetime
    clock_out: datetime | None = None
    total_break_minutes: int = 0
    work_type: WorkType | None = WorkType.REGULAR
    approved: bool = False
    location: str | None = None
    notes: str | None = None
    description: str | None = None
    is_holiday: bool | None = None


@dataclass(frozen=True)
class EntryWarning:
    """Anomaly found while classifying an entry."""

    entry_id: str
    code: str
    message: str


@dataclass(frozen=True)
class ClassifiedEntry:
    """A raw entry with its derived categories and durations."""

    entry: RawTimeEntry
    work_type: WorkType
    work_date: date
    is_weekend: bool
    is_evening: bool
    is_night: bool
    is_holiday: bool
    gross_hours: float
    net_hours: float
    auto_break_applied: bool = False
    auto_break_hours: float = 0.0
    warning: EntryWarning | None = None

    @property
    def is_open(self) -> bool:
        """Check if the session is still running."""
        return self.entry.clock_out is None

    @property
    def is_worked(self) -> bool:
        """Check if this entry counts as time worked."""
        return self.work_type in WORKED_TYPES

    @property
    def break_hours(self) -> float:
        """Manually logged break in hours."""
        return max(0, self.entry.total_break_minutes) / 60


def resolve_work_type(entry: RawTimeEntry) -> WorkType:
    """Determine the work type of an entry.

    The explicit tag wins. Entries stored before tagging existed have no
    work type; for those the notes and description are searched for the
    markers the old free-text convention used.

    Args:
        entry: The raw entry.

    Returns:
        The resolved work type.
    """
    if entry.work_type is not None:
        return WorkType(entry.work_type)

    text = " ".join(t for t in (entry.notes, entry.description) if t).lower()
    if any(marker in text for marker in LEGACY_COMPENSATION_MARKERS):
        return WorkType.COMPENSATION_USED
    if any(marker in text for marker in LEGACY_OVERTIME_MARKERS):
        return WorkType.OVERTIME
    return WorkType.REGULAR


def to_local(moment: datetime, timezone: str) -> datetime:
    """Convert an aware datetime to local time; naive values are local."""
    if moment.tzinfo is None:
        return moment
    return moment.astimezone(ZoneInfo(timezone))


def is_weekend(moment: datetime) -> bool:
    return moment.weekday() >= 5  # Saturday = 5, Sunday = 6


def is_evening(moment: datetime) -> bool:
    return moment.hour >= EVENING_START_HOUR


def is_night(moment: datetime) -> bool:
    return moment.hour >= NIGHT_START_HOUR or moment.hour < NIGHT_END_HOUR


def calculate_gross_hours(clock_in: datetime, clock_out: datetime) -> float:
    """Calculate hours between clock-in and clock-out (may be negative)."""
    return (clock_out - clock_in).total_seconds() / 3600


def classify_entry(
    entry: RawTimeEntry,
    policy: LaborPolicy,
    holiday_calendar: HolidayCalendar | None = None,
) -> ClassifiedEntry:
    """Classify one entry and compute its net worked duration.

    Categories are derived from the local clock-in time. An open session
    contributes nothing. A session whose clock-out precedes its clock-in
    contributes nothing and carries an ``INVALID_ENTRY`` warning. When no
    break was logged on a worked session longer than the policy's
    auto-break threshold, the automatic break is deducted and reported
    separately.

    Args:
        entry: The raw entry.
        policy: The labor policy.
        holiday_calendar: Optional holiday calendar, used when the entry
            carries no holiday flag of its own.

    Returns:
        The classified entry.
    """
    local_in = to_local(entry.clock_in, policy.timezone)
    work_type = resolve_work_type(entry)

    if entry.is_holiday is not None:
        holiday = entry.is_holiday
    elif holiday_calendar is not None:
        holiday = holiday_calendar.is_holiday(local_in.date())
    else:
        holiday = False

    warning = None
    gross_hours = 0.0
    if entry.clock_out is not None:
        gross_hours = calculate_gross_hours(entry.clock_in, entry.clock_out)
        if gross_hours < 0:
            warning = EntryWarning(
                entry_id=entry.id,
                code="INVALID_ENTRY",
                message=(
                    f"Uitkloktijd {entry.clock_out.isoformat()} ligt voor "
                    f"inkloktijd {entry.clock_in.isoformat()}"
                ),
            )
            logger.warning(
                f"Entry {entry.id} of user {entry.user_id} ends before it "
                "starts - excluded from balance"
            )
            gross_hours = 0.0

    break_minutes = max(0, entry.total_break_minutes)
    auto_break_hours = 0.0
    if (
        work_type in WORKED_TYPES
        and break_minutes == 0
        and gross_hours > policy.auto_break_after_hours
    ):
        auto_break_hours = policy.auto_break_hours

    net_hours = max(0.0, gross_hours - break_minutes / 60 - auto_break_hours)

    return ClassifiedEntry(
        entry=entry,
        work_type=work_type,
        work_date=local_in.date(),
        is_weekend=is_weekend(local_in),
        is_evening=is_evening(local_in),
        is_night=is_night(local_in),
        is_holiday=holiday,
        gross_hours=gross_hours,
        net_hours=net_hours,
        auto_break_applied=auto_break_hours > 0,
        auto_break_hours=auto_break_hours,
        warning=warning,
    )


def classify_entries(
    entries: list[RawTimeEntry],
    policy: LaborPolicy,
    holiday_calendar: HolidayCalendar | None = None,
) -> list[ClassifiedEntry]:
    """Classify a list of entries."""
    return [classify_entry(e, policy, holiday_calendar) for e in entries]
