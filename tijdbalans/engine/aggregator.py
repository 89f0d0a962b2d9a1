# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Balance aggregation: fold classified entries into a time balance."""

import logging
from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date

from .classifier import ClassifiedEntry, EntryWarning
from .enums import WorkType
from .period import Period
from .policy import LaborPolicy

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TimeBalance:
    """Computed hours for one person over one period."""

    user_id: str
    period: Period
    expected_hours: float
    actual_hours: float
    regular_hours: float
    overtime_hours: float
    shortage_hours: float
    compensation_hours: float
    used_compensation_hours: float
    break_hours: float
    weekend_hours: float
    evening_hours: float
    night_hours: float
    holiday_hours: float
    auto_break_deducted: float
    daily_overtime_hours: float = 0.0
    open_entry_count: int = 0
    warnings: tuple[EntryWarning, ...] = field(default_factory=tuple)

    @property
    def net_compensation_hours(self) -> float:
        """Earned minus used compensation within the period."""
        return self.compensation_hours - self.used_compensation_hours

    @property
    def invalid_entry_count(self) -> int:
        return sum(1 for w in self.warnings if w.code == "INVALID_ENTRY")


def calculate_expected_hours(period: Period, contract_hours_per_week: float) -> float:
    """Scale the weekly contract hours to the length of a period."""
    if contract_hours_per_week <= 0:
        return 0.0
    return contract_hours_per_week * period.days / 7


def calculate_compensation_earned(
    overtime_hours: float,
    weekend_hours: float,
    evening_hours: float,
    night_hours: float,
    holiday_hours: float,
    policy: LaborPolicy,
) -> float:
    """Calculate compensation hours earned from overtime and premiums.

    Overtime converts at the compensation multiplier. Each enabled
    premium category adds its surplus (multiplier - 1) on top.

    Args:
        overtime_hours: Overtime hours.
        weekend_hours: Hours worked on weekends.
        evening_hours: Hours worked in the evening.
        night_hours: Hours worked at night.
        holiday_hours: Hours worked on holidays.
        policy: The labor policy.

    Returns:
        Compensation hours earned.
    """
    earned = overtime_hours * policy.compensation_multiplier
    if policy.weekend_compensation:
        earned += weekend_hours * (policy.weekend_multiplier - 1)
    if policy.evening_compensation:
        earned += evening_hours * (policy.evening_multiplier - 1)
    if policy.night_compensation:
        earned += night_hours * (policy.night_multiplier - 1)
    if policy.holiday_compensation:
        earned += holiday_hours * (policy.holiday_multiplier - 1)
    return earned


def calculate_time_balance(
    user_id: str,
    entries: Iterable[ClassifiedEntry],
    period: Period,
    policy: LaborPolicy,
    contract_hours_per_week: float | None = None,
) -> TimeBalance:
    """Fold classified entries into a time balance for one period.

    Only entries whose local clock-in date lies inside the period are
    counted. Worked entries (regular and overtime) make up the actual
    hours and the category breakdowns; compensation-usage entries make up
    the used compensation. Categories may overlap each other, the total
    never counts an entry twice.

    Args:
        user_id: The user the balance belongs to.
        entries: Classified entries of that user.
        period: The evaluation period.
        policy: The labor policy.
        contract_hours_per_week: Weekly contract hours, defaults to the
            policy's value. Zero means a zero-hours contract.

    Returns:
        The computed balance.
    """
    if contract_hours_per_week is None:
        contract_hours_per_week = policy.contract_hours_per_week

    actual = 0.0
    breaks = 0.0
    weekend = evening = night = holiday = 0.0
    auto_break = 0.0
    used_compensation = 0.0
    open_entries = 0
    warnings: list[EntryWarning] = []
    daily_hours: dict[date, float] = defaultdict(float)

    for classified in entries:
        if not period.contains(classified.work_date):
            logger.debug(
                f"Entry {classified.entry.id} on {classified.work_date} "
                f"lies outside {period.label()} - skipped"
            )
            continue
        if classified.warning is not None:
            warnings.append(classified.warning)
        if classified.is_open:
            open_entries += 1
            continue

        if classified.work_type == WorkType.COMPENSATION_USED:
            used_compensation += classified.net_hours
            continue
        if not classified.is_worked:
            continue

        hours = classified.net_hours
        actual += hours
        breaks += classified.break_hours
        auto_break += classified.auto_break_hours
        daily_hours[classified.work_date] += hours
        if classified.is_weekend:
            weekend += hours
        if classified.is_evening:
            evening += hours
        if classified.is_night:
            night += hours
        if classified.is_holiday:
            holiday += hours

    expected = calculate_expected_hours(period, contract_hours_per_week)
    overtime = max(0.0, actual - expected)
    shortage = max(0.0, expected - actual)
    daily_overtime = sum(
        max(0.0, hours - policy.daily_overtime_threshold)
        for hours in daily_hours.values()
    )

    return TimeBalance(
        user_id=user_id,
        period=period,
        expected_hours=expected,
        actual_hours=actual,
        regular_hours=min(actual, expected),
        overtime_hours=overtime,
        shortage_hours=shortage,
        compensation_hours=calculate_compensation_earned(
            overtime, weekend, evening, night, holiday, policy
        ),
        used_compensation_hours=used_compensation,
        break_hours=breaks,
        weekend_hours=weekend,
        evening_hours=evening,
        night_hours=night,
        holiday_hours=holiday,
        auto_break_deducted=auto_break,
        daily_overtime_hours=daily_overtime,
        open_entry_count=open_entries,
        warnings=tuple(warnings),
    )


# --- Weekly overtime ---


@dataclass(frozen=True)
class DailyOvertime:
    """Worked hours and overtime for one entry in a week."""

    entry_id: str
    work_date: date
    total_hours: float
    overtime_hours: float
    is_weekend: bool
    is_evening: bool
    is_night: bool


@dataclass(frozen=True)
class WeeklyOvertimeSummary:
    """Overtime and compensation earned by one person in one week."""

    user_id: str
    week: Period
    total_worked_hours: float
    weekly_overtime_threshold: float
    weekly_overtime: float
    daily_overtime_total: float
    compensation_earned: float
    daily_breakdown: tuple[DailyOvertime, ...]
    auto_approval_eligible: bool

    @property
    def needs_approval(self) -> bool:
        return self.compensation_earned > 0


# Premium surplus applied in the weekly overtime summary.
WEEKLY_WEEKEND_PREMIUM = 0.5
WEEKLY_EVENING_PREMIUM = 0.25
WEEKLY_NIGHT_PREMIUM = 0.5


def calculate_weekly_overtime(
    user_id: str,
    entries: Iterable[ClassifiedEntry],
    week: Period,
    policy: LaborPolicy,
) -> WeeklyOvertimeSummary:
    """Summarize overtime for one week.

    Each closed worked entry contributes its hours above the daily
    threshold; the week contributes its hours above the weekly
    threshold. Both convert at the compensation multiplier. Weekend,
    evening (weekdays only) and night hours earn a fixed premium when
    the policy enables them.

    Args:
        user_id: The user.
        entries: Classified entries of the user.
        week: The week to summarize.
        policy: The labor policy.

    Returns:
        The weekly summary.
    """
    breakdown = [
        DailyOvertime(
            entry_id=c.entry.id,
            work_date=c.work_date,
            total_hours=c.net_hours,
            overtime_hours=max(0.0, c.net_hours - policy.daily_overtime_threshold),
            is_weekend=c.is_weekend,
            is_evening=c.is_evening,
            is_night=c.is_night,
        )
        for c in entries
        if week.contains(c.work_date) and c.is_worked and not c.is_open
    ]

    total = sum(day.total_hours for day in breakdown)
    weekly_overtime = max(0.0, total - policy.weekly_overtime_threshold)
    daily_total = sum(day.overtime_hours for day in breakdown)

    earned = (daily_total + weekly_overtime) * policy.compensation_multiplier
    if policy.weekend_compensation:
        earned += WEEKLY_WEEKEND_PREMIUM * sum(
            d.total_hours for d in breakdown if d.is_weekend
        )
    if policy.evening_compensation:
        earned += WEEKLY_EVENING_PREMIUM * sum(
            d.total_hours for d in breakdown if d.is_evening and not d.is_weekend
        )
    if policy.night_compensation:
        earned += WEEKLY_NIGHT_PREMIUM * sum(
            d.total_hours for d in breakdown if d.is_night
        )

    return WeeklyOvertimeSummary(
        user_id=user_id,
        week=week,
        total_worked_hours=total,
        weekly_overtime_threshold=policy.weekly_overtime_threshold,
        weekly_overtime=weekly_overtime,
        daily_overtime_total=daily_total,
        compensation_earned=earned,
        daily_breakdown=tuple(breakdown),
        auto_approval_eligible=0 < earned <= policy.auto_approval_threshold,
    )
