# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Evaluation periods."""

from calendar import monthrange
from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum


class PeriodPreset(str, Enum):
    """Named periods offered by the dashboard."""

    CURRENT_WEEK = "current_week"
    CURRENT_MONTH = "current_month"
    LAST_MONTH = "last_month"
    LAST_3_MONTHS = "last_3_months"


@dataclass(frozen=True)
class Period:
    """An inclusive date range."""

    start: date
    end: date

    def __post_init__(self) -> None:
        if self.end < self.start:
            raise ValueError(
                f"Period end {self.end} lies before its start {self.start}"
            )

    @property
    def days(self) -> int:
        """Number of calendar days in the period, both ends included."""
        return (self.end - self.start).days + 1

    def contains(self, check_date: date) -> bool:
        return self.start <= check_date <= self.end

    def label(self) -> str:
        """Dutch display label, e.g. ``01-01-2024 - 07-01-2024``."""
        return f"{self.start:%d-%m-%Y} - {self.end:%d-%m-%Y}"

    @classmethod
    def week_of(cls, day: date) -> "Period":
        """The Monday to Sunday week containing a date."""
        monday = day - timedelta(days=day.weekday())
        return cls(monday, monday + timedelta(days=6))

    @classmethod
    def month_of(cls, year: int, month: int) -> "Period":
        _, last_day = monthrange(year, month)
        return cls(date(year, month, 1), date(year, month, last_day))

    @classmethod
    def from_preset(
        cls, preset: PeriodPreset | str, today: date | None = None
    ) -> "Period":
        """Resolve a named period relative to today.

        Args:
            preset: The named period.
            today: Reference date, defaults to today.

        Returns:
            The resolved period.
        """
        today = today or date.today()
        preset = PeriodPreset(preset)

        if preset == PeriodPreset.CURRENT_WEEK:
            return cls.week_of(today)
        if preset == PeriodPreset.LAST_MONTH:
            year, month = _shift_month(today.year, today.month, -1)
            return cls.month_of(year, month)
        if preset == PeriodPreset.LAST_3_MONTHS:
            year, month = _shift_month(today.year, today.month, -3)
            current = cls.month_of(today.year, today.month)
            return cls(date(year, month, 1), current.end)
        return cls.month_of(today.year, today.month)


def previous_weeks(current: Period, count: int) -> list[Period]:
    """The ``count`` whole weeks before a period, oldest first."""
    first_monday = current.start - timedelta(days=current.start.weekday())
    return [
        Period.week_of(first_monday - timedelta(days=7 * offset))
        for offset in range(count, 0, -1)
    ]


def _shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1
