# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Public holiday calendars."""

from collections.abc import Iterable
from datetime import date
from typing import Protocol

import holidays


class HolidayCalendar(Protocol):
    """Anything that can tell whether a date is a holiday."""

    def is_holiday(self, check_date: date) -> bool:
        """Return True if the date is a holiday."""
        ...


class PublicHolidayCalendar:
    """Holiday calendar backed by the ``holidays`` package.

    Defaults to the Dutch calendar (Nieuwjaarsdag, Goede Vrijdag, Pasen,
    Koningsdag, Bevrijdingsdag, Hemelvaart, Pinksteren, Kerst). Extra
    company-specific dates can be added on top.
    """

    def __init__(
        self,
        country_code: str = "NL",
        region: str | None = None,
        extra_dates: Iterable[date] = (),
    ) -> None:
        """Initialize the calendar.

        Args:
            country_code: ISO 2-letter country code.
            region: Optional subdivision code.
            extra_dates: Additional dates treated as holidays.
        """
        self.country_code = country_code
        self.region = region
        self.extra_dates = frozenset(extra_dates)
        self._years: dict[int, holidays.HolidayBase] = {}

    def _for_year(self, year: int) -> holidays.HolidayBase:
        if year not in self._years:
            self._years[year] = holidays.country_holidays(
                self.country_code, subdiv=self.region, years=year
            )
        return self._years[year]

    def is_holiday(self, check_date: date) -> bool:
        """Check if a date is a public or extra holiday.

        Args:
            check_date: The date to check.

        Returns:
            True if the date is a holiday.
        """
        if check_date in self.extra_dates:
            return True
        return check_date in self._for_year(check_date.year)

    def get_holiday_name(self, check_date: date) -> str | None:
        """Get the name of a holiday on a date.

        Args:
            check_date: The date to check.

        Returns:
            The holiday name, or None if not a public holiday.
        """
        return self._for_year(check_date.year).get(check_date)

    def get_public_holidays(self, year: int) -> dict[date, str]:
        """Get public holidays for a year.

        Args:
            year: The year.

        Returns:
            Dictionary mapping dates to holiday names.
        """
        return dict(self._for_year(year).items())


class NoHolidays:
    """Calendar without any holidays."""

    def is_holiday(self, check_date: date) -> bool:
        return False
