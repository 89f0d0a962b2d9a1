# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Tests for evaluation periods."""

from datetime import date

import pytest

from tijdbalans.engine.period import Period, PeriodPreset, previous_weeks

TODAY = date(2024, 3, 13)  # Wednesday


class TestPeriod:
    """Tests for the Period value object."""

    def test_end_before_start(self):
        with pytest.raises(ValueError):
            Period(date(2024, 1, 10), date(2024, 1, 9))

    def test_days_are_inclusive(self):
        assert Period(date(2024, 1, 8), date(2024, 1, 14)).days == 7
        assert Period(date(2024, 1, 8), date(2024, 1, 8)).days == 1

    def test_contains(self):
        week = Period(date(2024, 1, 8), date(2024, 1, 14))
        assert week.contains(date(2024, 1, 8))
        assert week.contains(date(2024, 1, 14))
        assert not week.contains(date(2024, 1, 15))

    def test_week_starts_on_monday(self):
        week = Period.week_of(date(2024, 1, 14))  # Sunday
        assert week == Period(date(2024, 1, 8), date(2024, 1, 14))

    def test_month_of_leap_february(self):
        assert Period.month_of(2024, 2).end == date(2024, 2, 29)


class TestPresets:
    """Tests for Period.from_preset."""

    def test_current_week(self):
        period = Period.from_preset(PeriodPreset.CURRENT_WEEK, TODAY)
        assert period == Period(date(2024, 3, 11), date(2024, 3, 17))

    def test_current_month(self):
        period = Period.from_preset("current_month", TODAY)
        assert period == Period(date(2024, 3, 1), date(2024, 3, 31))

    def test_last_month_across_year(self):
        period = Period.from_preset(PeriodPreset.LAST_MONTH, date(2024, 1, 15))
        assert period == Period(date(2023, 12, 1), date(2023, 12, 31))

    def test_last_three_months(self):
        period = Period.from_preset(PeriodPreset.LAST_3_MONTHS, TODAY)
        assert period == Period(date(2023, 12, 1), date(2024, 3, 31))

    def test_unknown_preset(self):
        with pytest.raises(ValueError):
            Period.from_preset("next_year", TODAY)


class TestPreviousWeeks:
    """Tests for previous_weeks."""

    def test_oldest_first(self):
        weeks = previous_weeks(Period.week_of(TODAY), 3)

        assert [w.start for w in weeks] == [
            date(2024, 2, 19),
            date(2024, 2, 26),
            date(2024, 3, 4),
        ]

    def test_month_period_counts_back_from_its_first_week(self):
        weeks = previous_weeks(Period.month_of(2024, 3), 1)
        assert weeks == [Period(date(2024, 2, 19), date(2024, 2, 25))]

    def test_zero_weeks(self):
        assert previous_weeks(Period.week_of(TODAY), 0) == []
