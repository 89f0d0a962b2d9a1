# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Labor policy configuration."""

import math
from dataclasses import dataclass, fields, replace

_NON_NEGATIVE_FIELDS = (
    "contract_hours_per_week",
    "daily_overtime_threshold",
    "weekly_overtime_threshold",
    "max_accrual_hours",
    "auto_approval_threshold",
    "auto_break_after_hours",
    "auto_break_minutes",
    "max_hours_per_request",
    "max_daily_hours",
    "min_rest_between_shifts",
    "break_required_after_hours",
    "break_minimum_minutes",
)

_MULTIPLIER_FIELDS = (
    "compensation_multiplier",
    "weekend_multiplier",
    "evening_multiplier",
    "night_multiplier",
    "holiday_multiplier",
)


@dataclass(frozen=True)
class LaborPolicy:
    """Labor rules applied when computing balances.

    A policy is immutable and passed explicitly to every computation.
    Thresholds must be non-negative and multipliers at least 1.0. The
    relation between the daily and weekly overtime thresholds is not
    checked; policy authors may set inconsistent values. A value of the
    wrong type, or a number that is not finite, raises ValueError.
    """

    contract_hours_per_week: float = 40.0
    daily_overtime_threshold: float = 8.0
    weekly_overtime_threshold: float = 40.0
    compensation_multiplier: float = 1.0
    max_accrual_hours: float = 80.0

    auto_approval_enabled: bool = False
    auto_approval_threshold: float = 0.0

    weekend_compensation: bool = True
    evening_compensation: bool = True
    night_compensation: bool = True
    holiday_compensation: bool = True

    weekend_multiplier: float = 1.5
    evening_multiplier: float = 1.25
    night_multiplier: float = 1.5
    holiday_multiplier: float = 2.0

    auto_break_after_hours: float = 6.0
    auto_break_minutes: int = 30

    max_hours_per_request: float = 8.0
    max_daily_hours: float = 12.0
    min_rest_between_shifts: float = 11.0
    break_required_after_hours: float = 5.5
    break_minimum_minutes: int = 30

    timezone: str = "Europe/Amsterdam"

    def __post_init__(self) -> None:
        for field in fields(self):
            value = getattr(self, field.name)
            if field.type is bool or field.type is str:
                valid = isinstance(value, field.type)
            else:
                valid = (
                    isinstance(value, (int, float))
                    and not isinstance(value, bool)
                    and math.isfinite(value)
                )
            if not valid:
                raise ValueError(f"{field.name} has an invalid value: {value!r}")
        for name in _NON_NEGATIVE_FIELDS:
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be non-negative")
        for name in _MULTIPLIER_FIELDS:
            if getattr(self, name) < 1.0:
                raise ValueError(f"{name} must be at least 1.0")

    @property
    def auto_break_hours(self) -> float:
        """Automatic break duration in hours."""
        return self.auto_break_minutes / 60

    def with_overrides(self, **overrides: object) -> "LaborPolicy":
        """Return a copy with some fields replaced.

        Unknown keys and None values are ignored, so a partially filled
        work-pattern configuration can be applied directly.

        Args:
            **overrides: Field values to replace.

        Returns:
            The new policy.

        Raises:
            ValueError: If a replaced value is invalid.
        """
        known = {f.name for f in fields(self)}
        values = {
            key: value
            for key, value in overrides.items()
            if key in known and value is not None
        }
        return replace(self, **values)

