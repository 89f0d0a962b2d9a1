# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Dutch display formatting for hour figures."""

import math
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .aggregator import TimeBalance


def format_duration(hours: float) -> str:
    """Format an hour count as ``<H>u <M>m``.

    Any negative value gets a leading minus, even when it rounds to zero.
    Minutes are rounded half up; a value that rounds up to 60 minutes
    carries into the hour.

    Examples:
        8.5 -> "8u 30m", -1.25 -> "-1u 15m", 0 -> "0u 0m"

    Args:
        hours: The hour count.

    Returns:
        The formatted duration.
    """
    sign = "-" if hours < 0 else ""
    magnitude = abs(hours)
    whole = math.floor(magnitude)
    minutes = math.floor((magnitude - whole) * 60 + 0.5)
    if minutes == 60:
        whole += 1
        minutes = 0
    return f"{sign}{whole}u {minutes}m"


def safe_percentage(actual: float, expected: float) -> int | None:
    """Percentage of actual over expected, or None when nothing is expected.

    Used for every productivity figure, so zero-hours contracts report no
    productivity instead of a division by zero.
    """
    if expected <= 0:
        return None
    return round(actual / expected * 100)


def format_time_balance(balance: "TimeBalance") -> str:
    """Render a balance as a short Dutch summary."""
    lines = [
        f"Periode: {balance.period.label()}",
        (
            f"Gewerkt: {format_duration(balance.actual_hours)} / "
            f"{format_duration(balance.expected_hours)}"
        ),
        f"Overtime: {format_duration(balance.overtime_hours)}",
        f"Compensatie saldo: {format_duration(balance.net_compensation_hours)}",
    ]
    if balance.shortage_hours > 0:
        lines.append(f"TEKORT: {format_duration(balance.shortage_hours)}")
    else:
        lines.append("TARGET BEHAALD")
    return "\n".join(lines)
