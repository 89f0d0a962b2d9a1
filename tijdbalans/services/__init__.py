# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Business logic services."""

from tijdbalans.services.compensation_service import CompensationService
from tijdbalans.services.time_balance_service import TimeBalanceService

__all__ = [
    "CompensationService",
    "TimeBalanceService",
]
