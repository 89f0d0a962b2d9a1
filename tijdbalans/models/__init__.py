# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Database models package."""

from tijdbalans.models.base import Base, TimestampMixin
from tijdbalans.models.notification import Notification
from tijdbalans.models.time_entry import TimeEntry
from tijdbalans.models.user import User

__all__ = [
    "Base",
    "Notification",
    "TimeEntry",
    "TimestampMixin",
    "User",
]
