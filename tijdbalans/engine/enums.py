# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Enumeration types shared by the engine, the models and the API."""

from enum import Enum


class WorkType(str, Enum):
    """Tag of a time entry, decided when the entry is created."""

    REGULAR = "REGULAR"
    OVERTIME = "OVERTIME"
    COMPENSATION_USED = "COMPENSATION_USED"
    SICK = "SICK"
    VACATION = "VACATION"


# Entry types that count as time actually worked.
WORKED_TYPES = frozenset({WorkType.REGULAR, WorkType.OVERTIME})


class ContractType(str, Enum):
    """Employment contract types."""

    FULL_TIME = "FULL_TIME"
    PART_TIME = "PART_TIME"
    ZERO_HOURS = "ZERO_HOURS"


class ApprovalStatus(str, Enum):
    """Approval state of a compensation request.

    Status flow:
    - PENDING -> APPROVED (terminal)
    - PENDING -> REJECTED (terminal)
    """

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class Severity(str, Enum):
    """Severity of a shortage alert."""

    WARNING = "WARNING"
    CRITICAL = "CRITICAL"


class EscalationLevel(str, Enum):
    """Escalation level of a shortage alert."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class CompensationType(str, Enum):
    """Reason category of a compensation request."""

    FULL_DAY = "FULL_DAY"
    HALF_DAY = "HALF_DAY"
    VACATION = "VACATION"
    PERSONAL = "PERSONAL"
    SICK = "SICK"
    FLEX = "FLEX"
    CUSTOM = "CUSTOM"
