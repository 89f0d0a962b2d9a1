# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Pure time balance computations.

Nothing in this package touches the database; every function receives a
snapshot of entries and an immutable labor policy.
"""

from tijdbalans.engine.aggregator import (
    TimeBalance,
    WeeklyOvertimeSummary,
    calculate_time_balance,
    calculate_weekly_overtime,
)
from tijdbalans.engine.calendar import HolidayCalendar, PublicHolidayCalendar
from tijdbalans.engine.classifier import (
    ClassifiedEntry,
    EntryWarning,
    RawTimeEntry,
    classify_entries,
    classify_entry,
)
from tijdbalans.engine.enums import (
    ApprovalStatus,
    ContractType,
    EscalationLevel,
    Severity,
    WorkType,
)
from tijdbalans.engine.errors import (
    AlreadyApproved,
    InsufficientBalance,
    InvalidRequest,
    NotFound,
    RequestAlreadyDecided,
    TimeBalanceError,
)
from tijdbalans.engine.formatting import format_duration, safe_percentage
from tijdbalans.engine.ledger import (
    BulkCompensationResult,
    CompensationLedger,
    CompensationRequest,
    decide_request,
)
from tijdbalans.engine.period import Period, PeriodPreset
from tijdbalans.engine.policy import LaborPolicy
from tijdbalans.engine.shortage import ShortageAlert, detect_shortages

__all__ = [
    "AlreadyApproved",
    "ApprovalStatus",
    "BulkCompensationResult",
    "ClassifiedEntry",
    "CompensationLedger",
    "CompensationRequest",
    "ContractType",
    "EntryWarning",
    "EscalationLevel",
    "HolidayCalendar",
    "InsufficientBalance",
    "InvalidRequest",
    "LaborPolicy",
    "NotFound",
    "Period",
    "PeriodPreset",
    "PublicHolidayCalendar",
    "RawTimeEntry",
    "RequestAlreadyDecided",
    "Severity",
    "ShortageAlert",
    "TimeBalance",
    "TimeBalanceError",
    "WeeklyOvertimeSummary",
    "WorkType",
    "calculate_time_balance",
    "calculate_weekly_overtime",
    "classify_entries",
    "classify_entry",
    "decide_request",
    "detect_shortages",
    "format_duration",
    "safe_percentage",
]
