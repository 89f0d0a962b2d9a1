# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Compensation ledger: banked overtime versus compensation taken."""

import logging
import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, replace
from datetime import date

from .classifier import ClassifiedEntry
from .enums import ApprovalStatus, WorkType
from .errors import (
    AlreadyApproved,
    InsufficientBalance,
    InvalidRequest,
    RequestAlreadyDecided,
)
from .formatting import format_duration
from .policy import LaborPolicy

logger = logging.getLogger(__name__)

DEFAULT_LOOKBACK_ENTRIES = 100

LEDGER_TYPES = frozenset({WorkType.OVERTIME, WorkType.COMPENSATION_USED})


@dataclass(frozen=True)
class CompensationRequest:
    """A proposed or committed use of banked compensation time."""

    user_id: str
    date: date
    hours: float
    type: str
    requires_approval: bool
    remaining_balance: float
    reason: str | None = None
    status: ApprovalStatus = ApprovalStatus.PENDING
    id: str | None = None


@dataclass(frozen=True)
class BulkCompensationResult:
    """Outcome of a multi-day compensation request."""

    requests: tuple[CompensationRequest, ...]
    total_hours: float
    remaining_balance: float

    @property
    def message(self) -> str:
        return (
            f"{len(self.requests)} dagen compensatie aangevraagd "
            f"({format_duration(self.total_hours)})"
        )


@dataclass(frozen=True)
class AccrualCheck:
    """Whether new compensation fits under the accrual ceiling."""

    allowed: bool
    max_allowed: float | None = None


@dataclass(frozen=True)
class CompensationLedger:
    """Earned and used compensation hours of one person.

    ``earned`` holds only what was actually credited: accrual that would
    push the balance above the policy ceiling is dropped and reported in
    ``capped_hours``. An existing balance is never reduced by the ceiling.
    """

    user_id: str
    earned: float
    used: float
    policy: LaborPolicy
    capped_hours: float = 0.0
    weekend_hours: float = 0.0
    evening_hours: float = 0.0
    entry_count: int = 0

    @property
    def balance(self) -> float:
        return self.earned - self.used

    @property
    def can_use_compensation(self) -> bool:
        return self.balance > 0

    @property
    def max_usable_hours(self) -> float:
        """Hours a single request may take: one workday at most."""
        return max(0.0, min(self.balance, self.policy.max_hours_per_request))

    @classmethod
    def from_entries(
        cls,
        user_id: str,
        entries: Iterable[ClassifiedEntry],
        policy: LaborPolicy,
        lookback: int = DEFAULT_LOOKBACK_ENTRIES,
    ) -> "CompensationLedger":
        """Build the ledger from a person's classified entries.

        Only overtime and compensation-usage entries count, and of those
        only the ``lookback`` most recent. They are folded oldest first so
        the accrual ceiling applies in the order hours were earned.

        Args:
            user_id: The user.
            entries: Classified entries of the user.
            policy: The labor policy.
            lookback: Maximum number of ledger entries to scan.

        Returns:
            The ledger.
        """
        relevant = sorted(
            (e for e in entries if e.work_type in LEDGER_TYPES),
            key=lambda e: e.entry.clock_in,
            reverse=True,
        )[:lookback]
        relevant.reverse()

        earned = used = capped = 0.0
        weekend = evening = 0.0
        for classified in relevant:
            hours = classified.net_hours
            if classified.work_type == WorkType.COMPENSATION_USED:
                used += hours
                continue

            accrual = hours * policy.compensation_multiplier
            room = max(0.0, policy.max_accrual_hours - (earned - used))
            credited = min(accrual, room)
            capped += accrual - credited
            earned += credited
            if classified.is_weekend:
                weekend += hours
            if classified.is_evening:
                evening += hours

        if capped > 0:
            logger.info(
                f"User {user_id}: {capped:.2f}h compensation not credited, "
                f"ceiling of {policy.max_accrual_hours}h reached"
            )

        return cls(
            user_id=user_id,
            earned=earned,
            used=used,
            policy=policy,
            capped_hours=capped,
            weekend_hours=weekend,
            evening_hours=evening,
            entry_count=len(relevant),
        )

    def can_earn_compensation(self, new_hours: float) -> AccrualCheck:
        """Check whether new hours fit under the accrual ceiling."""
        if self.balance + new_hours <= self.policy.max_accrual_hours:
            return AccrualCheck(allowed=True)
        return AccrualCheck(
            allowed=False,
            max_allowed=max(0.0, self.policy.max_accrual_hours - self.balance),
        )

    def _requires_approval(self, hours: float) -> bool:
        return not (
            self.policy.auto_approval_enabled
            and hours <= self.policy.auto_approval_threshold
        )

    def _insufficient(
        self, requested: float, available: float
    ) -> InsufficientBalance:
        logger.info(
            f"User {self.user_id}: compensation request of {requested:.2f}h "
            f"rejected, {available:.2f}h available"
        )
        return InsufficientBalance(
            requested=requested,
            available=available,
            message=(
                f"Niet genoeg compensatie uren. Beschikbaar: "
                f"{format_duration(available)}, Aangevraagd: "
                f"{format_duration(requested)}"
            ),
        )

    def request(
        self,
        request_date: date,
        hours: float,
        request_type: str,
        reason: str | None = None,
    ) -> CompensationRequest:
        """Validate and create a single-day compensation request.

        Args:
            request_date: The day off.
            hours: Hours to take.
            request_type: Reason category.
            reason: Optional free-text reason.

        Returns:
            The new request.

        Raises:
            InvalidRequest: If hours is not a finite positive number.
            InsufficientBalance: If hours exceeds the usable balance.
        """
        if not math.isfinite(hours) or hours <= 0:
            raise InvalidRequest("Uren moeten groter dan nul zijn")
        if hours > self.max_usable_hours:
            raise self._insufficient(hours, self.max_usable_hours)

        requires_approval = self._requires_approval(hours)
        return CompensationRequest(
            user_id=self.user_id,
            date=request_date,
            hours=hours,
            type=request_type,
            reason=reason,
            requires_approval=requires_approval,
            remaining_balance=self.balance - hours,
            status=(
                ApprovalStatus.PENDING if requires_approval else ApprovalStatus.APPROVED
            ),
        )

    def request_bulk(
        self,
        dates: Sequence[date],
        hours_per_day: float,
        request_type: str,
        reason: str | None = None,
    ) -> BulkCompensationResult:
        """Validate and create a multi-day compensation request.

        The request is all or nothing: when the total exceeds the balance
        no per-day request is produced.

        Args:
            dates: The days off.
            hours_per_day: Hours to take on each day.
            request_type: Reason category shared by all days.
            reason: Optional free-text reason shared by all days.

        Returns:
            The per-day requests with the remaining balance.

        Raises:
            InvalidRequest: For empty or duplicate dates or invalid hours.
            InsufficientBalance: If the total exceeds the balance.
        """
        if not dates:
            raise InvalidRequest("Geen datums opgegeven")
        if len(set(dates)) != len(dates):
            raise InvalidRequest("Dubbele datums in aanvraag")
        if not math.isfinite(hours_per_day) or hours_per_day <= 0:
            raise InvalidRequest("Uren moeten groter dan nul zijn")
        if hours_per_day > self.policy.max_hours_per_request:
            raise InvalidRequest(
                f"Maximaal {format_duration(self.policy.max_hours_per_request)} "
                "per dag toegestaan"
            )

        total = len(dates) * hours_per_day
        if total > self.balance:
            raise self._insufficient(total, max(0.0, self.balance))

        requires_approval = self._requires_approval(total)
        status = (
            ApprovalStatus.PENDING if requires_approval else ApprovalStatus.APPROVED
        )
        remaining = self.balance
        requests = []
        for day in sorted(dates):
            remaining -= hours_per_day
            requests.append(
                CompensationRequest(
                    user_id=self.user_id,
                    date=day,
                    hours=hours_per_day,
                    type=request_type,
                    reason=reason,
                    requires_approval=requires_approval,
                    remaining_balance=remaining,
                    status=status,
                )
            )

        return BulkCompensationResult(
            requests=tuple(requests),
            total_hours=total,
            remaining_balance=self.balance - total,
        )


def decide_request(
    request: CompensationRequest, approve: bool
) -> CompensationRequest:
    """Approve or reject a pending request.

    Args:
        request: The request.
        approve: True to approve, False to reject.

    Returns:
        The decided request.

    Raises:
        AlreadyApproved: If the request was approved before.
        RequestAlreadyDecided: If the request was rejected before.
    """
    if request.status == ApprovalStatus.APPROVED:
        raise AlreadyApproved(request.id)
    if request.status != ApprovalStatus.PENDING:
        raise RequestAlreadyDecided(request.id, request.status.value.lower())
    status = ApprovalStatus.APPROVED if approve else ApprovalStatus.REJECTED
    return replace(request, status=status, requires_approval=False)
