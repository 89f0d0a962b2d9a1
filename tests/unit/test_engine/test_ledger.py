# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Tests for the compensation ledger."""

import math
from datetime import date, datetime, timedelta

import pytest

from tijdbalans.engine.classifier import RawTimeEntry, classify_entries
from tijdbalans.engine.enums import ApprovalStatus, WorkType
from tijdbalans.engine.errors import (
    AlreadyApproved,
    InsufficientBalance,
    InvalidRequest,
    RequestAlreadyDecided,
)
from tijdbalans.engine.ledger import CompensationLedger, decide_request
from tijdbalans.engine.policy import LaborPolicy

POLICY = LaborPolicy()
DAY = date(2024, 3, 4)


def ledger(earned: float = 20, used: float = 5, **policy_overrides):
    policy = POLICY.with_overrides(**policy_overrides)
    return CompensationLedger(user_id="u1", earned=earned, used=used, policy=policy)


def ledger_entry(index: int, hours: float, work_type: WorkType) -> RawTimeEntry:
    clock_in = datetime(2024, 1, 1, 9) + timedelta(days=index)
    return RawTimeEntry(
        id=f"e{index}",
        user_id="u1",
        clock_in=clock_in,
        clock_out=clock_in + timedelta(hours=hours),
        work_type=work_type,
        total_break_minutes=0,
    )


class TestBalance:
    """Tests for balance, can_use and max_usable."""

    def test_balance_is_earned_minus_used(self):
        assert ledger(20, 5).balance == 15

    def test_max_usable_capped_at_one_workday(self):
        assert ledger(20, 5).max_usable_hours == 8

    def test_max_usable_below_cap(self):
        assert ledger(6, 1).max_usable_hours == 5

    def test_empty_ledger(self):
        empty = ledger(0, 0)
        assert empty.can_use_compensation is False
        assert empty.max_usable_hours == 0

    def test_negative_balance_from_bad_data(self):
        corrupt = ledger(2, 5)
        assert corrupt.balance == -3
        assert corrupt.can_use_compensation is False
        assert corrupt.max_usable_hours == 0


class TestFromEntries:
    """Tests for CompensationLedger.from_entries."""

    def test_sums_overtime_and_usage(self):
        entries = classify_entries(
            [
                ledger_entry(0, 4, WorkType.OVERTIME),
                ledger_entry(1, 3, WorkType.OVERTIME),
                ledger_entry(2, 2, WorkType.COMPENSATION_USED),
                ledger_entry(3, 8, WorkType.REGULAR),
            ],
            POLICY,
        )
        result = CompensationLedger.from_entries("u1", entries, POLICY)

        assert result.earned == 7
        assert result.used == 2
        assert result.balance == 5
        assert result.entry_count == 3

    def test_legacy_text_tags_count(self):
        legacy = RawTimeEntry(
            id="legacy",
            user_id="u1",
            clock_in=datetime(2024, 1, 1, 18),
            clock_out=datetime(2024, 1, 1, 21),
            work_type=None,
            notes="overtime voor release",
        )
        entries = classify_entries([legacy], POLICY)

        assert CompensationLedger.from_entries("u1", entries, POLICY).earned == 3

    def test_multiplier_applies_to_accrual(self):
        policy = LaborPolicy(compensation_multiplier=1.5)
        entries = classify_entries([ledger_entry(0, 4, WorkType.OVERTIME)], policy)

        assert CompensationLedger.from_entries("u1", entries, policy).earned == 6

    def test_accrual_clamped_at_ceiling(self):
        policy = LaborPolicy(max_accrual_hours=10, auto_break_after_hours=24)
        entries = classify_entries(
            [ledger_entry(i, 4, WorkType.OVERTIME) for i in range(4)], policy
        )
        result = CompensationLedger.from_entries("u1", entries, policy)

        assert result.earned == 10
        assert result.capped_hours == 6
        assert result.balance == 10

    def test_usage_frees_room_under_ceiling(self):
        policy = LaborPolicy(max_accrual_hours=10)
        entries = classify_entries(
            [
                ledger_entry(0, 5, WorkType.OVERTIME),
                ledger_entry(1, 5, WorkType.OVERTIME),
                ledger_entry(2, 4, WorkType.COMPENSATION_USED),
                ledger_entry(3, 5, WorkType.OVERTIME),
            ],
            policy,
        )
        result = CompensationLedger.from_entries("u1", entries, policy)

        assert result.earned == 14
        assert result.capped_hours == 1
        assert result.balance == 10

    def test_lookback_keeps_most_recent(self):
        entries = classify_entries(
            [ledger_entry(i, 1, WorkType.OVERTIME) for i in range(5)]
            + [ledger_entry(10, 2, WorkType.COMPENSATION_USED)],
            POLICY,
        )
        result = CompensationLedger.from_entries("u1", entries, POLICY, lookback=3)

        assert result.entry_count == 3
        assert result.earned == 2
        assert result.used == 2

    def test_balance_identity_holds(self):
        entries = classify_entries(
            [
                ledger_entry(i, 1 + i % 3, WorkType.OVERTIME)
                if i % 4
                else ledger_entry(i, 2, WorkType.COMPENSATION_USED)
                for i in range(20)
            ],
            POLICY,
        )
        result = CompensationLedger.from_entries("u1", entries, POLICY)

        assert result.balance == result.earned - result.used


class TestCanEarn:
    """Tests for can_earn_compensation."""

    def test_room_left(self):
        assert ledger(20, 5).can_earn_compensation(10).allowed is True

    def test_over_ceiling(self):
        check = ledger(80, 5).can_earn_compensation(10)
        assert check.allowed is False
        assert check.max_allowed == 5


class TestSingleRequest:
    """Tests for CompensationLedger.request."""

    def test_more_than_a_workday_is_rejected(self):
        with pytest.raises(InsufficientBalance) as exc_info:
            ledger(20, 5).request(DAY, 10, "FULL_DAY")

        assert exc_info.value.requested == 10
        assert exc_info.value.available == 8
        assert exc_info.value.shortfall == 2

    def test_within_balance_creates_pending_request(self):
        request = ledger(20, 5).request(DAY, 6, "PERSONAL", "Tandarts")

        assert request.hours == 6
        assert request.remaining_balance == 9
        assert request.requires_approval is True
        assert request.status == ApprovalStatus.PENDING
        assert request.reason == "Tandarts"

    def test_more_than_balance_is_rejected(self):
        with pytest.raises(InsufficientBalance) as exc_info:
            ledger(4, 0).request(DAY, 5, "CUSTOM")

        assert exc_info.value.shortfall == 1
        assert "Niet genoeg compensatie uren" in str(exc_info.value)

    @pytest.mark.parametrize("hours", [0, -2, math.nan, math.inf, -math.inf])
    def test_non_positive_or_non_finite_hours(self, hours):
        with pytest.raises(InvalidRequest):
            ledger().request(DAY, hours, "CUSTOM")

    def test_auto_approval_only_when_enabled(self):
        disabled = ledger(auto_approval_threshold=4)
        enabled = ledger(auto_approval_enabled=True, auto_approval_threshold=4)

        assert disabled.request(DAY, 2, "FLEX").requires_approval is True
        small = enabled.request(DAY, 2, "FLEX")
        assert small.requires_approval is False
        assert small.status == ApprovalStatus.APPROVED
        assert enabled.request(DAY, 6, "FLEX").requires_approval is True

    def test_never_drives_balance_negative(self):
        small = ledger(3, 0)
        request = small.request(DAY, 3, "CUSTOM")

        assert request.remaining_balance == 0
        with pytest.raises(InsufficientBalance):
            ledger(3, 3).request(DAY, 0.5, "CUSTOM")


class TestBulkRequest:
    """Tests for CompensationLedger.request_bulk."""

    def test_exceeding_balance_is_rejected_as_a_unit(self):
        dates = [DAY, DAY + timedelta(days=1), DAY + timedelta(days=2)]

        with pytest.raises(InsufficientBalance) as exc_info:
            ledger(20, 5).request_bulk(dates, 8, "VACATION")

        assert exc_info.value.requested == 24
        assert exc_info.value.shortfall == 9

    def test_success_reports_remaining_balance(self):
        dates = [DAY + timedelta(days=1), DAY]
        result = ledger(20, 5).request_bulk(dates, 4, "VACATION", "Lang weekend")

        assert result.total_hours == 8
        assert result.remaining_balance == 7
        assert [r.date for r in result.requests] == sorted(dates)
        assert [r.remaining_balance for r in result.requests] == [11, 7]
        assert {r.reason for r in result.requests} == {"Lang weekend"}
        assert result.message == "2 dagen compensatie aangevraagd (8u 0m)"

    def test_empty_dates(self):
        with pytest.raises(InvalidRequest):
            ledger().request_bulk([], 4, "CUSTOM")

    def test_duplicate_dates(self):
        with pytest.raises(InvalidRequest):
            ledger().request_bulk([DAY, DAY], 4, "CUSTOM")

    @pytest.mark.parametrize("hours", [math.nan, math.inf])
    def test_non_finite_hours_per_day(self, hours):
        with pytest.raises(InvalidRequest):
            ledger(40, 0).request_bulk([DAY], hours, "CUSTOM")

    def test_hours_per_day_above_cap(self):
        with pytest.raises(InvalidRequest):
            ledger(40, 0).request_bulk([DAY], 9, "CUSTOM")


class TestDecideRequest:
    """Tests for decide_request."""

    def test_approve_pending(self):
        request = ledger().request(DAY, 4, "CUSTOM")
        assert decide_request(request, True).status == ApprovalStatus.APPROVED

    def test_reject_pending(self):
        request = ledger().request(DAY, 4, "CUSTOM")
        assert decide_request(request, False).status == ApprovalStatus.REJECTED

    def test_re_approval_is_an_error(self):
        approved = decide_request(ledger().request(DAY, 4, "CUSTOM"), True)

        with pytest.raises(AlreadyApproved):
            decide_request(approved, True)
        with pytest.raises(AlreadyApproved):
            decide_request(approved, False)

    def test_rejected_is_terminal(self):
        rejected = decide_request(ledger().request(DAY, 4, "CUSTOM"), False)

        with pytest.raises(RequestAlreadyDecided):
            decide_request(rejected, True)
