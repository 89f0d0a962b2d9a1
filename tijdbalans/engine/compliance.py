# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Working-time compliance checks (Arbeidstijdenwet)."""

from collections.abc import Sequence
from dataclasses import dataclass

from .classifier import ClassifiedEntry
from .policy import LaborPolicy


@dataclass(frozen=True)
class ComplianceWarning:
    """Compliance finding for an entry or a set of entries."""

    level: str  # "info", "warning", "error"
    code: str
    message: str
    entry_id: str | None = None
    law_reference: str | None = None


class DutchComplianceValidator:
    """Dutch working-time rules.

    Key rules:
    - Maximum 12 hours per shift
    - Maximum 60 hours per week
    - Minimum 11 hours rest between shifts
    - 30 minutes break after 5.5 hours, 45 minutes after 10 hours

    Shift and rest limits and the first break rule come from the policy,
    so stricter collective agreements can be configured.
    """

    WEEKLY_MAX_HOURS = 60.0
    LONG_SHIFT_HOURS = 10.0
    LONG_SHIFT_BREAK_MINUTES = 45

    def __init__(self, policy: LaborPolicy) -> None:
        """Initialize the validator.

        Args:
            policy: The labor policy.
        """
        self.policy = policy

    def validate_break_rules(self, entry: ClassifiedEntry) -> list[ComplianceWarning]:
        """Check that a shift had the required break.

        Automatically deducted breaks count as taken, but are reported so
        the person can log breaks manually next time.

        Args:
            entry: The classified entry.

        Returns:
            List of compliance warnings.
        """
        warnings: list[ComplianceWarning] = []
        if entry.is_open or not entry.is_worked:
            return warnings

        gross = entry.gross_hours
        taken = entry.entry.total_break_minutes + entry.auto_break_hours * 60

        if gross > self.LONG_SHIFT_HOURS:
            required = self.LONG_SHIFT_BREAK_MINUTES
        elif gross > self.policy.break_required_after_hours:
            required = self.policy.break_minimum_minutes
        else:
            required = 0

        if taken < required:
            warnings.append(
                ComplianceWarning(
                    level="warning",
                    code="INSUFFICIENT_BREAK",
                    message=(
                        f"Na {gross:.1f} uur werken is minimaal {required} "
                        f"minuten pauze verplicht ({taken:.0f} genomen)"
                    ),
                    entry_id=entry.entry.id,
                    law_reference="Arbeidstijdenwet art. 5:4",
                )
            )
        if entry.auto_break_applied:
            warnings.append(
                ComplianceWarning(
                    level="info",
                    code="AUTO_BREAK_APPLIED",
                    message=(
                        f"{self.policy.auto_break_minutes} minuten pauze "
                        "automatisch afgetrokken, klok pauzes handmatig in"
                    ),
                    entry_id=entry.entry.id,
                )
            )

        return warnings

    def validate_daily_hours(self, entry: ClassifiedEntry) -> list[ComplianceWarning]:
        """Check the shift length.

        Args:
            entry: The classified entry.

        Returns:
            List of compliance warnings.
        """
        warnings: list[ComplianceWarning] = []
        if entry.is_open or not entry.is_worked:
            return warnings

        if entry.net_hours > self.policy.max_daily_hours:
            warnings.append(
                ComplianceWarning(
                    level="error",
                    code="EXCEEDS_DAILY_MAX",
                    message=(
                        f"Meer dan {self.policy.max_daily_hours:g} uur per dienst "
                        f"({entry.net_hours:.1f} uur gewerkt)"
                    ),
                    entry_id=entry.entry.id,
                    law_reference="Arbeidstijdenwet art. 5:7",
                )
            )
        elif entry.net_hours > self.policy.daily_overtime_threshold:
            warnings.append(
                ComplianceWarning(
                    level="info",
                    code="OVERTIME",
                    message=(
                        f"Overuren: meer dan {self.policy.daily_overtime_threshold:g} "
                        f"uur ({entry.net_hours:.1f} uur gewerkt)"
                    ),
                    entry_id=entry.entry.id,
                )
            )

        return warnings

    def validate_rest_period(
        self,
        current: ClassifiedEntry,
        previous: ClassifiedEntry | None,
    ) -> list[ComplianceWarning]:
        """Check the rest between two consecutive shifts.

        Args:
            current: The current entry.
            previous: The previous entry (if any).

        Returns:
            List of compliance warnings.
        """
        warnings: list[ComplianceWarning] = []
        if previous is None or previous.entry.clock_out is None:
            return warnings

        rest_hours = (
            current.entry.clock_in - previous.entry.clock_out
        ).total_seconds() / 3600
        if 0 <= rest_hours < self.policy.min_rest_between_shifts:
            warnings.append(
                ComplianceWarning(
                    level="warning",
                    code="INSUFFICIENT_REST",
                    message=(
                        f"Slechts {rest_hours:.1f} uur rust sinds vorige dienst "
                        f"({self.policy.min_rest_between_shifts:g} uur vereist)"
                    ),
                    entry_id=current.entry.id,
                    law_reference="Arbeidstijdenwet art. 5:3",
                )
            )

        return warnings

    def validate_weekly_hours(
        self, entries: Sequence[ClassifiedEntry]
    ) -> list[ComplianceWarning]:
        """Check weekly limits.

        Args:
            entries: Classified entries of one week.

        Returns:
            List of compliance warnings.
        """
        warnings: list[ComplianceWarning] = []
        total = sum(e.net_hours for e in entries if e.is_worked)

        if total > self.WEEKLY_MAX_HOURS:
            warnings.append(
                ComplianceWarning(
                    level="error",
                    code="EXCEEDS_WEEKLY_MAX",
                    message=(
                        f"Meer dan {self.WEEKLY_MAX_HOURS:g} uur per week "
                        f"({total:.1f} uur gewerkt)"
                    ),
                    law_reference="Arbeidstijdenwet art. 5:7",
                )
            )
        elif total > self.policy.weekly_overtime_threshold:
            warnings.append(
                ComplianceWarning(
                    level="info",
                    code="WEEKLY_OVERTIME",
                    message=(
                        f"Overuren deze week: meer dan "
                        f"{self.policy.weekly_overtime_threshold:g} uur "
                        f"({total:.1f} uur gewerkt)"
                    ),
                )
            )

        return warnings

    def validate_entries(
        self, entries: Sequence[ClassifiedEntry]
    ) -> list[ComplianceWarning]:
        """Run the per-entry and rest checks over a person's entries."""
        warnings: list[ComplianceWarning] = []
        previous = None
        for entry in sorted(entries, key=lambda e: e.entry.clock_in):
            if not entry.is_worked:
                continue
            warnings.extend(self.validate_break_rules(entry))
            warnings.extend(self.validate_daily_hours(entry))
            warnings.extend(self.validate_rest_period(entry, previous))
            previous = entry
        return warnings
