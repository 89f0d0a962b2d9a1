# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Application configuration."""

from pydantic_settings import BaseSettings, SettingsConfigDict

from tijdbalans.engine.enums import ContractType
from tijdbalans.engine.policy import LaborPolicy


class Settings(BaseSettings):
    """Settings read from the environment (prefix ``TIJDBALANS_``)."""

    model_config = SettingsConfigDict(
        env_prefix="TIJDBALANS_",
        env_file=".env",
        extra="ignore",
        frozen=True,
    )

    database_url: str = "sqlite:///./tijdbalans.db"
    log_level: str = "INFO"

    # Regional settings
    timezone: str = "Europe/Amsterdam"
    holiday_country: str = "NL"
    holiday_region: str | None = None

    # Contract hours per week
    full_time_hours: float = 40.0
    part_time_hours: float = 32.0

    # Overtime and compensation
    daily_overtime_threshold: float = 8.0
    weekly_overtime_threshold: float = 40.0
    compensation_multiplier: float = 1.0
    max_accrual_hours: float = 80.0
    auto_approval_enabled: bool = False
    auto_approval_threshold: float = 0.0
    max_hours_per_request: float = 8.0

    # Breaks
    auto_break_after_hours: float = 6.0
    auto_break_minutes: int = 30

    # History windows
    shortage_history_weeks: int = 12
    compensation_lookback_entries: int = 100

    def contract_hours(self, contract_type: ContractType | str | None) -> float:
        """Get weekly contract hours; unknown types count as full-time."""
        try:
            contract = ContractType(contract_type)
        except ValueError:
            return self.full_time_hours
        if contract == ContractType.PART_TIME:
            return self.part_time_hours
        if contract == ContractType.ZERO_HOURS:
            return 0.0
        return self.full_time_hours

    def labor_policy(
        self, contract_type: ContractType | str | None = None
    ) -> LaborPolicy:
        """Build the labor policy for a contract type.

        Args:
            contract_type: The contract type, full-time when omitted.

        Returns:
            The immutable labor policy.
        """
        return LaborPolicy(
            contract_hours_per_week=self.contract_hours(contract_type),
            daily_overtime_threshold=self.daily_overtime_threshold,
            weekly_overtime_threshold=self.weekly_overtime_threshold,
            compensation_multiplier=self.compensation_multiplier,
            max_accrual_hours=self.max_accrual_hours,
            auto_approval_enabled=self.auto_approval_enabled,
            auto_approval_threshold=self.auto_approval_threshold,
            max_hours_per_request=self.max_hours_per_request,
            auto_break_after_hours=self.auto_break_after_hours,
            auto_break_minutes=self.auto_break_minutes,
            timezone=self.timezone,
        )


settings = Settings()
