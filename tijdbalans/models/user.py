# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Personnel model."""

from __future__ import annotations

import json
import uuid as uuid_lib
from typing import TYPE_CHECKING, Any

from sqlalchemy import Boolean, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tijdbalans.engine.enums import ContractType
from tijdbalans.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from tijdbalans.models.time_entry import TimeEntry


class User(Base, TimestampMixin):
    """A person whose hours are tracked."""

    __tablename__ = "users"

    id: Mapped[uuid_lib.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid_lib.uuid4,
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    role: Mapped[str] = mapped_column(String(30), default="EMPLOYEE", nullable=False)
    contract_type: Mapped[str] = mapped_column(
        String(30), default=ContractType.FULL_TIME.value, nullable=False
    )
    archived: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # JSON object of labor policy overrides from the assigned work pattern
    work_pattern_settings: Mapped[str | None] = mapped_column(Text, nullable=True)

    time_entries: Mapped[list[TimeEntry]] = relationship(
        "TimeEntry",
        back_populates="user",
        foreign_keys="[TimeEntry.user_id]",
        cascade="all, delete-orphan",
    )

    @property
    def policy_overrides(self) -> dict[str, Any]:
        """Work pattern overrides as a dictionary.

        Raises:
            ValueError: If the stored settings are not a JSON object.
        """
        if not self.work_pattern_settings:
            return {}
        overrides = json.loads(self.work_pattern_settings)
        if not isinstance(overrides, dict):
            raise ValueError("work pattern settings must be a JSON object")
        return overrides

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<User(id={self.id}, name={self.name!r})>"
