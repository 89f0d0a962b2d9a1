# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Time entry model."""

from __future__ import annotations

import uuid as uuid_lib
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tijdbalans.engine.classifier import RawTimeEntry
from tijdbalans.engine.enums import ApprovalStatus, WorkType
from tijdbalans.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from tijdbalans.models.user import User


class TimeEntry(Base, TimestampMixin):
    """One clock session, or one day of compensation taken.

    Entries are created on clock-in, closed on clock-out and later
    approved or rejected. ``work_type`` is NULL only for rows stored before
    entries were tagged.
    """

    __tablename__ = "time_entries"

    id: Mapped[uuid_lib.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid_lib.uuid4,
    )
    user_id: Mapped[uuid_lib.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    start_time: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    end_time: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    total_break_minutes: Mapped[int] = mapped_column(
        Integer, default=0, nullable=False
    )
    work_type: Mapped[str | None] = mapped_column(
        String(30), default=WorkType.REGULAR.value, nullable=True
    )

    # Approval
    approval_status: Mapped[str] = mapped_column(
        String(20), default=ApprovalStatus.PENDING.value, nullable=False
    )
    approved_by: Mapped[uuid_lib.UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    decided_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    # Descriptive fields
    location: Mapped[str | None] = mapped_column(String(200), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    compensation_type: Mapped[str | None] = mapped_column(String(30), nullable=True)
    is_holiday: Mapped[bool | None] = mapped_column(Boolean, nullable=True)

    user: Mapped[User] = relationship(
        "User", back_populates="time_entries", foreign_keys=[user_id]
    )

    __table_args__ = (
        Index("idx_time_entries_user_start", "user_id", "start_time"),
        Index("idx_time_entries_user_type", "user_id", "work_type"),
    )

    @property
    def approved(self) -> bool:
        return self.approval_status == ApprovalStatus.APPROVED.value

    def to_raw(self) -> RawTimeEntry:
        """Snapshot this row for the engine."""
        return RawTimeEntry(
            id=str(self.id),
            user_id=str(self.user_id),
            clock_in=self.start_time,
            clock_out=self.end_time,
            total_break_minutes=self.total_break_minutes or 0,
            work_type=WorkType(self.work_type) if self.work_type else None,
            approved=self.approved,
            location=self.location,
            notes=self.notes,
            description=self.description,
            is_holiday=self.is_holiday,
        )

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"<TimeEntry(id={self.id}, type={self.work_type}, "
            f"start={self.start_time}, end={self.end_time})>"
        )
