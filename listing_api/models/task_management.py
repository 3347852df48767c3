"""Task management tables."""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from listing_api.models.base import Base, IdMixin, SoftDeleteMixin, TimestampMixin


class TaskModel(IdMixin, TimestampMixin, SoftDeleteMixin, Base):
    __tablename__ = "task_management_tasks"

    status_id: Mapped[str] = mapped_column(String(36), index=True)
    priority_id: Mapped[str] = mapped_column(String(36), index=True)
    creator_id: Mapped[str] = mapped_column(String(36), index=True)
    project_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True, index=True)
    board_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True, index=True)
    title: Mapped[str] = mapped_column(String(255))
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    status_name: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    priority_name: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    due_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
