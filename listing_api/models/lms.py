"""Enterprise LMS tables."""

from enum import Enum
from typing import Optional

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from listing_api.models.base import Base, IdMixin, SoftDeleteMixin, TimestampMixin


class AnnouncementStatus(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"


class AnnouncementModel(IdMixin, TimestampMixin, SoftDeleteMixin, Base):
    __tablename__ = "enterprise_lms_announcements"

    tenant_id: Mapped[str] = mapped_column(String(36), index=True)
    creator_id: Mapped[str] = mapped_column(String(36), index=True)
    title: Mapped[str] = mapped_column(String(255))
    body: Mapped[str] = mapped_column(Text)
    target_audience_description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(32), default=AnnouncementStatus.DRAFT.value)
