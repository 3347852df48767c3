"""Healthcare platform tables."""

from datetime import date, datetime
from enum import Enum
from typing import Optional

from sqlalchemy import Date, DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from listing_api.models.base import Base, IdMixin, SoftDeleteMixin, TimestampMixin


class PolicyStatus(str, Enum):
    """Insurance policy lifecycle status."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    PENDING = "pending"
    EXPIRED = "expired"


class AppointmentStatus(str, Enum):
    """Appointment status."""

    SCHEDULED = "scheduled"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    NO_SHOW = "no_show"


class InsurancePolicyModel(IdMixin, TimestampMixin, SoftDeleteMixin, Base):
    __tablename__ = "healthcare_platform_insurance_policies"

    organization_id: Mapped[str] = mapped_column(String(36), index=True)
    patient_id: Mapped[str] = mapped_column(String(36), index=True)
    policy_number: Mapped[str] = mapped_column(String(64))
    payer_name: Mapped[str] = mapped_column(String(255))
    group_number: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    coverage_start_date: Mapped[date] = mapped_column(Date)
    coverage_end_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    plan_type: Mapped[str] = mapped_column(String(32))
    policy_status: Mapped[str] = mapped_column(String(32), default=PolicyStatus.ACTIVE.value)


class AppointmentModel(IdMixin, TimestampMixin, SoftDeleteMixin, Base):
    __tablename__ = "healthcare_platform_appointments"

    organization_id: Mapped[str] = mapped_column(String(36), index=True)
    patient_id: Mapped[str] = mapped_column(String(36), index=True)
    provider_id: Mapped[str] = mapped_column(String(36), index=True)
    department_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)
    status: Mapped[str] = mapped_column(String(32), default=AppointmentStatus.SCHEDULED.value)
    appointment_type: Mapped[str] = mapped_column(String(32))
    start_time: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    end_time: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    title: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
