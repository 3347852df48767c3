"""Healthcare platform summary schemas."""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class InsurancePolicySummary(BaseModel):
    """Insurance policy row as shown in admin lists."""

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(..., description="Policy ID")
    organization_id: str
    patient_id: str
    policy_number: str
    payer_name: str
    group_number: Optional[str] = None
    coverage_start_date: date
    coverage_end_date: Optional[date] = None
    plan_type: str
    policy_status: str
    created_at: datetime
    updated_at: datetime


class AppointmentSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    organization_id: str
    patient_id: str
    provider_id: str
    department_id: Optional[str] = None
    status: str
    appointment_type: str
    start_time: datetime
    end_time: datetime
    title: Optional[str] = None
    created_at: datetime
