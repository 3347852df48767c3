"""Enterprise LMS summary schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class AnnouncementSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    tenant_id: str
    creator_id: str
    title: str
    body: str
    status: str
    created_at: datetime
    updated_at: datetime
