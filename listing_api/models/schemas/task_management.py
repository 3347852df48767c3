"""Task management summary schemas."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class TaskSummary(BaseModel):
    """Task card data for board and list views."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    description: Optional[str] = None
    status_id: str
    status_name: Optional[str] = Field(None, description="Denormalized status label")
    priority_id: str
    priority_name: Optional[str] = Field(None, description="Denormalized priority label")
    creator_id: str
    project_id: Optional[str] = None
    board_id: Optional[str] = None
    due_date: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
