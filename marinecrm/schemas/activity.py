from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class ActivityCreate(BaseModel):
    type: str = "note"  # note, status_change, system
    content: str
    created_by: Optional[str] = None


class Activity(ActivityCreate):
    id: int
    project_id: int
    created_at: datetime

    class Config:
        from_attributes = True
