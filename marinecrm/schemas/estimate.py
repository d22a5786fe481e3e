from pydantic import BaseModel
from typing import Optional, Dict, Any
from datetime import datetime


class EstimateUpsert(BaseModel):
    """Estimate data is an opaque JSON document; no schema is enforced here."""
    data: Dict[str, Any] = {}


class Estimate(BaseModel):
    id: int
    project_id: int
    estimate_type: str
    data: Optional[Dict[str, Any]] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
