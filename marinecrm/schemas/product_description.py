from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class ProductDescriptionCreate(BaseModel):
    key: str
    scope_template: str


class ProductDescriptionUpdate(BaseModel):
    scope_template: str


class ProductDescription(BaseModel):
    key: str
    scope_template: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
