from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class ProjectBase(BaseModel):
    """Base schema for Project"""
    name: str
    project_type: Optional[str] = None
    opportunity_number: Optional[str] = None
    order_number: Optional[str] = None
    stage: Optional[str] = "Lead"
    status: Optional[str] = "active"
    currency: str = "USD"
    price_per_vessel: Optional[float] = None
    number_of_vessels: int = 1
    pumps_per_vessel: Optional[int] = None
    flow_capacity: Optional[float] = None
    flow_head: Optional[float] = None
    flow_power: Optional[float] = None
    vessel_size: Optional[float] = None
    vessel_size_unit: Optional[str] = None
    vessel_type: Optional[str] = None
    shipyard_id: Optional[int] = None
    primary_contact_id: Optional[int] = None
    notes: Optional[str] = None


class ProjectCreate(ProjectBase):
    """Schema for creating a new project"""
    pass


class ProjectUpdate(BaseModel):
    """Schema for updating a project - only provided fields are applied"""
    name: Optional[str] = None
    project_type: Optional[str] = None
    opportunity_number: Optional[str] = None
    order_number: Optional[str] = None
    stage: Optional[str] = None
    status: Optional[str] = None
    currency: Optional[str] = None
    price_per_vessel: Optional[float] = None
    number_of_vessels: Optional[int] = None
    pumps_per_vessel: Optional[int] = None
    flow_capacity: Optional[float] = None
    flow_head: Optional[float] = None
    flow_power: Optional[float] = None
    vessel_size: Optional[float] = None
    vessel_size_unit: Optional[str] = None
    vessel_type: Optional[str] = None
    shipyard_id: Optional[int] = None
    primary_contact_id: Optional[int] = None
    notes: Optional[str] = None


class ProjectResponse(ProjectBase):
    """Schema for project response"""
    id: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ProjectListResponse(BaseModel):
    """Schema for listing projects"""
    id: int
    name: str
    project_type: Optional[str] = None
    opportunity_number: Optional[str] = None
    stage: Optional[str] = None
    status: Optional[str] = None
    currency: Optional[str] = None
    price_per_vessel: Optional[float] = None
    number_of_vessels: Optional[int] = None
    updated_at: datetime

    class Config:
        from_attributes = True
