from pydantic import BaseModel
from typing import Optional


class CompanyCreate(BaseModel):
    name: str
    type: Optional[str] = None  # Shipyard, Vessel Owner, Design Company
    location: Optional[str] = None


class CompanyUpdate(BaseModel):
    name: Optional[str] = None
    type: Optional[str] = None
    location: Optional[str] = None


class Company(CompanyCreate):
    id: int

    class Config:
        from_attributes = True


class ContactCreate(BaseModel):
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    company_id: Optional[int] = None


class ContactUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    company_id: Optional[int] = None


class Contact(ContactCreate):
    id: int

    class Config:
        from_attributes = True
