from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List, Optional

from marinecrm.database import get_db
from marinecrm import models, schemas

router = APIRouter(tags=["Companies & Contacts"])


# -------------------------
# COMPANIES
# -------------------------

@router.get("/companies/", response_model=List[schemas.Company])
def list_companies(type: Optional[str] = None, db: Session = Depends(get_db)):
    query = db.query(models.Company)
    if type:
        query = query.filter(models.Company.type == type)
    return query.order_by(models.Company.name).all()


@router.post("/companies/", response_model=schemas.Company)
def create_company(payload: schemas.CompanyCreate, db: Session = Depends(get_db)):
    company = models.Company(**payload.model_dump())
    db.add(company)
    db.commit()
    db.refresh(company)
    return company


@router.put("/companies/{company_id}", response_model=schemas.Company)
def update_company(company_id: int, payload: schemas.CompanyUpdate, db: Session = Depends(get_db)):
    company = db.query(models.Company).filter(models.Company.id == company_id).first()
    if not company:
        raise HTTPException(status_code=404, detail="Company not found")

    for field, value in payload.model_dump(exclude_unset=True).items():
        setattr(company, field, value)
    db.commit()
    db.refresh(company)
    return company


@router.delete("/companies/{company_id}")
def delete_company(company_id: int, db: Session = Depends(get_db)):
    company = db.query(models.Company).filter(models.Company.id == company_id).first()
    if not company:
        raise HTTPException(status_code=404, detail="Company not found")

    # Detach projects that point at this shipyard
    db.query(models.Project).filter(
        models.Project.shipyard_id == company_id
    ).update({"shipyard_id": None})
    # Its contacts go with it
    contact_ids = [c.id for c in company.contacts]
    if contact_ids:
        db.query(models.Project).filter(
            models.Project.primary_contact_id.in_(contact_ids)
        ).update({"primary_contact_id": None}, synchronize_session=False)
    db.delete(company)
    db.commit()
    return {"message": "Company deleted successfully"}


# -------------------------
# CONTACTS
# -------------------------

@router.get("/contacts/", response_model=List[schemas.Contact])
def list_contacts(company_id: Optional[int] = None, db: Session = Depends(get_db)):
    query = db.query(models.Contact)
    if company_id is not None:
        query = query.filter(models.Contact.company_id == company_id)
    return query.order_by(models.Contact.name).all()


@router.post("/contacts/", response_model=schemas.Contact)
def create_contact(payload: schemas.ContactCreate, db: Session = Depends(get_db)):
    if payload.company_id is not None:
        if not db.query(models.Company).filter(models.Company.id == payload.company_id).first():
            raise HTTPException(status_code=404, detail="Company not found")

    contact = models.Contact(**payload.model_dump())
    db.add(contact)
    db.commit()
    db.refresh(contact)
    return contact


@router.put("/contacts/{contact_id}", response_model=schemas.Contact)
def update_contact(contact_id: int, payload: schemas.ContactUpdate, db: Session = Depends(get_db)):
    contact = db.query(models.Contact).filter(models.Contact.id == contact_id).first()
    if not contact:
        raise HTTPException(status_code=404, detail="Contact not found")

    for field, value in payload.model_dump(exclude_unset=True).items():
        setattr(contact, field, value)
    db.commit()
    db.refresh(contact)
    return contact


@router.delete("/contacts/{contact_id}")
def delete_contact(contact_id: int, db: Session = Depends(get_db)):
    contact = db.query(models.Contact).filter(models.Contact.id == contact_id).first()
    if not contact:
        raise HTTPException(status_code=404, detail="Contact not found")

    db.query(models.Project).filter(
        models.Project.primary_contact_id == contact_id
    ).update({"primary_contact_id": None})
    db.delete(contact)
    db.commit()
    return {"message": "Contact deleted successfully"}
