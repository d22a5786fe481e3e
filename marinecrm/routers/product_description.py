from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List

from marinecrm.database import get_db
from marinecrm.models.product_description import ProductDescription
from marinecrm import schemas

router = APIRouter(tags=["Product Descriptions"])


@router.get("/", response_model=List[schemas.ProductDescription])
def list_descriptions(db: Session = Depends(get_db)):
    return db.query(ProductDescription).order_by(ProductDescription.key).all()


@router.get("/{key}", response_model=schemas.ProductDescription)
def get_description(key: str, db: Session = Depends(get_db)):
    row = db.query(ProductDescription).filter(ProductDescription.key == key).first()
    if not row:
        raise HTTPException(status_code=404, detail=f"Product description '{key}' not found")
    return row


@router.post("/", response_model=schemas.ProductDescription)
def create_description(payload: schemas.ProductDescriptionCreate, db: Session = Depends(get_db)):
    if db.query(ProductDescription).filter(ProductDescription.key == payload.key).first():
        raise HTTPException(status_code=400, detail=f"Product description '{payload.key}' already exists")

    row = ProductDescription(key=payload.key, scope_template=payload.scope_template)
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


@router.put("/{key}", response_model=schemas.ProductDescription)
def update_description(key: str, payload: schemas.ProductDescriptionUpdate, db: Session = Depends(get_db)):
    row = db.query(ProductDescription).filter(ProductDescription.key == key).first()
    if not row:
        raise HTTPException(status_code=404, detail=f"Product description '{key}' not found")

    row.scope_template = payload.scope_template
    db.commit()
    db.refresh(row)
    return row


@router.delete("/{key}")
def delete_description(key: str, db: Session = Depends(get_db)):
    row = db.query(ProductDescription).filter(ProductDescription.key == key).first()
    if not row:
        raise HTTPException(status_code=404, detail=f"Product description '{key}' not found")

    db.delete(row)
    db.commit()
    return {"message": "Product description deleted successfully"}
