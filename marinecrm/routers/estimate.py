from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List

from marinecrm.database import get_db
from marinecrm import models
from marinecrm.schemas.estimate import Estimate, EstimateUpsert
from marinecrm.utils.project import get_project_by_id
from marinecrm.utils.estimate import get_estimate, upsert_estimate

router = APIRouter(tags=["Estimates"])


@router.get("/projects/{project_id}/estimates", response_model=List[Estimate])
def list_estimates(project_id: int, db: Session = Depends(get_db)):
    """All estimate documents attached to a project, one per estimate type."""
    if not get_project_by_id(db, project_id):
        raise HTTPException(status_code=404, detail="Project not found")

    return db.query(models.ProjectEstimate).filter(
        models.ProjectEstimate.project_id == project_id
    ).order_by(models.ProjectEstimate.estimate_type).all()


@router.get("/projects/{project_id}/estimates/{estimate_type}", response_model=Estimate)
def read_estimate(project_id: int, estimate_type: str, db: Session = Depends(get_db)):
    """
    Get the estimate data for a project + type.

    Used by the UI to rehydrate the estimate form when it is opened.
    """
    estimate = get_estimate(db, project_id, estimate_type)
    if not estimate:
        raise HTTPException(
            status_code=404,
            detail=f"No '{estimate_type}' estimate for project {project_id}"
        )
    return estimate


@router.put("/projects/{project_id}/estimates/{estimate_type}", response_model=Estimate)
def save_estimate(
    project_id: int,
    estimate_type: str,
    payload: EstimateUpsert,
    db: Session = Depends(get_db)
):
    """
    Create or replace the estimate data for a project + type.

    The document is stored as-is; the quote builder validates it when a
    quote is generated.
    """
    if not get_project_by_id(db, project_id):
        raise HTTPException(status_code=404, detail="Project not found")

    estimate = upsert_estimate(db, project_id, estimate_type, payload.data)
    db.commit()
    db.refresh(estimate)
    return estimate


@router.delete("/projects/{project_id}/estimates/{estimate_type}")
def delete_estimate(project_id: int, estimate_type: str, db: Session = Depends(get_db)):
    estimate = get_estimate(db, project_id, estimate_type)
    if not estimate:
        raise HTTPException(
            status_code=404,
            detail=f"No '{estimate_type}' estimate for project {project_id}"
        )

    db.delete(estimate)
    db.commit()
    return {"message": "Estimate deleted successfully"}
