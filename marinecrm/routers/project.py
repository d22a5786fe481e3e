"""
Project management router.

Provides CRUD operations for projects (sales opportunities) and their
activity log.
"""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List, Optional
from marinecrm.database import get_db
from marinecrm.models.project import Project
from marinecrm.models.activity import Activity
from marinecrm.schemas.project import (
    ProjectCreate,
    ProjectUpdate,
    ProjectResponse,
    ProjectListResponse
)
from marinecrm.schemas.activity import Activity as ActivitySchema, ActivityCreate
from marinecrm.utils.project import get_project_by_id
from marinecrm.utils.activity import log_activity

router = APIRouter(tags=["Projects"])


@router.post("/projects/", response_model=ProjectResponse)
def create_project(
    project: ProjectCreate,
    db: Session = Depends(get_db)
):
    """
    Create a new project.

    Each project gets a unique ID, but display names can be duplicated.
    """
    new_project = Project(**project.model_dump())
    db.add(new_project)
    db.commit()
    db.refresh(new_project)
    return new_project


@router.get("/projects/", response_model=List[ProjectListResponse])
def list_projects(
    status: Optional[str] = None,
    stage: Optional[str] = None,
    db: Session = Depends(get_db)
):
    """
    List projects, most recently updated first.

    Can filter by status (active, archived) and pipeline stage.
    """
    query = db.query(Project)

    if status:
        query = query.filter(Project.status == status)
    if stage:
        query = query.filter(Project.stage == stage)

    return query.order_by(Project.updated_at.desc()).all()


@router.get("/projects/{project_id}", response_model=ProjectResponse)
def get_project(
    project_id: int,
    db: Session = Depends(get_db)
):
    project = get_project_by_id(db, project_id)
    if not project:
        raise HTTPException(status_code=404, detail="Project not found")
    return project


@router.put("/projects/{project_id}", response_model=ProjectResponse)
def update_project(
    project_id: int,
    project_update: ProjectUpdate,
    db: Session = Depends(get_db)
):
    """
    Update a project. Only fields present in the payload are applied.

    A stage change is recorded in the project's activity log.
    """
    project = get_project_by_id(db, project_id)
    if not project:
        raise HTTPException(status_code=404, detail="Project not found")

    changes = project_update.model_dump(exclude_unset=True)
    old_stage = project.stage
    for field, value in changes.items():
        setattr(project, field, value)

    db.commit()
    db.refresh(project)

    if "stage" in changes and changes["stage"] != old_stage:
        log_activity(
            db,
            project.id,
            f"Stage changed from {old_stage or '-'} to {project.stage}",
            activity_type="status_change"
        )
    return project


@router.delete("/projects/{project_id}")
def delete_project(
    project_id: int,
    db: Session = Depends(get_db)
):
    """
    Delete a project and all associated data.

    This will cascade delete estimates, line items, generated files and
    activities. Use with caution - this action cannot be undone.
    """
    project = get_project_by_id(db, project_id)
    if not project:
        raise HTTPException(status_code=404, detail="Project not found")

    db.delete(project)
    db.commit()
    return {"message": "Project deleted successfully"}


@router.get("/projects/{project_id}/activities", response_model=List[ActivitySchema])
def list_activities(project_id: int, db: Session = Depends(get_db)):
    """Activity log for a project, newest first."""
    if not get_project_by_id(db, project_id):
        raise HTTPException(status_code=404, detail="Project not found")

    return db.query(Activity).filter(
        Activity.project_id == project_id
    ).order_by(Activity.created_at.desc(), Activity.id.desc()).all()


@router.post("/projects/{project_id}/activities", response_model=ActivitySchema)
def add_activity(project_id: int, payload: ActivityCreate, db: Session = Depends(get_db)):
    if not get_project_by_id(db, project_id):
        raise HTTPException(status_code=404, detail="Project not found")

    activity = Activity(project_id=project_id, **payload.model_dump())
    db.add(activity)
    db.commit()
    db.refresh(activity)
    return activity
