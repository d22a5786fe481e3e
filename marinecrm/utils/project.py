"""
Utility functions for looking up projects.

Projects are tracked by unique ID; display names may repeat.
"""
from sqlalchemy.orm import Session
from marinecrm.models.project import Project
from typing import Optional, Dict, Any


def get_project_by_id(db: Session, project_id: int, for_update: bool = False) -> Optional[Project]:
    """
    Get a project by its unique ID.

    Args:
        db: Database session
        project_id: Unique project ID
        for_update: Take a row lock (SELECT ... FOR UPDATE) until the
            transaction ends. Ignored by backends without row locks.

    Returns:
        Project instance if found, None otherwise
    """
    query = db.query(Project).filter(Project.id == project_id)
    if for_update:
        query = query.with_for_update()
    return query.first()


def project_row(project: Project) -> Dict[str, Any]:
    """Plain key-value view of a project, as consumed by the quote pipeline."""
    return {
        column.name: getattr(project, column.name)
        for column in Project.__table__.columns
    }
