"""
Utility functions for project estimate data.

Estimate data is stored per (project_id, estimate_type). Writes replace
the whole JSON document.
"""
from sqlalchemy.orm import Session
from marinecrm.models.estimate import ProjectEstimate
from typing import Optional, Dict, Any

DEFAULT_ESTIMATE_TYPE = "anti_heeling"


def get_estimate(db: Session, project_id: int, estimate_type: str = DEFAULT_ESTIMATE_TYPE) -> Optional[ProjectEstimate]:
    return db.query(ProjectEstimate).filter(
        ProjectEstimate.project_id == project_id,
        ProjectEstimate.estimate_type == estimate_type
    ).first()


def upsert_estimate(
    db: Session,
    project_id: int,
    estimate_type: str,
    data: Dict[str, Any]
) -> ProjectEstimate:
    """
    Create or replace the estimate data for a project + type.

    Note:
        Caller is responsible for committing the transaction.
    """
    estimate = get_estimate(db, project_id, estimate_type)
    if estimate:
        estimate.data = data
    else:
        estimate = ProjectEstimate(
            project_id=project_id,
            estimate_type=estimate_type,
            data=data
        )
        db.add(estimate)
    db.flush()
    return estimate
