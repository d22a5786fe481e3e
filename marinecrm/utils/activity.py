import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from marinecrm.models.activity import Activity

logger = logging.getLogger(__name__)


def log_activity(
    db: Session,
    project_id: int,
    content: str,
    activity_type: str = "system",
    created_by: Optional[str] = None
) -> Optional[Activity]:
    """
    Record a project activity. Best-effort: failures are logged and
    rolled back, never raised, so callers' primary responses survive.
    """
    try:
        activity = Activity(
            project_id=project_id,
            type=activity_type,
            content=content,
            created_by=created_by
        )
        db.add(activity)
        db.commit()
        return activity
    except SQLAlchemyError:
        db.rollback()
        logger.warning("Could not record activity for project %s", project_id, exc_info=True,
                       extra={"project_id": project_id})
        return None
