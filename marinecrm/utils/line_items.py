"""
Synchronisation of generated quote items into project_line_items.

Generated rows carry source "AUTO:<kind>" and are replaced wholesale on
every regeneration; user rows carry "MANUAL:<kind>" and are never touched.
"""
import logging
from typing import Iterable, List

from sqlalchemy.orm import Session

from marinecrm.models.line_item import ProjectLineItem, AUTO_PREFIX, MANUAL_PREFIX
from marinecrm.schemas.quote import QuoteItem
from marinecrm.utils.project import get_project_by_id

logger = logging.getLogger(__name__)


def sync_auto_line_items(db: Session, project_id: int, items: Iterable[QuoteItem]) -> List[ProjectLineItem]:
    """
    Replace the project's AUTO: rows with the given items in one transaction.

    The project row is locked first so concurrent regenerations for the
    same project serialise instead of interleaving their delete+insert
    passes. On any error the whole transaction is rolled back and the
    exception propagates.
    """
    try:
        get_project_by_id(db, project_id, for_update=True)

        deleted = db.query(ProjectLineItem).filter(
            ProjectLineItem.project_id == project_id,
            ProjectLineItem.source.like(f"{AUTO_PREFIX}%")
        ).delete(synchronize_session=False)

        rows = [
            ProjectLineItem(
                project_id=project_id,
                kind=item.kind,
                qty=item.qty,
                unit=item.unit,
                description=item.description,
                source=f"{AUTO_PREFIX}{item.kind}",
            )
            for item in items
        ]
        db.add_all(rows)
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info("Synced %d AUTO line items (replaced %d)", len(rows), deleted,
                extra={"project_id": project_id})
    return rows


def add_manual_line_item(db: Session, project_id: int, kind: str, qty: float, unit: str,
                         description: str, unit_price: float = None) -> ProjectLineItem:
    item = ProjectLineItem(
        project_id=project_id,
        kind=kind,
        qty=qty,
        unit=unit,
        description=description,
        unit_price=unit_price,
        source=f"{MANUAL_PREFIX}{kind}",
    )
    db.add(item)
    db.commit()
    db.refresh(item)
    return item
