"""
Quote generation router.

Flow: project row + estimate row -> quote item builder -> description
templates -> document renderer -> persisted ProjectFile. Syncing the items
into project_line_items and logging an activity are best-effort
side-effects that never fail the request.
"""
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from marinecrm.database import get_db
from marinecrm import models
from marinecrm.models.project import Project
from marinecrm.schemas.quote import (
    QuoteItem,
    QuotePreviewRequest,
    QuoteGenerateRequest,
    QuotePreviewResponse,
    QuoteGenerateResponse,
    LineItem,
    LineItemCreate,
    ProjectFile as ProjectFileSchema,
)
from marinecrm.services.quote_document import render_quote
from marinecrm.services.quote_items import build_items, compute_total_price
from marinecrm.services.template_filler import load_templates
from marinecrm.utils.activity import log_activity
from marinecrm.utils.estimate import get_estimate
from marinecrm.utils.line_items import sync_auto_line_items, add_manual_line_item
from marinecrm.utils.project import get_project_by_id, project_row

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Quotes"])


def _load_project(db: Session, project_id: int) -> Project:
    project = get_project_by_id(db, project_id)
    if not project:
        raise HTTPException(status_code=404, detail="Project not found")
    return project


def _resolve_items(db: Session, project: Project, payload: QuotePreviewRequest) -> List[QuoteItem]:
    """Caller-supplied items bypass the builder; otherwise build from the estimate."""
    if payload.items:
        return list(payload.items)

    estimate = get_estimate(db, project.id, payload.estimate_type)
    if not estimate:
        raise HTTPException(
            status_code=404,
            detail=f"No '{payload.estimate_type}' estimate for project {project.id}"
        )

    templates = load_templates(db)
    return build_items(project_row(project), estimate.data or {}, templates)


@router.post("/projects/{project_id}/quote/preview", response_model=QuotePreviewResponse)
def preview_quote(
    project_id: int,
    payload: QuotePreviewRequest = QuotePreviewRequest(),
    db: Session = Depends(get_db)
):
    """Build the quote items for display without rendering or persisting anything."""
    project = _load_project(db, project_id)
    items = _resolve_items(db, project, payload)
    row = project_row(project)

    return QuotePreviewResponse(
        items=items,
        total_price=compute_total_price(row),
        currency=project.currency or "USD"
    )


@router.post("/projects/{project_id}/quote", response_model=QuoteGenerateResponse)
def generate_quote(
    project_id: int,
    payload: QuoteGenerateRequest = QuoteGenerateRequest(),
    db: Session = Depends(get_db)
):
    """
    Generate a quote document and store it as a project file.

    - 404 if the project is missing, or the estimate is missing and no
      items were supplied
    - 500 if the generated file cannot be saved
    - line-item sync and activity logging failures are logged only
    """
    project = _load_project(db, project_id)
    row = project_row(project)
    items = _resolve_items(db, project, payload)

    rendered = render_quote(row, items, payload.options, fmt=payload.format)

    try:
        project_file = models.ProjectFile(
            project_id=project.id,
            name=rendered.filename,
            mime_type=rendered.mime_type,
            size=len(rendered.buffer),
            content=rendered.buffer
        )
        db.add(project_file)
        db.commit()
        db.refresh(project_file)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to store generated quote", extra={"project_id": project_id})
        raise HTTPException(status_code=500, detail="Failed to store generated quote")

    logger.info("Generated quote %s", rendered.filename,
                extra={"project_id": project_id, "file_id": project_file.id, "items": len(items)})

    synced = False
    if payload.sync_line_items:
        try:
            sync_auto_line_items(db, project.id, items)
            synced = True
        except SQLAlchemyError:
            logger.warning("Line item sync failed", exc_info=True, extra={"project_id": project_id})

    log_activity(db, project.id, f"Quote generated: {rendered.filename} ({len(items)} items)")

    return QuoteGenerateResponse(
        file=ProjectFileSchema.model_validate(project_file),
        items=items,
        total_price=compute_total_price(row, payload.options.total_price),
        currency=row.get("currency") or "USD",
        line_items_synced=synced
    )


# -------------------------
# LINE ITEMS
# -------------------------

@router.get("/projects/{project_id}/line-items", response_model=List[LineItem])
def list_line_items(project_id: int, db: Session = Depends(get_db)):
    _load_project(db, project_id)
    return db.query(models.ProjectLineItem).filter(
        models.ProjectLineItem.project_id == project_id
    ).order_by(models.ProjectLineItem.id).all()


@router.post("/projects/{project_id}/line-items", response_model=LineItem)
def create_line_item(project_id: int, payload: LineItemCreate, db: Session = Depends(get_db)):
    """Add a user-entered line item (tagged MANUAL:, kept across quote regenerations)."""
    _load_project(db, project_id)
    return add_manual_line_item(
        db,
        project_id,
        kind=payload.kind,
        qty=payload.qty,
        unit=payload.unit,
        description=payload.description,
        unit_price=payload.unit_price
    )


@router.delete("/line-items/{line_item_id}")
def delete_line_item(line_item_id: int, db: Session = Depends(get_db)):
    item = db.query(models.ProjectLineItem).filter(models.ProjectLineItem.id == line_item_id).first()
    if not item:
        raise HTTPException(status_code=404, detail="Line item not found")

    db.delete(item)
    db.commit()
    return {"message": "Line item deleted successfully"}
