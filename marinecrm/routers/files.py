from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session
from typing import List

from marinecrm.database import get_db
from marinecrm.models.project_file import ProjectFile
from marinecrm.schemas.quote import ProjectFile as ProjectFileSchema
from marinecrm.utils.project import get_project_by_id

router = APIRouter(tags=["Files"])


@router.get("/projects/{project_id}/files", response_model=List[ProjectFileSchema])
def list_project_files(project_id: int, db: Session = Depends(get_db)):
    """Files stored for a project (generated quotes), newest first."""
    if not get_project_by_id(db, project_id):
        raise HTTPException(status_code=404, detail="Project not found")

    return db.query(ProjectFile).filter(
        ProjectFile.project_id == project_id
    ).order_by(ProjectFile.created_at.desc(), ProjectFile.id.desc()).all()


@router.get("/files/{file_id}/download")
def download_file(file_id: int, db: Session = Depends(get_db)):
    record = db.query(ProjectFile).filter(ProjectFile.id == file_id).first()
    if not record:
        raise HTTPException(status_code=404, detail="File not found")

    return Response(
        content=record.content,
        media_type=record.mime_type,
        headers={"Content-Disposition": f'attachment; filename="{record.name}"'}
    )


@router.delete("/files/{file_id}")
def delete_file(file_id: int, db: Session = Depends(get_db)):
    record = db.query(ProjectFile).filter(ProjectFile.id == file_id).first()
    if not record:
        raise HTTPException(status_code=404, detail="File not found")

    db.delete(record)
    db.commit()
    return {"message": "File deleted successfully"}
