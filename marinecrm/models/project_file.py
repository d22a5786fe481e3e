from sqlalchemy import Column, Integer, String, DateTime, LargeBinary, ForeignKey
from sqlalchemy.orm import relationship, backref, deferred
from datetime import datetime
from marinecrm.database import Base


class ProjectFile(Base):
    """Generated quote documents (and other artifacts) stored per project."""
    __tablename__ = "project_files"

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False)
    mime_type = Column(String, nullable=False)
    size = Column(Integer, nullable=False, default=0)
    content = deferred(Column(LargeBinary, nullable=False))
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    project = relationship("Project", backref=backref("files", cascade="all, delete-orphan"))
