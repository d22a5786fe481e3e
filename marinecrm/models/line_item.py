from sqlalchemy import Column, Integer, String, Float, Text, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship, backref
from datetime import datetime
from marinecrm.database import Base

AUTO_PREFIX = "AUTO:"
MANUAL_PREFIX = "MANUAL:"


class ProjectLineItem(Base):
    """
    Persisted bill-of-materials row for a project.

    `source` carries the provenance marker: "AUTO:<kind>" for rows synced
    from a generated quote (replaced on every regeneration) and
    "MANUAL:<kind>" for rows entered by a user (never touched by a sync).
    """
    __tablename__ = "project_line_items"

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    kind = Column(String, nullable=False)
    qty = Column(Float, nullable=False, default=1)
    unit = Column(String, nullable=True)
    description = Column(Text, nullable=False)
    unit_price = Column(Float, nullable=True)
    source = Column(String, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    project = relationship("Project", backref=backref("line_items", cascade="all, delete-orphan"))

    __table_args__ = (
        Index('idx_line_item_project_source', 'project_id', 'source'),
    )
