from sqlalchemy import Column, Integer, String, DateTime, JSON, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship, backref
from datetime import datetime
from marinecrm.database import Base


class ProjectEstimate(Base):
    """
    Engineering inputs attached to a project, one row per estimate type.

    The data column is an opaque JSON document (pump type/quantity, motor,
    control system, valve line items, starter, level switches, class
    certification, commissioning). It has no fixed schema; the quote
    builder validates it at the boundary via EstimateInputs.
    """
    __tablename__ = "project_estimates"

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    estimate_type = Column(String, nullable=False, default="anti_heeling")
    data = Column(JSON, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    project = relationship("Project", backref=backref("estimates", cascade="all, delete-orphan"))

    __table_args__ = (
        UniqueConstraint('project_id', 'estimate_type', name='uq_project_estimate_type'),
    )
