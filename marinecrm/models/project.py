from sqlalchemy import Column, Integer, String, Float, DateTime, ForeignKey, Text, Index
from sqlalchemy.orm import relationship
from datetime import datetime
from marinecrm.database import Base


class Project(Base):
    """
    Sales opportunity / project.

    This table stores:
    - Opportunity identity (id, name, opportunity/order numbers, stage)
    - Commercial terms (currency, price per vessel, number of vessels)
    - Flow specification of the pump system (capacity, head, power)
    - Vessel description (size, unit, type)

    Estimates, line items, generated quote files and activities all
    reference this table via project_id.
    """
    __tablename__ = "projects"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String, nullable=False, index=True)
    project_type = Column(String, nullable=True)  # "Anti-Heeling", "Fuel Transfer"
    opportunity_number = Column(String, nullable=True, index=True)
    order_number = Column(String, nullable=True)
    stage = Column(String, nullable=True, default="Lead")
    status = Column(String, nullable=True, default="active")  # active, archived

    # Commercial
    currency = Column(String, nullable=False, default="USD")
    price_per_vessel = Column(Float, nullable=True)
    number_of_vessels = Column(Integer, nullable=False, default=1)
    pumps_per_vessel = Column(Integer, nullable=True)

    # Flow specification
    flow_capacity = Column(Float, nullable=True)  # m3/h
    flow_head = Column(Float, nullable=True)      # mwc
    flow_power = Column(Float, nullable=True)     # kW

    # Vessel
    vessel_size = Column(Float, nullable=True)
    vessel_size_unit = Column(String, nullable=True)  # DWT, TEU
    vessel_type = Column(String, nullable=True)

    shipyard_id = Column(Integer, ForeignKey("companies.id", ondelete="SET NULL"), nullable=True)
    primary_contact_id = Column(Integer, ForeignKey("contacts.id", ondelete="SET NULL"), nullable=True)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    shipyard = relationship("Company", foreign_keys=[shipyard_id])
    primary_contact = relationship("Contact", foreign_keys=[primary_contact_id])

    __table_args__ = (
        Index('idx_project_status', 'status'),
        Index('idx_project_updated', 'updated_at'),
    )
