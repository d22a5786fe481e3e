from sqlalchemy import Column, String, Text, DateTime
from datetime import datetime
from marinecrm.database import Base


class ProductDescription(Base):
    """Description template keyed by product, with {{placeholder}} tokens."""
    __tablename__ = "product_descriptions"

    key = Column(String, primary_key=True)
    scope_template = Column(Text, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
