"""Vendor profile. Featured fields are a projection of the vendor's active promotion."""
from datetime import datetime
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey
from app.database import Base


class Vendor(Base):
    __tablename__ = "vendors"

    # Same id as the owning VENDOR user
    id = Column(String(36), ForeignKey("users.id"), primary_key=True)
    name = Column(String(200), nullable=False)
    cuisine_type = Column(String(100), nullable=True)
    location = Column(String(255), nullable=True)
    is_featured = Column(Boolean, nullable=False, default=False)
    promotion_tier = Column(String(50), nullable=True)
    featured_until = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)
