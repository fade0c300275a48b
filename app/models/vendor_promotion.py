"""Vendor promotion: a purchased, time-boxed featured package. At most one ACTIVE per vendor."""
import uuid
import enum
from datetime import datetime
from sqlalchemy import Column, String, Numeric, DateTime, ForeignKey, Index, text
from app.database import Base


class PromotionStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    CANCELLED = "CANCELLED"
    EXPIRED = "EXPIRED"


class VendorPromotion(Base):
    __tablename__ = "vendor_promotions"
    __table_args__ = (
        Index(
            "ix_vendor_promotions_vendor_id_active",
            "vendor_id",
            unique=True,
            sqlite_where=text("status = 'ACTIVE'"),
            postgresql_where=text("status = 'ACTIVE'"),
        ),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    vendor_id = Column(String(36), ForeignKey("vendors.id"), nullable=False, index=True)
    package_id = Column(String(50), nullable=False)
    package_name = Column(String(100), nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    duration = Column(String(20), nullable=False)  # "1 Month" | "3 Months" | "6 Months"
    start_date = Column(DateTime, nullable=False)
    end_date = Column(DateTime, nullable=False)
    status = Column(String(20), nullable=False, default=PromotionStatus.ACTIVE.value)
    payment_id = Column(String(64), nullable=True)
    payment_method = Column(String(50), nullable=False, default="test")
    payment_status = Column(String(20), nullable=False, default="completed")
    cancelled_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)
