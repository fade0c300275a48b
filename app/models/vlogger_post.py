"""Sponsored post submitted by a vlogger about a vendor. Admin approves (with payout) or rejects once."""
import uuid
import enum
from datetime import datetime
from sqlalchemy import Column, String, Text, Numeric, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from app.database import Base


class PostStatus(str, enum.Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class VloggerPost(Base):
    __tablename__ = "vlogger_posts"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    vlogger_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    vendor_id = Column(String(36), ForeignKey("vendors.id"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    url = Column(String(1024), nullable=False)
    screenshot_url = Column(String(1024), nullable=True)
    platform = Column(String(50), nullable=False)
    status = Column(String(20), nullable=False, default=PostStatus.PENDING.value, index=True)
    admin_notes = Column(Text, nullable=True)
    payout_amount = Column(Numeric(10, 2), nullable=True)
    submitted_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    reviewed_at = Column(DateTime, nullable=True)
    reviewed_by_id = Column(String(36), ForeignKey("users.id"), nullable=True)

    vendor = relationship("Vendor", lazy="joined")
    vlogger = relationship(
        "Vlogger",
        primaryjoin="VloggerPost.vlogger_id == Vlogger.id",
        foreign_keys=[vlogger_id],
        viewonly=True,
        lazy="joined",
    )
