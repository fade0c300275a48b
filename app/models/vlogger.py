from datetime import datetime
from sqlalchemy import Column, String, DateTime, ForeignKey
from app.database import Base


class Vlogger(Base):
    __tablename__ = "vloggers"

    # Same id as the owning VLOGGER user
    id = Column(String(36), ForeignKey("users.id"), primary_key=True)
    name = Column(String(200), nullable=False)
    platform = Column(String(50), nullable=True)
    username = Column(String(100), nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
