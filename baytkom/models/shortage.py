from sqlalchemy import Column, String, Integer, DateTime, ForeignKey, Text
from baytkom.models.base import Base
from baytkom.utils.timezones import utcnow


class Shortage(Base):
    __tablename__ = "shortages"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name_ar = Column(String(200), nullable=False)
    name_en = Column(String(200), nullable=True)
    quantity = Column(Integer, nullable=False, default=1)
    notes = Column(Text, nullable=True)
    status = Column(String(20), nullable=False, default="pending")  # pending, approved, rejected, purchased
    created_by = Column(String, ForeignKey("users.id"), nullable=False)
    approved_by = Column(String, ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)
