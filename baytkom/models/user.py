from sqlalchemy import Column, String, Boolean, DateTime
from baytkom.models.base import Base
from baytkom.utils.timezones import utcnow
import uuid


class User(Base):
    __tablename__ = "users"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    username = Column(String(100), unique=True, nullable=False, index=True)
    password = Column(String(200), nullable=False)  # hashed
    email = Column(String, nullable=True)
    first_name = Column(String, nullable=True)
    first_name_en = Column(String, nullable=True)
    last_name = Column(String, nullable=True)
    display_name = Column(String, nullable=True)
    profile_image_url = Column(String, nullable=True)

    role = Column(String(20), nullable=False, default="household")  # admin, household, maid, driver

    # Capability flags layered on top of the role (admin implies all)
    can_approve = Column(Boolean, nullable=False, default=False)
    can_add_shortages = Column(Boolean, nullable=False, default=False)
    can_approve_trips = Column(Boolean, nullable=False, default=False)

    is_suspended = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    @property
    def name(self) -> str:
        return self.display_name or self.first_name or self.username
