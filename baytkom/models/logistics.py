from sqlalchemy import Column, String, Integer, Boolean, ForeignKey, DateTime, Text, Index
from sqlalchemy.orm import relationship
from baytkom.models.base import Base
from baytkom.utils.timezones import utcnow


class Vehicle(Base):
    __tablename__ = "vehicles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    odometer_reading = Column(Integer, default=0)
    last_maintenance_date = Column(DateTime, nullable=True)
    is_private = Column(Boolean, nullable=False, default=False)
    assigned_user_id = Column(String, ForeignKey("users.id"), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=utcnow)


class Trip(Base):
    """Scheduled driver errand with a time window and status lifecycle"""
    __tablename__ = "trips"

    id = Column(Integer, primary_key=True, autoincrement=True)
    person_name = Column(String(200), nullable=False)
    location = Column(String(500), nullable=False)
    departure_time = Column(DateTime, nullable=False)
    estimated_duration = Column(Integer, default=30)  # minutes
    status = Column(String(20), nullable=False, default="pending")
    approved_by = Column(String, ForeignKey("users.id"), nullable=True)
    assigned_driver = Column(String, ForeignKey("users.id"), nullable=True)
    vehicle_id = Column(Integer, ForeignKey("vehicles.id"), nullable=True)
    started_at = Column(DateTime, nullable=True)
    waiting_started_at = Column(DateTime, nullable=True)
    waiting_duration = Column(Integer, default=0)  # seconds, accumulated across waiting periods
    completed_at = Column(DateTime, nullable=True)
    notes = Column(Text, nullable=True)
    is_personal = Column(Boolean, nullable=False, default=False)
    created_by = Column(String, ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime, default=utcnow)

    vehicle = relationship("Vehicle")

    __table_args__ = (
        Index("idx_trips_driver", "assigned_driver", "status"),
        Index("idx_trips_departure", "departure_time"),
    )


class TripLocation(Base):
    __tablename__ = "trip_locations"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name_ar = Column(String(200), nullable=False)
    name_en = Column(String(200), nullable=True)
    address = Column(String(500), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=utcnow)


class Technician(Base):
    __tablename__ = "technicians"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    specialty = Column(String(100), nullable=False)
    phone = Column(String(50), nullable=False)
    notes = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=utcnow)


class SparePartOrder(Base):
    __tablename__ = "spare_part_orders"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    quantity = Column(Integer, nullable=False, default=1)
    price = Column(Integer, nullable=True)
    vehicle_id = Column(Integer, ForeignKey("vehicles.id"), nullable=True)
    technician_id = Column(Integer, ForeignKey("technicians.id"), nullable=True)
    status = Column(String(20), nullable=False, default="pending")  # pending, ordered, received, installed, cancelled
    assigned_to = Column(String, ForeignKey("users.id"), nullable=True)
    created_by = Column(String, ForeignKey("users.id"), nullable=False)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=utcnow)
