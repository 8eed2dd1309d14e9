from sqlalchemy import Column, String, Integer, Boolean, ForeignKey, DateTime, Text, Index
from sqlalchemy.orm import relationship
from baytkom.models.base import Base
from baytkom.utils.timezones import utcnow


class Order(Base):
    """Household shopping request routed through approval and fulfillment"""
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, autoincrement=True)
    status = Column(String(20), nullable=False, default="pending")  # pending, approved, rejected, in_progress, completed
    created_by = Column(String, ForeignKey("users.id"), nullable=False)
    approved_by = Column(String, ForeignKey("users.id"), nullable=True)
    assigned_driver = Column(String, ForeignKey("users.id"), nullable=True)
    notes = Column(Text, nullable=True)
    total_estimated = Column(Integer, default=0)
    total_actual = Column(Integer, default=0)
    receipt_image_url = Column(String(500), nullable=True)
    scheduled_for = Column(String(10), nullable=True)  # YYYY-MM-DD
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)
    completed_at = Column(DateTime, nullable=True)

    items = relationship("OrderItem", back_populates="order", cascade="all, delete-orphan")

    __table_args__ = (
        Index("idx_orders_status", "status"),
        Index("idx_orders_driver", "assigned_driver", "status"),
    )


class OrderItem(Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, autoincrement=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False)
    quantity = Column(Integer, nullable=False, default=1)
    estimated_price = Column(Integer, default=0)
    actual_price = Column(Integer, nullable=True)
    is_purchased = Column(Boolean, nullable=False, default=False)
    substitute_product_id = Column(Integer, ForeignKey("products.id"), nullable=True)
    notes = Column(Text, nullable=True)

    order = relationship("Order", back_populates="items")
