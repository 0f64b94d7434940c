from sqlalchemy import Column, Integer, String, DateTime, Text, Float, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid
from backoffice.database import Base

class Order(Base):
    __tablename__ = "orders"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    # Доставка / покупатель
    shipping_name = Column(String(200), nullable=True)
    shipping_phone = Column(String(50), nullable=True, index=True)
    shipping_email = Column(String(200), nullable=True)
    shipping_street = Column(String(300), nullable=True)
    shipping_city = Column(String(100), nullable=True)
    shipping_district = Column(String(100), nullable=True)

    # Суммы
    subtotal = Column(Float, default=0.0)
    shipping_cost = Column(Float, default=0.0)
    discount = Column(Float, default=0.0)
    total = Column(Float, nullable=False, default=0.0)

    status = Column(String(30), default="pending", index=True)
    payment_method = Column(String(50), nullable=True)
    payment_status = Column(String(30), default="unpaid")
    notes = Column(Text, nullable=True)

    items = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    def __repr__(self):
        return f"<Order {self.id} ({self.status})>"

class OrderItem(Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(String(36), ForeignKey("orders.id"), nullable=False, index=True)
    # Товар мог быть удален, строка заказа остается
    product_id = Column(String(36), nullable=True)
    quantity = Column(Integer, nullable=False, default=1)
    price = Column(Float, nullable=False)

    order = relationship("Order", back_populates="items")
