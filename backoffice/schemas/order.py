# backoffice/schemas/order.py
from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime

class OrderItemIn(BaseModel):
    product_id: Optional[str] = None
    quantity: int = Field(..., ge=1)
    price: float = Field(..., ge=0)

class OrderItemResponse(OrderItemIn):
    id: int

    class Config:
        from_attributes = True

class OrderBase(BaseModel):
    shipping_name: Optional[str] = None
    shipping_phone: Optional[str] = None
    shipping_email: Optional[str] = None
    shipping_street: Optional[str] = None
    shipping_city: Optional[str] = None
    shipping_district: Optional[str] = None
    subtotal: float = 0
    shipping_cost: float = 0
    discount: float = 0
    total: float = Field(..., ge=0)
    status: str = "pending"
    payment_method: Optional[str] = None
    payment_status: str = "unpaid"
    notes: Optional[str] = None

class OrderCreate(OrderBase):
    items: List[OrderItemIn] = []

class OrderUpdate(BaseModel):
    status: Optional[str] = None
    payment_status: Optional[str] = None
    notes: Optional[str] = None

class OrderResponse(OrderBase):
    id: str
    items: List[OrderItemResponse] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
