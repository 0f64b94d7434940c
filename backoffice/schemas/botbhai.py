# backoffice/schemas/botbhai.py
from typing import Any, Dict, List, Literal, Optional, Union
from enum import Enum
from pydantic import BaseModel, Field

StockStatus = Literal["in_stock", "low_stock", "out_of_stock"]
ProductStatus = Literal["active", "inactive", "archived"]

# Локальные записи, которые мост умеет отправлять

class ProductRecord(BaseModel):
    id: str
    name: str
    price: float
    original_price: Optional[float] = None
    stock: int = 0
    images: Optional[List[str]] = None
    category: Optional[str] = None
    tags: Optional[List[str]] = None
    description: Optional[str] = None
    is_active: bool = True

    @classmethod
    def from_model(cls, product) -> "ProductRecord":
        """Запись из ORM-модели Product (название категории берется из связи)"""
        return cls(
            id=product.id,
            name=product.name,
            price=product.price or 0,
            original_price=product.original_price,
            stock=product.stock or 0,
            images=product.images or None,
            category=product.category.name if product.category else None,
            tags=product.tags or None,
            description=product.description,
            is_active=product.is_active if product.is_active is not None else True,
        )

class CustomerInfo(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None

class OrderLine(BaseModel):
    product_id: str = ""
    qty: int
    price: float

class OrderRecord(BaseModel):
    id: str
    total: float
    subtotal: Optional[float] = None
    shipping_cost: Optional[float] = None
    discount: Optional[float] = None
    status: Optional[str] = None
    payment_method: Optional[str] = None
    payment_status: Optional[str] = None
    notes: Optional[str] = None
    customer: CustomerInfo = Field(default_factory=CustomerInfo)
    items: List[OrderLine] = []

    @classmethod
    def from_model(cls, order) -> "OrderRecord":
        """Запись из ORM-модели Order; адрес склеивается из полей доставки"""
        address_parts = [order.shipping_street, order.shipping_city, order.shipping_district]
        address = ", ".join(part for part in address_parts if part)
        return cls(
            id=order.id,
            total=order.total or 0,
            subtotal=order.subtotal,
            shipping_cost=order.shipping_cost,
            discount=order.discount,
            status=order.status,
            payment_method=order.payment_method,
            payment_status=order.payment_status,
            notes=order.notes,
            customer=CustomerInfo(
                name=order.shipping_name,
                phone=order.shipping_phone,
                email=order.shipping_email,
                address=address or None,
            ),
            items=[
                OrderLine(product_id=item.product_id or "", qty=item.quantity, price=item.price)
                for item in order.items
            ],
        )

# Внешняя схема BotBhai

class BotBhaiProductPayload(BaseModel):
    product_id: str
    product_name: str
    image_url: Optional[str] = None
    images: Optional[List[str]] = None
    category: Optional[str] = None
    subcategory: Optional[str] = None
    tags: Optional[List[str]] = None
    color: Optional[str] = None
    size: Optional[str] = None
    stock: int = 0
    stock_status: StockStatus = "out_of_stock"
    base_price: float = 0
    selling_price: float = 0
    discount_price: Optional[float] = None
    wholesale_price: Optional[float] = None
    description: Optional[str] = None
    features: Optional[List[str]] = None
    is_available: bool = True
    status: ProductStatus = "active"

class BotBhaiOrderItem(BaseModel):
    product_id: str
    qty: int
    price: float

class BotBhaiOrderPayload(BaseModel):
    order_id: str
    customer_id: str
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    customer_email: Optional[str] = None
    customer_address: Optional[str] = None
    items: List[BotBhaiOrderItem] = []
    subtotal: float = 0
    delivery_charge: float = 0
    discount: float = 0
    total: float = 0
    status: str = "pending"
    payment_method: Optional[str] = None
    payment_status: str = "unpaid"
    paid_amount: float = 0
    customer_notes: Optional[str] = None

# Relay

class RelayAction(str, Enum):
    SYNC_PRODUCT = "sync_product"
    DELETE_PRODUCT = "delete_product"
    SYNC_ORDER = "sync_order"
    DELETE_ORDER = "delete_order"
    SYNC_ALL = "sync_all"
    SYNC_ALL_ORDERS = "sync_all_orders"

class RelayRequest(BaseModel):
    # action - строка, неизвестные значения отклоняются с понятной ошибкой
    action: str
    data: Optional[Dict[str, Any]] = None

class UpstreamResponse(BaseModel):
    ok: bool
    status: int
    body: str

class SweepSummary(BaseModel):
    ok: bool = True
    message: str
    synced: int = 0
    total: int = 0
    errors: List[str] = []

RelayResponse = Union[UpstreamResponse, SweepSummary]

# Форма API ключа

class ApiKeyUpdate(BaseModel):
    api_key: str = Field(..., min_length=1)

class ApiKeyStatus(BaseModel):
    configured: bool
    api_key_masked: Optional[str] = None
