# backoffice/crud/order.py
from sqlalchemy.orm import Session
from typing import Optional, List
from backoffice.models.order import Order, OrderItem
from backoffice.schemas.order import OrderCreate, OrderUpdate

def get_order(db: Session, order_id: str) -> Optional[Order]:
    return db.query(Order).filter(Order.id == order_id).first()

def get_orders(
    db: Session,
    skip: int = 0,
    limit: Optional[int] = 100,
    status: Optional[str] = None
) -> List[Order]:
    """Список заказов, новые первыми; limit=None - все заказы"""
    query = db.query(Order)

    if status:
        query = query.filter(Order.status == status)

    query = query.order_by(Order.created_at.desc()).offset(skip)
    if limit is not None:
        query = query.limit(limit)
    return query.all()

def create_order(db: Session, order_in: OrderCreate) -> Order:
    data = order_in.dict(exclude={"items"})
    db_order = Order(**data)
    db_order.items = [OrderItem(**item.dict()) for item in order_in.items]

    db.add(db_order)
    db.commit()
    db.refresh(db_order)
    return db_order

def update_order(db: Session, order: Order, order_update: OrderUpdate) -> Order:
    for field, value in order_update.dict(exclude_unset=True).items():
        setattr(order, field, value)

    db.commit()
    db.refresh(order)
    return order
