# backoffice/api/v1/endpoints/orders.py
from typing import Any, List, Optional
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException
from sqlalchemy.orm import Session
from backoffice.database import get_db
from backoffice.api.deps import require_admin, get_botbhai_bridge
from backoffice.schemas.botbhai import OrderRecord
from backoffice.schemas.order import OrderCreate, OrderUpdate, OrderResponse
from backoffice.services.botbhai_bridge import BotBhaiBridge
from backoffice.crud.order import get_order, get_orders, create_order, update_order

router = APIRouter()

@router.get("/", response_model=List[OrderResponse])
def read_orders(
    db: Session = Depends(get_db),
    skip: int = 0,
    limit: int = 100,
    status: Optional[str] = None,
    current_user = Depends(require_admin)
) -> Any:
    return get_orders(db, skip=skip, limit=limit, status=status)

@router.get("/{order_id}", response_model=OrderResponse)
def read_order(
    order_id: str,
    db: Session = Depends(get_db),
    current_user = Depends(require_admin)
) -> Any:
    order = get_order(db, order_id)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    return order

@router.post("/", response_model=OrderResponse, status_code=201)
def create_new_order(
    *,
    db: Session = Depends(get_db),
    order_in: OrderCreate,
    background_tasks: BackgroundTasks,
    bridge: BotBhaiBridge = Depends(get_botbhai_bridge),
    current_user = Depends(require_admin)
) -> Any:
    """Новый заказ сразу уходит в BotBhai"""
    order = create_order(db, order_in)
    background_tasks.add_task(bridge.sync_order, OrderRecord.from_model(order))
    return order

@router.patch("/{order_id}", response_model=OrderResponse)
def update_existing_order(
    *,
    db: Session = Depends(get_db),
    order_id: str,
    order_in: OrderUpdate,
    background_tasks: BackgroundTasks,
    bridge: BotBhaiBridge = Depends(get_botbhai_bridge),
    current_user = Depends(require_admin)
) -> Any:
    """Смена статуса заказа / оплаты"""
    order = get_order(db, order_id)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")

    order = update_order(db, order, order_in)
    background_tasks.add_task(bridge.sync_order, OrderRecord.from_model(order))
    return order
