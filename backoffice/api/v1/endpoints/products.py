# backoffice/api/v1/endpoints/products.py
from typing import Any, List, Optional
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, status
from sqlalchemy.orm import Session
from backoffice.database import get_db
from backoffice.api.deps import require_admin, get_botbhai_bridge
from backoffice.schemas.botbhai import ProductRecord
from backoffice.schemas.catalog import ProductCreate, ProductUpdate, ProductResponse
from backoffice.services.botbhai_bridge import BotBhaiBridge
from backoffice.crud.product import (
    get_product,
    get_products,
    create_product,
    update_product,
    delete_product,
)

router = APIRouter()

@router.get("/", response_model=List[ProductResponse])
def read_products(
    db: Session = Depends(get_db),
    skip: int = 0,
    limit: int = 100,
    is_active: Optional[bool] = None,
    category: Optional[str] = None,
    current_user = Depends(require_admin)
) -> Any:
    """Список товаров"""
    return get_products(db, skip=skip, limit=limit, is_active=is_active, category=category)

@router.get("/{product_id}", response_model=ProductResponse)
def read_product(
    product_id: str,
    db: Session = Depends(get_db),
    current_user = Depends(require_admin)
) -> Any:
    product = get_product(db, product_id=product_id)
    if not product:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
    return product

@router.post("/", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
def create_new_product(
    *,
    db: Session = Depends(get_db),
    product_in: ProductCreate,
    background_tasks: BackgroundTasks,
    bridge: BotBhaiBridge = Depends(get_botbhai_bridge),
    current_user = Depends(require_admin)
) -> Any:
    """
    Создать товар.
    После ответа товар отправляется в BotBhai (если ключ настроен).
    """
    product = create_product(db=db, product_in=product_in)
    background_tasks.add_task(bridge.sync_product, ProductRecord.from_model(product))
    return product

@router.put("/{product_id}", response_model=ProductResponse)
def update_existing_product(
    *,
    db: Session = Depends(get_db),
    product_id: str,
    product_in: ProductUpdate,
    background_tasks: BackgroundTasks,
    bridge: BotBhaiBridge = Depends(get_botbhai_bridge),
    current_user = Depends(require_admin)
) -> Any:
    product = get_product(db, product_id=product_id)
    if not product:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")

    product = update_product(db=db, product=product, product_update=product_in)
    background_tasks.add_task(bridge.sync_product, ProductRecord.from_model(product))
    return product

@router.delete("/{product_id}")
def delete_existing_product(
    *,
    db: Session = Depends(get_db),
    product_id: str,
    background_tasks: BackgroundTasks,
    bridge: BotBhaiBridge = Depends(get_botbhai_bridge),
    current_user = Depends(require_admin)
) -> Any:
    product = get_product(db, product_id=product_id)
    if not product:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")

    delete_product(db=db, product=product)
    background_tasks.add_task(bridge.delete_product, product_id)
    return {"message": "Product deleted successfully"}
