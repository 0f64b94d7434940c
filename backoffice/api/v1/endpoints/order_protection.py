# backoffice/api/v1/endpoints/order_protection.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from backoffice.database import get_db
from backoffice.api.deps import require_admin
from backoffice.schemas.order_protection import OrderProtectionSettings
from backoffice.services.order_protection import load_order_protection, save_order_protection

router = APIRouter()

@router.get("/", response_model=OrderProtectionSettings)
def read_order_protection(
    db: Session = Depends(get_db),
    current_user = Depends(require_admin)
):
    """Текущие правила защиты заказов (незаданные поля - значения по умолчанию)"""
    return load_order_protection(db)

@router.put("/", response_model=OrderProtectionSettings)
def update_order_protection(
    settings_in: OrderProtectionSettings,
    db: Session = Depends(get_db),
    current_user = Depends(require_admin)
):
    return save_order_protection(db, settings_in)
