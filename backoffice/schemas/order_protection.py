# backoffice/schemas/order_protection.py
from pydantic import BaseModel, Field

class OrderProtectionSettings(BaseModel):
    """Правила блокировки подозрительных заказов"""

    # Блокировка по вводу (смена телефона, злоупотребление OTP)
    input_blocking_enabled: bool = False
    max_phone_changes: int = Field(3, ge=0)
    otp_abuse_threshold: int = Field(5, ge=0)

    # Блокировка по времени между заказами
    time_blocking_enabled: bool = False
    order_cooldown_hours: int = Field(12, ge=0)

    # Блокировка по истории (процент успешных заказов)
    history_blocking_enabled: bool = False
    min_success_rate: int = Field(50, ge=0, le=100)

    # OTP для новых покупателей
    new_customer_otp_enabled: bool = False

    # Процент возвратов: выше первого порога - OTP, выше второго - блок
    custom_history_blocking_enabled: bool = False
    return_rate_otp_threshold: int = Field(20, ge=0, le=100)
    return_rate_block_threshold: int = Field(50, ge=0, le=100)

    # Блокировка по статусам незавершенных заказов
    status_blocking_enabled: bool = False
    block_pending_orders: bool = True
    block_shipped_orders: bool = False
    block_returned_orders: bool = True
    max_pending_orders: int = Field(2, ge=0)
