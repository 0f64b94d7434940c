import logging
from typing import Dict, Optional
from pydantic import ValidationError
from sqlalchemy.orm import Session
from backoffice.crud.settings import get_settings_by_prefix, set_settings
from backoffice.schemas.order_protection import OrderProtectionSettings

logger = logging.getLogger(__name__)

SETTINGS_PREFIX = "order_protection_"

# Флаги, включенные по умолчанию: выключаются только явным "false"
DEFAULT_ON_FLAGS = {"block_pending_orders", "block_returned_orders"}

def _parse_int(raw: Optional[str], default: int) -> int:
    try:
        return int(str(raw).strip())
    except (TypeError, ValueError):
        return default

def parse_order_protection(raw: Dict[str, str]) -> OrderProtectionSettings:
    """Настройки из строк admin_settings (ключи без префикса)"""
    defaults = OrderProtectionSettings()
    values = {}

    for name, field in OrderProtectionSettings.model_fields.items():
        default = getattr(defaults, name)
        stored = raw.get(name)

        if field.annotation is bool:
            if name in DEFAULT_ON_FLAGS:
                values[name] = stored != "false"
            else:
                values[name] = stored == "true"
        else:
            values[name] = _parse_int(stored, default) if stored is not None else default

    try:
        return OrderProtectionSettings(**values)
    except ValidationError as e:
        # Значение вне допустимого диапазона - берем значение по умолчанию
        for error in e.errors():
            name = error["loc"][0]
            logger.warning(f"Invalid stored order protection value for {name}, using default")
            values[name] = getattr(defaults, name)
        return OrderProtectionSettings(**values)

def serialize_order_protection(settings_in: OrderProtectionSettings) -> Dict[str, str]:
    """Строки для admin_settings: булевы как "true"/"false", числа как есть"""
    serialized = {}
    for name, value in settings_in.dict().items():
        if isinstance(value, bool):
            serialized[f"{SETTINGS_PREFIX}{name}"] = "true" if value else "false"
        else:
            serialized[f"{SETTINGS_PREFIX}{name}"] = str(value)
    return serialized

def load_order_protection(db: Session) -> OrderProtectionSettings:
    return parse_order_protection(get_settings_by_prefix(db, SETTINGS_PREFIX))

def save_order_protection(db: Session, settings_in: OrderProtectionSettings) -> OrderProtectionSettings:
    set_settings(db, serialize_order_protection(settings_in))
    logger.info("Order protection settings saved")
    return settings_in
