# backoffice/crud/settings.py
from sqlalchemy.orm import Session
from typing import Optional, Dict
from backoffice.models.settings import AdminSetting

def get_setting(db: Session, key: str) -> Optional[AdminSetting]:
    """Получить строку настроек по ключу"""
    return db.query(AdminSetting).filter(AdminSetting.key == key).first()

def get_setting_value(db: Session, key: str) -> Optional[str]:
    """Значение настройки или None, если строки нет или значение пустое"""
    setting = get_setting(db, key)
    if not setting or not setting.value:
        return None
    return setting.value

def get_settings_by_prefix(db: Session, prefix: str) -> Dict[str, str]:
    """Все настройки с ключом, начинающимся с prefix; ключи возвращаются без префикса"""
    rows = db.query(AdminSetting).filter(AdminSetting.key.like(f"{prefix}%")).all()
    return {row.key[len(prefix):]: row.value for row in rows}

def set_setting(db: Session, key: str, value: str, commit: bool = True) -> AdminSetting:
    """Создать или обновить настройку (upsert по ключу)"""
    setting = get_setting(db, key)
    if setting:
        setting.value = value
    else:
        setting = AdminSetting(key=key, value=value)
        db.add(setting)

    if commit:
        db.commit()
        db.refresh(setting)
    return setting

def set_settings(db: Session, values: Dict[str, str]) -> None:
    """Сохранить несколько настроек одной транзакцией"""
    for key, value in values.items():
        set_setting(db, key, value, commit=False)
        # autoflush выключен: новые строки должны быть видны следующим запросам
        db.flush()
    db.commit()
