# backoffice/api/v1/endpoints/botbhai.py
from typing import Any, Dict, Optional
from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import ValidationError
from sqlalchemy.orm import Session
from backoffice.database import get_db
from backoffice.api.deps import require_admin, get_botbhai_bridge
from backoffice.core.config import settings
from backoffice.crud.settings import get_setting_value, set_setting
from backoffice.schemas.botbhai import (
    RelayAction, RelayRequest, UpstreamResponse, SweepSummary,
    BotBhaiProductPayload, BotBhaiOrderPayload,
    ApiKeyUpdate, ApiKeyStatus,
)
from backoffice.services.botbhai_bridge import BotBhaiBridge, API_KEY_MISSING
from backoffice.services.botbhai_client import BotBhaiApiError
import logging

router = APIRouter()
logger = logging.getLogger(__name__)

def mask_api_key(api_key: str) -> str:
    """Показываем только последние 4 символа ключа"""
    if len(api_key) <= 4:
        return "*" * len(api_key)
    return "*" * (len(api_key) - 4) + api_key[-4:]

@router.get("/botbhai/settings", response_model=ApiKeyStatus)
async def read_botbhai_settings(
    db: Session = Depends(get_db),
    current_user = Depends(require_admin)
):
    """Статус API ключа BotBhai (сам ключ не отдается)"""
    api_key = get_setting_value(db, settings.BOTBHAI_API_KEY_SETTING)
    if not api_key:
        return ApiKeyStatus(configured=False)
    return ApiKeyStatus(configured=True, api_key_masked=mask_api_key(api_key))

@router.put("/botbhai/settings", response_model=ApiKeyStatus)
async def update_botbhai_settings(
    key_in: ApiKeyUpdate,
    db: Session = Depends(get_db),
    current_user = Depends(require_admin)
):
    """Сохранение API ключа BotBhai"""
    api_key = key_in.api_key.strip()
    if not api_key:
        raise HTTPException(status_code=400, detail="API key must not be blank")

    set_setting(db, settings.BOTBHAI_API_KEY_SETTING, api_key)
    logger.info(f"BotBhai API key updated by {current_user.username}")

    return ApiKeyStatus(configured=True, api_key_masked=mask_api_key(api_key))

def _require_record_id(data: Optional[Dict[str, Any]]) -> str:
    record_id = (data or {}).get("id")
    if not record_id:
        raise HTTPException(status_code=400, detail="data.id is required")
    return str(record_id)

def _validate_payload(model, data: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Проверить payload по схеме; наружу уходит то, что прислал клиент"""
    data = data or {}
    try:
        model(**data)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.errors(include_url=False))
    return data

@router.post("/botbhai-sync")
async def botbhai_relay(
    request: RelayRequest,
    db: Session = Depends(get_db),
    bridge: BotBhaiBridge = Depends(get_botbhai_bridge),
    current_user = Depends(require_admin)
):
    """
    Relay для админки: ключ BotBhai читается на сервере и не уходит в браузер.

    sync_product / sync_order пересылают готовый payload, delete_* - {id},
    sync_all / sync_all_orders запускают полную синхронизацию и возвращают сводку.
    """
    if not bridge.config.enabled:
        raise HTTPException(status_code=400, detail=API_KEY_MISSING)

    try:
        action = RelayAction(request.action)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Unknown action: {request.action}")

    if action == RelayAction.SYNC_ALL:
        summary: SweepSummary = await bridge.sync_all_products(db)
        return summary

    if action == RelayAction.SYNC_ALL_ORDERS:
        summary = await bridge.sync_all_orders(db)
        return summary

    if action == RelayAction.SYNC_PRODUCT:
        payload = _validate_payload(BotBhaiProductPayload, request.data)
    elif action == RelayAction.SYNC_ORDER:
        payload = _validate_payload(BotBhaiOrderPayload, request.data)
    else:
        record_id = _require_record_id(request.data)

    try:
        async with bridge.make_client() as client:
            if action == RelayAction.SYNC_PRODUCT:
                response: UpstreamResponse = await client.push_product(payload)
            elif action == RelayAction.DELETE_PRODUCT:
                response = await client.remove_product(record_id)
            elif action == RelayAction.SYNC_ORDER:
                response = await client.push_order(payload)
            else:
                response = await client.remove_order(record_id)
    except BotBhaiApiError as e:
        logger.error(f"botbhai-sync {action.value} error: {e}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))

    if not response.ok:
        logger.warning(f"botbhai-sync {action.value} rejected: {response.status}")

    return response
