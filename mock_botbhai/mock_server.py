# mock_botbhai/mock_server.py
"""
Локальный мок внешнего API BotBhai для разработки.

Запуск: uvicorn mock_botbhai.mock_server:app --port 8090
и BOTBHAI_PRODUCTS_URL=http://localhost:8090/api/v1/external/products,
BOTBHAI_ORDERS_URL=http://localhost:8090/api/v1/external/orders
"""
from fastapi import FastAPI, HTTPException, Header, Depends, Body
from datetime import datetime
from typing import Dict, Any, Optional
import os
import random
import uvicorn

from backoffice.schemas.botbhai import BotBhaiProductPayload, BotBhaiOrderPayload

app = FastAPI(title="Mock BotBhai API", version="1.0")

# Хранилище в памяти
products_db: Dict[str, Dict[str, Any]] = {}
orders_db: Dict[str, Dict[str, Any]] = {}
api_keys = ["test-botbhai-key-123"]

# Доля запросов, на которые мок отвечает 429 (проверка обработки ошибок)
FAILURE_RATE = float(os.getenv("MOCK_BOTBHAI_FAILURE_RATE", "0"))

def verify_api_key(x_api_key: Optional[str] = Header(None)):
    if not x_api_key or x_api_key not in api_keys:
        raise HTTPException(status_code=401, detail="Invalid API Key")
    return x_api_key

def maybe_rate_limit():
    if FAILURE_RATE and random.random() < FAILURE_RATE:
        raise HTTPException(status_code=429, detail="Too many requests")

@app.get("/api/v1/external/health")
async def health_check():
    return {"status": "ok", "timestamp": datetime.now().isoformat()}

@app.post("/api/v1/external/products")
async def upsert_product(
    payload: BotBhaiProductPayload,
    api_key: str = Depends(verify_api_key)
):
    """Создание / обновление товара (мок)"""
    maybe_rate_limit()
    created = payload.product_id not in products_db
    products_db[payload.product_id] = {**payload.dict(), "updated_at": datetime.now().isoformat()}
    return {"success": True, "product_id": payload.product_id, "created": created}

@app.delete("/api/v1/external/products")
async def remove_product(
    body: Dict[str, Any] = Body(...),
    api_key: str = Depends(verify_api_key)
):
    if products_db.pop(str(body.get("id")), None) is None:
        raise HTTPException(status_code=404, detail="Product not found")
    return {"success": True}

@app.post("/api/v1/external/orders")
async def upsert_order(
    payload: BotBhaiOrderPayload,
    api_key: str = Depends(verify_api_key)
):
    """Создание / обновление заказа (мок)"""
    maybe_rate_limit()
    created = payload.order_id not in orders_db
    orders_db[payload.order_id] = {**payload.dict(), "updated_at": datetime.now().isoformat()}
    return {"success": True, "order_id": payload.order_id, "created": created}

@app.delete("/api/v1/external/orders")
async def remove_order(
    body: Dict[str, Any] = Body(...),
    api_key: str = Depends(verify_api_key)
):
    if orders_db.pop(str(body.get("id")), None) is None:
        raise HTTPException(status_code=404, detail="Order not found")
    return {"success": True}

@app.get("/api/v1/external/_state")
async def dump_state():
    """Что мок успел получить (для ручной проверки)"""
    return {"products": len(products_db), "orders": len(orders_db)}

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8090)
