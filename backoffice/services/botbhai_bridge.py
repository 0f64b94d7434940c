"""Мост синхронизации товаров и заказов магазина с CRM BotBhai.

Односторонняя отправка: мост не хранит состояние и не пишет статус
синхронизации в БД. Операции над одной записью никогда не бросают
исключения - результат возвращается как SyncOk / SyncErr / SyncSkipped.
"""
import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Union

import httpx
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from backoffice.core.config import settings
from backoffice.crud.order import get_orders
from backoffice.crud.product import get_active_products
from backoffice.crud.settings import get_setting_value
from backoffice.schemas.botbhai import OrderRecord, ProductRecord, SweepSummary
from backoffice.services.botbhai_client import (
    BotBhaiApiError, BotBhaiClient, BotBhaiResponseError, raise_for_upstream
)
from backoffice.services.botbhai_mapping import build_order_payload, build_product_payload

logger = logging.getLogger(__name__)

API_KEY_MISSING = "BotBhai API key not configured"

@dataclass
class BotBhaiConfig:
    """Настройки моста; api_key=None означает, что синхронизация выключена"""
    api_key: Optional[str]
    products_url: str = settings.BOTBHAI_PRODUCTS_URL
    orders_url: str = settings.BOTBHAI_ORDERS_URL
    batch_size: int = settings.BOTBHAI_BATCH_SIZE
    batch_delay: float = settings.BOTBHAI_BATCH_DELAY
    timeout: Optional[float] = settings.BOTBHAI_TIMEOUT

    @property
    def enabled(self) -> bool:
        return bool(self.api_key and self.api_key.strip())

def load_botbhai_config(db: Session) -> BotBhaiConfig:
    """Собрать конфигурацию моста: ключ из admin_settings, остальное из settings"""
    return BotBhaiConfig(api_key=get_setting_value(db, settings.BOTBHAI_API_KEY_SETTING))

@dataclass
class SyncOk:
    status: int
    body: str = ""
    ok = True

@dataclass
class SyncErr:
    reason: str
    status: Optional[int] = None
    body: Optional[str] = None
    ok = False

@dataclass
class SyncSkipped:
    reason: str
    ok = False

SyncResult = Union[SyncOk, SyncErr, SyncSkipped]

ProgressCallback = Callable[[int, int], None]

class BotBhaiBridge:
    """Отправка товаров и заказов в BotBhai"""

    def __init__(
        self,
        config: BotBhaiConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.config = config
        self._transport = transport

    def make_client(self) -> BotBhaiClient:
        return BotBhaiClient(
            products_url=self.config.products_url,
            orders_url=self.config.orders_url,
            api_key=self.config.api_key,
            timeout=self.config.timeout,
            transport=self._transport
        )

    async def _call(self, label: str, operation) -> SyncResult:
        """Выполнить запрос и перевести ответ/исключение в SyncResult"""
        try:
            response = raise_for_upstream(await operation())
            return SyncOk(status=response.status, body=response.body)
        except BotBhaiResponseError as e:
            logger.error(f"BotBhai {label} failed: {e.status_code} {(e.body or '')[:200]}")
            return SyncErr(reason=str(e.status_code), status=e.status_code, body=e.body)
        except BotBhaiApiError as e:
            logger.error(f"BotBhai {label} error: {e}")
            return SyncErr(reason=str(e))

    async def _run(self, label: str, method_name: str, argument) -> SyncResult:
        if not self.config.enabled:
            logger.debug(f"BotBhai {label} skipped: {API_KEY_MISSING}")
            return SyncSkipped(reason=API_KEY_MISSING)

        async with self.make_client() as client:
            method = getattr(client, method_name)
            return await self._call(label, lambda: method(argument))

    async def sync_product(self, product: ProductRecord) -> SyncResult:
        payload = build_product_payload(product).model_dump()
        return await self._run(f"product sync {product.id}", "push_product", payload)

    async def delete_product(self, product_id: str) -> SyncResult:
        return await self._run(f"product delete {product_id}", "remove_product", product_id)

    async def sync_order(self, order: OrderRecord) -> SyncResult:
        payload = build_order_payload(order).model_dump()
        return await self._run(f"order sync {order.id}", "push_order", payload)

    async def delete_order(self, order_id: str) -> SyncResult:
        return await self._run(f"order delete {order_id}", "remove_order", order_id)

    async def sync_all_products(
        self,
        db: Session,
        on_progress: Optional[ProgressCallback] = None
    ) -> SweepSummary:
        """
        Полная синхронизация активных товаров.

        Товары отправляются пачками по batch_size параллельно; между пачками
        пауза batch_delay секунд (после последней пачки паузы нет).
        on_progress(обработано, всего) вызывается после каждой пачки.
        """
        if not self.config.enabled:
            logger.info(f"Product sweep skipped: {API_KEY_MISSING}")
            return SweepSummary(ok=False, message=API_KEY_MISSING)

        try:
            products = [ProductRecord.from_model(p) for p in get_active_products(db)]
        except SQLAlchemyError as e:
            logger.error(f"Product fetch error: {e}")
            return SweepSummary(message="Synced 0 products", errors=[f"Product fetch error: {e}"])

        total = len(products)
        batch_size = max(1, self.config.batch_size)
        synced = 0
        processed = 0
        errors: List[str] = []

        logger.info(f"Starting BotBhai product sweep: {total} products, batch size {batch_size}")

        async with self.make_client() as client:
            for start in range(0, total, batch_size):
                batch = products[start:start + batch_size]

                results = await asyncio.gather(*[
                    self._call(
                        f"product sync {product.id}",
                        lambda product=product: client.push_product(build_product_payload(product).model_dump())
                    )
                    for product in batch
                ])

                for product, result in zip(batch, results):
                    if result.ok:
                        synced += 1
                    else:
                        errors.append(f"Product {product.id}: {result.reason}")

                processed += len(batch)
                if on_progress:
                    on_progress(processed, total)

                if processed < total:
                    logger.debug(f"Batch done ({processed}/{total}), sleeping {self.config.batch_delay}s")
                    await asyncio.sleep(self.config.batch_delay)

        logger.info(f"BotBhai product sweep completed: synced={synced}, errors={len(errors)}")
        return SweepSummary(
            message=f"Synced {synced} products",
            synced=synced,
            total=total,
            errors=errors
        )

    async def sync_all_orders(self, db: Session) -> SweepSummary:
        """Полная синхронизация заказов, по одному, без пачек"""
        if not self.config.enabled:
            logger.info(f"Order sweep skipped: {API_KEY_MISSING}")
            return SweepSummary(ok=False, message=API_KEY_MISSING)

        try:
            orders = [OrderRecord.from_model(o) for o in get_orders(db, limit=None)]
        except SQLAlchemyError as e:
            logger.error(f"Order fetch error: {e}")
            return SweepSummary(message="Synced 0 orders", errors=[f"Order fetch error: {e}"])

        synced = 0
        errors: List[str] = []

        async with self.make_client() as client:
            for order in orders:
                payload = build_order_payload(order).model_dump()
                result = await self._call(f"order sync {order.id}", lambda: client.push_order(payload))
                if result.ok:
                    synced += 1
                else:
                    errors.append(f"Order {order.id}: {result.reason}")

        logger.info(f"BotBhai order sweep completed: synced={synced}, errors={len(errors)}")
        return SweepSummary(
            message=f"Synced {synced} orders",
            synced=synced,
            total=len(orders),
            errors=errors
        )
