import asyncio
import logging
from typing import Any, Dict
from uuid import uuid4
from celery import current_task
from sqlalchemy.orm import Session
from backoffice.database import SessionLocal
from backoffice.services.botbhai_bridge import BotBhaiBridge, load_botbhai_config
from backoffice.tasks.celery_app import celery_app

logger = logging.getLogger(__name__)

@celery_app.task(bind=True)
def sync_all_products_task(self) -> Dict[str, Any]:
    """
    Фоновая полная синхронизация активных товаров с BotBhai.

    Прогресс публикуется в состоянии задачи (PROGRESS, meta={current, total}).
    Повторов нет: упавшие товары попадают в errors сводки.
    """
    task_id = current_task.request.id if current_task and current_task.request.id else str(uuid4())

    db: Session = SessionLocal()
    try:
        logger.info(f"Starting BotBhai product sweep task {task_id}")
        bridge = BotBhaiBridge(load_botbhai_config(db))

        def report_progress(current: int, total: int):
            logger.info(f"Product sweep {task_id}: {current}/{total}")
            if self.request.id:
                self.update_state(state="PROGRESS", meta={"current": current, "total": total})

        summary = asyncio.run(bridge.sync_all_products(db, on_progress=report_progress))

        logger.info(f"Product sweep task {task_id} finished: {summary.message}, errors={len(summary.errors)}")
        return summary.model_dump()

    finally:
        db.close()

@celery_app.task
def sync_all_orders_task() -> Dict[str, Any]:
    """Фоновая полная синхронизация заказов с BotBhai"""
    db: Session = SessionLocal()
    try:
        bridge = BotBhaiBridge(load_botbhai_config(db))
        summary = asyncio.run(bridge.sync_all_orders(db))

        logger.info(f"Order sweep finished: {summary.message}, errors={len(summary.errors)}")
        return summary.model_dump()

    finally:
        db.close()
