from celery import Celery
from celery.schedules import crontab
from backoffice.core.config import settings

def make_celery():
    """Создание и настройка Celery приложения"""

    celery_app = Celery(
        "backoffice",
        broker=settings.CELERY_BROKER_URL,
        backend=settings.CELERY_RESULT_BACKEND,
        include=["backoffice.tasks.sync_tasks"]
    )

    celery_app.conf.update(
        task_serializer="json",
        result_serializer="json",
        accept_content=["json"],
        timezone=settings.CELERY_TIMEZONE,
        enable_utc=settings.CELERY_ENABLE_UTC,

        task_track_started=True,
        # Полная синхронизация товаров идет долго из-за пауз между пачками
        task_time_limit=2 * 60 * 60,
        task_soft_time_limit=110 * 60,

        broker_connection_retry_on_startup=True,
        result_expires=24 * 3600,

        beat_schedule={
            # Ночная пересинхронизация товаров с BotBhai
            'botbhai-resync-products-nightly': {
                'task': 'backoffice.tasks.sync_tasks.sync_all_products_task',
                'schedule': crontab(minute=30, hour=3),
                'args': (),
                'options': {'queue': 'sync'}
            },
        },

        task_routes={
            'backoffice.tasks.sync_tasks.*': {'queue': 'sync'},
        },

        # Одна полная синхронизация на воркер за раз
        worker_prefetch_multiplier=1,
        worker_concurrency=1
    )

    return celery_app

celery_app = make_celery()
