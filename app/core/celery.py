"""
Celery configuration for background tasks
"""
from celery import Celery
from celery.schedules import crontab
import logging

from app.core.config import settings

logger = logging.getLogger(__name__)

celery_app = Celery(
    "fintrack",
    broker=settings.redis_url,
    backend=settings.redis_url,
    include=[
        "app.modules.invoices.tasks",
        "app.modules.reports.tasks"
    ]
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_track_started=True,
    task_time_limit=30 * 60,  # 30 minutes
    task_soft_time_limit=25 * 60,  # 25 minutes
    worker_prefetch_multiplier=1,
    worker_max_tasks_per_child=1000,

    # Result backend settings
    result_expires=3600,  # 1 hour

    # En tests las tareas corren en el mismo proceso
    task_always_eager=settings.ENVIRONMENT == "test",
    task_eager_propagates=True,

    task_routes={
        "app.modules.invoices.tasks.*": {"queue": "invoices"},
        "app.modules.reports.tasks.*": {"queue": "reports"},
    },

    beat_schedule={
        "mark-overdue-invoices": {
            "task": "app.modules.invoices.tasks.mark_overdue_invoices_task",
            "schedule": 3600.0,  # Run every hour
        },
        "generate-end-of-day-reports": {
            "task": "app.modules.reports.tasks.generate_end_of_day_reports",
            "schedule": crontab(hour=23, minute=55),  # Daily, before midnight UTC
        }
    }
)

if __name__ == "__main__":
    celery_app.start()
