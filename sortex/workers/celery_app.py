from celery import Celery
from celery.schedules import crontab

from sortex.core.config import get_settings

settings = get_settings()

celery_app = Celery(
    "sortex",
    broker=settings.get_celery_broker_url(),
    backend=settings.get_celery_result_backend(),
    include=["sortex.workers.tasks"],
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_always_eager=settings.celery_task_always_eager,
)

celery_app.conf.beat_schedule = {
    "orphan-sweep-daily": {
        "task": "sortex.workers.tasks.sweep_orphaned_objects_job",
        "schedule": crontab(hour=3, minute=0),
    }
}
