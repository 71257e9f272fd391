import logging

from celery import Celery
from kombu import Queue

from stockk.config import Settings, get_settings
from stockk.tasks.domain.queue import QUEUES, QUEUE_DEFAULT

logger = logging.getLogger(__name__)


def create_celery_app(settings: Settings) -> Celery:
    """Crée l'application Celery partagée par le producteur (API) et le worker."""
    app = Celery("stockk", broker=settings.REDIS_URL)
    app.conf.update(
        task_serializer="json",
        accept_content=["json"],
        timezone="UTC",
        enable_utc=True,
        task_queues=[Queue(name) for name in QUEUES],
        task_default_queue=QUEUE_DEFAULT,
        # Accusé de réception après traitement: une tâche perdue avec le worker est redistribuée
        task_acks_late=True,
        task_reject_on_worker_lost=True,
        worker_prefetch_multiplier=1,
        task_ignore_result=True,
        broker_transport_options={"queue_order_strategy": "priority"},
    )
    logger.debug(f"Application Celery configurée (broker={settings.REDIS_URL}).")
    return app


celery_app = create_celery_app(get_settings())
