from typing import Annotated

from fastapi import Depends

from stockk.config import Settings, get_settings
from stockk.tasks.domain.queue import AbstractTaskQueue, TaskOptions
from stockk.tasks.infrastructure.celery_app import celery_app
from stockk.tasks.infrastructure.celery_queue import CeleryTaskQueue

# Handle sans état partagé par toutes les requêtes
_task_queue = CeleryTaskQueue(celery_app)


def get_task_queue() -> AbstractTaskQueue:
    """Fournit le producteur de tâches partagé."""
    return _task_queue


def get_alert_task_options(settings: Settings = Depends(get_settings)) -> TaskOptions:
    """Options d'envoi des tâches d'alerte, lues depuis la configuration."""
    return TaskOptions(
        queue=settings.ALERT_QUEUE,
        priority=settings.ALERT_PRIORITY,
        max_retry=settings.ALERT_MAX_RETRY,
    )


TaskQueueDep = Annotated[AbstractTaskQueue, Depends(get_task_queue)]
AlertTaskOptionsDep = Annotated[TaskOptions, Depends(get_alert_task_options)]
