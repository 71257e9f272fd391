import asyncio
import logging

from celery import Celery
from kombu.exceptions import KombuError

from stockk.tasks.domain.exceptions import TaskEnqueueException
from stockk.tasks.domain.queue import AbstractTaskQueue, TaskOptions

logger = logging.getLogger(__name__)


class CeleryTaskQueue(AbstractTaskQueue):
    """Producteur de tâches s'appuyant sur Celery (broker Redis).

    Les tâches sont envoyées par nom: le processus API n'importe pas le code du worker.
    """

    def __init__(self, celery_app: Celery):
        self.celery_app = celery_app

    async def enqueue(self, task_type: str, payload: bytes, options: TaskOptions) -> str:
        try:
            # send_task est bloquant (connexion au broker): exécuté hors de la boucle asyncio
            result = await asyncio.to_thread(
                self.celery_app.send_task,
                task_type,
                args=[payload.decode("utf-8")],
                kwargs={"max_retry": options.max_retry},
                queue=options.queue,
                priority=options.priority,
            )
        except (KombuError, OSError) as e:
            logger.error(f"[CeleryTaskQueue] Échec de l'envoi de la tâche '{task_type}': {e}", exc_info=True)
            raise TaskEnqueueException(task_type, str(e)) from e
        logger.debug(f"[CeleryTaskQueue] Tâche '{task_type}' envoyée (id={result.id}, file={options.queue}).")
        return result.id
