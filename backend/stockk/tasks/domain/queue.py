from abc import ABC, abstractmethod

from pydantic import BaseModel, Field

# Type de tâche unique transporté par la file
TASK_SEND_LOW_STOCK_ALERT = "task:send_low_stock_alert"

# Files de priorité consommées par le worker
QUEUE_CRITICAL = "critical"
QUEUE_DEFAULT = "default"
QUEUE_LOW = "low"
QUEUES = (QUEUE_CRITICAL, QUEUE_DEFAULT, QUEUE_LOW)


class TaskOptions(BaseModel):
    """Options d'envoi d'une tâche: file, priorité et nombre maximal de tentatives."""
    queue: str = QUEUE_DEFAULT
    priority: int = Field(default=5, ge=0, le=9)
    max_retry: int = Field(default=10, ge=0)


class AbstractTaskQueue(ABC):
    """Producteur de tâches asynchrones.

    Le handle est sans état et partagé entre requêtes concurrentes.
    """

    @abstractmethod
    async def enqueue(self, task_type: str, payload: bytes, options: TaskOptions) -> str:
        """Met une tâche en file et retourne son identifiant.

        Raises:
            TaskEnqueueException: si la file est injoignable.
        """
        raise NotImplementedError
