"""Exceptions spécifiques à la file de tâches et au worker."""

from stockk.core.exceptions import InternalException, StockkException


class TaskEnqueueException(InternalException):
    """Levée lorsque la mise en file d'une tâche échoue."""
    def __init__(self, task_type: str, reason: str = "file injoignable"):
        super().__init__(f"Impossible de mettre en file la tâche '{task_type}': {reason}.")
        self.task_type = task_type


class MalformedTaskPayloadException(StockkException):
    """Charge utile illisible: échec définitif, la tâche n'est pas rejouée."""
    status_code = 400
    message = "Charge utile de tâche invalide"


class AlertTaskFailedException(InternalException):
    """Échec d'une étape du traitement d'alerte: la tâche peut être rejouée."""
    def __init__(self, reason: str):
        super().__init__(f"Traitement de l'alerte stock bas en échec: {reason}")
        self.reason = reason
