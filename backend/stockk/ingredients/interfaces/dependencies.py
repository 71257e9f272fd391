from typing import Annotated

from fastapi import Depends

from stockk.core.dependencies import SessionFactoryDep, TransactionManagerDep
from stockk.tasks.interfaces.dependencies import AlertTaskOptionsDep, TaskQueueDep

# Domain
from stockk.ingredients.domain.repositories import AbstractIngredientRepository

# Infrastructure
from stockk.ingredients.infrastructure.persistence import SQLAlchemyIngredientRepository

# Application
from stockk.ingredients.application.services import IngredientAlertService, IngredientService

# --- Repository Dependencies ---

def get_ingredient_repository(session_factory: SessionFactoryDep) -> AbstractIngredientRepository:
    """Fournit une instance de SQLAlchemyIngredientRepository."""
    return SQLAlchemyIngredientRepository(session_factory=session_factory)


IngredientRepositoryDep = Annotated[AbstractIngredientRepository, Depends(get_ingredient_repository)]

# --- Service Dependencies ---

def get_ingredient_service(
    ingredient_repo: IngredientRepositoryDep,
    transaction_manager: TransactionManagerDep,
) -> IngredientService:
    return IngredientService(ingredient_repo=ingredient_repo, transaction_manager=transaction_manager)


def get_ingredient_alert_service(
    ingredient_repo: IngredientRepositoryDep,
    task_queue: TaskQueueDep,
    task_options: AlertTaskOptionsDep,
) -> IngredientAlertService:
    """Injecte le repository et le producteur de tâches dans le service d'alerte."""
    return IngredientAlertService(ingredient_repo=ingredient_repo, task_queue=task_queue, task_options=task_options)


IngredientServiceDep = Annotated[IngredientService, Depends(get_ingredient_service)]
IngredientAlertServiceDep = Annotated[IngredientAlertService, Depends(get_ingredient_alert_service)]
