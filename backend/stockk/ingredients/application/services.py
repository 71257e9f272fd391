import logging
from typing import List

from stockk.core.exceptions import ValidationException
from stockk.core.transaction import TransactionManager

# Domaine
from stockk.ingredients.domain.entities import Ingredient
from stockk.ingredients.domain.repositories import AbstractIngredientRepository

# Application
from stockk.ingredients.application.schemas import IngredientStockUpdate

# Tâches
from stockk.tasks.domain.payloads import LowStockAlertPayload, LowStockIngredient
from stockk.tasks.domain.queue import AbstractTaskQueue, TaskOptions, TASK_SEND_LOW_STOCK_ALERT

logger = logging.getLogger(__name__)


class IngredientService:
    """Service applicatif pour la consultation et le réapprovisionnement des stocks."""

    def __init__(self, ingredient_repo: AbstractIngredientRepository, transaction_manager: TransactionManager):
        self.ingredient_repo = ingredient_repo
        self.transaction_manager = transaction_manager
        logger.info("IngredientService initialisé.")

    async def get_ingredient(self, ingredient_id: int) -> Ingredient:
        return await self.ingredient_repo.get_by_id(ingredient_id)

    async def list_ingredients(self) -> List[Ingredient]:
        return await self.ingredient_repo.list_all()

    async def update_ingredient_stock(self, updates: List[IngredientStockUpdate]) -> List[Ingredient]:
        """Fixe le stock de plusieurs ingrédients en une seule transaction.

        Tout ou rien: une valeur hors limites ou un ingrédient inconnu annule
        l'ensemble des mises à jour.
        """
        if not updates:
            raise ValidationException("La liste des ingrédients à mettre à jour est vide.")
        ids = [u.id for u in updates]
        if len(set(ids)) != len(ids):
            raise ValidationException("Un même ingrédient apparaît plusieurs fois dans la mise à jour.")
        for update in updates:
            if update.id <= 0:
                raise ValidationException(f"ID d'ingrédient invalide: {update.id}.")

        tx = await self.transaction_manager.begin()
        async with tx:
            updated = []
            for update in updates:
                updated.append(await self.ingredient_repo.restock(update.id, update.current_stock, tx=tx))
            await tx.commit()

        logger.info(f"[IngredientService] Stock mis à jour pour {len(updated)} ingrédient(s): {ids}.")
        return updated


class IngredientAlertService:
    """Détecteur de stock bas et expéditeur des alertes.

    N'enfile une tâche que si au moins un ingrédient est sous le seuil et non
    encore signalé; le verrou ``alert_sent`` est positionné par le worker.
    """

    def __init__(
        self,
        ingredient_repo: AbstractIngredientRepository,
        task_queue: AbstractTaskQueue,
        task_options: TaskOptions,
    ):
        self.ingredient_repo = ingredient_repo
        self.task_queue = task_queue
        self.task_options = task_options

    async def check_ingredient_levels_and_alert(self) -> List[Ingredient]:
        """Retourne les ingrédients inclus dans l'alerte (liste vide si aucune tâche n'a été enfilée)."""
        low_stock = await self.ingredient_repo.list_low_stock()
        if not low_stock:
            logger.debug("[IngredientAlertService] Aucun ingrédient en stock bas non signalé.")
            return []

        payload = LowStockAlertPayload(
            ingredients=[
                LowStockIngredient(
                    id=i.id, name=i.name, total_stock=i.total_stock, current_stock=i.current_stock
                )
                for i in low_stock
            ]
        )
        task_id = await self.task_queue.enqueue(
            TASK_SEND_LOW_STOCK_ALERT,
            payload.model_dump_json().encode("utf-8"),
            self.task_options,
        )
        logger.info(
            f"[IngredientAlertService] Tâche d'alerte {task_id} enfilée pour {len(low_stock)} ingrédient(s): "
            f"{[i.name for i in low_stock]}"
        )
        return low_stock
