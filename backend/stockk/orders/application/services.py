import asyncio
import logging
from typing import List, Optional

from stockk.core.exceptions import InternalException
from stockk.orders.constants import MAX_DB_INTEGER

# Domaine
from stockk.orders.domain.entities import Order, OrderItem
from stockk.orders.domain.exceptions import InvalidOrderException
from stockk.orders.domain.repositories import AbstractOrderRepository
from stockk.products.domain.repositories import AbstractProductRepository
from stockk.ingredients.domain.exceptions import InsufficientIngredientStockException
from stockk.ingredients.domain.repositories import AbstractIngredientRepository

# Application
from stockk.core.transaction import TransactionManager
from stockk.ingredients.application.services import IngredientAlertService
from stockk.orders.application.schemas import OrderItemCreate

logger = logging.getLogger(__name__)


class OrderService:
    """Coordinateur de la création de commande.

    Une commande est créée dans une seule transaction qui couvre l'insertion de
    la commande et toutes les décrémentations de stock qui en découlent: soit
    tout est validé, soit rien n'est visible. L'alerte de stock bas est
    déclenchée après le commit et ne peut jamais faire échouer la commande.
    """

    def __init__(
        self,
        order_repo: AbstractOrderRepository,
        product_repo: AbstractProductRepository,
        ingredient_repo: AbstractIngredientRepository,
        transaction_manager: TransactionManager,
        alert_service: Optional[IngredientAlertService] = None,
        timeout: Optional[float] = None,
    ):
        self.order_repo = order_repo
        self.product_repo = product_repo
        self.ingredient_repo = ingredient_repo
        self.transaction_manager = transaction_manager
        self.alert_service = alert_service
        self.timeout = timeout
        logger.info("OrderService initialisé.")

    @staticmethod
    def _validate_items(items: List[OrderItemCreate]) -> None:
        if not items:
            raise InvalidOrderException("La commande doit contenir au moins un produit.")
        for item in items:
            if item.product_id <= 0 or item.product_id > MAX_DB_INTEGER:
                raise InvalidOrderException(f"ID de produit invalide: {item.product_id}.")
            if item.quantity <= 0:
                raise InvalidOrderException(
                    f"Quantité invalide pour le produit {item.product_id}: {item.quantity} (doit être > 0)."
                )
            if item.quantity > MAX_DB_INTEGER:
                raise InvalidOrderException(
                    f"Quantité invalide pour le produit {item.product_id}: {item.quantity} "
                    f"(maximum {MAX_DB_INTEGER})."
                )

    async def create_order(self, items: List[OrderItemCreate]) -> Order:
        """Crée une commande et consomme le stock des ingrédients correspondants.

        Raises:
            InvalidOrderException: entrée invalide, aucune transaction n'est ouverte.
            ProductNotFoundException: un produit référencé n'existe pas.
            InsufficientIngredientStockException: un ingrédient passerait sous zéro.
            InternalException: échec de stockage, de commit ou délai dépassé.
        """
        self._validate_items(items)

        if self.timeout is None:
            order = await self._create_order_in_transaction(items)
        else:
            try:
                order = await asyncio.wait_for(self._create_order_in_transaction(items), timeout=self.timeout)
            except asyncio.TimeoutError as e:
                # L'annulation de la tâche a déjà déclenché le rollback
                logger.error(f"[OrderService] Délai de {self.timeout}s dépassé pendant la création de commande.")
                raise InternalException("Délai dépassé lors de la création de la commande.") from e

        logger.info(f"[OrderService] Commande {order.id} créée avec {len(order.items)} ligne(s).")
        await self._dispatch_low_stock_alert(order)
        return order

    async def _create_order_in_transaction(self, items: List[OrderItemCreate]) -> Order:
        tx = await self.transaction_manager.begin()
        # Toute sortie du bloc sans commit annule la transaction
        async with tx:
            order = await self.order_repo.create(
                tx, Order(items=[OrderItem(product_id=i.product_id, quantity=i.quantity) for i in items])
            )

            for item in items:
                product = await self.product_repo.get_by_id(item.product_id, tx=tx)
                for entry in product.ingredients:
                    required = entry.amount * item.quantity
                    ingredient = await self.ingredient_repo.get_by_id(entry.ingredient_id, tx=tx, lock=True)
                    new_stock = ingredient.current_stock - required
                    if new_stock < 0:
                        logger.warning(
                            f"[OrderService] Stock insuffisant pour '{ingredient.name}': "
                            f"requis {required:g}, disponible {ingredient.current_stock:g}."
                        )
                        raise InsufficientIngredientStockException(
                            ingredient_id=ingredient.id,
                            name=ingredient.name,
                            required=required,
                            available=ingredient.current_stock,
                        )
                    await self.ingredient_repo.update_stock(ingredient.id, new_stock, tx=tx)

            await tx.commit()
        return order

    async def _dispatch_low_stock_alert(self, order: Order) -> None:
        """Déclenche la détection de stock bas; un échec est journalisé, jamais propagé."""
        if self.alert_service is None:
            return
        try:
            await self.alert_service.check_ingredient_levels_and_alert()
        except Exception as e:
            logger.error(
                f"[OrderService] Échec de l'alerte stock bas après la commande {order.id} "
                f"(commande conservée): {e}",
                exc_info=True,
            )

    async def get_order(self, order_id: int) -> Order:
        return await self.order_repo.get_by_id(order_id)
