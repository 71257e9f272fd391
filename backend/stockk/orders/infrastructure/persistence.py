import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from stockk.core.exceptions import InternalException
from stockk.core.transaction import Transaction, session_scope
from stockk.orders.models import OrderDB, OrderItemDB

# Domaine Orders
from stockk.orders.domain.entities import Order, OrderItem
from stockk.orders.domain.repositories import AbstractOrderRepository
from stockk.orders.domain.exceptions import OrderNotFoundException
from stockk.products.domain.exceptions import ProductNotFoundException

logger = logging.getLogger(__name__)

# Code SQLSTATE PostgreSQL: foreign_key_violation
PG_FOREIGN_KEY_VIOLATION = "23503"


def is_foreign_key_violation(error: IntegrityError) -> bool:
    """Détecte une violation de clé étrangère quel que soit le driver (asyncpg ou sqlite)."""
    orig = error.orig
    for candidate in (orig, getattr(orig, "__cause__", None)):
        if candidate is None:
            continue
        code = getattr(candidate, "sqlstate", None) or getattr(candidate, "pgcode", None)
        if code == PG_FOREIGN_KEY_VIOLATION:
            return True
    return "FOREIGN KEY constraint failed" in str(orig)


class SQLAlchemyOrderRepository(AbstractOrderRepository):
    """Implémentation SQLAlchemy du repository de Commandes."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def create(self, tx: Transaction, order: Order) -> Order:
        """Ajoute une nouvelle commande avec ses items.
        NOTE: La décrémentation du stock n'est PAS gérée ici.
        """
        try:
            order_db = OrderDB()
            if order.created_at is not None:
                order_db.created_at = order.created_at
            tx.add(order_db)
            await tx.flush()  # Obtenir l'ID

            items = []
            for item in order.items:
                item_db = OrderItemDB(order_id=order_db.id, product_id=item.product_id, quantity=item.quantity)
                tx.add(item_db)
                try:
                    await tx.flush()
                except IntegrityError as e:
                    if is_foreign_key_violation(e):
                        logger.warning(f"Commande {order_db.id}: produit ID {item.product_id} inexistant.")
                        raise ProductNotFoundException(item.product_id) from e
                    raise
                items.append(OrderItem.model_validate(item_db))
        except SQLAlchemyError as e:
            logger.error(f"Erreur DB création commande: {e}", exc_info=True)
            raise InternalException("Erreur lors de la création de la commande.") from e

        logger.info(f"Commande ID {order_db.id} ajoutée ({len(items)} ligne(s)).")
        return Order(id=order_db.id, created_at=order_db.created_at, items=items)

    async def get_by_id(self, order_id: int, tx: Optional[Transaction] = None) -> Order:
        """Récupère une commande par son ID, avec ses items dans l'ordre d'insertion."""
        try:
            async with session_scope(self.session_factory, tx) as session:
                order_db = (
                    await session.execute(select(OrderDB).where(OrderDB.id == order_id))
                ).scalar_one_or_none()
                if order_db is None:
                    logger.debug(f"Commande ID {order_id} non trouvée dans get_by_id().")
                    raise OrderNotFoundException(order_id)

                items_db = (
                    await session.execute(
                        select(OrderItemDB).where(OrderItemDB.order_id == order_id).order_by(OrderItemDB.id)
                    )
                ).scalars().all()
                return Order(
                    id=order_db.id,
                    created_at=order_db.created_at,
                    items=[OrderItem.model_validate(i_db) for i_db in items_db],
                )
        except SQLAlchemyError as e:
            logger.error(f"Erreur DB lecture commande {order_id}: {e}", exc_info=True)
            raise InternalException(f"Erreur lors de la lecture de la commande {order_id}.") from e
