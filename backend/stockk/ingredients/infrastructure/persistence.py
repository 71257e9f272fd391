import logging
import math
from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from stockk.core.exceptions import InternalException
from stockk.core.transaction import Transaction, session_scope
from stockk.ingredients.constants import LOW_STOCK_THRESHOLD_PERCENT
from stockk.ingredients.models import IngredientDB

# Domaine Ingredients
from stockk.ingredients.domain.entities import Ingredient
from stockk.ingredients.domain.repositories import AbstractIngredientRepository
from stockk.ingredients.domain.exceptions import IngredientNotFoundException, InvalidStockLevelException

logger = logging.getLogger(__name__)


class SQLAlchemyIngredientRepository(AbstractIngredientRepository):
    """Implémentation SQLAlchemy du registre des stocks d'ingrédients."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    @staticmethod
    def _select_by_id(ingredient_id: int, lock: bool = False):
        # populate_existing: relire la ligne même si l'objet est déjà dans la session de la transaction
        stmt = (
            select(IngredientDB)
            .where(IngredientDB.id == ingredient_id)
            .execution_options(populate_existing=True)
        )
        if lock:
            # SELECT ... FOR UPDATE (ignoré par SQLite, sérialisé par BEGIN IMMEDIATE)
            stmt = stmt.with_for_update()
        return stmt

    async def get_by_id(self, ingredient_id: int, tx: Optional[Transaction] = None, lock: bool = False) -> Ingredient:
        try:
            async with session_scope(self.session_factory, tx) as session:
                result = await session.execute(self._select_by_id(ingredient_id, lock=lock))
                ingredient_db = result.scalar_one_or_none()
                if ingredient_db is None:
                    logger.debug(f"Ingrédient ID {ingredient_id} non trouvé dans get_by_id().")
                    raise IngredientNotFoundException(ingredient_id)
                return Ingredient.model_validate(ingredient_db)
        except SQLAlchemyError as e:
            logger.error(f"Erreur DB lecture ingrédient {ingredient_id}: {e}", exc_info=True)
            raise InternalException(f"Erreur lors de la lecture de l'ingrédient {ingredient_id}.") from e

    async def list_all(self, tx: Optional[Transaction] = None) -> List[Ingredient]:
        stmt = select(IngredientDB).order_by(IngredientDB.id)
        try:
            async with session_scope(self.session_factory, tx) as session:
                result = await session.execute(stmt)
                return [Ingredient.model_validate(i_db) for i_db in result.scalars().all()]
        except SQLAlchemyError as e:
            logger.error(f"Erreur DB listage ingrédients: {e}", exc_info=True)
            raise InternalException("Erreur lors du listage des ingrédients.") from e

    async def update_stock(self, ingredient_id: int, new_stock: float, tx: Optional[Transaction] = None) -> None:
        stmt = (
            update(IngredientDB)
            .where(IngredientDB.id == ingredient_id)
            .values(current_stock=new_stock)
        )
        try:
            async with session_scope(self.session_factory, tx) as session:
                result = await session.execute(stmt)
                if result.rowcount == 0:
                    logger.warning(f"MAJ stock: ingrédient ID {ingredient_id} introuvable (0 ligne modifiée).")
                    raise IngredientNotFoundException(ingredient_id)
        except SQLAlchemyError as e:
            logger.error(f"Erreur DB MAJ stock ingrédient {ingredient_id} -> {new_stock}: {e}", exc_info=True)
            raise InternalException(f"Erreur lors de la mise à jour du stock de l'ingrédient {ingredient_id}.") from e
        logger.debug(f"Stock ingrédient ID {ingredient_id} fixé à {new_stock}.")

    async def list_low_stock(self, tx: Optional[Transaction] = None) -> List[Ingredient]:
        # Seuil et verrou d'alerte sont évalués par la requête: comparaison stricte
        stmt = (
            select(IngredientDB)
            .where(
                IngredientDB.current_stock / IngredientDB.total_stock * 100 < LOW_STOCK_THRESHOLD_PERCENT,
                IngredientDB.alert_sent == False,  # noqa: E712
            )
            .order_by(IngredientDB.id)
        )
        try:
            async with session_scope(self.session_factory, tx) as session:
                result = await session.execute(stmt)
                return [Ingredient.model_validate(i_db) for i_db in result.scalars().all()]
        except SQLAlchemyError as e:
            logger.error(f"Erreur DB recherche ingrédients en stock bas: {e}", exc_info=True)
            raise InternalException("Erreur lors de la recherche des ingrédients en stock bas.") from e

    async def mark_alert_sent(self, ingredient_id: int, tx: Optional[Transaction] = None) -> None:
        stmt = (
            update(IngredientDB)
            .where(IngredientDB.id == ingredient_id)
            .values(alert_sent=True)
        )
        try:
            async with session_scope(self.session_factory, tx) as session:
                result = await session.execute(stmt)
                if result.rowcount == 0:
                    raise IngredientNotFoundException(ingredient_id)
        except SQLAlchemyError as e:
            logger.error(f"Erreur DB marquage alerte ingrédient {ingredient_id}: {e}", exc_info=True)
            raise InternalException(f"Erreur lors du marquage de l'alerte pour l'ingrédient {ingredient_id}.") from e
        logger.debug(f"Alerte marquée comme envoyée pour l'ingrédient ID {ingredient_id}.")

    async def restock(self, ingredient_id: int, new_stock: float, tx: Optional[Transaction] = None) -> Ingredient:
        try:
            async with session_scope(self.session_factory, tx) as session:
                result = await session.execute(self._select_by_id(ingredient_id, lock=True))
                ingredient_db = result.scalar_one_or_none()
                if ingredient_db is None:
                    raise IngredientNotFoundException(ingredient_id)
                if not math.isfinite(new_stock) or new_stock < 0 or new_stock > ingredient_db.total_stock:
                    raise InvalidStockLevelException(ingredient_id, new_stock, ingredient_db.total_stock)

                ingredient_db.current_stock = new_stock
                if new_stock / ingredient_db.total_stock * 100 >= LOW_STOCK_THRESHOLD_PERCENT:
                    # Stock repassé au seuil: réarmer le verrou pour la prochaine période de stock bas
                    ingredient_db.alert_sent = False
                await session.flush()
                logger.info(
                    f"Ingrédient ID {ingredient_id} réapprovisionné à {new_stock:g} "
                    f"(alert_sent={ingredient_db.alert_sent})."
                )
                return Ingredient.model_validate(ingredient_db)
        except SQLAlchemyError as e:
            logger.error(f"Erreur DB réapprovisionnement ingrédient {ingredient_id}: {e}", exc_info=True)
            raise InternalException(f"Erreur lors du réapprovisionnement de l'ingrédient {ingredient_id}.") from e
