import logging
from collections import defaultdict
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from stockk.core.exceptions import InternalException
from stockk.core.transaction import Transaction, session_scope
from stockk.ingredients.models import IngredientDB
from stockk.products.models import ProductDB, ProductIngredientDB

# Domaine Products
from stockk.products.domain.entities import Product, ProductIngredient
from stockk.products.domain.repositories import AbstractProductRepository
from stockk.products.domain.exceptions import ProductNotFoundException

logger = logging.getLogger(__name__)


def _bom_statement():
    return (
        select(ProductIngredientDB, IngredientDB.name)
        .join(IngredientDB, IngredientDB.id == ProductIngredientDB.ingredient_id)
        .order_by(ProductIngredientDB.product_id, ProductIngredientDB.ingredient_id)
    )


def _to_entry(pi_db: ProductIngredientDB, ingredient_name: str) -> ProductIngredient:
    return ProductIngredient(
        product_id=pi_db.product_id,
        ingredient_id=pi_db.ingredient_id,
        amount=pi_db.amount,
        ingredient_name=ingredient_name,
    )


class SQLAlchemyProductRepository(AbstractProductRepository):
    """Implémentation SQLAlchemy du repository de Produits."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def get_by_id(self, product_id: int, tx: Optional[Transaction] = None) -> Product:
        try:
            async with session_scope(self.session_factory, tx) as session:
                product_db = (
                    await session.execute(select(ProductDB).where(ProductDB.id == product_id))
                ).scalar_one_or_none()
                if product_db is None:
                    logger.debug(f"Produit ID {product_id} non trouvé dans get_by_id().")
                    raise ProductNotFoundException(product_id)

                rows = (
                    await session.execute(_bom_statement().where(ProductIngredientDB.product_id == product_id))
                ).all()
                return Product(
                    id=product_db.id,
                    name=product_db.name,
                    ingredients=[_to_entry(pi_db, name) for pi_db, name in rows],
                )
        except SQLAlchemyError as e:
            logger.error(f"Erreur DB lecture produit {product_id}: {e}", exc_info=True)
            raise InternalException(f"Erreur lors de la lecture du produit {product_id}.") from e

    async def list_all(self, tx: Optional[Transaction] = None) -> List[Product]:
        try:
            async with session_scope(self.session_factory, tx) as session:
                products_db = (await session.execute(select(ProductDB).order_by(ProductDB.id))).scalars().all()
                rows = (await session.execute(_bom_statement())).all()
        except SQLAlchemyError as e:
            logger.error(f"Erreur DB listage produits: {e}", exc_info=True)
            raise InternalException("Erreur lors du listage des produits.") from e

        entries_by_product = defaultdict(list)
        for pi_db, name in rows:
            entries_by_product[pi_db.product_id].append(_to_entry(pi_db, name))
        return [
            Product(id=p.id, name=p.name, ingredients=entries_by_product[p.id])
            for p in products_db
        ]
