"""Crée les tables et insère le menu de démonstration (Burger et ses ingrédients).

Usage: ``python backend/SQL/script/seed_menu.py`` (DATABASE_URL ou POSTGRES_* dans l'environnement).
Idempotent: un ingrédient ou un produit déjà présent (même nom) n'est pas réinséré.
"""
import asyncio
import logging

from sqlalchemy import select

from stockk.config import get_settings
from stockk.core.logging import configure_logging
from stockk.database import create_engine_from_settings, create_session_factory, create_tables
from stockk.ingredients.models import IngredientDB
from stockk.products.models import ProductDB, ProductIngredientDB

logger = logging.getLogger("seed_menu")

# Stocks en grammes
INGREDIENTS = [
    {"name": "Beef", "total_stock": 20000, "current_stock": 20000},
    {"name": "Cheese", "total_stock": 5000, "current_stock": 5000},
    {"name": "Onion", "total_stock": 1000, "current_stock": 1000},
]

# Nomenclature: grammes d'ingrédient par unité de produit
PRODUCTS = {
    "Burger": {"Beef": 150, "Cheese": 30, "Onion": 20},
}


async def seed_menu(session_factory) -> None:
    async with session_factory() as session:
        ingredient_ids = {}
        for data in INGREDIENTS:
            ingredient = (
                await session.execute(select(IngredientDB).where(IngredientDB.name == data["name"]))
            ).scalar_one_or_none()
            if ingredient is None:
                ingredient = IngredientDB(**data)
                session.add(ingredient)
                await session.flush()
                logger.info(f"Ingrédient '{data['name']}' inséré (ID {ingredient.id}).")
            ingredient_ids[data["name"]] = ingredient.id

        for product_name, bom in PRODUCTS.items():
            product = (
                await session.execute(select(ProductDB).where(ProductDB.name == product_name))
            ).scalar_one_or_none()
            if product is not None:
                logger.info(f"Produit '{product_name}' déjà présent, ignoré.")
                continue
            product = ProductDB(name=product_name)
            session.add(product)
            await session.flush()
            for ingredient_name, amount in bom.items():
                session.add(
                    ProductIngredientDB(
                        product_id=product.id,
                        ingredient_id=ingredient_ids[ingredient_name],
                        amount=amount,
                    )
                )
            logger.info(f"Produit '{product_name}' inséré (ID {product.id}).")

        await session.commit()


async def main() -> None:
    settings = get_settings()
    configure_logging(settings.ENVIRONMENT)
    engine = create_engine_from_settings(settings)
    try:
        await create_tables(engine)
        await seed_menu(create_session_factory(engine))
        logger.info("Importation terminée avec succès !")
    finally:
        await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
