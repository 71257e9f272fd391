from typing import Optional

from sqlalchemy import CheckConstraint
from sqlmodel import SQLModel, Field


# --- Modèle Product ---
class ProductDB(SQLModel, table=True):
    __tablename__ = "products"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(max_length=255, unique=True, index=True)


# --- Nomenclature (bill-of-materials): quantité d'ingrédient par unité de produit ---
class ProductIngredientDB(SQLModel, table=True):
    __tablename__ = "product_ingredients"
    __table_args__ = (CheckConstraint("amount > 0", name="ck_product_ingredients_amount_positive"),)

    product_id: int = Field(foreign_key="products.id", primary_key=True)
    ingredient_id: int = Field(foreign_key="ingredients.id", primary_key=True)
    amount: float
