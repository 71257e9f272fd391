from typing import Optional

from sqlalchemy import CheckConstraint
from sqlmodel import SQLModel, Field


# --- Modèle Ingredient ---

# 1. Modèle de base (données communes)
class IngredientBase(SQLModel):
    name: str = Field(max_length=255, unique=True, index=True)
    total_stock: float  # Capacité, fixée à la création
    current_stock: float
    # Verrou d'alerte: passe à True quand une alerte stock bas a été envoyée
    alert_sent: bool = Field(default=False)


# 2. Modèle de table (hérite de Base)
class IngredientDB(IngredientBase, table=True):
    __tablename__ = "ingredients"
    __table_args__ = (
        CheckConstraint("total_stock > 0", name="ck_ingredients_total_stock_positive"),
        CheckConstraint("current_stock >= 0", name="ck_ingredients_current_stock_non_negative"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
