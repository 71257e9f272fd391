from typing import List

from pydantic import BaseModel, Field

from stockk.core.schemas import OrmBaseModel


class IngredientRead(OrmBaseModel):
    id: int
    name: str
    total_stock: float
    current_stock: float
    alert_sent: bool
    remaining_percentage: float


class IngredientStockUpdate(BaseModel):
    id: int
    # NaN et infini sont refusés avant même la vérification des bornes
    current_stock: float = Field(allow_inf_nan=False)


class IngredientStockUpdateRequest(BaseModel):
    ingredients: List[IngredientStockUpdate]
