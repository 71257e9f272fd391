from typing import List

from pydantic import BaseModel, Field


class LowStockIngredient(BaseModel):
    id: int
    name: str
    total_stock: float = Field(gt=0)
    current_stock: float

    @property
    def remaining_percentage(self) -> float:
        return self.current_stock / self.total_stock * 100


class LowStockAlertPayload(BaseModel):
    """Charge utile JSON de la tâche d'alerte: ``{"ingredients": [...]}``."""
    ingredients: List[LowStockIngredient]
