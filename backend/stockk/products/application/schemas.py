from typing import List, Optional

from stockk.core.schemas import OrmBaseModel


class ProductIngredientRead(OrmBaseModel):
    ingredient_id: int
    ingredient_name: Optional[str] = None
    amount: float


class ProductRead(OrmBaseModel):
    id: int
    name: str
    ingredients: List[ProductIngredientRead] = []
