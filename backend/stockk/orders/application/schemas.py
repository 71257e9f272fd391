from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel

from stockk.core.schemas import OrmBaseModel


# Les bornes (ID > 0, quantité > 0) sont vérifiées par OrderService
class OrderItemCreate(BaseModel):
    product_id: int
    quantity: int


class OrderCreate(BaseModel):
    products: List[OrderItemCreate]


class OrderItemResponse(OrmBaseModel):
    id: int
    product_id: int
    quantity: int


class OrderResponse(OrmBaseModel):
    id: int
    created_at: Optional[datetime] = None
    items: List[OrderItemResponse] = []
