from typing import Optional, List
from datetime import datetime
from pydantic import BaseModel, Field

# Entités du Domaine "Orders"

class OrderItem(BaseModel):
    id: Optional[int] = None
    order_id: Optional[int] = None
    product_id: int
    quantity: int = Field(..., gt=0)

    class Config:
        from_attributes = True

class Order(BaseModel):
    id: Optional[int] = None  # Attribué par la base à l'insertion
    created_at: Optional[datetime] = None

    items: List[OrderItem] = []  # Dans l'ordre d'insertion

    class Config:
        from_attributes = True
