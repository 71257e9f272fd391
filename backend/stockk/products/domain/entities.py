from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

# Entités du Domaine "Products"


class ProductIngredient(BaseModel):
    """Ligne de nomenclature: ``amount`` d'un ingrédient consommé par unité de produit."""
    model_config = ConfigDict(from_attributes=True)

    product_id: int
    ingredient_id: int
    amount: float = Field(gt=0)
    ingredient_name: Optional[str] = None


class Product(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    # Ordonnée par ID d'ingrédient
    ingredients: List[ProductIngredient] = []
