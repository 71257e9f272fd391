import logging
from typing import List

from fastapi import APIRouter, status

from stockk.ingredients.application.schemas import IngredientRead, IngredientStockUpdateRequest
from stockk.ingredients.interfaces.dependencies import IngredientServiceDep

logger = logging.getLogger(__name__)

ingredient_router = APIRouter(
    prefix="/ingredients",
    tags=["Ingredients"],
)


@ingredient_router.get("", response_model=List[IngredientRead])
async def list_ingredients_endpoint(service: IngredientServiceDep):
    """Liste l'état du registre des stocks."""
    ingredients = await service.list_ingredients()
    return [IngredientRead.model_validate(i) for i in ingredients]


@ingredient_router.put("/stock", response_model=List[IngredientRead], status_code=status.HTTP_200_OK)
async def update_ingredient_stock_endpoint(request: IngredientStockUpdateRequest, service: IngredientServiceDep):
    """Réapprovisionne un ou plusieurs ingrédients (tout ou rien)."""
    updated = await service.update_ingredient_stock(request.ingredients)
    return [IngredientRead.model_validate(i) for i in updated]


@ingredient_router.get("/{ingredient_id}", response_model=IngredientRead)
async def get_ingredient_endpoint(ingredient_id: int, service: IngredientServiceDep):
    ingredient = await service.get_ingredient(ingredient_id)
    return IngredientRead.model_validate(ingredient)
