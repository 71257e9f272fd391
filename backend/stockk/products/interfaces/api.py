import logging
from typing import List

from fastapi import APIRouter

from stockk.products.application.schemas import ProductRead
from stockk.products.interfaces.dependencies import ProductServiceDep

logger = logging.getLogger(__name__)

product_router = APIRouter(
    prefix="/products",
    tags=["Products"],
)


@product_router.get("", response_model=List[ProductRead])
async def list_products_endpoint(service: ProductServiceDep):
    """Liste les produits avec leur nomenclature."""
    return await service.list_products()


@product_router.get("/{product_id}", response_model=ProductRead)
async def get_product_endpoint(product_id: int, service: ProductServiceDep):
    return await service.get_product(product_id)
