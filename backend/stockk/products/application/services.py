import logging
from typing import List

from stockk.products.domain.entities import Product
from stockk.products.domain.repositories import AbstractProductRepository

logger = logging.getLogger(__name__)


class ProductService:
    """Consultation du catalogue et des nomenclatures."""

    def __init__(self, product_repo: AbstractProductRepository):
        self.product_repo = product_repo

    async def get_product(self, product_id: int) -> Product:
        return await self.product_repo.get_by_id(product_id)

    async def list_products(self) -> List[Product]:
        return await self.product_repo.list_all()
