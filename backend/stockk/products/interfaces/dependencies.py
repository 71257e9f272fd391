from typing import Annotated

from fastapi import Depends

from stockk.core.dependencies import SessionFactoryDep
from stockk.products.domain.repositories import AbstractProductRepository
from stockk.products.infrastructure.persistence import SQLAlchemyProductRepository
from stockk.products.application.services import ProductService


def get_product_repository(session_factory: SessionFactoryDep) -> AbstractProductRepository:
    """Fournit une instance de SQLAlchemyProductRepository."""
    return SQLAlchemyProductRepository(session_factory=session_factory)


ProductRepositoryDep = Annotated[AbstractProductRepository, Depends(get_product_repository)]


def get_product_service(product_repo: ProductRepositoryDep) -> ProductService:
    return ProductService(product_repo=product_repo)


ProductServiceDep = Annotated[ProductService, Depends(get_product_service)]
