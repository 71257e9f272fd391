from typing import Annotated

from fastapi import Depends

from stockk.config import Settings, get_settings
from stockk.core.dependencies import SessionFactoryDep, TransactionManagerDep

# Domain
from stockk.orders.domain.repositories import AbstractOrderRepository

# Infrastructure
from stockk.orders.infrastructure.persistence import SQLAlchemyOrderRepository

# Application
from stockk.orders.application.services import OrderService
from stockk.ingredients.interfaces.dependencies import IngredientAlertServiceDep, IngredientRepositoryDep
from stockk.products.interfaces.dependencies import ProductRepositoryDep

# --- Repository Dependencies ---

def get_order_repository(session_factory: SessionFactoryDep) -> AbstractOrderRepository:
    """Fournit une instance de SQLAlchemyOrderRepository."""
    return SQLAlchemyOrderRepository(session_factory=session_factory)


OrderRepositoryDep = Annotated[AbstractOrderRepository, Depends(get_order_repository)]

# --- Service Dependencies ---

def get_order_service(
    order_repo: OrderRepositoryDep,
    product_repo: ProductRepositoryDep,
    ingredient_repo: IngredientRepositoryDep,
    transaction_manager: TransactionManagerDep,
    alert_service: IngredientAlertServiceDep,
    settings: Settings = Depends(get_settings),
) -> OrderService:
    """Injecte les repositories, le gestionnaire de transactions et le service d'alerte."""
    return OrderService(
        order_repo=order_repo,
        product_repo=product_repo,
        ingredient_repo=ingredient_repo,
        transaction_manager=transaction_manager,
        alert_service=alert_service,
        timeout=settings.ORDER_TIMEOUT_SECONDS,
    )


OrderServiceDep = Annotated[OrderService, Depends(get_order_service)]
