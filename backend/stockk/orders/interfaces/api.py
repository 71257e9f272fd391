import logging

from fastapi import APIRouter, status

from stockk.orders.application.schemas import OrderCreate, OrderResponse
from stockk.orders.interfaces.dependencies import OrderServiceDep

logger = logging.getLogger(__name__)

order_router = APIRouter(
    prefix="/orders",
    tags=["Orders"],
)

# Les StockkException sont traduites en réponses JSON par le handler de l'application


@order_router.post("", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
async def create_order_endpoint(order_data: OrderCreate, service: OrderServiceDep):
    """Crée une commande et consomme le stock des ingrédients."""
    created_order = await service.create_order(order_data.products)
    return created_order


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_order_details_endpoint(order_id: int, service: OrderServiceDep):
    return await service.get_order(order_id)
