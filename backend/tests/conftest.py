# Standard Library

from typing import AsyncGenerator, Dict

# Third-Party Libraries
import pytest
import pytest_asyncio

from httpx import AsyncClient, ASGITransport
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

# First-Party Libraries (Your project)
from stockk.main import app
from stockk.database import create_engine_from_url, create_session_factory, create_tables, get_session_factory
from stockk.core.transaction import TransactionManager
from stockk.ingredients.models import IngredientDB
from stockk.ingredients.infrastructure.persistence import SQLAlchemyIngredientRepository
from stockk.ingredients.application.services import IngredientAlertService
from stockk.products.models import ProductDB, ProductIngredientDB
from stockk.products.infrastructure.persistence import SQLAlchemyProductRepository
from stockk.orders.infrastructure.persistence import SQLAlchemyOrderRepository
from stockk.orders.application.services import OrderService
from stockk.tasks.domain.queue import AbstractTaskQueue, TaskOptions, QUEUE_CRITICAL
from stockk.tasks.interfaces.dependencies import get_task_queue


class FakeTaskQueue(AbstractTaskQueue):
    """File en mémoire: conserve les tâches enfilées, ou lève ``fail_with`` si défini."""

    def __init__(self):
        self.enqueued = []
        self.fail_with = None

    async def enqueue(self, task_type: str, payload: bytes, options: TaskOptions) -> str:
        if self.fail_with is not None:
            raise self.fail_with
        self.enqueued.append((task_type, payload, options))
        return f"task-{len(self.enqueued)}"


async def count_rows(session_factory: async_sessionmaker[AsyncSession], model) -> int:
    async with session_factory() as session:
        return (await session.execute(select(func.count()).select_from(model))).scalar_one()


# --- Fixtures de Base ---

@pytest_asyncio.fixture(scope="function")
async def engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """Base SQLite fichier par test (les transactions concurrentes ont besoin de vraies connexions)."""
    engine = create_engine_from_url(f"sqlite+aiosqlite:///{tmp_path / 'stockk_test.db'}")
    await create_tables(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return create_session_factory(engine)


@pytest.fixture
def transaction_manager(session_factory) -> TransactionManager:
    return TransactionManager(session_factory)


@pytest_asyncio.fixture(scope="function")
async def burger_menu(session_factory) -> Dict[str, int]:
    """Beef 20000 g, Cheese 5000 g, Onion 1000 g; Burger = 150 g / 30 g / 20 g."""
    async with session_factory() as session:
        beef = IngredientDB(name="Beef", total_stock=20000, current_stock=20000)
        cheese = IngredientDB(name="Cheese", total_stock=5000, current_stock=5000)
        onion = IngredientDB(name="Onion", total_stock=1000, current_stock=1000)
        burger = ProductDB(name="Burger")
        session.add_all([beef, cheese, onion, burger])
        await session.flush()
        session.add_all([
            ProductIngredientDB(product_id=burger.id, ingredient_id=beef.id, amount=150),
            ProductIngredientDB(product_id=burger.id, ingredient_id=cheese.id, amount=30),
            ProductIngredientDB(product_id=burger.id, ingredient_id=onion.id, amount=20),
        ])
        await session.commit()
        return {"beef": beef.id, "cheese": cheese.id, "onion": onion.id, "burger": burger.id}


# --- Repositories et services ---

@pytest.fixture
def ingredient_repo(session_factory) -> SQLAlchemyIngredientRepository:
    return SQLAlchemyIngredientRepository(session_factory)


@pytest.fixture
def product_repo(session_factory) -> SQLAlchemyProductRepository:
    return SQLAlchemyProductRepository(session_factory)


@pytest.fixture
def order_repo(session_factory) -> SQLAlchemyOrderRepository:
    return SQLAlchemyOrderRepository(session_factory)


@pytest.fixture
def task_queue() -> FakeTaskQueue:
    return FakeTaskQueue()


@pytest.fixture
def alert_options() -> TaskOptions:
    return TaskOptions(queue=QUEUE_CRITICAL, priority=0, max_retry=10)


@pytest.fixture
def alert_service(ingredient_repo, task_queue, alert_options) -> IngredientAlertService:
    return IngredientAlertService(ingredient_repo=ingredient_repo, task_queue=task_queue, task_options=alert_options)


@pytest.fixture
def order_service(order_repo, product_repo, ingredient_repo, transaction_manager, alert_service) -> OrderService:
    return OrderService(
        order_repo=order_repo,
        product_repo=product_repo,
        ingredient_repo=ingredient_repo,
        transaction_manager=transaction_manager,
        alert_service=alert_service,
    )


# --- Client HTTP ---

@pytest_asyncio.fixture(scope="function")
async def test_client(session_factory, task_queue) -> AsyncGenerator[AsyncClient, None]:
    """Fournit un AsyncClient httpx branché sur la base de test et la file en mémoire."""
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    app.dependency_overrides[get_task_queue] = lambda: task_queue
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
