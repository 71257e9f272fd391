import logging
from typing import Optional

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool
from sqlmodel import SQLModel

from stockk.config import Settings, get_settings

# Importer les modèles de table pour enregistrer leurs métadonnées dans SQLModel.metadata
from stockk.ingredients import models as _ingredient_models  # noqa: F401
from stockk.products import models as _product_models  # noqa: F401
from stockk.orders import models as _order_models  # noqa: F401

logger = logging.getLogger(__name__)


def _configure_sqlite(engine: AsyncEngine) -> None:
    """Active les clés étrangères et prend le verrou d'écriture dès le BEGIN.

    SQLite ne connaît pas SELECT ... FOR UPDATE: avec BEGIN IMMEDIATE, deux
    transactions qui lisent puis décrémentent le même stock sont sérialisées.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        # Désactiver le BEGIN implicite du driver, on émet le nôtre
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def create_engine_from_url(
    database_url: str,
    echo: bool = False,
    pool_size: Optional[int] = None,
    max_overflow: Optional[int] = None,
    use_null_pool: bool = False,
) -> AsyncEngine:
    """Crée un moteur asynchrone adapté au backend (PostgreSQL/asyncpg ou SQLite/aiosqlite)."""
    url = make_url(database_url)
    is_sqlite = url.get_backend_name() == "sqlite"

    engine_kwargs = {"echo": echo}
    if use_null_pool:
        # Une connexion par usage: utilisé par le worker qui crée sa propre boucle asyncio
        engine_kwargs["poolclass"] = NullPool
    elif not is_sqlite:
        if pool_size is not None:
            engine_kwargs["pool_size"] = pool_size
        if max_overflow is not None:
            engine_kwargs["max_overflow"] = max_overflow

    engine = create_async_engine(url, **engine_kwargs)
    if is_sqlite:
        _configure_sqlite(engine)
    logger.info(f"Moteur SQLAlchemy async configuré pour le backend '{url.get_backend_name()}'.")
    return engine


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,  # Empêche les objets d'expirer après commit
        autoflush=False,
    )


def create_engine_from_settings(settings: Settings, use_null_pool: bool = False) -> AsyncEngine:
    return create_engine_from_url(
        settings.database_url,
        echo=settings.DB_ECHO_LOG,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        use_null_pool=use_null_pool,
    )


_engine: Optional[AsyncEngine] = None
_session_factory: Optional[async_sessionmaker[AsyncSession]] = None


def get_engine() -> AsyncEngine:
    """Moteur partagé du processus HTTP, créé au premier usage."""
    global _engine
    if _engine is None:
        _engine = create_engine_from_settings(get_settings())
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Dépendance FastAPI qui fournit la factory de sessions.

    Les repositories ouvrent leurs propres sessions (mode ambiant) ou utilisent
    la transaction qu'on leur passe; la factory est donc injectée plutôt qu'une session.
    """
    global _session_factory
    if _session_factory is None:
        _session_factory = create_session_factory(get_engine())
    return _session_factory


async def dispose_engine() -> None:
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
        logger.debug("Moteur SQLAlchemy fermé.")
    _engine = None
    _session_factory = None


# --- Fonctions utilitaires (script de seed, tests) ---
async def create_tables(engine: AsyncEngine) -> None:
    """Crée toutes les tables définies par les modèles SQLModel."""
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


async def drop_tables(engine: AsyncEngine) -> None:
    """Supprime toutes les tables définies par les modèles SQLModel."""
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
