from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from stockk.core.transaction import TransactionManager
from stockk.database import get_session_factory

SessionFactoryDep = Annotated[async_sessionmaker[AsyncSession], Depends(get_session_factory)]


def get_transaction_manager(session_factory: SessionFactoryDep) -> TransactionManager:
    """Fournit un TransactionManager lié à la factory de sessions de l'application."""
    return TransactionManager(session_factory)


TransactionManagerDep = Annotated[TransactionManager, Depends(get_transaction_manager)]
