"""Frontière transactionnelle partagée par les repositories et les services.

Une ``Transaction`` est ouverte par le service (``TransactionManager.begin``) et
passée explicitement à chaque appel de repository d'un même traitement. Sans
transaction, les repositories travaillent sur une session ambiante courte
(voir ``session_scope``).
"""
import logging
from contextlib import asynccontextmanager
from enum import Enum
from typing import Any, AsyncIterator, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from stockk.core.exceptions import InternalException

logger = logging.getLogger(__name__)


class TransactionState(str, Enum):
    ACTIVE = "active"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"


class TransactionClosedError(InternalException):
    """Levée lors de toute utilisation d'une transaction déjà validée ou annulée."""
    def __init__(self, state: TransactionState):
        super().__init__(f"La transaction est terminée (état: {state.value}).")
        self.state = state


class Transaction:
    """Unité de travail liée à une session et à une connexion exclusives.

    Expose la même surface que la session ambiante (execute, scalar, get, add,
    flush) plus commit/rollback. Après commit ou rollback, toute utilisation
    lève ``TransactionClosedError``; un rollback supplémentaire est ignoré.
    """

    def __init__(self, session: AsyncSession):
        self._session = session
        self.state = TransactionState.ACTIVE

    @property
    def is_active(self) -> bool:
        return self.state is TransactionState.ACTIVE

    @property
    def session(self) -> AsyncSession:
        if not self.is_active:
            raise TransactionClosedError(self.state)
        return self._session

    async def execute(self, statement: Any, params: Optional[Any] = None) -> Any:
        return await self.session.execute(statement, params)

    async def scalar(self, statement: Any, params: Optional[Any] = None) -> Any:
        return await self.session.scalar(statement, params)

    async def get(self, entity: Any, ident: Any, **kwargs: Any) -> Any:
        return await self.session.get(entity, ident, **kwargs)

    def add(self, instance: Any) -> None:
        self.session.add(instance)

    async def flush(self) -> None:
        await self.session.flush()

    async def commit(self) -> None:
        session = self.session
        try:
            await session.commit()
        except SQLAlchemyError as e:
            logger.error(f"[Transaction] Échec du commit: {e}", exc_info=True)
            await self._finish(TransactionState.ROLLED_BACK, rollback=True)
            raise InternalException("Échec de la validation de la transaction.") from e
        await self._finish(TransactionState.COMMITTED)
        logger.debug("[Transaction] Transaction validée.")

    async def rollback(self) -> None:
        if not self.is_active:
            # Rollback après commit (ou double rollback): sans effet
            return
        await self._finish(TransactionState.ROLLED_BACK, rollback=True)
        logger.debug("[Transaction] Transaction annulée.")

    async def _finish(self, state: TransactionState, rollback: bool = False) -> None:
        self.state = state
        try:
            if rollback:
                await self._session.rollback()
        except SQLAlchemyError as e:
            # La fermeture de la session ci-dessous libère quand même la connexion
            logger.error(f"[Transaction] Échec du rollback: {e}", exc_info=True)
        finally:
            await self._session.close()

    async def __aenter__(self) -> "Transaction":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        # Toute sortie sans commit (erreur, annulation, délai dépassé) annule la transaction
        await self.rollback()
        return False


class TransactionManager:
    """Ouvre des transactions sur la factory de sessions de l'application."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def begin(self) -> Transaction:
        session = self.session_factory()
        try:
            # Acquiert la connexion et émet le BEGIN immédiatement
            await session.connection()
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"[TransactionManager] Impossible de démarrer la transaction: {e}", exc_info=True)
            await session.close()
            raise InternalException("Impossible de démarrer la transaction.") from e
        except BaseException:
            # Annulation (délai dépassé) pendant l'attente du verrou: aucune Transaction ne la refermera
            await session.close()
            raise
        return Transaction(session)


@asynccontextmanager
async def session_scope(
    session_factory: async_sessionmaker[AsyncSession],
    tx: Optional[Transaction] = None,
) -> AsyncIterator[AsyncSession]:
    """Fournit la session à utiliser par un repository.

    Avec une transaction active, on réutilise sa session (le commit reste à la
    charge de celui qui l'a ouverte). Sinon, on ouvre une session ambiante qui
    est validée en sortie normale et annulée en cas d'erreur.
    """
    if tx is not None:
        yield tx.session
        return

    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
