from abc import ABC, abstractmethod
from typing import Optional

from stockk.core.transaction import Transaction
from .entities import Order


class AbstractOrderRepository(ABC):
    """Interface abstraite pour le repository des Commandes."""

    @abstractmethod
    async def create(self, tx: Transaction, order: Order) -> Order:
        """Insère l'en-tête puis chaque ligne, dans l'ordre, sous la transaction fournie.

        Raises:
            ProductNotFoundException: si une ligne référence un produit inconnu.
            InternalException: pour toute autre erreur de stockage.
        """
        raise NotImplementedError

    @abstractmethod
    async def get_by_id(self, order_id: int, tx: Optional[Transaction] = None) -> Order:
        """Récupère une commande avec ses lignes.

        Raises:
            OrderNotFoundException: si la commande n'existe pas.
        """
        raise NotImplementedError
