from abc import ABC, abstractmethod
from typing import List, Optional

from stockk.core.transaction import Transaction
from .entities import Product


class AbstractProductRepository(ABC):
    """Interface abstraite pour le repository des Produits (lecture seule)."""

    @abstractmethod
    async def get_by_id(self, product_id: int, tx: Optional[Transaction] = None) -> Product:
        """Récupère un produit avec sa nomenclature.

        Raises:
            ProductNotFoundException: si le produit n'existe pas.
        """
        raise NotImplementedError

    @abstractmethod
    async def list_all(self, tx: Optional[Transaction] = None) -> List[Product]:
        raise NotImplementedError
