from abc import ABC, abstractmethod
from typing import List, Optional

from stockk.core.transaction import Transaction
from .entities import Ingredient


class AbstractIngredientRepository(ABC):
    """Interface abstraite pour le repository des Ingrédients (registre des stocks).

    Toutes les méthodes acceptent une transaction optionnelle; sans transaction,
    l'opération s'exécute sur une session ambiante.
    """

    @abstractmethod
    async def get_by_id(self, ingredient_id: int, tx: Optional[Transaction] = None, lock: bool = False) -> Ingredient:
        """Récupère un ingrédient par son ID. ``lock`` pose un verrou de ligne jusqu'à la fin de la transaction.

        Raises:
            IngredientNotFoundException: si aucune ligne ne correspond.
        """
        raise NotImplementedError

    @abstractmethod
    async def list_all(self, tx: Optional[Transaction] = None) -> List[Ingredient]:
        """Liste tous les ingrédients."""
        raise NotImplementedError

    @abstractmethod
    async def update_stock(self, ingredient_id: int, new_stock: float, tx: Optional[Transaction] = None) -> None:
        """Fixe ``current_stock`` sans condition.

        Raises:
            IngredientNotFoundException: si aucune ligne n'a été modifiée.
        """
        raise NotImplementedError

    @abstractmethod
    async def list_low_stock(self, tx: Optional[Transaction] = None) -> List[Ingredient]:
        """Liste les ingrédients sous le seuil d'alerte dont l'alerte n'a pas encore été envoyée."""
        raise NotImplementedError

    @abstractmethod
    async def mark_alert_sent(self, ingredient_id: int, tx: Optional[Transaction] = None) -> None:
        """Positionne le verrou ``alert_sent``. Idempotent."""
        raise NotImplementedError

    @abstractmethod
    async def restock(self, ingredient_id: int, new_stock: float, tx: Optional[Transaction] = None) -> Ingredient:
        """Réapprovisionne un ingrédient et réarme le verrou d'alerte si le stock repasse au seuil.

        Raises:
            IngredientNotFoundException: si l'ingrédient n'existe pas.
            InvalidStockLevelException: si ``new_stock`` sort de [0, stock total].
        """
        raise NotImplementedError
