"""Taxonomie des erreurs applicatives.

Chaque erreur porte le statut HTTP vers lequel la couche API la traduit.
Les erreurs de stockage sont classées une seule fois, à la frontière des
repositories, puis remontent inchangées jusqu'à l'appelant.
"""
from typing import Optional


class StockkException(Exception):
    """Classe de base pour les exceptions de l'application."""
    status_code: int = 500
    message: str = "Erreur interne du serveur"

    def __init__(self, detail: Optional[str] = None):
        self.detail = detail
        super().__init__(detail or self.message)


class ValidationException(StockkException):
    """Levée pour une entrée mal formée ou hors limites. Ne touche jamais au stockage."""
    status_code = 400
    message = "Erreur de validation"


class NotFoundException(StockkException):
    """Levée lorsqu'une ressource référencée (produit, ingrédient, commande) est absente."""
    status_code = 404
    message = "Ressource non trouvée"


class InsufficientStockException(StockkException):
    """Levée lorsqu'une décrémentation rendrait un stock négatif (règle métier, pas une panne)."""
    status_code = 409
    message = "Stock insuffisant"


class InternalException(StockkException):
    """Levée pour une panne de stockage, de transaction ou de file non imputable à l'appelant."""
    status_code = 500
    message = "Erreur interne du serveur"
