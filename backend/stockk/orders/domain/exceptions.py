"""Exceptions spécifiques au domaine Order."""

from stockk.core.exceptions import NotFoundException, ValidationException


class OrderNotFoundException(NotFoundException):
    """Levée lorsqu'une commande spécifique n'est pas trouvée."""
    def __init__(self, order_id: int):
        super().__init__(f"Commande avec ID {order_id} non trouvée.")
        self.order_id = order_id


class InvalidOrderException(ValidationException):
    """Levée lorsqu'une commande est structurellement invalide (liste vide, ID ou quantité hors limites)."""
    pass
