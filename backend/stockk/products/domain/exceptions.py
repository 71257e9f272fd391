"""Exceptions spécifiques au domaine Product."""

from stockk.core.exceptions import NotFoundException


class ProductNotFoundException(NotFoundException):
    """Levée lorsqu'un produit spécifique n'est pas trouvé."""
    def __init__(self, product_id: int):
        super().__init__(f"Produit avec ID {product_id} non trouvé.")
        self.product_id = product_id
