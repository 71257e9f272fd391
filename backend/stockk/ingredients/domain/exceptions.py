"""Exceptions spécifiques au domaine Ingredient."""

from stockk.core.exceptions import InsufficientStockException, NotFoundException, ValidationException


class IngredientNotFoundException(NotFoundException):
    """Levée lorsqu'un ingrédient spécifique n'est pas trouvé."""
    def __init__(self, ingredient_id: int):
        super().__init__(f"Ingrédient avec ID {ingredient_id} non trouvé.")
        self.ingredient_id = ingredient_id


class InsufficientIngredientStockException(InsufficientStockException):
    """Levée lorsque la décrémentation d'un ingrédient rendrait son stock négatif."""
    def __init__(self, ingredient_id: int, name: str, required: float, available: float):
        super().__init__(
            f"Stock insuffisant pour l'ingrédient '{name}' (ID: {ingredient_id}). "
            f"Requis: {required:g}, Disponible: {available:g}."
        )
        self.ingredient_id = ingredient_id
        self.name = name
        self.required = required
        self.available = available


class InvalidStockLevelException(ValidationException):
    """Levée lorsqu'un niveau de stock demandé sort de l'intervalle [0, stock total]."""
    def __init__(self, ingredient_id: int, requested: float, total_stock: float):
        super().__init__(
            f"Niveau de stock {requested:g} invalide pour l'ingrédient ID {ingredient_id} "
            f"(attendu entre 0 et {total_stock:g})."
        )
        self.ingredient_id = ingredient_id
        self.requested = requested
        self.total_stock = total_stock
