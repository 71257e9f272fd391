from pydantic import BaseModel, ConfigDict

# Entités du Domaine "Ingredients"


class Ingredient(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    total_stock: float
    current_stock: float
    alert_sent: bool = False

    @property
    def remaining_percentage(self) -> float:
        """Pourcentage du stock total encore disponible."""
        return self.current_stock / self.total_stock * 100
