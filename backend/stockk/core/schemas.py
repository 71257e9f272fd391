from typing import Optional

from pydantic import BaseModel, ConfigDict


# Configuration commune pour activer le mode ORM (from_attributes)
class OrmBaseModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class ErrorResponse(BaseModel):
    """Corps JSON renvoyé pour toute erreur applicative."""
    code: int
    message: str
    detail: Optional[str] = None
