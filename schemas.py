from decimal import Decimal
from typing import Annotated, Optional
from pydantic import BaseModel, PlainSerializer

# Le prix reste un Decimal en mémoire mais sort en nombre JSON
Price = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]

class ProductCreate(BaseModel):
    id: int  # Fourni par l'appelant, jamais vérifié
    name: str
    price: Price

class ProductUpdate(BaseModel):
    id: Optional[int] = None  # Ignoré: seuls name et price sont appliqués
    name: str
    price: Price

class ProductResponse(BaseModel):
    id: int
    name: str
    price: Price

    class Config:
        from_attributes = True
