from decimal import Decimal
from typing import List
from pydantic import BaseModel

class Product(BaseModel):
    id: int
    name: str
    price: Decimal


# Catalogue initial, chargé au démarrage du service
def seed_products() -> List[Product]:
    return [
        Product(id=1, name="Product A", price=Decimal("12.99")),
        Product(id=2, name="Product B", price=Decimal("15.99")),
        Product(id=3, name="Product C", price=Decimal("18.99")),
        Product(id=4, name="Product D", price=Decimal("21.99")),
    ]
