"""
In-memory product store.

Holds the ordered product sequence for the lifetime of the process. Ids are
never checked for uniqueness: every id-scoped operation acts on the first
matching product, in insertion order.
"""
import threading
from decimal import Decimal
from typing import Iterable, List, Optional
from loguru import logger
from models import Product


class ProductNotFound(Exception):
    """No product with the requested id exists in the store."""

    def __init__(self, product_id: int):
        super().__init__(f"Product {product_id} not found")
        self.product_id = product_id


class ProductStore:
    def __init__(self, products: Optional[Iterable[Product]] = None):
        # Un seul verrou: chaque opération est un scan/mutation atomique
        self._lock = threading.Lock()
        self._products: List[Product] = list(products or [])

    def __len__(self) -> int:
        with self._lock:
            return len(self._products)

    def _find(self, product_id: int) -> Product:
        # Recherche linéaire, le premier trouvé gagne
        product = next((p for p in self._products if p.id == product_id), None)
        if product is None:
            raise ProductNotFound(product_id)
        return product

    def reset(self, products: Iterable[Product]) -> None:
        with self._lock:
            self._products = list(products)
            logger.info(f"Store reset with {len(self._products)} products")

    def list_products(self) -> List[Product]:
        with self._lock:
            return list(self._products)

    def get_product(self, product_id: int) -> Product:
        with self._lock:
            return self._find(product_id)

    def add_product(self, product: Product) -> Product:
        with self._lock:
            self._products.append(product)
        return product

    def update_product(self, product_id: int, name: str, price: Decimal) -> Product:
        with self._lock:
            product = self._find(product_id)
            product.name = name
            product.price = price
        return product

    def remove_product(self, product_id: int) -> Product:
        with self._lock:
            product = self._find(product_id)
            # Suppression par identité: les doublons d'id plus loin restent en place
            index = next(i for i, p in enumerate(self._products) if p is product)
            del self._products[index]
        return product
