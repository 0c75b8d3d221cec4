"""Catalog reader port (abstract interface).

The checkout pipeline never owns product data. It reads price, wholesale
terms, stock and display fields through this narrow contract so that the
catalogue service can be swapped (in-memory for tests, HTTP or database backed
in production) without touching cart or order code.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class ProductSnapshot:
    """Read-only view of a product at lookup time."""

    product_id: str
    name: str
    price: int
    stock: int = 0
    in_stock: bool = True
    wholesale_price: int | None = None
    wholesale_min_qty: int | None = None
    image: str | None = None

    @property
    def offers_wholesale(self) -> bool:
        return bool(self.wholesale_price)


class CatalogReader(ABC):
    """Abstract catalog lookup interface."""

    @abstractmethod
    def get_product(self, product_id: str) -> ProductSnapshot | None:
        """Return the product, or None when no such product exists."""
        ...

    def get_products(self, product_ids) -> dict[str, ProductSnapshot]:
        """Bulk lookup used when enriching a cart for display."""
        found = {}
        for product_id in product_ids:
            product = self.get_product(str(product_id))
            if product is not None:
                found[str(product_id)] = product
        return found
