"""In-memory catalog reader for development and testing.

Products are registered up front (or through the seeding helper) and served
from a dictionary. Mirrors the shape of the real catalogue so cart behaviour
can be exercised without a product service.
"""

from catalogue.reader.port import CatalogReader, ProductSnapshot


class InMemoryCatalog(CatalogReader):
    def __init__(self, products=None) -> None:
        self._products: dict[str, ProductSnapshot] = {}
        for product in products or []:
            self.put(product)

    def put(self, product: ProductSnapshot) -> None:
        self._products[str(product.product_id)] = product

    def add_product(self, product_id: str, name: str, price: int, **terms) -> ProductSnapshot:
        product = ProductSnapshot(product_id=str(product_id), name=name, price=price, **terms)
        self.put(product)
        return product

    def remove(self, product_id: str) -> None:
        self._products.pop(str(product_id), None)

    def clear(self) -> None:
        self._products.clear()

    def get_product(self, product_id: str) -> ProductSnapshot | None:
        return self._products.get(str(product_id))
