"""Services for managing the product catalog."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Protocol

from diet_manager.domain.models import Product, check_field

_logger = logging.getLogger(__name__)


class ProductRepository(Protocol):
    """Persistence interface for the product catalog."""

    def load_all(self) -> dict[str, Product]:
        """Return all products keyed by name."""

    def save_all(self, products: dict[str, Product]) -> None:
        """Replace the persisted products with the given collection."""


@dataclass
class ProductCatalog:
    """Mapping from product name to nutritional facts per unit."""

    repository: ProductRepository
    products: dict[str, Product] = field(default_factory=dict)

    def load(self) -> None:
        """Replace the in-memory catalog with the persisted one."""
        self.products = self.repository.load_all()

    def add_product(  # noqa: PLR0913
        self,
        name: str,
        unit: str,
        calories: float,
        proteins: float,
        minerals: float,
    ) -> Product:
        """Insert or overwrite a product and persist the whole catalog.

        The in-memory catalog changes only after the file is rewritten.
        """
        product = Product(
            name=check_field(name, "name"),
            unit=check_field(unit, "unit"),
            calories=calories,
            proteins=proteins,
            minerals=minerals,
        )
        products = {**self.products, product.name: product}
        self.repository.save_all(products)
        self.products = products
        _logger.info("Stored product: name=%s unit=%s", product.name, product.unit)
        return product

    def lookup(self, name: str) -> Product | None:
        """Return a product by name, if present."""
        return self.products.get(name.strip())

    def list_products(self) -> list[Product]:
        """Return all products sorted by name."""
        return sorted(self.products.values(), key=lambda product: product.name)

    def missing(self, names: Iterable[str]) -> list[str]:
        """Return the names that are not in the catalog, in input order."""
        return [name for name in names if self.lookup(name) is None]

    def save(self) -> None:
        """Persist the whole catalog."""
        self.repository.save_all(self.products)
