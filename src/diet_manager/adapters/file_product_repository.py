"""Text-file repository for the product catalog."""

from dataclasses import dataclass

from diet_manager.adapters.flat_records import decode_products, encode_products
from diet_manager.adapters.text_file_storage import TextFileStorage
from diet_manager.domain.models import Product
from diet_manager.services.catalog import ProductRepository


@dataclass
class FileProductRepository(ProductRepository):
    """Stores products in ``products.txt``."""

    storage: TextFileStorage
    file_name: str = "products.txt"

    def load_all(self) -> dict[str, Product]:
        """Return all products keyed by name."""
        return decode_products(
            self.storage.read_text(self.file_name), self.file_name
        )

    def save_all(self, products: dict[str, Product]) -> None:
        """Rewrite the products file."""
        self.storage.write_text(self.file_name, encode_products(products.values()))
