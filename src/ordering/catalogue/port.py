"""Catalogue port (abstract interface).

The product catalogue is owned by another service. Ordering only needs
an authoritative name and price for a product at the moment it is added
to a cart or ordered directly.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from decimal import Decimal


@dataclass(frozen=True)
class Product:
    id: str
    name: str
    price: Decimal
    stock: int = 0
    images: tuple[str, ...] = field(default_factory=tuple)

    @property
    def image_url(self) -> str | None:
        return self.images[0] if self.images else None


class Catalogue(ABC):
    """Abstract product lookup."""

    @abstractmethod
    def get_product(self, product_id: str) -> Product:
        """Return the product.

        Raises NotFoundError if the catalogue does not know the product and
        GatewayError if the catalogue could not be reached.
        """
        ...
