"""In-memory catalogue for development and testing."""

from decimal import Decimal

from shared.errors import GatewayError, NotFoundError

from ordering.catalogue.port import Catalogue, Product


class FakeCatalogue(Catalogue):
    """Catalogue backed by a dict. Prices can be changed between calls."""

    def __init__(self) -> None:
        self.products: dict[str, Product] = {}
        self.should_succeed: bool = True
        self.calls: list[str] = []

    def configure(self, should_succeed: bool) -> None:
        self.should_succeed = should_succeed

    def add_product(
        self,
        product_id: str,
        name: str,
        price: Decimal | str | float,
        stock: int = 100,
        images: tuple[str, ...] = (),
    ) -> Product:
        product = Product(id=product_id, name=name, price=Decimal(str(price)), stock=stock, images=tuple(images))
        self.products[product_id] = product
        return product

    def get_product(self, product_id: str) -> Product:
        self.calls.append(product_id)
        if not self.should_succeed:
            raise GatewayError("Catalogue unavailable")
        product = self.products.get(product_id)
        if product is None:
            raise NotFoundError(f"Product not found: {product_id}")
        return product
