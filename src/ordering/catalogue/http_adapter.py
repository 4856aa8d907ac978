"""HTTP client for the product catalogue service."""

from decimal import Decimal

import httpx
import structlog

from shared.errors import GatewayError, NotFoundError

from ordering.catalogue.port import Catalogue, Product

logger = structlog.get_logger(__name__)


class HttpCatalogue(Catalogue):
    def __init__(self, base_url: str, timeout: float = 5.0, client: httpx.Client | None = None) -> None:
        self.client = client or httpx.Client(base_url=base_url, timeout=timeout)

    def get_product(self, product_id: str) -> Product:
        try:
            response = self.client.get(f"/api/products/{product_id}")
        except httpx.HTTPError as exc:
            logger.error("Catalogue request failed", product_id=product_id, error=str(exc))
            raise GatewayError("Catalogue unavailable") from exc

        if response.status_code == 404:
            raise NotFoundError(f"Product not found: {product_id}")
        if response.is_error:
            logger.error("Catalogue returned an error", product_id=product_id, status=response.status_code)
            raise GatewayError(f"Catalogue returned {response.status_code}")

        data = response.json()
        return Product(
            id=str(data["id"]),
            name=data["name"],
            price=Decimal(str(data["price"])),
            stock=int(data.get("stock") or 0),
            images=tuple(data.get("images") or ()),
        )
