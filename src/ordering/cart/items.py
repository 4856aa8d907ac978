"""Cart item management — commands and handler."""

import structlog
from pydantic import BaseModel, Field

from ordering.cart.cart import Cart, CartItem, CartRepository
from ordering.catalogue import get_catalogue

logger = structlog.get_logger(__name__)


class AddToCart(BaseModel):
    user_id: str
    product_id: str
    quantity: int = Field(default=1, gt=0)


class UpdateCartQuantity(BaseModel):
    user_id: str
    product_id: str
    quantity: int


class RemoveFromCart(BaseModel):
    user_id: str
    product_id: str


class ClearCart(BaseModel):
    user_id: str


class ManageCartItemsHandler:
    def __init__(self, repository: CartRepository | None = None) -> None:
        self.repository = repository or CartRepository()

    def get_cart(self, user_id: str) -> Cart:
        return self.repository.get(user_id)

    def add_to_cart(self, command: AddToCart) -> Cart:
        # Price and name come from the catalogue now and are frozen on the line
        product = get_catalogue().get_product(command.product_id)

        cart = self.repository.get(command.user_id)
        cart.add_item(
            CartItem(
                product_id=product.id,
                product_name=product.name,
                quantity=command.quantity,
                unit_price=product.price,
                image_url=product.image_url,
            )
        )
        self.repository.save(cart)

        logger.info(
            "Item added to cart",
            user_id=command.user_id,
            product_id=command.product_id,
            item_count=cart.item_count,
        )
        return cart

    def update_cart_quantity(self, command: UpdateCartQuantity) -> Cart:
        cart = self.repository.get(command.user_id)
        cart.set_quantity(command.product_id, command.quantity)
        self.repository.save(cart)
        logger.info(
            "Cart quantity updated",
            user_id=command.user_id,
            product_id=command.product_id,
            quantity=command.quantity,
        )
        return cart

    def remove_from_cart(self, command: RemoveFromCart) -> Cart:
        cart = self.repository.get(command.user_id)
        cart.remove_item(command.product_id)
        self.repository.save(cart)
        logger.info("Item removed from cart", user_id=command.user_id, product_id=command.product_id)
        return cart

    def clear_cart(self, command: ClearCart) -> None:
        self.repository.delete(command.user_id)
        logger.info("Cart cleared", user_id=command.user_id)
