"""Read-only order queries."""

from dataclasses import dataclass
from typing import Generic, TypeVar

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain
from shared.errors import NotFoundError

from ordering.order.order import Order, OrderStatus

T = TypeVar("T")


@dataclass(frozen=True)
class Page(Generic[T]):
    items: list[T]
    page: int
    size: int
    total: int

    @property
    def pages(self) -> int:
        return (self.total + self.size - 1) // self.size if self.size else 0


def _paged(page: int, size: int, **filters) -> Page[Order]:
    result = (
        current_domain.repository_for(Order)
        ._dao.query.filter(**filters)
        .order_by("-created_at")
        .offset(page * size)
        .limit(size)
        .all()
    )
    return Page(items=list(result.items), page=page, size=size, total=result.total)


def get_order(order_id: str) -> Order:
    try:
        return current_domain.repository_for(Order).get(order_id)
    except ObjectNotFoundError:
        raise NotFoundError(f"Order not found: {order_id}") from None


def get_order_for_user(order_id: str, user_id: str) -> Order:
    order = get_order(order_id)
    if str(order.user_id) != str(user_id):
        raise NotFoundError(f"Order not found: {order_id}")
    return order


def list_orders_for_user(user_id: str, page: int = 0, size: int = 10) -> Page[Order]:
    return _paged(page, size, user_id=user_id)


def list_orders_by_status(status: OrderStatus, page: int = 0, size: int = 10) -> Page[Order]:
    return _paged(page, size, status=status.value)
