"""Fallback template for types without a dedicated layout."""

from pydantic import BaseModel

from notifications.templates.base import RenderedMessage


class GenericPayload(BaseModel):
    customer_name: str = "Customer"
    message: str = "You have a new notification from ShopStream."


class GenericTemplate:
    notification_type = None
    payload_model = GenericPayload

    @staticmethod
    def render(payload: GenericPayload) -> RenderedMessage:
        return RenderedMessage(
            subject="Notification from ShopStream",
            content=f"Hi {payload.customer_name},\n\n{payload.message}\n\nThe ShopStream Team",
        )
