"""Welcome notification template — sent when a customer registers."""

from pydantic import BaseModel

from notifications.notification.notification import NotificationType
from notifications.templates.base import RenderedMessage


class WelcomePayload(BaseModel):
    customer_name: str = "there"


class WelcomeTemplate:
    notification_type = NotificationType.WELCOME
    payload_model = WelcomePayload

    @staticmethod
    def render(payload: WelcomePayload) -> RenderedMessage:
        return RenderedMessage(
            subject="Welcome to ShopStream!",
            content=(
                f"Hi {payload.customer_name},\n\n"
                "Thank you for joining ShopStream! We're excited to have you.\n\n"
                "Start exploring our catalogue and find great deals.\n\n"
                "Happy shopping!\n"
                "The ShopStream Team"
            ),
        )
