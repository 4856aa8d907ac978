"""Template registry — maps NotificationType to template classes.

Each template pairs a typed payload model with a render function. Types
without a dedicated template fall back to the generic one.
"""

from pydantic import ValidationError as PydanticValidationError
from shared.errors import ValidationError

from notifications.notification.notification import NotificationType
from notifications.templates.base import RenderedMessage
from notifications.templates.generic import GenericTemplate
from notifications.templates.order_cancellation import OrderCancellationTemplate
from notifications.templates.order_confirmation import OrderConfirmationTemplate
from notifications.templates.order_shipped import OrderShippedTemplate
from notifications.templates.payment_failed import PaymentFailedTemplate
from notifications.templates.payment_success import PaymentSuccessTemplate
from notifications.templates.refund_notification import RefundNotificationTemplate
from notifications.templates.welcome import WelcomeTemplate

TEMPLATE_REGISTRY: dict[NotificationType, type] = {
    NotificationType.ORDER_CONFIRMATION: OrderConfirmationTemplate,
    NotificationType.ORDER_SHIPPED: OrderShippedTemplate,
    NotificationType.ORDER_CANCELLED: OrderCancellationTemplate,
    NotificationType.PAYMENT_SUCCESS: PaymentSuccessTemplate,
    NotificationType.PAYMENT_FAILED: PaymentFailedTemplate,
    NotificationType.PAYMENT_REFUNDED: RefundNotificationTemplate,
    NotificationType.WELCOME: WelcomeTemplate,
}


def get_template(notification_type: NotificationType):
    """Look up a template class, falling back to the generic template."""
    return TEMPLATE_REGISTRY.get(notification_type, GenericTemplate)


def render(notification_type: NotificationType, data: dict | None = None) -> RenderedMessage:
    """Validate ``data`` against the type's payload model and render it."""
    template_cls = get_template(notification_type)
    try:
        payload = template_cls.payload_model.model_validate(data or {})
    except PydanticValidationError as exc:
        errors: dict[str, list[str]] = {}
        for error in exc.errors():
            field = ".".join(str(part) for part in error["loc"]) or "template_data"
            errors.setdefault(f"template_data.{field}", []).append(error["msg"])
        raise ValidationError(errors) from exc
    return template_cls.render(payload)
