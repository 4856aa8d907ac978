"""Payment gateway factory.

Provides get_gateway() / set_gateway() to swap implementations:
- FakeGateway for development and testing
- RazorpayGateway when GATEWAY_ADAPTER=razorpay
"""

from shared.config import get_settings

from payments.gateway.port import PaymentGateway

_current_gateway: PaymentGateway | None = None


def get_gateway() -> PaymentGateway:
    """Return the current payment gateway. Defaults to FakeGateway."""
    global _current_gateway
    if _current_gateway is None:
        settings = get_settings()
        if settings.gateway_adapter == "razorpay":
            from payments.gateway.razorpay_adapter import RazorpayGateway

            _current_gateway = RazorpayGateway(
                key_id=settings.gateway_key_id,
                key_secret=settings.gateway_key_secret,
                timeout=settings.gateway_timeout_seconds,
            )
        else:
            from payments.gateway.fake_adapter import FakeGateway

            _current_gateway = FakeGateway(key_id=settings.gateway_key_id, key_secret=settings.gateway_key_secret)
    return _current_gateway


def set_gateway(gateway: PaymentGateway) -> None:
    """Override the active payment gateway (useful for tests)."""
    global _current_gateway
    _current_gateway = gateway


def reset_gateway() -> None:
    """Reset to default gateway."""
    global _current_gateway
    _current_gateway = None
