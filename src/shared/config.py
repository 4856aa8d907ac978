"""Environment-driven settings shared by every bounded context.

Protean reads its own configuration (databases, brokers, event processing)
from each domain's ``domain.toml``, with the overlay picked by
``PROTEAN_ENV``. The settings here cover what Protean does not: the
key-value store, collaborator adapters and notification tuning.

Values are read once from ``os.environ`` and cached. Tests call
``reset_settings()`` after changing the environment.
"""

import os
from dataclasses import dataclass


def _env(name: str, default: str) -> str:
    return os.environ.get(name, default)


def _env_int(name: str, default: int) -> int:
    return int(os.environ.get(name, str(default)))


def _env_float(name: str, default: float) -> float:
    return float(os.environ.get(name, str(default)))


@dataclass(frozen=True)
class Settings:
    env: str = "development"

    # Key-value store (carts, idempotency records)
    redis_url: str | None = None
    kv_backend: str = "memory"

    # Ordering
    cart_ttl_days: int = 7
    catalogue_adapter: str = "fake"
    catalogue_url: str = "http://localhost:8081"
    catalogue_timeout_seconds: float = 5.0

    # Payments
    idempotency_ttl_hours: int = 24
    default_currency: str = "INR"
    gateway_adapter: str = "fake"
    gateway_key_id: str = "rzp_test_key"
    gateway_key_secret: str = "rzp_test_secret"
    gateway_timeout_seconds: float = 10.0

    # Notifications
    notification_max_retries: int = 3
    notification_sweep_interval_seconds: int = 60
    notification_sweep_batch_size: int = 100
    notification_sending_stale_seconds: int = 300
    email_adapter: str = "fake"
    email_timeout_seconds: float = 10.0
    smtp_host: str = "localhost"
    smtp_port: int = 587
    smtp_username: str | None = None
    smtp_password: str | None = None
    mail_from: str = "noreply@shopstream.local"
    user_directory_adapter: str = "fake"
    user_service_url: str = "http://localhost:8082"
    storefront_url: str = "http://localhost:3000"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            env=_env("PROTEAN_ENV", "development").lower(),
            redis_url=os.environ.get("REDIS_URL"),
            kv_backend=_env("KV_BACKEND", cls.kv_backend),
            cart_ttl_days=_env_int("CART_TTL_DAYS", cls.cart_ttl_days),
            catalogue_adapter=_env("CATALOGUE_ADAPTER", cls.catalogue_adapter),
            catalogue_url=_env("CATALOGUE_URL", cls.catalogue_url),
            catalogue_timeout_seconds=_env_float("CATALOGUE_TIMEOUT_SECONDS", cls.catalogue_timeout_seconds),
            idempotency_ttl_hours=_env_int("IDEMPOTENCY_TTL_HOURS", cls.idempotency_ttl_hours),
            default_currency=_env("DEFAULT_CURRENCY", cls.default_currency),
            gateway_adapter=_env("GATEWAY_ADAPTER", cls.gateway_adapter),
            gateway_key_id=_env("GATEWAY_KEY_ID", cls.gateway_key_id),
            gateway_key_secret=_env("GATEWAY_KEY_SECRET", cls.gateway_key_secret),
            gateway_timeout_seconds=_env_float("GATEWAY_TIMEOUT_SECONDS", cls.gateway_timeout_seconds),
            notification_max_retries=_env_int("NOTIFICATION_MAX_RETRIES", cls.notification_max_retries),
            notification_sweep_interval_seconds=_env_int(
                "NOTIFICATION_SWEEP_INTERVAL_SECONDS", cls.notification_sweep_interval_seconds
            ),
            notification_sweep_batch_size=_env_int(
                "NOTIFICATION_SWEEP_BATCH_SIZE", cls.notification_sweep_batch_size
            ),
            notification_sending_stale_seconds=_env_int(
                "NOTIFICATION_SENDING_STALE_SECONDS", cls.notification_sending_stale_seconds
            ),
            email_adapter=_env("EMAIL_ADAPTER", cls.email_adapter),
            email_timeout_seconds=_env_float("EMAIL_TIMEOUT_SECONDS", cls.email_timeout_seconds),
            smtp_host=_env("SMTP_HOST", cls.smtp_host),
            smtp_port=_env_int("SMTP_PORT", cls.smtp_port),
            smtp_username=os.environ.get("SMTP_USERNAME"),
            smtp_password=os.environ.get("SMTP_PASSWORD"),
            mail_from=_env("MAIL_FROM", cls.mail_from),
            user_directory_adapter=_env("USER_DIRECTORY_ADAPTER", cls.user_directory_adapter),
            user_service_url=_env("USER_SERVICE_URL", cls.user_service_url),
            storefront_url=_env("STOREFRONT_URL", cls.storefront_url),
        )

    @property
    def is_production(self) -> bool:
        return self.env == "production"


_settings: Settings | None = None


def get_settings() -> Settings:
    """Return the process-wide settings, reading the environment on first use."""
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings


def reset_settings() -> None:
    """Forget cached settings so the next call re-reads the environment."""
    global _settings
    _settings = None
