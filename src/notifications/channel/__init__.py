"""Channel adapter registry — pluggable notification dispatch channels.

Only email has an adapter. The fake adapter is used by default; the SMTP
adapter is selected with EMAIL_ADAPTER=smtp.
"""

from shared.config import get_settings

from notifications.notification.notification import NotificationChannel

_channel_instances: dict[NotificationChannel, object] = {}

SUPPORTED_CHANNELS = frozenset({NotificationChannel.EMAIL})


def _build_email_adapter():
    settings = get_settings()
    if settings.email_adapter == "smtp":
        from notifications.channel.smtp_email import SmtpEmailAdapter

        return SmtpEmailAdapter(
            host=settings.smtp_host,
            port=settings.smtp_port,
            sender=settings.mail_from,
            username=settings.smtp_username,
            password=settings.smtp_password,
            timeout=settings.email_timeout_seconds,
        )

    from notifications.channel.fake_email import FakeEmailAdapter

    return FakeEmailAdapter()


def is_supported(channel: NotificationChannel) -> bool:
    return channel in SUPPORTED_CHANNELS


def get_channel(channel: NotificationChannel):
    """Return the configured adapter for ``channel`` (singleton per channel)."""
    if channel not in _channel_instances:
        if channel == NotificationChannel.EMAIL:
            _channel_instances[channel] = _build_email_adapter()
        else:
            raise ValueError(f"No adapter for channel: {channel.value}")
    return _channel_instances[channel]


def set_channel(channel: NotificationChannel, adapter) -> None:
    """Override the adapter for a channel (useful for tests)."""
    _channel_instances[channel] = adapter


def reset_channels() -> None:
    """Reset all channel singletons (useful for testing)."""
    _channel_instances.clear()
