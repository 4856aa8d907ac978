"""Recipient directory factory.

- FakeRecipientDirectory for development and testing
- HttpRecipientDirectory when USER_DIRECTORY_ADAPTER=http
"""

from shared.config import get_settings

from notifications.recipients.fake_directory import FakeRecipientDirectory
from notifications.recipients.port import RecipientDirectory

_current_directory: RecipientDirectory | None = None


def get_directory() -> RecipientDirectory:
    global _current_directory
    if _current_directory is None:
        settings = get_settings()
        if settings.user_directory_adapter == "http":
            from notifications.recipients.http_directory import HttpRecipientDirectory

            _current_directory = HttpRecipientDirectory(settings.user_service_url)
        else:
            _current_directory = FakeRecipientDirectory()
    return _current_directory


def set_directory(directory: RecipientDirectory) -> None:
    """Override the active directory (useful for tests)."""
    global _current_directory
    _current_directory = directory


def reset_directory() -> None:
    global _current_directory
    _current_directory = None
