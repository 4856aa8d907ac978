"""HTTP client for the user service's profile lookup."""

import httpx
import structlog

from shared.errors import GatewayError, NotFoundError

from notifications.recipients.port import RecipientDirectory

logger = structlog.get_logger(__name__)


class HttpRecipientDirectory(RecipientDirectory):
    def __init__(self, base_url: str, timeout: float = 5.0, client: httpx.Client | None = None) -> None:
        self.client = client or httpx.Client(base_url=base_url, timeout=timeout)

    def email_for(self, user_id: str) -> str:
        try:
            response = self.client.get(f"/api/users/{user_id}")
        except httpx.HTTPError as exc:
            logger.error("User directory request failed", user_id=user_id, error=str(exc))
            raise GatewayError("User directory unavailable") from exc

        if response.status_code == 404:
            raise NotFoundError(f"User not found: {user_id}")
        if response.is_error:
            raise GatewayError(f"User directory returned {response.status_code}")

        email = response.json().get("email")
        if not email:
            raise NotFoundError(f"No e-mail address on file for user: {user_id}")
        return email
