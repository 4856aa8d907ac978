"""In-memory recipient directory for development and testing."""

from shared.errors import GatewayError

from notifications.recipients.port import RecipientDirectory


class FakeRecipientDirectory(RecipientDirectory):
    """Registered addresses win; anyone else gets ``<user_id>@<domain>``."""

    def __init__(self, domain: str = "example.com") -> None:
        self.domain = domain
        self.addresses: dict[str, str] = {}
        self.should_succeed: bool = True
        self.calls: list[str] = []

    def configure(self, should_succeed: bool) -> None:
        self.should_succeed = should_succeed

    def register(self, user_id: str, email: str) -> None:
        self.addresses[user_id] = email

    def email_for(self, user_id: str) -> str:
        self.calls.append(user_id)
        if not self.should_succeed:
            raise GatewayError("User directory unavailable")
        return self.addresses.get(user_id, f"{user_id}@{self.domain}")
