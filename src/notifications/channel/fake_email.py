"""Fake email adapter — records sent emails for testing."""

from uuid import uuid4

from notifications.channel.email_port import EmailPort


class FakeEmailAdapter(EmailPort):
    """Email adapter that records messages in memory for test assertions."""

    def __init__(self) -> None:
        self.sent_emails: list[dict] = []
        self.attempts: int = 0
        self.should_succeed = True
        self.failure_reason = "Email delivery failed"
        self.raises: Exception | None = None

    def configure(
        self,
        should_succeed: bool = True,
        failure_reason: str = "Email delivery failed",
        raises: Exception | None = None,
    ) -> None:
        """Configure the fake adapter behavior for testing.

        ``raises`` makes every send raise that exception instead of returning
        a result, e.g. ``TimeoutError()`` to simulate a hung mail server.
        """
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason
        self.raises = raises

    def send(self, to: str, subject: str, body: str) -> dict:
        self.attempts += 1
        if self.raises is not None:
            raise self.raises
        if not self.should_succeed:
            return {"message_id": None, "status": "failed", "error": self.failure_reason}

        message_id = f"email-{uuid4().hex[:12]}"
        self.sent_emails.append({"message_id": message_id, "to": to, "subject": subject, "body": body})
        return {"message_id": message_id, "status": "sent"}

    def reset(self) -> None:
        """Clear sent emails (useful between tests)."""
        self.sent_emails.clear()
        self.attempts = 0
        self.configure()
