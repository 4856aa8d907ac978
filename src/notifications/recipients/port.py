"""Recipient directory port — resolves a user's contact address."""

from abc import ABC, abstractmethod


class RecipientDirectory(ABC):
    @abstractmethod
    def email_for(self, user_id: str) -> str:
        """Return the e-mail address of ``user_id``.

        Raises NotFoundError for unknown users and GatewayError when the
        directory cannot be reached.
        """
