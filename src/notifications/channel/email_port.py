"""Email channel port — abstract interface for transactional email delivery."""

from abc import ABC, abstractmethod


class EmailPort(ABC):
    """Abstract interface for email delivery adapters."""

    @abstractmethod
    def send(
        self,
        to: str,
        subject: str,
        body: str,
        html_body: str | None = None,
        sender: str | None = None,
    ) -> dict:
        """Deliver one email to a customer or operator.

        Args:
            sender: "Name <address>" override; adapters fall back to their configured sender.

        Returns:
            dict with keys: message_id, status ("sent" or "failed"), error (optional)
        """
        ...
