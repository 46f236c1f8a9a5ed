"""Chat channel port — abstract interface for direct messages to a contact handle."""

from abc import ABC, abstractmethod


class ChatPort(ABC):
    """Abstract interface for chat (direct message) adapters."""

    @abstractmethod
    def send(self, handle: str, text: str) -> dict:
        """Send a direct message to a chat handle or chat id.

        Returns:
            dict with keys: ok (bool), status ("sent" or "failed"), message_id, error (optional)
        """
        ...
