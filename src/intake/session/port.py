"""Session source port — abstract interface for retrieving checkout sessions.

The normalizer programs against the port; the adapter that talks to the
payment provider is swapped via configuration.
"""

from abc import ABC, abstractmethod


class SessionSourcePort(ABC):
    """Abstract interface for checkout session sources."""

    @abstractmethod
    def retrieve(self, session_id: str) -> dict:
        """Retrieve a checkout session with its line items expanded.

        Returns:
            dict with keys: id, customer_details, customer_email, metadata, line_items

        Raises:
            Any transport error; callers decide whether to propagate it.
        """
        ...
