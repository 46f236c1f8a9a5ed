"""Narrative provider port — abstract interface for text generation providers."""

from abc import ABC, abstractmethod


class NarrativeProviderPort(ABC):
    """Abstract interface for a blueprint text provider."""

    provider_id: str = "provider"

    @abstractmethod
    def generate(self, prompt: str) -> str:
        """Generate blueprint text for the prompt.

        Raises:
            Any error on failure; the generator records it and moves on.
        """
        ...
