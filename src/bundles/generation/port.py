"""Bundle generator port — abstract interface for structured bundle synthesis."""

from abc import ABC, abstractmethod


class BundleGeneratorPort(ABC):
    """Abstract interface for adapters that synthesize an icon bundle."""

    @abstractmethod
    def generate(self, system_prompt: str, user_prompt: str) -> dict:
        """Ask the model for a bundle and return the parsed JSON record.

        Returns:
            dict with keys: name, category, description, icons (list of
            {slug, label, description, tags, tone}), keywords
        """
        ...
