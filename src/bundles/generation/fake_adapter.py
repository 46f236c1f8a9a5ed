"""Fake bundle generator — deterministic bundles built from the request summary."""

import json

from bundles.generation.port import BundleGeneratorPort
from shared.text import slugify


class FakeBundleGenerator(BundleGeneratorPort):
    """Generator that answers from the request summary, or with a configured response."""

    def __init__(self):
        self.requests: list[dict] = []
        self.should_succeed = True
        self.failure_reason = "Bundle generator unavailable"
        self.response: dict | None = None

    def configure(
        self,
        should_succeed: bool = True,
        failure_reason: str = "Bundle generator unavailable",
        response: dict | None = None,
    ):
        """Configure the fake generator behavior for testing."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason
        self.response = response

    def generate(self, system_prompt: str, user_prompt: str) -> dict:
        self.requests.append({"system_prompt": system_prompt, "user_prompt": user_prompt})
        if not self.should_succeed:
            raise RuntimeError(self.failure_reason)
        if self.response is not None:
            return self.response

        summary = json.loads(user_prompt.split("\n", 1)[0])
        keywords = summary.get("keywords") or ["daily rhythm"]
        return {
            "name": f"{keywords[0].title()} Rhythm",
            "category": summary.get("category") or "Household",
            "description": "Custom icons generated for this household.",
            "keywords": keywords,
            "icons": [
                {
                    "slug": slugify(keyword),
                    "label": keyword.title(),
                    "description": f"A cue for {keyword}.",
                    "tags": summary.get("persona_tags") or [],
                    "tone": "soft",
                }
                for keyword in keywords[:6]
            ],
        }

    def reset(self):
        """Forget recorded requests and restore default behavior."""
        self.requests.clear()
        self.should_succeed = True
        self.failure_reason = "Bundle generator unavailable"
        self.response = None
