"""Fake narrative provider — scripted successes and failures for testing."""

from narrative.provider.port import NarrativeProviderPort


class FakeNarrativeProvider(NarrativeProviderPort):
    """Provider that answers with canned text, or fails a configured number of times."""

    def __init__(self, provider_id: str = "fake", text: str | None = None):
        self.provider_id = provider_id
        self.prompts: list[str] = []
        self.text = text
        self.should_succeed = True
        self.failures_before_success = 0
        self.failure_reason = f"{provider_id} unavailable"

    def configure(
        self,
        should_succeed: bool = True,
        failures_before_success: int = 0,
        failure_reason: str | None = None,
        text: str | None = None,
    ):
        """Configure the fake provider behavior for testing."""
        self.should_succeed = should_succeed
        self.failures_before_success = failures_before_success
        self.failure_reason = failure_reason or f"{self.provider_id} unavailable"
        if text is not None:
            self.text = text

    def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self.should_succeed or len(self.prompts) <= self.failures_before_success:
            raise RuntimeError(self.failure_reason)
        if self.text is not None:
            return self.text
        first_line = prompt.strip().splitlines()[0] if prompt.strip() else "your rhythm"
        return (
            f"{first_line}\n\n"
            "Your blueprint opens with the rhythm you already carry. Mornings ask for one grounding "
            "ritual, afternoons for movement, and evenings for softness. Each season invites a reset."
        )

    def reset(self):
        """Forget recorded prompts and restore default behavior."""
        self.prompts.clear()
        self.should_succeed = True
        self.failures_before_success = 0
        self.failure_reason = f"{self.provider_id} unavailable"
