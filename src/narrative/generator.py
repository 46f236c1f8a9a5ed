"""Narrative generator — ordered provider fallback with bounded retries.

Providers are tried in order, each up to ``attempts_per_provider`` times
back to back with no delay. Every call is recorded as a GenerationAttempt.
The first success returns the text with the attempts so far; when every
provider is exhausted, NarrativeGenerationError carries the full log.
"""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime

import structlog

logger = structlog.get_logger(__name__)

ATTEMPTS_PER_PROVIDER = 2


@dataclass(frozen=True)
class GenerationAttempt:
    provider: str
    ok: bool
    started_at: datetime
    finished_at: datetime
    error: str | None = None

    def to_dict(self) -> dict:
        return {
            "provider": self.provider,
            "ok": self.ok,
            "started_at": self.started_at.isoformat(),
            "finished_at": self.finished_at.isoformat(),
            "error": self.error,
        }


@dataclass(frozen=True)
class NarrativeResult:
    text: str
    provider: str
    attempts: tuple[GenerationAttempt, ...]


class NarrativeGenerationError(Exception):
    """Every provider failed; ``attempts`` holds the complete log."""

    def __init__(self, attempts: list[GenerationAttempt]):
        super().__init__("All providers failed to generate blueprint")
        self.attempts = tuple(attempts)


def _now() -> datetime:
    return datetime.now(UTC)


def generate_narrative(
    prompt: str,
    providers: list,
    attempts_per_provider: int = ATTEMPTS_PER_PROVIDER,
    clock: Callable[[], datetime] = _now,
) -> NarrativeResult:
    attempts: list[GenerationAttempt] = []
    for provider in providers:
        provider_id = getattr(provider, "provider_id", type(provider).__name__)
        for attempt_number in range(1, attempts_per_provider + 1):
            started_at = clock()
            try:
                text = provider.generate(prompt)
                if not text or not text.strip():
                    raise ValueError(f"{provider_id} returned empty text")
            except Exception as exc:
                attempts.append(GenerationAttempt(provider_id, False, started_at, clock(), str(exc)))
                logger.warning(
                    "Narrative provider attempt failed",
                    provider=provider_id,
                    attempt=attempt_number,
                    error=str(exc),
                )
                continue

            attempts.append(GenerationAttempt(provider_id, True, started_at, clock()))
            logger.info("Narrative generated", provider=provider_id, attempts=len(attempts))
            return NarrativeResult(text=text.strip(), provider=provider_id, attempts=tuple(attempts))

    logger.error("All narrative providers failed", attempts=len(attempts))
    raise NarrativeGenerationError(attempts)
