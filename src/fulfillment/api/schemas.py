"""Pydantic API schemas for the Fulfillment domain.

These are the external API contracts. The routes translate them into an
OrderReference for the orchestrator and back into a structured result.
"""

from typing import Literal

from pydantic import BaseModel


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------
class RunFulfillmentRequest(BaseModel):
    session_id: str | None = None
    form: dict | None = None


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------
class RunFulfillmentResponse(BaseModel):
    status: Literal["triggered", "skipped", "failed"]
    reason: str | None = None
    email: str | None = None
    tier: str | None = None
    bundle_id: str | None = None
    bundle_source: str | None = None
    files: list[str] = []
    receipts: list[str] = []
    attempts: int = 0


class OrderOutcomeResponse(BaseModel):
    outcome_id: str
    email: str | None = None
    tier: str
    status: str
    message: str | None = None
    files: list[str] = []
    bundle_id: str | None = None
    attempts: int
    recorded_at: str | None = None
