"""FastAPI routes for the Fulfillment domain.

The run endpoint always answers with a structured result: ``triggered``
with the artifact links, ``skipped`` with a reason, or ``failed``.
"""

import structlog
from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse
from protean.utils.globals import current_domain

from fulfillment.api.schemas import (
    OrderOutcomeResponse,
    RunFulfillmentRequest,
    RunFulfillmentResponse,
)
from fulfillment.config import load_config
from fulfillment.orchestrator import OrderReference, run_order
from fulfillment.outcome.outcome import OrderOutcome
from fulfillment.services import FulfillmentServices

logger = structlog.get_logger(__name__)

fulfillment_router = APIRouter(prefix="/fulfillments", tags=["fulfillments"])


@fulfillment_router.post("/run", response_model=RunFulfillmentResponse)
async def run_fulfillment(body: RunFulfillmentRequest):
    """Fulfill one order from a checkout session id or an intake form payload."""
    if body.session_id:
        reference = OrderReference.for_session(body.session_id)
    elif body.form:
        reference = OrderReference.for_form(body.form)
    else:
        return RunFulfillmentResponse(status="skipped", reason="missing order reference")

    try:
        config = load_config()
        record = run_order(reference, services=FulfillmentServices.from_registry(config=config), config=config)
    except Exception as exc:
        logger.error("Fulfillment run failed", session_id=body.session_id, error=str(exc))
        failed = RunFulfillmentResponse(status="failed", reason=str(exc) or type(exc).__name__)
        return JSONResponse(status_code=502, content=failed.model_dump())

    plan = record.icons.plan
    return RunFulfillmentResponse(
        status="triggered",
        email=record.intake.email,
        tier=record.intake.tier.value,
        bundle_id=plan.bundle.id,
        bundle_source=plan.source.value,
        files=record.files,
        receipts=[receipt.channel for receipt in record.receipts],
        attempts=record.attempts,
    )


@fulfillment_router.get("/outcomes", response_model=list[OrderOutcomeResponse])
async def list_outcomes(email: str = Query(...)) -> list[OrderOutcomeResponse]:
    """List recorded outcomes for a customer email."""
    outcomes = current_domain.repository_for(OrderOutcome)._dao.query.filter(email=email).all().items
    return [
        OrderOutcomeResponse(
            outcome_id=str(outcome.id),
            email=outcome.email,
            tier=outcome.tier,
            status=outcome.status,
            message=outcome.message,
            files=outcome.file_list,
            bundle_id=outcome.bundle_id,
            attempts=outcome.attempts,
            recorded_at=outcome.recorded_at.isoformat() if outcome.recorded_at else None,
        )
        for outcome in outcomes
    ]
