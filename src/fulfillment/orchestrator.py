"""Fulfillment orchestrator — one order from reference to delivered artifacts.

State Machine:
    FIRST_ATTEMPT → SUCCESS
    FIRST_ATTEMPT → RETRY_ATTEMPT → {SUCCESS, FAILURE}

Each attempt runs the whole pipeline:
    workspace → narrative → icon bundle → schedule kit → delivery

A failed first attempt re-normalizes the intake from the order reference
before retrying. Individual steps are never retried on their own; retries
are safe because every folder is found-or-created by name, and the dated
order folder comes from the time the run started. After the second
failure one failure outcome is recorded, operators are alerted and the
last error is re-raised.
"""

from dataclasses import dataclass, replace
from datetime import UTC, datetime
from enum import Enum

import structlog

from audience.profiler import build_personalization_context
from fulfillment.blueprint import BlueprintArtifacts, create_blueprint
from fulfillment.bookkeeping import (
    append_fulfillment_log,
    build_log_row,
    notify_operators,
    persist_outcome,
)
from fulfillment.bundle_archive import archive_generated_bundle
from fulfillment.config import FulfillmentConfig, load_config
from fulfillment.icons import IconBundleArtifacts, materialize_icon_bundle
from fulfillment.outcome.outcome import OrderOutcome, OutcomeStatus
from fulfillment.schedule import ScheduleKit, create_schedule_kit
from fulfillment.services import FulfillmentServices
from fulfillment.workspace import OrderWorkspace, ensure_order_workspace
from intake.intake import DEFAULT_FULFILLMENT_TYPE, OrderIntake
from intake.normalization import normalize_intake, normalize_session
from notifications.delivery import ArtifactLink, DeliveryReceipt, dispatch_delivery

logger = structlog.get_logger(__name__)


class AttemptState(Enum):
    FIRST_ATTEMPT = "first_attempt"
    RETRY_ATTEMPT = "retry_attempt"
    SUCCESS = "success"
    FAILURE = "failure"


# (state, attempt succeeded) → next state
_TRANSITIONS = {
    (AttemptState.FIRST_ATTEMPT, True): AttemptState.SUCCESS,
    (AttemptState.FIRST_ATTEMPT, False): AttemptState.RETRY_ATTEMPT,
    (AttemptState.RETRY_ATTEMPT, True): AttemptState.SUCCESS,
    (AttemptState.RETRY_ATTEMPT, False): AttemptState.FAILURE,
}

_RUNNING_STATES = {AttemptState.FIRST_ATTEMPT, AttemptState.RETRY_ATTEMPT}


@dataclass(frozen=True)
class OrderReference:
    """Where an order's intake comes from: a checkout session, a form payload or a prebuilt intake."""

    session_id: str | None = None
    form: dict | None = None
    intake: OrderIntake | None = None

    @classmethod
    def for_session(cls, session_id: str) -> "OrderReference":
        return cls(session_id=session_id)

    @classmethod
    def for_form(cls, form: dict) -> "OrderReference":
        return cls(form=form)

    @classmethod
    def for_intake(cls, intake: OrderIntake) -> "OrderReference":
        return cls(intake=intake)


@dataclass(frozen=True)
class FulfillmentRecord:
    intake: OrderIntake
    workspace: OrderWorkspace
    blueprint: BlueprintArtifacts
    icons: IconBundleArtifacts
    schedule: ScheduleKit
    links: tuple[ArtifactLink, ...]
    receipts: tuple[DeliveryReceipt, ...]
    attempts: int = 1
    outcome_id: str | None = None

    @property
    def files(self) -> list[str]:
        return [f"{link.label}: {link.url}" for link in self.links]


# ---------------------------------------------------------------------------
# Intake resolution
# ---------------------------------------------------------------------------
def resolve_intake(
    reference: OrderReference,
    services: FulfillmentServices,
    config: FulfillmentConfig,
    send_followup: bool = True,
) -> OrderIntake:
    options = {
        "sku_map": services.sku_map,
        "send_followup": send_followup,
        "form_url": config.intake_form_url,
        "email_channel": services.email,
    }
    if reference.intake is not None:
        intake = reference.intake
    elif reference.session_id:
        intake = normalize_session(reference.session_id, session_source=services.session_source, **options)
    elif reference.form is not None:
        intake = normalize_intake(reference.form, **options)
    else:
        raise ValueError("Order reference carries no session, form or intake")

    if intake.fulfillment_type is None:
        intake = replace(intake, fulfillment_type=DEFAULT_FULFILLMENT_TYPE)
    return intake


def _renormalize(
    reference: OrderReference,
    current: OrderIntake,
    services: FulfillmentServices,
    config: FulfillmentConfig,
) -> OrderIntake:
    try:
        return resolve_intake(reference, services, config, send_followup=False)
    except Exception as exc:
        logger.warning("Re-normalization failed, retrying with previous intake", error=str(exc))
        return current


# ---------------------------------------------------------------------------
# One attempt
# ---------------------------------------------------------------------------
def collect_links(
    blueprint: BlueprintArtifacts,
    icons: IconBundleArtifacts,
    schedule: ScheduleKit,
) -> tuple[ArtifactLink, ...]:
    return (
        ArtifactLink("Blueprint document", blueprint.document.url),
        ArtifactLink("Blueprint PDF", blueprint.pdf.url),
        ArtifactLink("Schedule kit", schedule.folder.url),
        ArtifactLink("Icon bundle", icons.folder.url),
    )


def run_attempt(
    intake: OrderIntake,
    services: FulfillmentServices,
    config: FulfillmentConfig,
    now: datetime | None = None,
) -> FulfillmentRecord:
    store = services.document_store
    workspace = ensure_order_workspace(intake, store, config, now=now)
    blueprint = create_blueprint(intake, workspace, store, services.narrative_providers, config)
    context = build_personalization_context(intake, services.persona_overrides)
    icons = materialize_icon_bundle(
        intake,
        workspace,
        store,
        context,
        services.catalog,
        generator=services.bundle_generator,
        library=services.icon_library,
        bundle_library=services.bundle_library,
    )
    archive_generated_bundle(icons, store, services.log_store, config)
    schedule = create_schedule_kit(intake, workspace, store, config)
    links = collect_links(blueprint, icons, schedule)
    receipts = dispatch_delivery(
        intake,
        list(links),
        chat=services.chat,
        email=services.email,
        sender=config.sender,
    )
    return FulfillmentRecord(
        intake=intake,
        workspace=workspace,
        blueprint=blueprint,
        icons=icons,
        schedule=schedule,
        links=links,
        receipts=tuple(receipts),
    )


# ---------------------------------------------------------------------------
# Outcome bookkeeping
# ---------------------------------------------------------------------------
def _record_success(
    record: FulfillmentRecord,
    attempts: int,
    services: FulfillmentServices,
    config: FulfillmentConfig,
) -> FulfillmentRecord:
    intake = record.intake
    plan = record.icons.plan
    outcome = OrderOutcome.record_success(
        email=intake.email,
        tier=intake.tier.value,
        files=record.files,
        fulfillment_type=intake.fulfillment_type.value,
        add_ons=list(intake.add_ons),
        bundle_id=plan.bundle.id,
        bundle_source=plan.source.value,
        attempts=attempts,
        metadata={
            "bundle_fulfillment": plan.bundle.name,
            "fulfillment_type": intake.fulfillment_type.value,
            "add_ons": sorted(intake.add_ons),
            "narrative_provider": record.blueprint.provider,
            "receipts": [receipt.channel for receipt in record.receipts],
        },
    )
    persist_outcome(outcome)
    append_fulfillment_log(
        services.log_store,
        config,
        build_log_row(intake, OutcomeStatus.SUCCESS.value, "Delivered", record.files, plan.bundle.name, config),
    )
    return replace(record, attempts=attempts, outcome_id=str(outcome.id))


def _record_failure(
    intake: OrderIntake,
    error: Exception,
    attempts: int,
    services: FulfillmentServices,
    config: FulfillmentConfig,
) -> None:
    message = str(error) or type(error).__name__
    outcome = OrderOutcome.record_failure(
        email=intake.email,
        tier=intake.tier.value,
        message=message,
        fulfillment_type=intake.fulfillment_type.value,
        add_ons=list(intake.add_ons),
        attempts=attempts,
    )
    persist_outcome(outcome)
    append_fulfillment_log(
        services.log_store,
        config,
        build_log_row(intake, OutcomeStatus.ERROR.value, message, [], "", config),
    )
    notify_operators(intake, message, config, services.chat, services.email)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------
def run_order(
    reference: OrderReference,
    services: FulfillmentServices | None = None,
    config: FulfillmentConfig | None = None,
) -> FulfillmentRecord:
    """Fulfill one order, retrying the whole pipeline once.

    Raises:
        IntakeRetrievalError: when the checkout session cannot be retrieved.
        Exception: the last attempt's error once both attempts have failed.
    """
    config = config or load_config()
    services = services or FulfillmentServices.from_registry(config=config)
    intake = resolve_intake(reference, services, config)
    started_at = datetime.now(UTC)

    state = AttemptState.FIRST_ATTEMPT
    attempts = 0
    last_error: Exception | None = None

    with structlog.contextvars.bound_contextvars(order_email=intake.email):
        while state in _RUNNING_STATES:
            attempts += 1
            logger.info("Fulfillment attempt started", attempt=attempts, state=state.value, tier=intake.tier.value)
            try:
                record = run_attempt(intake, services, config, now=started_at)
            except Exception as exc:
                last_error = exc
                logger.warning("Fulfillment attempt failed", attempt=attempts, error=str(exc), exc_info=True)
                state = _TRANSITIONS[(state, False)]
                if state is AttemptState.RETRY_ATTEMPT:
                    intake = _renormalize(reference, intake, services, config)
                continue

            state = _TRANSITIONS[(state, True)]
            logger.info("Fulfillment succeeded", attempts=attempts, bundle_id=record.icons.plan.bundle.id)
            return _record_success(record, attempts, services, config)

        logger.error("Fulfillment failed", attempts=attempts, error=str(last_error))
        _record_failure(intake, last_error, attempts, services, config)
        raise last_error
