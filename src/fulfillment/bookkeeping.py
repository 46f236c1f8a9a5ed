"""Best-effort bookkeeping around a fulfillment run.

Outcome persistence, the fulfillment log sheet and operator alerts never
abort an order: every failure here is logged as a warning and dropped.
"""

from datetime import UTC, datetime
from zoneinfo import ZoneInfo

import structlog
from protean.utils.globals import current_domain

from fulfillment.config import FulfillmentConfig
from fulfillment.outcome.outcome import OrderOutcome
from intake.intake import OrderIntake
from notifications.templates import MessageType, get_template
from shared.text import validate_email

logger = structlog.get_logger(__name__)

LOG_RANGE = "Fulfillment!A2:J"


def build_log_row(
    intake: OrderIntake,
    status: str,
    message: str,
    files: list[str],
    bundle: str,
    config: FulfillmentConfig,
    now: datetime | None = None,
) -> list[str]:
    """[utc, local time, email, tier, message, files, status, fulfillment type, add-ons, bundle]"""
    now = now or datetime.now(UTC)
    local = now.astimezone(ZoneInfo(config.timezone))
    return [
        now.isoformat(),
        local.strftime("%Y-%m-%d %H:%M:%S %Z"),
        intake.email or "",
        intake.tier.value,
        message,
        "\n".join(files),
        status,
        intake.fulfillment_type.value,
        ", ".join(sorted(intake.add_ons)),
        bundle,
    ]


def append_fulfillment_log(
    log_store,
    config: FulfillmentConfig,
    row: list[str],
    range_name: str = LOG_RANGE,
) -> bool:
    if not config.sheet_id:
        logger.debug("No fulfillment sheet configured, skipping log row", range=range_name)
        return False
    try:
        log_store.append_row(config.sheet_id, range_name, row)
    except Exception as exc:
        logger.warning(
            "Failed to append fulfillment log row",
            sheet_id=config.sheet_id,
            range=range_name,
            error=str(exc),
        )
        return False
    return True


def persist_outcome(outcome: OrderOutcome) -> bool:
    try:
        current_domain.repository_for(OrderOutcome).add(outcome)
    except Exception as exc:
        logger.warning("Failed to persist order outcome", status=outcome.status, error=str(exc))
        return False
    return True


def notify_operators(intake: OrderIntake, message: str, config: FulfillmentConfig, chat, email) -> bool:
    """Alert operators by chat, falling back to email. Returns True when an alert went out."""
    content = get_template(MessageType.OPERATOR_ALERT.value).render({"email": intake.email, "message": message})

    if config.ops_chat_handle:
        try:
            result = chat.send(config.ops_chat_handle, content["chat_text"])
            if result.get("ok"):
                return True
            logger.warning("Operator chat alert not accepted", status=result.get("status"))
        except Exception as exc:
            logger.warning("Operator chat alert failed", error=str(exc))

    if validate_email(config.ops_email):
        try:
            result = email.send(config.ops_email, content["subject"], content["body"])
            if result.get("status") == "sent":
                return True
            logger.warning("Operator email alert not sent", error=result.get("error"))
        except Exception as exc:
            logger.warning("Operator email alert failed", error=str(exc))

    logger.error("Operators could not be alerted", email=intake.email, message=message)
    return False
