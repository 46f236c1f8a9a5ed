"""Best-effort follow-up when an intake is missing required details."""

import structlog

from intake.intake import OrderIntake
from notifications.channel import ChannelType, get_channel
from notifications.templates import MessageType, get_template
from shared.text import validate_email

logger = structlog.get_logger(__name__)

DEFAULT_INTAKE_FORM_URL = "https://messyandmagnetic.com/forms/intake"


def request_missing_info(
    intake: OrderIntake,
    form_url: str = DEFAULT_INTAKE_FORM_URL,
    email_channel=None,
) -> bool:
    """Email the customer a link to the intake form listing what is missing.

    Never raises. Returns True when the follow-up was accepted by the channel.
    """
    if not intake.missing:
        return False
    if not validate_email(intake.email):
        logger.info("Skipping missing-info follow-up, no deliverable email", missing=list(intake.missing))
        return False

    content = get_template(MessageType.MISSING_INFO.value).render(
        {"name": intake.customer.first_name, "missing": list(intake.missing), "form_url": form_url}
    )
    try:
        channel = email_channel or get_channel(ChannelType.EMAIL.value)
        result = channel.send(intake.email, content["subject"], content["body"], content["html_body"])
    except Exception as exc:
        logger.warning("Missing-info follow-up failed", email=intake.email, error=str(exc))
        return False

    if result.get("status") != "sent":
        logger.warning("Missing-info follow-up not sent", email=intake.email, error=result.get("error"))
        return False
    logger.info("Missing-info follow-up sent", email=intake.email, missing=list(intake.missing))
    return True
