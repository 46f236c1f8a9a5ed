"""Delivery dispatcher — sends the finished artifact links to the customer.

Channel order:
    1. Chat direct message, only when a contact handle and at least one link exist.
    2. Email with the same links, only when the chat attempt did not report success.

Delivery never raises. Transport errors are logged and the receipts
gathered so far are returned (possibly none).
"""

from dataclasses import dataclass

import structlog

from intake.intake import OrderIntake
from notifications.channel import ChannelType, get_channel
from notifications.templates import MessageType, get_template
from shared.text import as_text, validate_email

logger = structlog.get_logger(__name__)

CONTACT_HANDLE_KEYS = ("telegram_chat_id", "telegram_handle", "telegram", "chat_handle", "contact_handle")


@dataclass(frozen=True)
class ArtifactLink:
    label: str
    url: str


@dataclass(frozen=True)
class DeliveryReceipt:
    channel: str
    recipient: str
    message_id: str | None
    status: str


def resolve_contact_handle(intake: OrderIntake) -> str | None:
    for key in CONTACT_HANDLE_KEYS:
        handle = as_text(intake.prefs.get(key))
        if handle:
            return handle
    return None


def _send_chat(chat, handle: str, text: str) -> DeliveryReceipt | None:
    try:
        result = chat.send(handle, text)
    except Exception as exc:
        logger.warning("Chat delivery raised", handle=handle, error=str(exc))
        return None
    if not result.get("ok"):
        logger.warning("Chat delivery not accepted", handle=handle, status=result.get("status"))
        return None
    return DeliveryReceipt(
        channel=ChannelType.CHAT.value,
        recipient=handle,
        message_id=result.get("message_id"),
        status=result.get("status", "sent"),
    )


def _send_email(email, to: str, content: dict, sender: str | None) -> DeliveryReceipt | None:
    try:
        result = email.send(to, content["subject"], content["body"], content.get("html_body"), sender=sender)
    except Exception as exc:
        logger.warning("Email delivery raised", to=to, error=str(exc))
        return None
    if result.get("status") != "sent":
        logger.warning("Email delivery failed", to=to, error=result.get("error"))
        return None
    return DeliveryReceipt(
        channel=ChannelType.EMAIL.value,
        recipient=to,
        message_id=result.get("message_id"),
        status=result["status"],
    )


def dispatch_delivery(
    intake: OrderIntake,
    links: list[ArtifactLink],
    *,
    handle: str | None = None,
    chat=None,
    email=None,
    sender: str | None = None,
) -> list[DeliveryReceipt]:
    """Deliver artifact links to the customer and return the receipts."""
    links = [link for link in links if link.url]
    handle = handle or resolve_contact_handle(intake)
    chat = chat or get_channel(ChannelType.CHAT.value)
    email = email or get_channel(ChannelType.EMAIL.value)

    content = get_template(MessageType.DELIVERY_READY.value).render(
        {
            "name": intake.display_name,
            "tier_label": intake.tier.label,
            "links": [{"label": link.label, "url": link.url} for link in links],
        }
    )

    receipts: list[DeliveryReceipt] = []
    if handle and links:
        receipt = _send_chat(chat, handle, content["chat_text"])
        if receipt is not None:
            receipts.append(receipt)
            logger.info("Delivery sent via chat", handle=handle, links=len(links))
            return receipts

    if validate_email(intake.email):
        receipt = _send_email(email, intake.email.strip(), content, sender)
        if receipt is not None:
            receipts.append(receipt)
            logger.info("Delivery sent via email", to=receipt.recipient, links=len(links))
    else:
        logger.warning("No deliverable email address", email=intake.email)

    return receipts
