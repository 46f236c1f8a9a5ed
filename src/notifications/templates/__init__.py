"""Template registry — maps message types to template classes.

Each template renders subject, plain-text body and (where relevant)
HTML and chat variants from a context dict.
"""

from enum import Enum

from notifications.templates.delivery_ready import DeliveryReadyTemplate
from notifications.templates.missing_info import MissingInfoTemplate
from notifications.templates.operator_alert import OperatorAlertTemplate


class MessageType(Enum):
    DELIVERY_READY = "delivery_ready"
    MISSING_INFO = "missing_info"
    OPERATOR_ALERT = "operator_alert"


TEMPLATE_REGISTRY: dict[str, type] = {
    MessageType.DELIVERY_READY.value: DeliveryReadyTemplate,
    MessageType.MISSING_INFO.value: MissingInfoTemplate,
    MessageType.OPERATOR_ALERT.value: OperatorAlertTemplate,
}


def get_template(message_type: str):
    """Look up a template class by message type string."""
    template_cls = TEMPLATE_REGISTRY.get(message_type)
    if template_cls is None:
        raise ValueError(f"No template registered for message type: {message_type}")
    return template_cls
