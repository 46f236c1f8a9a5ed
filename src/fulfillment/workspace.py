"""Per-order workspace: root / Fulfillment / <customer> / <YYYY-MM-DD>.

Every level is found-or-created by name, so a retried attempt lands in the
same folders instead of creating duplicates.
"""

import re
from dataclasses import dataclass
from datetime import UTC, datetime

import structlog

from fulfillment.config import FulfillmentConfig
from fulfillment.storage.document_port import StoredFile
from intake.intake import OrderIntake

logger = structlog.get_logger(__name__)

FULFILLMENT_FOLDER = "Fulfillment"
_SEGMENT_RE = re.compile(r"[^a-z0-9@._-]+")


@dataclass(frozen=True)
class OrderWorkspace:
    root: StoredFile
    customer: StoredFile
    order: StoredFile
    started_at: datetime


def customer_segment(intake: OrderIntake) -> str:
    raw = (intake.email or intake.customer.name or "unknown").strip().lower()
    return _SEGMENT_RE.sub("_", raw) or "unknown"


def ensure_order_workspace(
    intake: OrderIntake,
    store,
    config: FulfillmentConfig,
    now: datetime | None = None,
) -> OrderWorkspace:
    now = now or datetime.now(UTC)
    root = store.ensure_folder(config.drive_root_id, FULFILLMENT_FOLDER)
    customer = store.ensure_folder(root.id, customer_segment(intake))
    order = store.ensure_folder(customer.id, now.astimezone(UTC).strftime("%Y-%m-%d"))
    logger.info("Order workspace ready", folder_id=order.id, customer=customer.name, date=order.name)
    return OrderWorkspace(root=root, customer=customer, order=order, started_at=now)
