"""Fulfillment bounded context — turning one order into delivered artifacts.

Hosts the orchestrator that sequences workspace setup, narrative,
icon bundle, schedule kit and delivery, and the Order Outcome aggregate
that records how each run ended.
"""

from protean.domain import Domain

from fulfillment.utils.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

fulfillment = Domain(name="fulfillment")
