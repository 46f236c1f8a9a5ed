"""Order outcome events — immutable facts about how a fulfillment run ended."""

from protean.fields import DateTime, Identifier, Integer, String, Text

from fulfillment.domain import fulfillment


@fulfillment.event(part_of="OrderOutcome")
class OrderFulfilled:
    """Every artifact for an order was created and delivery was dispatched."""

    __version__ = 1

    outcome_id = Identifier(required=True)
    email = String()
    tier = String(required=True)
    bundle_id = String()
    files = Text(required=True)  # JSON list of "label: url"
    attempts = Integer(required=True)
    recorded_at = DateTime(required=True)


@fulfillment.event(part_of="OrderOutcome")
class OrderFulfillmentFailed:
    """An order exhausted its attempts without being fulfilled."""

    __version__ = 1

    outcome_id = Identifier(required=True)
    email = String()
    tier = String(required=True)
    message = Text(required=True)
    attempts = Integer(required=True)
    recorded_at = DateTime(required=True)
