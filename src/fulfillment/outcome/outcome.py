"""Order Outcome aggregate — the persisted summary of one orchestrator run.

Exactly one outcome is recorded per run: ``record_success`` after the
first attempt that completes, or ``record_failure`` once every attempt
has failed. Outcomes are never mutated afterwards.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Integer, String, Text

from fulfillment.domain import fulfillment
from fulfillment.outcome.events import OrderFulfilled, OrderFulfillmentFailed


class OutcomeStatus(Enum):
    SUCCESS = "success"
    ERROR = "error"


@fulfillment.aggregate
class OrderOutcome:
    email = String(max_length=255)
    tier = String(max_length=20, required=True)
    status = String(choices=OutcomeStatus, required=True)
    message = Text()
    files = Text(default="[]")  # JSON list of "label: url"
    fulfillment_type = String(max_length=50)
    add_ons = Text(default="[]")  # JSON list
    bundle_id = String(max_length=255)
    bundle_source = String(max_length=50)
    attempts = Integer(min_value=1, default=1)
    metadata = Text(default="{}")  # JSON object
    recorded_at = DateTime()

    @invariant.post
    def failed_outcomes_have_no_files(self):
        if self.status == OutcomeStatus.ERROR.value and self.file_list:
            raise ValidationError({"files": ["A failed outcome cannot list artifacts"]})

    @property
    def file_list(self) -> list[str]:
        return json.loads(self.files) if self.files else []

    @property
    def add_on_list(self) -> list[str]:
        return json.loads(self.add_ons) if self.add_ons else []

    @property
    def metadata_dict(self) -> dict:
        return json.loads(self.metadata) if self.metadata else {}

    @classmethod
    def record_success(
        cls,
        email: str | None,
        tier: str,
        files: list[str],
        fulfillment_type: str,
        add_ons: list[str],
        bundle_id: str,
        bundle_source: str,
        attempts: int,
        metadata: dict | None = None,
    ):
        now = datetime.now(UTC)
        outcome = cls(
            email=email,
            tier=tier,
            status=OutcomeStatus.SUCCESS.value,
            message="Delivered",
            files=json.dumps(files),
            fulfillment_type=fulfillment_type,
            add_ons=json.dumps(sorted(add_ons)),
            bundle_id=bundle_id,
            bundle_source=bundle_source,
            attempts=attempts,
            metadata=json.dumps(metadata or {}),
            recorded_at=now,
        )
        outcome.raise_(
            OrderFulfilled(
                outcome_id=str(outcome.id),
                email=email or "",
                tier=tier,
                bundle_id=bundle_id,
                files=outcome.files,
                attempts=attempts,
                recorded_at=now,
            )
        )
        return outcome

    @classmethod
    def record_failure(
        cls,
        email: str | None,
        tier: str,
        message: str,
        fulfillment_type: str,
        add_ons: list[str],
        attempts: int,
    ):
        now = datetime.now(UTC)
        outcome = cls(
            email=email,
            tier=tier,
            status=OutcomeStatus.ERROR.value,
            message=message,
            files="[]",
            fulfillment_type=fulfillment_type,
            add_ons=json.dumps(sorted(add_ons)),
            attempts=attempts,
            recorded_at=now,
        )
        outcome.raise_(
            OrderFulfillmentFailed(
                outcome_id=str(outcome.id),
                email=email or "",
                tier=tier,
                message=message,
                attempts=attempts,
                recorded_at=now,
            )
        )
        return outcome
