"""Order Intake — the canonical, normalized form of one purchase or request.

Every downstream component (audience profiler, bundle resolver, narrative
generator, orchestrator) reads from an OrderIntake and never from the raw
event payload. Intakes are immutable; re-normalization produces a new one.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any


class Tier(Enum):
    MINI = "mini"
    LITE = "lite"
    FULL = "full"

    @property
    def label(self) -> str:
        return self.value.capitalize()


class FulfillmentType(Enum):
    DIGITAL = "digital"
    PHYSICAL = "physical"
    CRICUT_READY = "cricut-ready"


class Cohort(Enum):
    CHILD = "child"
    TEEN = "teen"
    ADULT = "adult"
    ELDER = "elder"


class IntakeSource(Enum):
    CHECKOUT = "checkout"
    FORM = "form"
    MANUAL = "manual"


DEFAULT_TIER = Tier.LITE
DEFAULT_FULFILLMENT_TYPE = FulfillmentType.DIGITAL


@dataclass(frozen=True)
class BirthData:
    date: str | None = None
    time: str | None = None
    location: str | None = None
    timezone: str | None = None


@dataclass(frozen=True)
class CustomerProfile:
    email: str | None = None
    name: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    pronouns: str | None = None
    partner_name: str | None = None
    household: tuple[str, ...] = ()


@dataclass(frozen=True)
class OrderIntake:
    email: str | None
    tier: Tier = DEFAULT_TIER
    add_ons: frozenset[str] = frozenset()
    fulfillment_type: FulfillmentType = DEFAULT_FULFILLMENT_TYPE
    customer: CustomerProfile = field(default_factory=CustomerProfile)
    birth: BirthData = field(default_factory=BirthData)
    prefs: dict[str, Any] = field(default_factory=dict)
    cohort: Cohort | None = None
    expansions: tuple[str, ...] = ()
    missing: tuple[str, ...] = ()
    source: IntakeSource = IntakeSource.MANUAL
    session_id: str | None = None

    @property
    def display_name(self) -> str:
        return self.customer.first_name or self.customer.name or "Friend"

    def pref(self, *keys: str) -> Any:
        """Return the first non-empty preference stored under any of keys."""
        for key in keys:
            value = self.prefs.get(key)
            if value not in (None, "", [], {}):
                return value
        return None


def merge_intake(base: OrderIntake, update: OrderIntake) -> OrderIntake:
    """Overlay update on base: add-ons and preferences are unioned, scalars from update win when set."""
    customer = replace(
        base.customer,
        **{key: value for key, value in vars(update.customer).items() if value},
    )
    birth = replace(
        base.birth,
        **{key: value for key, value in vars(update.birth).items() if value},
    )
    return replace(
        base,
        email=update.email or base.email,
        tier=update.tier,
        add_ons=base.add_ons | update.add_ons,
        fulfillment_type=update.fulfillment_type,
        customer=customer,
        birth=birth,
        prefs={**base.prefs, **update.prefs},
        cohort=update.cohort or base.cohort,
        expansions=tuple(dict.fromkeys(base.expansions + update.expansions)),
        missing=update.missing,
        source=update.source,
        session_id=update.session_id or base.session_id,
    )
