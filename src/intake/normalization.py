"""Intake normalization — heterogeneous event payloads to a canonical OrderIntake.

Two payload shapes are accepted:
    * a checkout session (line items, metadata, customer details), and
    * a flat field map submitted from the intake form.

Resolution precedence:
    tier:             SKU mapping > inline field/metadata > 'lite'
    fulfillment type: SKU mapping > keyword classification > 'digital'
    cohort:           explicit cohort field > numeric age > boolean child flags

Missing email, tier or birth date never fails normalization; it triggers
a best-effort follow-up email instead.
"""

import re
from dataclasses import replace
from typing import Any

import structlog

from intake.errors import IntakeRetrievalError
from intake.followup import DEFAULT_INTAKE_FORM_URL, request_missing_info
from intake.intake import (
    DEFAULT_FULFILLMENT_TYPE,
    DEFAULT_TIER,
    BirthData,
    Cohort,
    CustomerProfile,
    FulfillmentType,
    IntakeSource,
    OrderIntake,
    Tier,
)
from intake.session import get_session_source
from intake.sku_map import SkuMapping, load_sku_map
from shared.text import (
    as_text,
    camel_to_snake,
    read_field,
    read_flag,
    split_list,
    split_name,
    validate_email,
)

logger = structlog.get_logger(__name__)

TIER_FIELDS = ("tier", "product_tier", "preferred_tier", "package")
FULFILLMENT_FIELDS = ("fulfillment_type", "fulfillment", "delivery_format", "format")
COHORT_FIELDS = (
    "cohort",
    "client_cohort",
    "age_group",
    "agegroup",
    "client_age_group",
    "recipient_age_group",
    "tier_cohort",
    "age_range",
    "recipient_age_range",
)
AGE_FIELDS = ("age", "client_age", "recipient_age", "child_age")
CHILD_FLAG_FIELDS = ("is_child", "child_reading", "for_child")

ADD_ON_PATTERNS: tuple[tuple[str, re.Pattern], ...] = (
    ("extra-icons", re.compile(r"extra icons?|additional icons?|bonus icons?")),
    ("cricut-cut-file", re.compile(r"cut[ -]?files?|cricut cut")),
    ("child-addendum", re.compile(r"(child|kid)(ren)?'?s? addendum|child add-?on")),
    ("rush-delivery", re.compile(r"\brush\b|expedited?")),
)
ADD_ON_KEY_MARKERS = ("extra_icon", "bonus")
_FALSE_VALUES = {"false", "no", "n", "0", "none", "off"}

_FULFILLMENT_KEYWORDS: tuple[tuple[FulfillmentType, tuple[str, ...]], ...] = (
    (FulfillmentType.CRICUT_READY, ("cricut",)),
    (FulfillmentType.PHYSICAL, ("physical", "magnet", "mail")),
    (FulfillmentType.DIGITAL, ("print", "download", "digital")),
)

_COHORT_KEYWORDS: tuple[tuple[Cohort, tuple[str, ...]], ...] = (
    (Cohort.CHILD, ("child", "kid")),
    (Cohort.TEEN, ("teen", "youth")),
    (Cohort.ELDER, ("elder", "senior")),
    (Cohort.ADULT, ("adult",)),
)


# ---------------------------------------------------------------------------
# Field classification
# ---------------------------------------------------------------------------
def tier_from_text(value: str | None) -> Tier | None:
    if not value:
        return None
    lowered = value.lower()
    for tier in (Tier.MINI, Tier.LITE, Tier.FULL):
        if tier.value in lowered:
            return tier
    return None


def classify_fulfillment(value: str | None) -> FulfillmentType | None:
    if not value:
        return None
    lowered = value.lower()
    for fulfillment_type, keywords in _FULFILLMENT_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return fulfillment_type
    return None


def _cohort_from_age(value: str | None) -> Cohort | None:
    if not value:
        return None
    match = re.search(r"\d+(\.\d+)?", value)
    if match is None:
        return None
    age = float(match.group())
    if age < 13:
        return Cohort.CHILD
    if age < 18:
        return Cohort.TEEN
    if age >= 65:
        return Cohort.ELDER
    return Cohort.ADULT


def derive_cohort(prefs: dict[str, Any]) -> Cohort | None:
    explicit = read_field([prefs], *COHORT_FIELDS)
    if explicit:
        lowered = explicit.lower()
        for cohort, keywords in _COHORT_KEYWORDS:
            if any(keyword in lowered for keyword in keywords):
                return cohort

    cohort = _cohort_from_age(read_field([prefs], *AGE_FIELDS))
    if cohort is not None:
        return cohort

    if read_flag([prefs], *CHILD_FLAG_FIELDS):
        return Cohort.CHILD
    return None


def _is_enabled(value: Any) -> bool:
    text = as_text(value)
    return bool(text) and text.lower() not in _FALSE_VALUES


def scan_add_ons(values: dict[str, Any]) -> frozenset[str]:
    """Match every value (and marker key names) against the add-on keyword table."""
    found: set[str] = set()
    for key, value in values.items():
        if any(marker in key.lower() for marker in ADD_ON_KEY_MARKERS) and _is_enabled(value):
            found.add("extra-icons")
        texts = value if isinstance(value, (list, tuple)) else [value]
        for text in texts:
            lowered = (as_text(text) or "").lower()
            if not lowered:
                continue
            for add_on, pattern in ADD_ON_PATTERNS:
                if pattern.search(lowered):
                    found.add(add_on)
    return frozenset(found)


# ---------------------------------------------------------------------------
# Payload readers
# ---------------------------------------------------------------------------
def _line_items(session: dict) -> list[dict]:
    items = session.get("line_items") or []
    if isinstance(items, dict):
        items = items.get("data") or []
    return items


def _as_dict(value: Any) -> dict:
    """Expanded objects arrive as dicts, unexpanded ones as a bare id string."""
    if isinstance(value, dict):
        return value
    if isinstance(value, str) and value.strip():
        return {"id": value.strip()}
    return {}


def _line_item_keys(item: dict) -> list[str]:
    if not isinstance(item, dict):
        return []
    price = _as_dict(item.get("price"))
    product = _as_dict(price.get("product"))
    candidates = [
        price.get("id"),
        price.get("lookup_key"),
        _as_dict(price.get("metadata")).get("sku"),
        _as_dict(product.get("metadata")).get("sku"),
        item.get("sku"),
    ]
    return [key for key in (as_text(candidate) for candidate in candidates) if key]


def resolve_sku_mapping(session: dict, sku_map: dict[str, SkuMapping]) -> SkuMapping:
    """Combine the SKU mappings of every recognized line item."""
    tier = None
    fulfillment_type = None
    add_ons: set[str] = set()
    for item in _line_items(session):
        for key in _line_item_keys(item):
            mapping = sku_map.get(key)
            if mapping is None:
                continue
            tier = tier or mapping.tier
            fulfillment_type = fulfillment_type or mapping.fulfillment_type
            add_ons |= mapping.add_ons
            break
    return SkuMapping(tier=tier, add_ons=frozenset(add_ons), fulfillment_type=fulfillment_type)


def _snake_keys(values: dict[str, Any] | None) -> dict[str, Any]:
    return {camel_to_snake(key): value for key, value in (values or {}).items()}


def is_checkout_session(payload: dict) -> bool:
    return payload.get("object") == "checkout.session" or "line_items" in payload or "customer_details" in payload


def _build_intake(
    prefs: dict[str, Any],
    *,
    email: str | None,
    full_name: str | None,
    mapping: SkuMapping,
    source: IntakeSource,
    session_id: str | None,
) -> OrderIntake:
    tier = mapping.tier or tier_from_text(read_field([prefs], *TIER_FIELDS))
    tier_known = tier is not None
    tier = tier or DEFAULT_TIER

    fulfillment_type = (
        mapping.fulfillment_type
        or classify_fulfillment(read_field([prefs], *FULFILLMENT_FIELDS))
        or DEFAULT_FULFILLMENT_TYPE
    )

    first_name, last_name = split_name(full_name)
    customer = CustomerProfile(
        email=email,
        name=full_name,
        first_name=read_field([prefs], "first_name") or first_name,
        last_name=read_field([prefs], "last_name") or last_name,
        pronouns=read_field([prefs], "pronouns"),
        partner_name=read_field([prefs], "partner_name"),
        household=tuple(split_list(prefs.get("household") or prefs.get("children") or prefs.get("family_members"))),
    )
    birth = BirthData(
        date=read_field([prefs], "birthdate", "birth_date", "dob"),
        time=read_field([prefs], "birthtime", "birth_time"),
        location=read_field([prefs], "birthplace", "birth_place", "birthlocation"),
        timezone=read_field([prefs], "timezone", "birth_timezone"),
    )

    missing = []
    if not validate_email(email):
        missing.append("email")
    if not tier_known:
        missing.append("preferred tier")
    if not birth.date:
        missing.append("birth date")

    return OrderIntake(
        email=email.strip() if email else None,
        tier=tier,
        add_ons=mapping.add_ons | scan_add_ons(prefs),
        fulfillment_type=fulfillment_type,
        customer=customer,
        birth=birth,
        prefs=prefs,
        cohort=derive_cohort(prefs),
        expansions=("advanced-esoteric",) if tier is Tier.FULL else (),
        missing=tuple(missing),
        source=source,
        session_id=session_id,
    )


def _intake_from_session(session: dict, sku_map: dict[str, SkuMapping]) -> OrderIntake:
    metadata = _snake_keys(session.get("metadata"))
    details = session.get("customer_details") or {}
    email = read_field([details], "email") or read_field([session], "customer_email") or read_field([metadata], "email")
    full_name = read_field([details], "name") or read_field([metadata], "name", "full_name")
    return _build_intake(
        metadata,
        email=email,
        full_name=full_name,
        mapping=resolve_sku_mapping(session, sku_map),
        source=IntakeSource.CHECKOUT,
        session_id=session.get("id"),
    )


def _intake_from_fields(payload: dict) -> OrderIntake:
    fields = payload.get("fields") if isinstance(payload.get("fields"), dict) else payload
    prefs = _snake_keys(fields)
    email = read_field([prefs], "email", "customer_email", "email_address")
    full_name = read_field([prefs], "name", "full_name")
    if not full_name:
        parts = [read_field([prefs], "first_name"), read_field([prefs], "last_name")]
        full_name = " ".join(part for part in parts if part) or None
    return _build_intake(
        prefs,
        email=email,
        full_name=full_name,
        mapping=SkuMapping(),
        source=IntakeSource.FORM,
        session_id=None,
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------
def normalize_intake(
    payload: dict,
    *,
    sku_map: dict[str, SkuMapping] | None = None,
    send_followup: bool = True,
    form_url: str = DEFAULT_INTAKE_FORM_URL,
    email_channel=None,
) -> OrderIntake:
    """Normalize a checkout session or flat field map into an OrderIntake."""
    if is_checkout_session(payload):
        intake = _intake_from_session(payload, sku_map if sku_map is not None else load_sku_map())
    else:
        intake = _intake_from_fields(payload)

    logger.info(
        "Intake normalized",
        email=intake.email,
        tier=intake.tier.value,
        fulfillment_type=intake.fulfillment_type.value,
        add_ons=sorted(intake.add_ons),
        missing=list(intake.missing),
    )

    if send_followup and intake.missing:
        request_missing_info(intake, form_url=form_url, email_channel=email_channel)
    return intake


def normalize_session(
    session_id: str,
    *,
    session_source=None,
    **kwargs,
) -> OrderIntake:
    """Retrieve a checkout session and normalize it.

    Raises:
        IntakeRetrievalError: when the session cannot be retrieved.
    """
    source = session_source or get_session_source()
    try:
        session = source.retrieve(session_id)
    except Exception as exc:
        logger.error("Checkout session retrieval failed", session_id=session_id, error=str(exc))
        raise IntakeRetrievalError(session_id, str(exc)) from exc
    if not isinstance(session, dict):
        raise IntakeRetrievalError(session_id, "malformed session payload")

    intake = normalize_intake(session, **kwargs)
    return intake if intake.session_id else replace(intake, session_id=session_id)
