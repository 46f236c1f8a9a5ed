"""Fulfillment settings read from the environment."""

import os
from dataclasses import dataclass

from intake.followup import DEFAULT_INTAKE_FORM_URL


class ConfigurationError(Exception):
    """A required fulfillment setting is missing."""


@dataclass(frozen=True)
class FulfillmentConfig:
    drive_root_id: str
    blueprint_template_id: str | None = None
    schedule_template_ids: dict[str, str | None] | None = None
    intake_form_url: str = DEFAULT_INTAKE_FORM_URL
    sheet_id: str | None = None
    ops_chat_handle: str | None = None
    ops_email: str | None = None
    sender_email: str | None = None
    sender_name: str | None = None
    timezone: str = "America/Denver"
    icon_library_id: str | None = None

    @property
    def sender(self) -> str | None:
        if not self.sender_email:
            return None
        return f"{self.sender_name} <{self.sender_email}>" if self.sender_name else self.sender_email

    def schedule_template_id(self, kind: str) -> str | None:
        return (self.schedule_template_ids or {}).get(kind)


def load_config(environ=None) -> FulfillmentConfig:
    """Build the config from environment variables.

    Raises:
        ConfigurationError: when FULFILLMENT_DRIVE_ROOT_ID is not set.
    """
    env = os.environ if environ is None else environ
    drive_root_id = env.get("FULFILLMENT_DRIVE_ROOT_ID")
    if not drive_root_id:
        raise ConfigurationError("FULFILLMENT_DRIVE_ROOT_ID is not configured")

    return FulfillmentConfig(
        drive_root_id=drive_root_id,
        blueprint_template_id=env.get("FULFILLMENT_BLUEPRINT_TEMPLATE_ID") or None,
        schedule_template_ids={
            "daily": env.get("FULFILLMENT_SCHEDULE_DAILY_TEMPLATE_ID") or None,
            "weekly": env.get("FULFILLMENT_SCHEDULE_WEEKLY_TEMPLATE_ID") or None,
            "monthly": env.get("FULFILLMENT_SCHEDULE_MONTHLY_TEMPLATE_ID") or None,
        },
        intake_form_url=env.get("FULFILLMENT_INTAKE_FALLBACK_URL") or DEFAULT_INTAKE_FORM_URL,
        sheet_id=env.get("FULFILLMENT_SHEET_ID") or None,
        ops_chat_handle=env.get("FULFILLMENT_OPS_CHAT_HANDLE") or None,
        ops_email=env.get("FULFILLMENT_OPS_EMAIL") or None,
        sender_email=env.get("FULFILLMENT_SENDER_EMAIL") or None,
        sender_name=env.get("FULFILLMENT_SENDER_NAME") or None,
        timezone=env.get("FULFILLMENT_TIMEZONE") or "America/Denver",
        icon_library_id=env.get("FULFILLMENT_ICON_LIBRARY_ID") or None,
    )
