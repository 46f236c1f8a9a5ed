"""Schedule kit — tier-dependent daily / weekly / monthly rhythm documents.

    mini:  daily
    lite:  daily, weekly
    full:  daily, weekly, monthly
"""

from dataclasses import dataclass

import structlog

from fulfillment.config import FulfillmentConfig
from fulfillment.storage.document_port import PDF_MIME_TYPE, StoredFile
from fulfillment.workspace import OrderWorkspace
from intake.intake import OrderIntake, Tier
from shared.text import as_text, split_list

logger = structlog.get_logger(__name__)

SCHEDULE_FOLDER = "schedule"

_KINDS_BY_TIER = {
    Tier.MINI: ("daily",),
    Tier.LITE: ("daily", "weekly"),
    Tier.FULL: ("daily", "weekly", "monthly"),
}


@dataclass(frozen=True)
class ScheduleFile:
    kind: str
    document: StoredFile
    pdf: StoredFile


@dataclass(frozen=True)
class ScheduleKit:
    folder: StoredFile
    files: tuple[ScheduleFile, ...]


def schedule_kinds(tier: Tier) -> tuple[str, ...]:
    return _KINDS_BY_TIER[tier]


def _pref(intake: OrderIntake, key: str, default: str) -> str:
    items = split_list(intake.prefs.get(key))
    return ", ".join(items) if items else default


def build_schedule_content(kind: str, intake: OrderIntake) -> tuple[str, list[str]]:
    """Return (headline, lines) for one schedule document."""
    if kind == "daily":
        return f"{intake.display_name} daily rhythm", [
            f"Morning: {_pref(intake, 'morning_focus', 'Ground with one intention and a glass of water')}",
            f"Midday: {_pref(intake, 'midday_focus', 'Move your body and check the plan')}",
            f"Evening: {_pref(intake, 'evening_focus', 'Soften the lights and close the day')}",
            f"Themes: {_pref(intake, 'themes', as_text(intake.prefs.get('focus')) or 'steady rhythm')}",
        ]
    if kind == "weekly":
        return "Weekly wave", [
            f"Reset day: {_pref(intake, 'reset_day', 'Sunday')}",
            f"Share the plan via: {_pref(intake, 'share_channels', 'a family check-in')}",
            "Review the week's wins, then choose three priorities.",
        ]
    return "Monthly / seasonal cadence", [
        f"Season focus: {_pref(intake, 'season_focus', 'what wants to grow this season')}",
        f"Rituals: {_pref(intake, 'rituals', 'new moon intention, full moon release')}",
        f"Review: {_pref(intake, 'review', 'last Sunday of the month')}",
    ]


def create_schedule_kit(
    intake: OrderIntake,
    workspace: OrderWorkspace,
    store,
    config: FulfillmentConfig,
) -> ScheduleKit:
    folder = store.ensure_folder(workspace.order.id, SCHEDULE_FOLDER)
    files: list[ScheduleFile] = []
    for kind in schedule_kinds(intake.tier):
        headline, lines = build_schedule_content(kind, intake)
        title = f"{intake.display_name} - {kind.capitalize()} Schedule"
        template_id = config.schedule_template_id(kind)
        if template_id:
            document = store.copy_file(template_id, title, folder.id)
        else:
            document = store.create_document(title, folder.id)
        store.insert_text(document.id, "\n".join([headline, "", *lines]))
        pdf_bytes = store.export_document(document.id, PDF_MIME_TYPE)
        pdf = store.create_file(f"{title}.pdf", PDF_MIME_TYPE, pdf_bytes, folder.id)
        files.append(ScheduleFile(kind=kind, document=document, pdf=pdf))

    logger.info("Schedule kit created", kinds=[entry.kind for entry in files], folder_id=folder.id)
    return ScheduleKit(folder=folder, files=tuple(files))
