"""Blueprint materialization — narrative text into a document and its PDF."""

from dataclasses import dataclass

import structlog

from fulfillment.config import FulfillmentConfig
from fulfillment.storage.document_port import PDF_MIME_TYPE, StoredFile
from fulfillment.workspace import OrderWorkspace
from intake.intake import OrderIntake
from narrative.generator import GenerationAttempt, generate_narrative
from narrative.prompt import build_blueprint_prompt
from shared.text import summarize

logger = structlog.get_logger(__name__)

BLUEPRINT_FOLDER = "blueprint"
SUMMARY_LENGTH = 240


@dataclass(frozen=True)
class BlueprintArtifacts:
    folder: StoredFile
    document: StoredFile
    pdf: StoredFile
    story: str
    summary: str
    provider: str
    attempts: tuple[GenerationAttempt, ...]


def create_blueprint(
    intake: OrderIntake,
    workspace: OrderWorkspace,
    store,
    providers: list,
    config: FulfillmentConfig,
) -> BlueprintArtifacts:
    """Generate the narrative, then write it to a document and export a PDF.

    Raises:
        NarrativeGenerationError: when every provider fails.
    """
    narrative = generate_narrative(build_blueprint_prompt(intake), providers)

    folder = store.ensure_folder(workspace.order.id, BLUEPRINT_FOLDER)
    title = f"{intake.customer.name or intake.display_name} - Blueprint"
    if config.blueprint_template_id:
        document = store.copy_file(config.blueprint_template_id, title, folder.id)
    else:
        document = store.create_document(title, folder.id)
    store.insert_text(document.id, narrative.text)

    pdf_bytes = store.export_document(document.id, PDF_MIME_TYPE)
    pdf = store.create_file(f"{title}.pdf", PDF_MIME_TYPE, pdf_bytes, folder.id)
    logger.info("Blueprint created", document_id=document.id, pdf_id=pdf.id, provider=narrative.provider)

    return BlueprintArtifacts(
        folder=folder,
        document=document,
        pdf=pdf,
        story=narrative.text,
        summary=summarize(narrative.text, SUMMARY_LENGTH),
        provider=narrative.provider,
        attempts=narrative.attempts,
    )
