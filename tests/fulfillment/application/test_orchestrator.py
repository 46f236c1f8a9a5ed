"""Tests for the fulfillment orchestrator — whole-pipeline retry and outcome bookkeeping."""

import re
from dataclasses import replace
from datetime import UTC, datetime

import pytest
from bundles.template import BundleSource
from fulfillment.icons import IconLibraryEntry
from fulfillment.orchestrator import (
    AttemptState,
    OrderReference,
    _TRANSITIONS,
    _renormalize,
    resolve_intake,
    run_order,
)
from fulfillment.outcome.outcome import OrderOutcome, OutcomeStatus
from fulfillment.storage import get_document_store
from intake.errors import IntakeRetrievalError
from intake.intake import FulfillmentType, OrderIntake, Tier
from intake.session.fake_adapter import FakeSessionSource
from narrative.generator import NarrativeGenerationError
from protean import current_domain


class RefreshingSessionSource(FakeSessionSource):
    """Serves a newer version of the session on every retrieval."""

    def __init__(self, versions):
        super().__init__()
        self.versions = list(versions)

    def retrieve(self, session_id):
        self.retrieved.append(session_id)
        return self.versions[min(len(self.retrieved), len(self.versions)) - 1]


def _outcomes():
    return current_domain.repository_for(OrderOutcome)._dao.query.all().items


def _session(tier):
    return {
        "id": "cs_retry_1",
        "object": "checkout.session",
        "customer_details": {"email": "rio@example.com", "name": "Rio Vega"},
        "metadata": {
            "tier": tier,
            "birthdate": "1992-07-07",
            "household_type": "Family homeschool crew",
            "focus": "Play + morning basket",
        },
        "line_items": {"data": []},
    }


class TestStateMachine:
    def test_transitions(self):
        assert _TRANSITIONS[(AttemptState.FIRST_ATTEMPT, True)] is AttemptState.SUCCESS
        assert _TRANSITIONS[(AttemptState.FIRST_ATTEMPT, False)] is AttemptState.RETRY_ATTEMPT
        assert _TRANSITIONS[(AttemptState.RETRY_ATTEMPT, True)] is AttemptState.SUCCESS
        assert _TRANSITIONS[(AttemptState.RETRY_ATTEMPT, False)] is AttemptState.FAILURE


class TestSuccessfulRun:
    def test_full_pipeline(self, services, config, order_form):
        record = run_order(OrderReference.for_form(order_form), services, config)

        assert record.attempts == 1
        assert record.intake.tier == Tier.FULL
        assert record.intake.fulfillment_type == FulfillmentType.DIGITAL
        assert re.fullmatch(r"\d{4}-\d{2}-\d{2}", record.workspace.order.name)
        assert record.blueprint.provider == "codex"
        assert record.icons.plan.source == BundleSource.STORED
        assert [entry.kind for entry in record.schedule.files] == ["daily", "weekly", "monthly"]
        assert [link.label for link in record.links] == [
            "Blueprint document",
            "Blueprint PDF",
            "Schedule kit",
            "Icon bundle",
        ]
        assert [receipt.channel for receipt in record.receipts] == ["chat"]
        assert services.chat.sent_messages[0]["handle"] == "maya-chat"

    def test_success_outcome_persisted_and_logged(self, services, config, order_form):
        record = run_order(OrderReference.for_form(order_form), services, config)

        outcome = current_domain.repository_for(OrderOutcome).get(record.outcome_id)
        assert outcome.status == OutcomeStatus.SUCCESS.value
        assert outcome.file_list == record.files
        assert outcome.bundle_id == record.icons.plan.bundle.id
        assert outcome.metadata_dict["narrative_provider"] == "codex"

        row = services.log_store.rows[0]
        assert row["sheet_id"] == "sheet-1"
        assert row["row"][2] == "maya@example.com"
        assert row["row"][6] == "success"

    def test_prebuilt_intake_defaults_fulfillment_type(self, services, config):
        intake = OrderIntake(email="june@example.com", tier=Tier.MINI, fulfillment_type=None)
        record = run_order(OrderReference.for_intake(intake), services, config)
        assert record.intake.fulfillment_type == FulfillmentType.DIGITAL
        assert [entry.kind for entry in record.schedule.files] == ["daily"]
        assert [receipt.channel for receipt in record.receipts] == ["email"]

    def test_icon_library_folder_from_config(self, config, order_form):
        store = get_document_store()
        folder = store.ensure_folder("root-folder", "Icon Library")
        store.create_file("morning-basket.svg", "image/svg+xml", b"<svg/>", folder.id)

        record = run_order(OrderReference.for_form(order_form), config=replace(config, icon_library_id=folder.id))

        basket = next(asset for asset in record.icons.assets if asset.request.slug == "morning-basket")
        assert basket.origin == "library"


class TestRetry:
    def test_second_attempt_uses_renormalized_intake(self, services, config):
        source = RefreshingSessionSource([_session("lite"), _session("full")])
        services.session_source = source
        services.icon_library = [IconLibraryEntry(file_id="lib-morning", slug="morning-basket", label="Morning Basket")]
        services.document_store.configure(fail_on={"copy_file"}, failures=1)

        record = run_order(OrderReference.for_session("cs_retry_1"), services, config)

        assert record.attempts == 2
        assert source.retrieved == ["cs_retry_1", "cs_retry_1"]
        assert record.intake.tier == Tier.FULL
        assert record.intake.expansions == ("advanced-esoteric",)
        assert any(asset.origin == "library" for asset in record.icons.assets)
        outcome = current_domain.repository_for(OrderOutcome).get(record.outcome_id)
        assert outcome.attempts == 2
        assert outcome.tier == "full"

    def test_retry_reuses_workspace_folders(self, services, config, order_form):
        services.document_store.configure(fail_on={"create_document"}, failures=1)
        run_order(OrderReference.for_form(order_form), services, config)

        store = services.document_store
        assert len(store.folders_named("Fulfillment")) == 1
        assert len(store.folders_named("maya@example.com")) == 1
        assert len(store.folders_named("blueprint")) == 1

    def test_retry_across_midnight_keeps_one_order_folder(self, services, config, order_form, monkeypatch):
        ticks = iter(
            [
                datetime(2024, 5, 17, 23, 59, 58, tzinfo=UTC),
                datetime(2024, 5, 18, 0, 0, 1, tzinfo=UTC),
            ]
        )

        class _Clock(datetime):
            @classmethod
            def now(cls, tz=None):
                return next(ticks, datetime(2024, 5, 18, 0, 0, 5, tzinfo=UTC))

        monkeypatch.setattr("fulfillment.orchestrator.datetime", _Clock)
        monkeypatch.setattr("fulfillment.workspace.datetime", _Clock)
        services.document_store.configure(fail_on={"create_document"}, failures=1)

        record = run_order(OrderReference.for_form(order_form), services, config)

        assert record.attempts == 2
        assert record.workspace.order.name == "2024-05-17"
        assert len(services.document_store.folders_named("2024-05-17")) == 1
        assert services.document_store.folders_named("2024-05-18") == []

    def test_failed_renormalization_keeps_previous_intake(self, services, config):
        source = FakeSessionSource()
        source.configure(should_succeed=False)
        services.session_source = source
        current = OrderIntake(email="old@example.com")
        assert _renormalize(OrderReference.for_session("cs_gone"), current, services, config) is current


class TestUnrecoverableFailure:
    def test_two_attempts_and_one_failure_summary(self, services, config, order_form):
        services.document_store.configure(fail_on={"create_document"}, failure_reason="Drive quota exceeded")

        with pytest.raises(ConnectionError, match="Drive quota exceeded"):
            run_order(OrderReference.for_form(order_form), services, config)

        assert services.document_store.calls.count("create_document") == 2
        outcomes = _outcomes()
        assert len(outcomes) == 1
        assert outcomes[0].status == OutcomeStatus.ERROR.value
        assert outcomes[0].file_list == []
        assert outcomes[0].attempts == 2
        assert outcomes[0].message == "Drive quota exceeded"

    def test_operators_alerted_and_failure_logged(self, services, config, order_form):
        services.document_store.configure(fail_on={"create_document"})

        with pytest.raises(ConnectionError):
            run_order(OrderReference.for_form(order_form), services, config)

        alert = services.chat.sent_messages[-1]
        assert alert["handle"] == "ops-room"
        assert alert["text"].startswith("Fulfillment failed for maya@example.com")
        assert services.log_store.rows[-1]["row"][6] == "error"

    def test_narrative_failure_is_terminal_after_retry(self, services, config, order_form):
        for provider in services.narrative_providers:
            provider.configure(should_succeed=False)

        with pytest.raises(NarrativeGenerationError):
            run_order(OrderReference.for_form(order_form), services, config)

        assert len(services.narrative_providers[0].prompts) == 4
        assert _outcomes()[0].message == "All providers failed to generate blueprint"
        assert "create_document" not in services.document_store.calls

    def test_retrieval_error_propagates_before_any_attempt(self, services, config):
        services.session_source.configure(should_succeed=False)
        with pytest.raises(IntakeRetrievalError):
            run_order(OrderReference.for_session("cs_missing"), services, config)
        assert _outcomes() == []
        assert services.document_store.calls == []


def test_resolve_intake_requires_a_reference(services, config):
    with pytest.raises(ValueError):
        resolve_intake(OrderReference(), services, config)
