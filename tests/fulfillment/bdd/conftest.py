"""Shared BDD fixtures and step definitions for the Fulfillment domain."""

import pytest
from fulfillment.icons import IconLibraryEntry
from fulfillment.orchestrator import OrderReference
from fulfillment.outcome.outcome import OrderOutcome
from intake.session.fake_adapter import FakeSessionSource
from protean import current_domain
from pytest_bdd import given, parsers, then


class UpgradingSessionSource(FakeSessionSource):
    """Returns the next stored version of a session on every read."""

    def __init__(self, versions):
        super().__init__()
        self.versions = list(versions)

    def retrieve(self, session_id):
        self.retrieved.append(session_id)
        return self.versions[min(len(self.retrieved), len(self.versions)) - 1]


@pytest.fixture()
def error():
    """Container for a captured pipeline error."""
    return {"exc": None}


def _outcomes(**filters):
    query = current_domain.repository_for(OrderOutcome)._dao.query
    return (query.filter(**filters) if filters else query).all().items


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(
    parsers.cfparse('an intake form order for "{email}" on the "{tier}" tier'),
    target_fixture="reference",
)
def form_order(order_form, email, tier):
    return OrderReference.for_form({**order_form, "email": email, "tier": tier})


@given(
    parsers.cfparse('a checkout session "{session_id}" that is upgraded from "{first}" to "{second}" between reads'),
    target_fixture="reference",
)
def upgraded_session(services, session_id, first, second):
    def _version(tier):
        return {
            "id": session_id,
            "object": "checkout.session",
            "customer_details": {"email": "rio@example.com", "name": "Rio Vega"},
            "metadata": {
                "tier": tier,
                "birthdate": "1992-07-07",
                "household_type": "Family homeschool crew",
                "focus": "Play + morning basket",
            },
        }

    services.session_source = UpgradingSessionSource([_version(first), _version(second)])
    return OrderReference.for_session(session_id)


@given("the chat channel is down")
def chat_down(services):
    services.chat.configure(should_succeed=False)


@given(parsers.cfparse('the icon library holds "{slug}"'))
def icon_library(services, slug):
    services.icon_library = [IconLibraryEntry(file_id=f"lib-{slug}", slug=slug, label=slug.replace("-", " ").title())]


@given("copying library icons fails once")
def copy_fails_once(services):
    services.document_store.configure(fail_on={"copy_file"}, failures=1)


@given("the document store rejects new documents")
def documents_rejected(services):
    services.document_store.configure(fail_on={"create_document"})


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('a "{status}" outcome is recorded for "{email}"'))
def outcome_recorded(status, email):
    assert [outcome.status for outcome in _outcomes(email=email)] == [status]


@then(parsers.cfparse('exactly {count:d} "{status}" outcome is recorded'))
def outcome_count(count, status):
    assert len(_outcomes(status=status)) == count
    assert len(_outcomes()) == count
