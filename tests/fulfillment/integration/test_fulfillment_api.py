"""Integration tests for the fulfillment API through FastAPI TestClient."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from fulfillment.api.routes import fulfillment_router
from fulfillment.storage import get_document_store, get_log_store
from intake.session import get_session_source
from notifications.channel import get_channel


@pytest.fixture()
def client(monkeypatch):
    monkeypatch.setenv("FULFILLMENT_DRIVE_ROOT_ID", "root-folder")
    monkeypatch.setenv("FULFILLMENT_SHEET_ID", "sheet-1")
    monkeypatch.setenv("FULFILLMENT_OPS_CHAT_HANDLE", "ops-room")
    app = FastAPI()
    app.include_router(fulfillment_router)
    return TestClient(app)


def _checkout_session(session_id="cs_api_1"):
    return {
        "id": session_id,
        "object": "checkout.session",
        "customer_details": {"email": "lena@example.com", "name": "Lena Park"},
        "metadata": {
            "tier": "mini",
            "birthdate": "1988-11-02",
            "focus": "Calm mornings and medication reminders",
            "age": "71",
        },
        "line_items": {"data": []},
    }


class TestRunFulfillment:
    def test_missing_reference_is_skipped(self, client):
        response = client.post("/fulfillments/run", json={})
        assert response.status_code == 200
        assert response.json()["status"] == "skipped"
        assert response.json()["reason"] == "missing order reference"

    def test_form_order_triggered(self, client, order_form):
        response = client.post("/fulfillments/run", json={"form": order_form})
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "triggered"
        assert data["email"] == "maya@example.com"
        assert data["tier"] == "full"
        assert data["bundle_id"] == "family-rhythm"
        assert data["bundle_source"] == "stored"
        assert data["attempts"] == 1
        assert data["receipts"] == ["chat"]
        assert [entry.split(":")[0] for entry in data["files"]] == [
            "Blueprint document",
            "Blueprint PDF",
            "Schedule kit",
            "Icon bundle",
        ]

    def test_session_order_triggered(self, client):
        get_session_source().add_session(_checkout_session())
        response = client.post("/fulfillments/run", json={"session_id": "cs_api_1"})
        data = response.json()
        assert data["status"] == "triggered"
        assert data["tier"] == "mini"
        assert data["receipts"] == ["email"]
        assert get_channel("email").sent_emails[0]["to"] == "lena@example.com"

    def test_unknown_session_fails(self, client):
        response = client.post("/fulfillments/run", json={"session_id": "cs_missing"})
        assert response.status_code == 502
        data = response.json()
        assert data["status"] == "failed"
        assert "cs_missing" in data["reason"]
        assert get_document_store().calls == []

    def test_pipeline_failure_fails_after_retry(self, client, order_form):
        get_document_store().configure(fail_on={"export_document"}, failure_reason="Export quota exceeded")
        response = client.post("/fulfillments/run", json={"form": order_form})
        assert response.status_code == 502
        assert response.json() == {
            "status": "failed",
            "reason": "Export quota exceeded",
            "email": None,
            "tier": None,
            "bundle_id": None,
            "bundle_source": None,
            "files": [],
            "receipts": [],
            "attempts": 0,
        }
        assert get_log_store().rows[-1]["row"][6] == "error"
        assert get_channel("chat").sent_messages[-1]["handle"] == "ops-room"

    def test_unconfigured_drive_root_fails(self, client, order_form, monkeypatch):
        monkeypatch.delenv("FULFILLMENT_DRIVE_ROOT_ID")
        response = client.post("/fulfillments/run", json={"form": order_form})
        assert response.status_code == 502
        assert "FULFILLMENT_DRIVE_ROOT_ID" in response.json()["reason"]


class TestListOutcomes:
    def test_outcomes_for_email(self, client, order_form):
        client.post("/fulfillments/run", json={"form": order_form})
        get_document_store().configure(fail_on={"create_document"})
        client.post("/fulfillments/run", json={"form": order_form})

        response = client.get("/fulfillments/outcomes", params={"email": "maya@example.com"})
        assert response.status_code == 200
        statuses = sorted(outcome["status"] for outcome in response.json())
        assert statuses == ["error", "success"]
        success = next(outcome for outcome in response.json() if outcome["status"] == "success")
        assert success["bundle_id"] == "family-rhythm"
        assert len(success["files"]) == 4

    def test_unknown_email_has_no_outcomes(self, client):
        response = client.get("/fulfillments/outcomes", params={"email": "nobody@example.com"})
        assert response.json() == []

    def test_email_is_required(self, client):
        assert client.get("/fulfillments/outcomes").status_code == 422
