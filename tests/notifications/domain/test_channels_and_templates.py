"""Tests for channel adapters and message templates."""

import pytest
from notifications.channel import ChannelType, get_channel, reset_channels, set_channel
from notifications.channel.fake_chat import FakeChatAdapter
from notifications.channel.fake_email import FakeEmailAdapter
from notifications.templates import TEMPLATE_REGISTRY, MessageType, get_template


class TestFakeEmailAdapter:
    def setup_method(self):
        self.adapter = FakeEmailAdapter()

    def test_send_records_email(self):
        result = self.adapter.send(to="test@example.com", subject="Hi", body="Hello!")
        assert result["status"] == "sent"
        assert result["message_id"].startswith("email-")
        assert self.adapter.sent_emails[0]["to"] == "test@example.com"

    def test_send_failure(self):
        self.adapter.configure(should_succeed=False, failure_reason="SMTP error")
        result = self.adapter.send(to="a@b.com", subject="Hi", body="Hello")
        assert result == {"message_id": None, "status": "failed", "error": "SMTP error"}
        assert self.adapter.sent_emails == []

    def test_raise_error(self):
        self.adapter.configure(raise_error=True)
        with pytest.raises(ConnectionError):
            self.adapter.send(to="a@b.com", subject="Hi", body="Hello")

    def test_reset(self):
        self.adapter.send(to="a@b.com", subject="Hi", body="Hello")
        self.adapter.configure(should_succeed=False)
        self.adapter.reset()
        assert self.adapter.sent_emails == []
        assert self.adapter.should_succeed is True


class TestFakeChatAdapter:
    def setup_method(self):
        self.adapter = FakeChatAdapter()

    def test_send_records_message(self):
        result = self.adapter.send("room-1", "Your kit is ready")
        assert result["ok"] is True
        assert self.adapter.sent_messages[0]["handle"] == "room-1"

    def test_send_failure(self):
        self.adapter.configure(should_succeed=False)
        result = self.adapter.send("room-1", "Hi")
        assert result["ok"] is False
        assert result["status"] == "failed"

    def test_reset(self):
        self.adapter.send("room-1", "Hi")
        self.adapter.reset()
        assert self.adapter.sent_messages == []


class TestChannelRegistry:
    def test_defaults_are_fakes(self):
        assert isinstance(get_channel(ChannelType.EMAIL.value), FakeEmailAdapter)
        assert isinstance(get_channel(ChannelType.CHAT.value), FakeChatAdapter)

    def test_singleton_per_type(self):
        assert get_channel("email") is get_channel("email")

    def test_set_and_reset(self):
        adapter = FakeChatAdapter()
        set_channel("chat", adapter)
        assert get_channel("chat") is adapter
        reset_channels()
        assert get_channel("chat") is not adapter

    def test_unknown_channel(self):
        with pytest.raises(ValueError, match="Unknown channel type"):
            get_channel("pager")

    def test_unknown_adapter(self, monkeypatch):
        monkeypatch.setenv("EMAIL_ADAPTER", "smtp-relay")
        with pytest.raises(ValueError, match="Unknown email adapter"):
            get_channel("email")


class TestTemplates:
    def test_registry_covers_every_message_type(self):
        assert set(TEMPLATE_REGISTRY) == {message_type.value for message_type in MessageType}

    def test_unknown_template(self):
        with pytest.raises(ValueError):
            get_template("birthday")

    def test_delivery_ready(self):
        content = get_template("delivery_ready").render(
            {"name": "Maya", "tier_label": "Mini", "links": [{"label": "PDF", "url": "https://x.example/1?a=1&b=2"}]}
        )
        assert content["subject"] == "Your Mini Soul Blueprint is here"
        assert "- PDF: https://x.example/1?a=1&b=2" in content["body"]
        assert "a=1&amp;b=2" in content["html_body"]
        assert content["chat_text"].startswith("Maya, your Mini kit is ready")

    def test_missing_info(self):
        content = get_template("missing_info").render(
            {"name": None, "missing": ["email", "birth date"], "form_url": "https://forms.example/intake"}
        )
        assert content["body"].startswith("Hi there,")
        assert "We're missing email, birth date" in content["body"]

    def test_operator_alert(self):
        content = get_template("operator_alert").render({"email": None, "message": "store down"})
        assert content["chat_text"] == "Fulfillment failed for unknown customer: store down"
