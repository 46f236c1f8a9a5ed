"""Fake chat adapter — records direct messages for testing."""

from uuid import uuid4

from notifications.channel.chat_port import ChatPort


class FakeChatAdapter(ChatPort):
    """Chat adapter that records messages in memory for test assertions."""

    def __init__(self):
        self.sent_messages: list[dict] = []
        self.should_succeed = True
        self.raise_error = False
        self.failure_reason = "Chat delivery failed"

    def configure(
        self,
        should_succeed: bool = True,
        failure_reason: str = "Chat delivery failed",
        raise_error: bool = False,
    ):
        """Configure the fake adapter behavior for testing."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason
        self.raise_error = raise_error

    def send(self, handle: str, text: str) -> dict:
        if self.raise_error:
            raise ConnectionError(self.failure_reason)
        if not self.should_succeed:
            return {"ok": False, "status": "failed", "message_id": None, "error": self.failure_reason}

        message_id = f"chat-{uuid4().hex[:12]}"
        self.sent_messages.append({"message_id": message_id, "handle": handle, "text": text})
        return {"ok": True, "status": "sent", "message_id": message_id}

    def reset(self):
        """Clear sent messages (useful between tests)."""
        self.sent_messages.clear()
        self.should_succeed = True
        self.raise_error = False
        self.failure_reason = "Chat delivery failed"
