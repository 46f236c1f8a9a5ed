"""Fake session source — serves checkout sessions registered in memory."""

from intake.session.port import SessionSourcePort


class FakeSessionSource(SessionSourcePort):
    """Session source that returns sessions stored with ``add_session``."""

    def __init__(self):
        self.sessions: dict[str, dict] = {}
        self.retrieved: list[str] = []
        self.should_succeed = True
        self.failure_reason = "Session lookup failed"

    def configure(self, should_succeed: bool = True, failure_reason: str = "Session lookup failed"):
        """Configure the fake source behavior for testing."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def add_session(self, session: dict) -> None:
        self.sessions[session["id"]] = session

    def retrieve(self, session_id: str) -> dict:
        self.retrieved.append(session_id)
        if not self.should_succeed:
            raise ConnectionError(self.failure_reason)
        if session_id not in self.sessions:
            raise LookupError(f"No such checkout session: {session_id}")
        return self.sessions[session_id]

    def reset(self):
        """Forget stored sessions and restore default behavior."""
        self.sessions.clear()
        self.retrieved.clear()
        self.should_succeed = True
        self.failure_reason = "Session lookup failed"
