"""Intake errors."""


class IntakeRetrievalError(Exception):
    """The upstream checkout session could not be retrieved."""

    def __init__(self, session_id: str, reason: str):
        super().__init__(f"Could not retrieve session {session_id}: {reason}")
        self.session_id = session_id
        self.reason = reason
