"""Fake tabular log — keeps appended rows in memory."""

from fulfillment.storage.log_port import TabularLogPort


class FakeLogStore(TabularLogPort):
    def __init__(self):
        self.rows: list[dict] = []
        self.should_succeed = True
        self.failure_reason = "Log sheet unavailable"

    def configure(self, should_succeed: bool = True, failure_reason: str = "Log sheet unavailable"):
        """Configure the fake log behavior for testing."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def append_row(self, sheet_id: str, range_name: str, row: list[str]) -> None:
        if not self.should_succeed:
            raise ConnectionError(self.failure_reason)
        self.rows.append({"sheet_id": sheet_id, "range": range_name, "row": list(row)})

    def reset(self):
        self.rows.clear()
        self.should_succeed = True
        self.failure_reason = "Log sheet unavailable"
