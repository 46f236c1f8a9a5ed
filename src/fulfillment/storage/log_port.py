"""Tabular log port — append-only rows in a spreadsheet-like store."""

from abc import ABC, abstractmethod


class TabularLogPort(ABC):
    """Abstract interface for the fulfillment log sheet."""

    @abstractmethod
    def append_row(self, sheet_id: str, range_name: str, row: list[str]) -> None:
        """Append one row. Callers treat failures as warnings."""
        ...
