# src/tablesrv/errors.py
from __future__ import annotations


class TableError(Exception):
    """Base class for everything tablesrv raises on its own."""


class ConfigurationMissing(TableError):
    def __init__(self) -> None:
        super().__init__("A TableConfig object is required.")


class ConfigurationError(TableError):
    """Columns or table settings that cannot produce a consistent table."""


class RequestError(TableError, ValueError):
    """Malformed inbound data-request parameters."""


class MissingAccessor(TableError):
    """
    Neither the table nor the row object provides the accessor a column needs.
    """

    def __init__(self, accessor: str, row_type: str, owner_type: str) -> None:
        self.accessor = accessor
        self.row_type = row_type
        self.owner_type = owner_type
        super().__init__(
            f"{accessor}() method is required in {row_type} or {owner_type}"
        )
