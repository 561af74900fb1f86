from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

import pytest

from tablesrv.columns import Column, Columns
from tablesrv.config import TableConfig
from tablesrv.request import RequestParameters
from tablesrv.result import DataResult
from tablesrv.table import DataTable


@dataclass
class Item:
    id: int
    label: str

    def get_id(self) -> int:
        return self.id

    def get_label(self) -> str:
        return self.label


ITEMS = [Item(1, "a"), Item(2, "b"), Item(3, "c")]


class ItemTable(DataTable):
    """Serves ITEMS, honouring offset/length and recording each request."""

    def __init__(
        self,
        config: TableConfig | None,
        items: list[Any] | None = None,
        *,
        filtered_count: int | None = None,
    ) -> None:
        super().__init__(config)
        self.items = list(ITEMS if items is None else items)
        self.filtered_count = filtered_count
        self.requests: list[RequestParameters] = []

    @property
    def table_id(self) -> str:
        return "items"

    def load_data(self, request: RequestParameters) -> DataResult:
        self.requests.append(request)
        rows = self.items[request.offset :]
        if not request.is_all:
            rows = rows[: request.length]
        return DataResult(
            data=rows, total_count=len(self.items), filtered_count=self.filtered_count
        )


def default_columns() -> Columns:
    return Columns([Column("id"), Column("label", sortable=False)])


@pytest.fixture
def make_table() -> Callable[..., ItemTable]:
    def _make(
        columns: Columns | None = None,
        items: list[Any] | None = None,
        *,
        filtered_count: int | None = None,
        **config_kwargs: Any,
    ) -> ItemTable:
        config = TableConfig(columns=columns or default_columns(), **config_kwargs)
        return ItemTable(config, items, filtered_count=filtered_count)

    return _make
