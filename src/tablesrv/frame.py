# src/tablesrv/frame.py
from __future__ import annotations

from typing import Any, Callable, Hashable, Mapping
import logging

import pandas as pd

from .columns import ACCESSOR_PREFIX, Column, Columns
from .config import TableConfig
from .errors import RequestError
from .request import RequestParameters
from .result import DataResult
from .table import DataTable

logger = logging.getLogger(__name__)


class RowRecord:
    """
    One DataFrame row as a row object: ``record.get_<column>()`` returns the
    cell, ``record["column"]`` too.
    """

    __slots__ = ("_values",)

    def __init__(self, values: Mapping[str, Any]) -> None:
        self._values = dict(values)

    def __getitem__(self, key: str) -> Any:
        return self._values[key]

    def __getattr__(self, name: str) -> Callable[[], Any]:
        if name.startswith(ACCESSOR_PREFIX):
            key = name[len(ACCESSOR_PREFIX) :]
            values = object.__getattribute__(self, "_values")
            if key in values:
                return lambda: values[key]
        raise AttributeError(name)

    def __repr__(self) -> str:
        return f"RowRecord({self._values!r})"

    def to_dict(self) -> dict[str, Any]:
        return dict(self._values)


def columns_from_frame(df: pd.DataFrame, **column_options: Any) -> Columns:
    """One Column per DataFrame column, in frame order."""
    return Columns(Column(name=str(c), **column_options) for c in df.columns)


def _contains(series: pd.Series, term: str) -> pd.Series:
    return series.astype(str).str.contains(term, case=False, regex=False, na=False)


def _to_native(df: pd.DataFrame) -> list[dict[str, Any]]:
    # NaN/NaT are not JSON; hand them out as None
    cleaned = df.astype(object).where(df.notna(), None)
    return cleaned.to_dict(orient="records")


class DataFrameTable(DataTable):
    """
    A DataTable over an in-memory DataFrame.

    Sorting, global search (over searchable columns), per-column search and
    paging are applied in pandas.
    """

    def __init__(
        self,
        df: pd.DataFrame,
        config: TableConfig | None = None,
        *,
        table_id: str = "datatable",
    ) -> None:
        if config is None:
            config = TableConfig(columns=columns_from_frame(df))
        super().__init__(config)
        self._df = df
        self._table_id = table_id
        self._labels: dict[str, Hashable] = {str(c): c for c in df.columns}

    @property
    def table_id(self) -> str:
        return self._table_id

    @property
    def frame(self) -> pd.DataFrame:
        return self._df

    def _label(self, name: str) -> Hashable | None:
        return self._labels.get(name)

    def filter_frame(self, request: RequestParameters) -> pd.DataFrame:
        df = self._df

        if request.search:
            labels = [
                self._label(n)
                for n in self.searchable_column_names()
                if self._label(n) is not None
            ]
            if labels:
                mask = pd.Series(False, index=df.index)
                for label in labels:
                    mask |= _contains(df[label], request.search)
                df = df[mask]

        for name, term in request.column_search.items():
            label = self._label(name)
            if label is None:
                logger.debug("%s: no frame column for search key %r", self.table_id, name)
                continue
            df = df[_contains(df[label], term)]

        return df

    def sort_frame(self, df: pd.DataFrame, request: RequestParameters) -> pd.DataFrame:
        if request.sort_column is None or not self.config.ordering:
            return df
        if request.sort_column >= len(self.config.columns):
            raise RequestError(f"sort column out of range: {request.sort_column}")
        col = self.config.columns[request.sort_column]
        label = self._label(col.name)
        if not col.sortable or label is None:
            return df
        return df.sort_values(
            by=label,
            ascending=request.sort_direction == "asc",
            kind="mergesort",
            na_position="last",
        )

    def load_data(self, request: RequestParameters) -> DataResult:
        total = int(len(self._df))
        filtered = self.filter_frame(request)
        ordered = self.sort_frame(filtered, request)

        if request.is_all:
            page = ordered.iloc[request.offset :]
        else:
            page = ordered.iloc[request.offset : request.offset + request.length]

        rows = [
            RowRecord({str(k): v for k, v in rec.items()}) for rec in _to_native(page)
        ]
        filtered_count = int(len(filtered)) if len(filtered) != total else None
        return DataResult(data=rows, total_count=total, filtered_count=filtered_count)
