# src/tablesrv/request.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from .columns import SORT_DIRECTIONS, Columns, SortDirection
from .errors import RequestError

ALL_ROWS = -1


@dataclass(frozen=True, slots=True)
class RequestParameters:
    """
    One normalized data request from the grid widget.

    ``length == -1`` asks for every row. ``echo`` is opaque and must come back
    unchanged in the response.
    """

    offset: int = 0
    length: int = ALL_ROWS
    sort_column: int | None = None
    sort_direction: SortDirection = "asc"
    search: str | None = None
    column_search: dict[str, str] = field(default_factory=dict)
    echo: Any = None

    def __post_init__(self) -> None:
        if self.offset < 0:
            raise RequestError(f"offset must be >= 0, got {self.offset}")
        if self.length < ALL_ROWS:
            raise RequestError(f"length must be >= -1, got {self.length}")
        if self.sort_column is not None and self.sort_column < 0:
            raise RequestError(f"sort_column must be >= 0, got {self.sort_column}")
        if self.sort_direction not in SORT_DIRECTIONS:
            raise RequestError(
                f"sort_direction must be 'asc' or 'desc', got {self.sort_direction!r}"
            )

    @property
    def is_all(self) -> bool:
        return self.length == ALL_ROWS

    @classmethod
    def from_query(
        cls,
        params: Mapping[str, Any],
        *,
        columns: Columns | None = None,
    ) -> "RequestParameters":
        """
        Build from the widget's server-side query parameters:

          iDisplayStart, iDisplayLength, iSortCol_0, sSortDir_0,
          sSearch, sSearch_<i>, sEcho

        Per-column terms are keyed by column name when ``columns`` is given,
        otherwise by the column index as a string.
        """
        offset = _int_param(params, "iDisplayStart", default=0)
        length = _int_param(params, "iDisplayLength", default=ALL_ROWS)

        sort_column = _int_param(params, "iSortCol_0", default=None)
        if sort_column is not None and columns is not None:
            if not 0 <= sort_column < len(columns):
                raise RequestError(f"iSortCol_0 out of range: {sort_column}")

        raw_dir = str(params.get("sSortDir_0") or "asc").strip().lower()
        sort_direction: SortDirection = "desc" if raw_dir == "desc" else "asc"

        search = str(params.get("sSearch") or "").strip() or None

        column_search: dict[str, str] = {}
        for key, value in params.items():
            if not key.startswith("sSearch_"):
                continue
            term = str(value or "").strip()
            if not term:
                continue
            idx_raw = key[len("sSearch_") :]
            if columns is None:
                column_search[idx_raw] = term
                continue
            try:
                idx = int(idx_raw)
                if idx < 0:
                    raise IndexError(idx)
                name = columns[idx].name
            except (ValueError, IndexError):
                raise RequestError(f"bad per-column search parameter: {key}") from None
            column_search[name] = term

        return cls(
            offset=offset,
            length=length,
            sort_column=sort_column,
            sort_direction=sort_direction,
            search=search,
            column_search=column_search,
            echo=params.get("sEcho"),
        )


def _int_param(params: Mapping[str, Any], key: str, *, default: int | None) -> Any:
    raw = params.get(key)
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return default
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise RequestError(f"{key} must be an integer, got {raw!r}") from None
