# src/tablesrv/result.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence


@dataclass(frozen=True, slots=True)
class DataResult:
    """
    What a table's ``load_data`` hands back: one page of row objects plus counts.
    """

    data: Sequence[Any]
    total_count: int
    filtered_count: int | None = None

    @property
    def display_count(self) -> int:
        # the widget shows "filtered from total" only when a filter was applied
        return self.filtered_count if self.filtered_count is not None else self.total_count
