# src/tablesrv/columns.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Iterator, Literal, overload

from .errors import ConfigurationError

SortDirection = Literal["asc", "desc"]

SORT_DIRECTIONS: tuple[SortDirection, ...] = ("asc", "desc")
ACCESSOR_PREFIX = "get_"


@dataclass(frozen=True, slots=True)
class Column:
    """
    One rendered column of a DataTable.

    The value for a cell is looked up through ``accessor_name``
    (``get_<name>``), first on the table and then on the row object.
    """

    name: str
    title: str | None = None
    visible: bool = True
    sortable: bool = True
    searchable: bool = True
    default_sort: bool = False
    default_sort_direction: SortDirection = "asc"
    width: str | None = None
    css_class: str | None = None
    render: str | None = None  # client-side render callback source
    accessor_name: str = field(init=False)

    def __post_init__(self) -> None:
        if not self.name or not str(self.name).strip():
            raise ConfigurationError("column name must be a non-empty string")
        if self.default_sort_direction not in SORT_DIRECTIONS:
            raise ConfigurationError(
                f"column {self.name!r}: default_sort_direction must be "
                f"'asc' or 'desc', got {self.default_sort_direction!r}"
            )
        if self.title is None:
            object.__setattr__(self, "title", self.name)
        object.__setattr__(self, "accessor_name", ACCESSOR_PREFIX + self.name)


class Columns:
    """
    Ordered, read-only collection of columns.

    Position in the collection is the display order and the index the
    widget uses for sorting.
    """

    __slots__ = ("_columns", "_index")

    def __init__(self, columns: Iterable[Column] = ()) -> None:
        cols = tuple(columns)
        index: dict[str, int] = {}
        default_sorts: list[str] = []

        for i, col in enumerate(cols):
            if not isinstance(col, Column):
                raise ConfigurationError(
                    f"expected Column at position {i}, got {type(col).__name__}"
                )
            if col.name in index:
                raise ConfigurationError(f"duplicate column name: {col.name!r}")
            index[col.name] = i
            if col.default_sort:
                default_sorts.append(col.name)

        if len(default_sorts) > 1:
            raise ConfigurationError(
                "at most one column may be the default sort column, got: "
                + ", ".join(repr(n) for n in default_sorts)
            )

        self._columns = cols
        self._index = index

    def __len__(self) -> int:
        return len(self._columns)

    def __iter__(self) -> Iterator[Column]:
        return iter(self._columns)

    @overload
    def __getitem__(self, key: int) -> Column: ...
    @overload
    def __getitem__(self, key: str) -> Column: ...

    def __getitem__(self, key: int | str) -> Column:
        if isinstance(key, str):
            return self._columns[self.index_of(key)]
        return self._columns[key]

    def __contains__(self, name: object) -> bool:
        return name in self._index

    def __repr__(self) -> str:
        return f"Columns({list(self.names())!r})"

    def index_of(self, name: str) -> int:
        try:
            return self._index[name]
        except KeyError:
            raise KeyError(f"no column named {name!r}") from None

    def names(self) -> list[str]:
        return [c.name for c in self._columns]

    def searchable_names(self) -> list[str]:
        return [c.name for c in self._columns if c.searchable]

    def default_sort(self) -> tuple[int, Column] | None:
        for i, col in enumerate(self._columns):
            if col.default_sort:
                return i, col
        return None
