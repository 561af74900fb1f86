# src/tablesrv/resolver.py
from __future__ import annotations

from typing import Any, Callable, Collection

from .columns import Column
from .errors import MissingAccessor


def _lookup(obj: Any, name: str) -> Callable[..., Any] | None:
    fn = getattr(obj, name, None)
    return fn if callable(fn) else None


def resolve_value(
    row: Any,
    column: Column,
    owner: Any,
    *,
    skip_owner: Collection[str] = (),
) -> Any:
    """
    Resolve the display value of ``column`` for ``row``.

    Order:
      1) ``owner.<accessor>(row)`` so a table can compute or override a column
      2) ``row.<accessor>()``
      3) MissingAccessor

    ``skip_owner`` lists names the owner has but must not answer with (for
    example the base table's own methods).
    """
    name = column.accessor_name

    if name not in skip_owner:
        fn = _lookup(owner, name)
        if fn is not None:
            return fn(row)

    fn = _lookup(row, name)
    if fn is not None:
        return fn()

    raise MissingAccessor(name, type(row).__name__, type(owner).__name__)


def resolve_row(
    row: Any,
    columns: Collection[Column],
    owner: Any,
    *,
    skip_owner: Collection[str] = (),
) -> list[Any]:
    """One value per column, in column order."""
    return [resolve_value(row, c, owner, skip_owner=skip_owner) for c in columns]
