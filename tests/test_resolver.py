from __future__ import annotations

import pytest

from tablesrv.columns import Column
from tablesrv.errors import MissingAccessor
from tablesrv.resolver import resolve_row, resolve_value


class Item:
    def __init__(self, id: int, label: str) -> None:
        self._id = id
        self._label = label

    def get_id(self) -> int:
        return self._id

    def get_label(self) -> str:
        return self._label


class PlainOwner:
    pass


class OverridingOwner:
    def get_label(self, row: Item) -> str:
        return row.get_label().upper()


def test_row_accessor_used_when_owner_has_none() -> None:
    assert resolve_value(Item(1, "a"), Column("label"), PlainOwner()) == "a"


def test_owner_accessor_preferred_over_row() -> None:
    assert resolve_value(Item(1, "a"), Column("label"), OverridingOwner()) == "A"


def test_owner_can_compute_column_row_lacks() -> None:
    class Owner:
        def get_double(self, row: Item) -> int:
            return row.get_id() * 2

    assert resolve_value(Item(21, "x"), Column("double"), Owner()) == 42


def test_missing_accessor_names_accessor_and_both_types() -> None:
    with pytest.raises(MissingAccessor) as ei:
        resolve_value(Item(1, "a"), Column("price"), PlainOwner())

    err = ei.value
    assert err.accessor == "get_price"
    assert err.row_type == "Item"
    assert err.owner_type == "PlainOwner"
    msg = str(err)
    assert "get_price" in msg and "Item" in msg and "PlainOwner" in msg


def test_non_callable_attributes_are_not_accessors() -> None:
    class Row:
        get_label = "not callable"

    with pytest.raises(MissingAccessor):
        resolve_value(Row(), Column("label"), PlainOwner())


def test_skip_owner_falls_through_to_row() -> None:
    out = resolve_value(
        Item(1, "a"), Column("label"), OverridingOwner(), skip_owner={"get_label"}
    )
    assert out == "a"


def test_resolved_every_call_without_caching() -> None:
    calls: list[int] = []

    class Row:
        def get_id(self) -> int:
            calls.append(1)
            return len(calls)

    row = Row()
    assert resolve_value(row, Column("id"), PlainOwner()) == 1
    assert resolve_value(row, Column("id"), PlainOwner()) == 2


def test_resolve_row_keeps_column_order() -> None:
    cols = [Column("label"), Column("id")]
    assert resolve_row(Item(7, "z"), cols, PlainOwner()) == ["z", 7]
