from __future__ import annotations

import re
from typing import Callable

import pandas as pd
import pytest

from tablesrv.columns import Column, Columns
from tablesrv.config import TableConfig
from tablesrv.errors import ConfigurationMissing, MissingAccessor
from tablesrv.frame import DataFrameTable

from conftest import Item, ItemTable


def _body_rows(html: str) -> list[list[str]]:
    body = html.split("<tbody>", 1)[1].split("</tbody>", 1)[0]
    return [re.findall(r"<td[^>]*>(.*?)</td>", tr) for tr in re.findall(r"<tr>(.*?)</tr>", body)]


def test_static_render_scenario(make_table: Callable[..., ItemTable]) -> None:
    table = make_table(paging=False, static_max_length=2)
    html = table.render_html()

    assert _body_rows(html) == [["1", "a"], ["2", "b"]]

    req = table.requests[-1]
    assert req.offset == 0
    assert req.length == 2
    assert req.sort_column is None
    assert req.sort_direction == "asc"


def test_static_rows_capped_even_if_host_over_delivers(
    make_table: Callable[..., ItemTable],
) -> None:
    class Greedy(ItemTable):
        def load_data(self, request):  # type: ignore[no-untyped-def]
            result = super().load_data(request)
            return type(result)(data=self.items, total_count=len(self.items))

    table = Greedy(make_table(static_max_length=1).config)
    assert _body_rows(table.render_html()) == [["1", "a"]]


def test_static_request_uses_default_sort_column(
    make_table: Callable[..., ItemTable],
) -> None:
    cols = Columns(
        [Column("id"), Column("label", default_sort=True, default_sort_direction="desc")]
    )
    table = make_table(columns=cols)
    req = table.static_request()
    assert req.sort_column == 1
    assert req.sort_direction == "desc"
    assert req.length == table.config.static_max_length


def test_table_element_and_header(make_table: Callable[..., ItemTable]) -> None:
    cols = Columns([Column("id", title="ID"), Column("label", title="Label")])
    html = make_table(columns=cols, css_class="display compact").render_html()
    assert html.startswith(
        '<table cellpadding="0" cellspacing="0" border="0" class="display compact" id="items">'
    )
    assert "<thead><tr><th>ID</th><th>Label</th></tr></thead>" in html
    assert html.endswith("</tbody></table>")


def test_hidden_columns_still_emitted(make_table: Callable[..., ItemTable]) -> None:
    cols = Columns([Column("id", visible=False), Column("label")])
    html = make_table(columns=cols).render_html()
    assert '<th style="display: none;">id</th><th>label</th>' in html
    assert '<tr><td style="display: none;">1</td><td>a</td></tr>' in html


def test_server_side_renders_loading_row_without_loading_data(
    make_table: Callable[..., ItemTable],
) -> None:
    table = make_table(server_side=True, loading_html="<em>wait</em>")
    html = table.render_html()
    assert '<tbody><tr><td class="dataTables_empty"><em>wait</em></td></tr></tbody>' in html
    assert table.requests == []


def test_cell_values_escaped_by_default(make_table: Callable[..., ItemTable]) -> None:
    table = make_table(items=[Item(1, "<b>x</b>")])
    assert "<td>&lt;b&gt;x&lt;/b&gt;</td>" in table.render_html()


def test_cell_escaping_can_be_disabled(make_table: Callable[..., ItemTable]) -> None:
    table = make_table(items=[Item(1, "<b>x</b>")], escape_html=False)
    assert "<td><b>x</b></td>" in table.render_html()


def test_none_values_render_empty(make_table: Callable[..., ItemTable]) -> None:
    table = make_table(items=[Item(1, None)])  # type: ignore[arg-type]
    assert "<td>1</td><td></td>" in table.render_html()


def test_render_combines_table_and_script(make_table: Callable[..., ItemTable]) -> None:
    cols = Columns([Column("id", render="function(d){ return d; }"), Column("label")])
    out = make_table(columns=cols).render()
    assert out.index("</table>") < out.index("<script")
    assert '$("#items").DataTable({' in out
    assert "var items = " in out
    assert '"render": function(d){ return d; }' in out


def test_script_variable_name_is_a_valid_identifier(
    make_table: Callable[..., ItemTable],
) -> None:
    class Dashed(ItemTable):
        @property
        def table_id(self) -> str:
            return "2-user-table"

    out = Dashed(make_table().config).render_js()
    assert 'var _2_user_table = $("#2-user-table")' in out


def test_script_output_cannot_close_the_script_block() -> None:
    hostile = "</script><script>alert(1)//"
    df = pd.DataFrame({hostile: [1]})
    cols = Columns([Column(hostile, render="function(d){ return d; }")])
    table = DataFrameTable(df, TableConfig(columns=cols), table_id="t</script>")

    out = table.render_js()

    assert out.count("</script>") == 1
    assert out.rstrip().endswith("</script>")
    assert '"name": "<\\/script><script>alert(1)//"' in out
    assert '$("#t<\\/script>")' in out
    assert '"render": function(d){ return d; }' in out


@pytest.mark.parametrize("method", ["render_html", "render_options", "render_js"])
def test_render_without_config_rejected(
    make_table: Callable[..., ItemTable], method: str
) -> None:
    table = make_table()
    table.config = None  # type: ignore[assignment]
    with pytest.raises(ConfigurationMissing):
        getattr(table, method)()


def test_static_render_fails_on_missing_accessor(
    make_table: Callable[..., ItemTable],
) -> None:
    table = make_table(columns=Columns([Column("id"), Column("nope")]))
    with pytest.raises(MissingAccessor):
        table.render()
