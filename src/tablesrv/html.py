# src/tablesrv/html.py
from __future__ import annotations

from typing import Any, Iterable, Sequence
import re

from .callbacks import script_safe_json
from .columns import Column

JQUERY_URL = "https://code.jquery.com/jquery-3.7.1.min.js"
DATATABLES_JS_URL = "https://cdn.datatables.net/1.13.8/js/jquery.dataTables.min.js"
DATATABLES_CSS_URL = "https://cdn.datatables.net/1.13.8/css/jquery.dataTables.min.css"

HIDDEN_STYLE = ' style="display: none;"'


def _escape_html(s: str) -> str:
    return (
        s.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&#39;")
    )


def _cell_text(value: Any, *, escape: bool) -> str:
    text = "" if value is None else str(value)
    return _escape_html(text) if escape else text


def render_header(columns: Iterable[Column], *, escape: bool = True) -> str:
    """
    One <th> per column. Hidden columns are still emitted so the widget can
    toggle them client-side.
    """
    cells = []
    for col in columns:
        style = "" if col.visible else HIDDEN_STYLE
        cells.append(f"<th{style}>{_cell_text(col.title, escape=escape)}</th>")
    return "<thead><tr>" + "".join(cells) + "</tr></thead>"


def render_row(
    values: Sequence[Any], columns: Sequence[Column], *, escape: bool = True
) -> str:
    cells = []
    for col, value in zip(columns, values):
        style = "" if col.visible else HIDDEN_STYLE
        cells.append(f"<td{style}>{_cell_text(value, escape=escape)}</td>")
    return "<tr>" + "".join(cells) + "</tr>"


def render_loading_row(loading_html: str) -> str:
    # loading_html is trusted markup from the table config
    return f'<tr><td class="dataTables_empty">{loading_html}</td></tr>'


def render_table(
    *,
    table_id: str,
    header_html: str,
    body_html: str,
    css_class: str | None = None,
) -> str:
    cls = _escape_html(css_class or "")
    tid = _escape_html(table_id)
    return (
        f'<table cellpadding="0" cellspacing="0" border="0" class="{cls}" id="{tid}">'
        f"{header_html}"
        f"<tbody>{body_html}</tbody>"
        "</table>"
    )


def render_init_script(table_id: str, options_js: str) -> str:
    """
    The jQuery ready-handler that instantiates the widget on the table.
    """
    var_name = re.sub(r"\W", "_", table_id)
    if not var_name or var_name[0].isdigit():
        var_name = "_" + var_name
    selector = script_safe_json("#" + table_id)
    return f"""
    <script type="text/javascript">
      $(document).ready(function(){{
        var {var_name} = $({selector}).DataTable({options_js});
      }});
    </script>
    """


def render_page(*, title: str, body: str, extra_css: str = "") -> str:
    """
    Return a standalone HTML page around an already rendered table + script.
    """
    return f"""
    <!DOCTYPE html>
    <html lang="en">
    <head>
      <meta charset="UTF-8" />
      <title>{_escape_html(title)}</title>
      <meta name="viewport" content="width=device-width, initial-scale=1" />
      <link href="{DATATABLES_CSS_URL}" rel="stylesheet">
      <script src="{JQUERY_URL}"></script>
      <script src="{DATATABLES_JS_URL}"></script>
      <style>
        body {{
          margin: 0;
          padding: 1rem;
          font-family: system-ui, -apple-system, BlinkMacSystemFont, "Segoe UI", sans-serif;
          background: #f5f5f5;
          color: #222;
        }}

        .table-frame {{
          background: #ffffff;
          border: 1px solid #ddd;
          border-radius: 6px;
          padding: 1rem;
        }}

        h1 {{
          font-size: 1.1rem;
          margin: 0 0 1rem 0;
        }}
        {extra_css}
      </style>
    </head>
    <body>
      <h1>{_escape_html(title)}</h1>
      <div class="table-frame">
        {body}
      </div>
    </body>
    </html>
    """
