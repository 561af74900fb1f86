# src/tablesrv/table.py
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any
import json
import logging

from . import html as html_mod
from .callbacks import CallbackRegistry, RawExpression, encode_document
from .config import LanguageConfig, TableConfig
from .errors import ConfigurationMissing
from .request import RequestParameters
from .resolver import resolve_row
from .result import DataResult

logger = logging.getLogger(__name__)

# option key -> hook method; emitted only when the hook returns source
CALLBACK_HOOKS: tuple[tuple[str, str], ...] = (
    ("rowCallback", "row_callback"),
    ("initComplete", "init_complete"),
    ("drawCallback", "draw_callback"),
    ("footerCallback", "footer_callback"),
    ("headerCallback", "header_callback"),
    ("infoCallback", "info_callback"),
)

_LANGUAGE_PAGINATE = (
    ("first", "paginate_first"),
    ("last", "paginate_last"),
    ("next", "paginate_next"),
    ("previous", "paginate_previous"),
)
_LANGUAGE_KEYS = (
    ("emptyTable", "empty_table"),
    ("info", "info"),
    ("infoEmpty", "info_empty"),
    ("infoFiltered", "info_filtered"),
    ("infoPostFix", "info_post_fix"),
    ("lengthMenu", "length_menu"),
    ("search", "search"),
    ("zeroRecords", "zero_records"),
    ("url", "url"),
)


class DataTable(ABC):
    """
    Base class for a server-backed DataTables table.

    Subclasses provide ``table_id`` and ``load_data``. Cell values come from a
    ``get_<column>(row)`` method on the subclass if there is one, otherwise
    from ``row.get_<column>()``.

    Override any of ``row_callback``, ``init_complete``, ``draw_callback``,
    ``footer_callback``, ``header_callback`` or ``info_callback`` to return
    JavaScript source for the matching widget option.
    """

    def __init__(self, config: TableConfig | None = None) -> None:
        if config is None:
            raise ConfigurationMissing()
        self.config = config
        self._ajax_data_url: str | None = None

    # ---- host contract -----------------------------------------------------------

    @property
    @abstractmethod
    def table_id(self) -> str:
        """HTML id of the rendered table."""

    @abstractmethod
    def load_data(self, request: RequestParameters) -> DataResult:
        """Fetch one page of row objects for ``request``."""

    # ---- callback hooks ----------------------------------------------------------

    def row_callback(self) -> str | None:
        return None

    def init_complete(self) -> str | None:
        return None

    def draw_callback(self) -> str | None:
        return None

    def footer_callback(self) -> str | None:
        return None

    def header_callback(self) -> str | None:
        return None

    def info_callback(self) -> str | None:
        return None

    # ---- entry points ------------------------------------------------------------

    def render(self) -> str:
        """HTML table plus the script that instantiates the widget."""
        self._require_config()
        return self.render_html() + self.render_js()

    def render_json(self, request: RequestParameters) -> str:
        """Paged JSON response text for one widget data request."""
        return json.dumps(self.fetch(request), default=str)

    def fetch(self, request: RequestParameters) -> dict[str, Any]:
        self._require_config()
        result = self.load_data(request)
        response = self.build_paged_response(result, request)
        logger.debug(
            "%s: served %d rows (total=%d, display=%d, echo=%r)",
            self.table_id,
            len(response["data"]),
            response["iTotalRecords"],
            response["iTotalDisplayRecords"],
            request.echo,
        )
        return response

    # ---- ajax source -------------------------------------------------------------

    def set_ajax_data_url(self, url: str) -> None:
        self._ajax_data_url = url

    @property
    def ajax_source(self) -> str | None:
        """The config's ajax source if set, else the URL set on this table."""
        if self.config.ajax_source is not None:
            return self.config.ajax_source
        return self._ajax_data_url

    # ---- column helpers ----------------------------------------------------------

    def column_index(self, name: str) -> int:
        return self.config.columns.index_of(name)

    def searchable_column_names(self) -> list[str]:
        return self.config.columns.searchable_names()

    # ---- paged response ----------------------------------------------------------

    def resolve_row(self, row: Any) -> list[Any]:
        return resolve_row(row, self.config.columns, self, skip_owner=_BASE_ATTRS)

    def build_paged_response(
        self, result: DataResult, request: RequestParameters
    ) -> dict[str, Any]:
        rows = [self.resolve_row(obj) for obj in result.data]
        return {
            "iTotalRecords": result.total_count,
            "iTotalDisplayRecords": result.display_count,
            "data": rows,
            "sEcho": request.echo,
        }

    # ---- HTML --------------------------------------------------------------------

    def render_html(self) -> str:
        self._require_config()
        cfg = self.config
        header = html_mod.render_header(cfg.columns, escape=cfg.escape_html)

        if cfg.server_side:
            body = html_mod.render_loading_row(cfg.loading_html)
        else:
            body = self.render_static_rows()

        return html_mod.render_table(
            table_id=self.table_id,
            header_html=header,
            body_html=body,
            css_class=cfg.css_class,
        )

    def render_static_rows(self) -> str:
        columns = list(self.config.columns)
        escape = self.config.escape_html
        return "".join(
            html_mod.render_row(self.resolve_row(obj), columns, escape=escape)
            for obj in self.load_static_data()
        )

    def static_request(self) -> RequestParameters:
        """The request a non server-side table renders its rows with."""
        sort_column: int | None = None
        sort_direction = "asc"

        default = self.config.columns.default_sort()
        if default is not None:
            sort_column, col = default
            sort_direction = col.default_sort_direction

        return RequestParameters(
            offset=0,
            length=self.config.static_max_length,
            sort_column=sort_column,
            sort_direction=sort_direction,  # type: ignore[arg-type]
        )

    def load_static_data(self) -> list[Any]:
        request = self.static_request()
        logger.debug("%s: loading static rows with %r", self.table_id, request)
        result = self.load_data(request)
        return list(result.data)[: self.config.static_max_length]

    def render_js(self) -> str:
        return html_mod.render_init_script(self.table_id, self.render_options())

    # ---- widget options ----------------------------------------------------------

    def render_options(self) -> str:
        """Encoded options with callbacks emitted as bare JavaScript."""
        self._require_config()
        registry = CallbackRegistry()
        encoded = encode_document(self.build_options(), registry)
        logger.debug(
            "%s: encoded options with %d callback(s)", self.table_id, len(registry)
        )
        return encoded

    def build_options(self) -> dict[str, Any]:
        """
        The options document; callback entries are RawExpression nodes.
        """
        cfg = self.config
        options: dict[str, Any] = {
            "paging": cfg.paging,
            "lengthChange": cfg.length_change,
            "processing": cfg.processing,
            "searching": cfg.searching,
            "ordering": cfg.ordering,
            "info": cfg.info,
            "autoWidth": cfg.auto_width,
            "scrollCollapse": cfg.scroll_collapse,
            "pageLength": cfg.page_length,
            "jQueryUI": cfg.jquery_ui,
            "pagingType": cfg.paging_type,
            "stateSave": cfg.state_save,
            "stateDuration": cfg.state_duration,
            "columns": self.build_column_options(),
            "order": self.build_default_order(),
            "lengthMenu": self.build_length_menu(),
        }

        if cfg.server_side:
            options["serverSide"] = True
            options["sAjaxSource"] = self.ajax_source

        if cfg.scroll_x is not None:
            options["scrollX"] = cfg.scroll_x

        if cfg.scroll_y is not None:
            options["scrollY"] = cfg.scroll_y

        if cfg.language is not None:
            options["language"] = build_language_options(cfg.language)

        if cfg.dom is not None:
            options["dom"] = cfg.dom

        for key, hook in CALLBACK_HOOKS:
            source = getattr(self, hook)()
            if source is not None:
                options[key] = RawExpression(source)

        return options

    def build_column_options(self) -> list[dict[str, Any]]:
        out: list[dict[str, Any]] = []
        for col in self.config.columns:
            opts: dict[str, Any] = {
                "orderable": col.sortable,
                "name": col.name,
                "visible": col.visible,
                "searchable": col.searchable,
            }
            if col.width is not None:
                opts["width"] = col.width
            if col.css_class is not None:
                opts["className"] = col.css_class
            if col.render is not None:
                opts["render"] = RawExpression(col.render)
            out.append(opts)
        return out

    def build_default_order(self) -> list[list[Any]]:
        return [
            [i, col.default_sort_direction]
            for i, col in enumerate(self.config.columns)
            if col.default_sort
        ]

    def build_length_menu(self) -> list[list[Any]]:
        menu = self.config.length_menu
        return [list(menu.keys()), list(menu.values())]

    def _require_config(self) -> None:
        if getattr(self, "config", None) is None:
            raise ConfigurationMissing()


def build_language_options(language: LanguageConfig) -> dict[str, Any]:
    options: dict[str, Any] = {}

    paginate = {
        key: getattr(language, attr)
        for key, attr in _LANGUAGE_PAGINATE
        if getattr(language, attr) is not None
    }
    if paginate:
        options["paginate"] = paginate

    for key, attr in _LANGUAGE_KEYS:
        value = getattr(language, attr)
        if value is not None:
            options[key] = value

    return options


# accessor lookups on a table only consider what subclasses add
_BASE_ATTRS = frozenset(dir(DataTable))
