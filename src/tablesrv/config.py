# src/tablesrv/config.py
from __future__ import annotations

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Iterable, Literal
import configparser
import logging
import os

from .columns import Column, Columns

logger = logging.getLogger(__name__)

PagingType = Literal[
    "full_numbers", "two_button", "simple", "simple_numbers", "full", "numbers"
]

PAGING_TYPE_FULL_NUMBERS: PagingType = "full_numbers"
PAGING_TYPE_TWO_BUTTON: PagingType = "two_button"

DEFAULT_LENGTH_MENU: dict[int, int | str] = {10: 10, 25: 25, 50: 50, 100: 100}
DEFAULT_LOADING_HTML = "<p>loading data</p>"

INI_ENV_VAR = "TABLESRV_INI"
INI_FILENAME = "tablesrv.ini"
INI_SECTION = "table-defaults"


@dataclass(slots=True)
class LanguageConfig:
    """Caller-supplied widget strings; unset entries keep the widget defaults."""

    paginate_first: str | None = None
    paginate_last: str | None = None
    paginate_next: str | None = None
    paginate_previous: str | None = None
    empty_table: str | None = None
    info: str | None = None
    info_empty: str | None = None
    info_filtered: str | None = None
    info_post_fix: str | None = None
    length_menu: str | None = None
    search: str | None = None
    zero_records: str | None = None
    url: str | None = None


@dataclass(slots=True)
class TableConfig:
    """
    All table-level settings plus the column collection.

    Defaults describe a static (non server-side) table with paging, search
    and info switched off.
    """

    columns: Columns
    page_length: int = 10
    ajax_source: str | None = None
    processing: bool = True
    server_side: bool = False
    paging: bool = False
    length_change: bool = False
    searching: bool = False
    info: bool = False
    ordering: bool = True
    jquery_ui: bool = False
    auto_width: bool = True
    scroll_collapse: bool = False
    css_class: str | None = None
    length_menu: dict[int, int | str] = field(
        default_factory=lambda: dict(DEFAULT_LENGTH_MENU)
    )
    scroll_x: str | bool | None = None
    scroll_y: str | None = None
    paging_type: PagingType = PAGING_TYPE_FULL_NUMBERS
    language: LanguageConfig | None = None
    loading_html: str = DEFAULT_LOADING_HTML
    state_duration: int = 7200
    state_save: bool = False
    dom: str | None = None
    static_max_length: int = 100
    escape_html: bool = True

    def __post_init__(self) -> None:
        if not isinstance(self.columns, Columns):
            self.columns = Columns(self.columns)

    @classmethod
    def from_defaults(
        cls,
        columns: Columns | Iterable[Column],
        *,
        ini_path: Path | None = None,
        **overrides: Any,
    ) -> "TableConfig":
        """
        Build a config seeded from ``tablesrv.ini`` (if any), then ``overrides``.
        """
        values = load_table_defaults(ini_path)
        values.update(overrides)
        return cls(columns=columns, **values)  # type: ignore[arg-type]


# ---- ini defaults ----------------------------------------------------------------

_BOOL_KEYS = {
    "paging",
    "length_change",
    "searching",
    "info",
    "ordering",
    "processing",
    "state_save",
    "jquery_ui",
    "auto_width",
    "scroll_collapse",
    "escape_html",
}
_INT_KEYS = {"page_length", "state_duration", "static_max_length"}
_STR_KEYS = {"paging_type", "dom", "css_class", "loading_html"}


def _strip_quotes(s: str) -> str:
    s = s.strip()
    if len(s) >= 2 and ((s[0] == s[-1] == "'") or (s[0] == s[-1] == '"')):
        return s[1:-1].strip()
    return s


def _resolve_ini_path() -> Path | None:
    """
    Resolution order:
      1) env var TABLESRV_INI
      2) ./tablesrv.ini (cwd)
      3) None
    """
    env_path = os.environ.get(INI_ENV_VAR)
    if env_path:
        p = Path(env_path).expanduser()
        if p.exists() and p.is_file():
            return p

    cwd_ini = Path.cwd() / INI_FILENAME
    if cwd_ini.exists() and cwd_ini.is_file():
        return cwd_ini

    return None


def _parse_int(raw: str) -> int | None:
    try:
        return int(float(_strip_quotes(raw)))
    except ValueError:
        return None


def load_table_defaults(path: Path | None = None) -> dict[str, Any]:
    """
    Read the ``[table-defaults]`` section and return only the keys it sets.

    Values that don't parse are skipped (and logged) rather than failing.
    """
    ini_path = path if path is not None else _resolve_ini_path()
    if ini_path is None:
        return {}

    cfg = configparser.ConfigParser()
    cfg.read(ini_path)
    if not cfg.has_section(INI_SECTION):
        return {}

    known = {f.name for f in fields(TableConfig)}
    out: dict[str, Any] = {}

    for key, raw in cfg.items(INI_SECTION):
        if key not in known:
            logger.warning("%s: ignoring unknown key %r", ini_path, key)
            continue

        if key in _BOOL_KEYS:
            try:
                out[key] = cfg.getboolean(INI_SECTION, key)
            except ValueError:
                logger.warning("%s: %s=%r is not a boolean", ini_path, key, raw)
        elif key in _INT_KEYS:
            value = _parse_int(raw)
            if value is None or value < 0:
                logger.warning("%s: %s=%r is not a valid count", ini_path, key, raw)
            else:
                out[key] = value
        elif key in _STR_KEYS:
            out[key] = _strip_quotes(raw)
        else:
            logger.warning("%s: key %r cannot be set from ini", ini_path, key)

    return out
