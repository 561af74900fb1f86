# src/tablesrv/cli.py
from __future__ import annotations

from pathlib import Path
from typing import Any
import argparse
import logging
import sys

import pandas as pd

from .config import TableConfig
from .frame import DataFrameTable, columns_from_frame
from .server import DEFAULT_HOST, DEFAULT_PORT

logger = logging.getLogger(__name__)

_READERS = {
    ".csv": lambda p: pd.read_csv(p),
    ".tsv": lambda p: pd.read_csv(p, sep="\t"),
    ".json": lambda p: pd.read_json(p),
}


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="tablesrv", description="tablesrv – serve a data file as a DataTables grid"
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    serve_p = sub.add_parser("serve", help="Serve a CSV/TSV/JSON file as a table")
    serve_p.add_argument("path", help="Data file to serve")
    serve_p.add_argument(
        "--host", default=DEFAULT_HOST, help=f"Host to bind (default: {DEFAULT_HOST})"
    )
    serve_p.add_argument(
        "--port", type=int, default=DEFAULT_PORT, help=f"Port to bind (default: {DEFAULT_PORT})"
    )
    serve_p.add_argument(
        "--page-length",
        type=int,
        default=None,
        help="Rows per page (default: tablesrv.ini or 10)",
    )
    serve_p.add_argument(
        "--static",
        action="store_true",
        help="Pre-render rows into the page instead of serving them over ajax",
    )
    serve_p.add_argument("--title", default=None, help="Page title (default: file name)")
    serve_p.add_argument("--table-id", default="datatable", help="HTML id of the table")
    serve_p.add_argument(
        "--quiet",
        action="store_true",
        help="Reduce uvicorn logging noise",
    )
    serve_p.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="tablesrv log level (default: INFO)",
    )

    return p


def read_frame(path: Path) -> pd.DataFrame:
    reader = _READERS.get(path.suffix.lower())
    if reader is None:
        raise ValueError(
            f"unsupported file type {path.suffix!r}; expected one of "
            + ", ".join(sorted(_READERS))
        )
    return reader(path)


def build_table(
    df: pd.DataFrame,
    *,
    static: bool = False,
    page_length: int | None = None,
    table_id: str = "datatable",
) -> DataFrameTable:
    overrides: dict[str, Any] = {
        "server_side": not static,
        "paging": True,
        "length_change": True,
        "searching": True,
        "info": True,
    }
    if page_length is not None:
        overrides["page_length"] = page_length

    config = TableConfig.from_defaults(columns_from_frame(df), **overrides)
    return DataFrameTable(df, config, table_id=table_id)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    if args.cmd == "serve":
        logging.basicConfig(
            level=getattr(logging, args.log_level),
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )

        path = Path(args.path).expanduser()
        if not path.is_file():
            print(f"tablesrv: no such file: {path}", file=sys.stderr)
            return 2

        try:
            df = read_frame(path)
        except ValueError as e:
            print(f"tablesrv: {e}", file=sys.stderr)
            return 2
        logger.info("loaded %d rows x %d columns from %s", len(df), df.shape[1], path)

        table = build_table(
            df,
            static=args.static,
            page_length=args.page_length,
            table_id=args.table_id,
        )

        # imported late so `--help` doesn't pay for the web stack
        from .app import create_app
        from .server import serve

        app = create_app(table, title=args.title or path.name)
        try:
            serve(app, host=args.host, port=args.port, quiet=args.quiet)
        except KeyboardInterrupt:
            return 0

    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
