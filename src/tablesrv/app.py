# src/tablesrv/app.py
from __future__ import annotations

from typing import Any
import logging

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, JSONResponse, Response

from . import html as html_mod
from .errors import RequestError, TableError
from .request import RequestParameters
from .table import DataTable

logger = logging.getLogger(__name__)

DEFAULT_DATA_PATH = "/data"
DEFAULT_PAGE_TITLE = "tablesrv"


def create_app(
    table: DataTable,
    *,
    data_path: str = DEFAULT_DATA_PATH,
    title: str = DEFAULT_PAGE_TITLE,
) -> FastAPI:
    """
    Serve one table:

      GET /           full HTML page (table skeleton + widget script)
      GET /options    encoded widget options
      GET data_path   paged JSON for server-side requests
    """
    app = FastAPI(title=title)
    table.set_ajax_data_url(data_path)

    @app.exception_handler(TableError)
    async def _table_error(request: Request, exc: TableError) -> JSONResponse:
        status = 422 if isinstance(exc, RequestError) else 500
        if status == 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc)
        return JSONResponse(
            status_code=status,
            content={"detail": str(exc), "error": type(exc).__name__},
        )

    @app.get("/", response_class=HTMLResponse)
    def index() -> HTMLResponse:
        return HTMLResponse(html_mod.render_page(title=title, body=table.render()))

    @app.get("/options")
    def options() -> Response:
        return Response(table.render_options(), media_type="application/javascript")

    @app.get(data_path)
    def data(request: Request) -> dict[str, Any]:
        params = RequestParameters.from_query(
            dict(request.query_params), columns=table.config.columns
        )
        return table.fetch(params)

    app.state.table = table
    return app
