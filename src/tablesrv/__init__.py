# src/tablesrv/__init__.py
from __future__ import annotations

from .callbacks import CallbackRegistry, RawExpression, encode_document, normalize
from .columns import Column, Columns
from .config import LanguageConfig, TableConfig
from .errors import (
    ConfigurationError,
    ConfigurationMissing,
    MissingAccessor,
    RequestError,
    TableError,
)
from .request import RequestParameters
from .resolver import resolve_value
from .result import DataResult
from .table import DataTable

__all__ = [
    "CallbackRegistry",
    "RawExpression",
    "encode_document",
    "normalize",
    "Column",
    "Columns",
    "LanguageConfig",
    "TableConfig",
    "ConfigurationError",
    "ConfigurationMissing",
    "MissingAccessor",
    "RequestError",
    "TableError",
    "RequestParameters",
    "resolve_value",
    "DataResult",
    "DataTable",
]
