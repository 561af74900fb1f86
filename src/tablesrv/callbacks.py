# src/tablesrv/callbacks.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterator
import hashlib
import json
import re

_BLOCK_COMMENT_RE = re.compile(r"/\*.*?\*/", re.DOTALL)
_LINE_COMMENT_RE = re.compile(r"//[^\n]*")
_LINEBREAK_RE = re.compile(r"[\t\r\n]+")


@dataclass(frozen=True, slots=True)
class RawExpression:
    """
    Client-side code that must land in the options unquoted, e.g. a render
    function. Anywhere else in the document values are plain JSON data.
    """

    source: str


def normalize(source: str) -> str:
    """
    Canonical single-line form of a callback: comments and line breaks/tabs
    removed, outer whitespace trimmed.

    Purely textual: ``//`` or ``/*`` inside string or regex literals is
    treated as a comment too.
    """
    out = source
    while True:
        prev = out
        out = _BLOCK_COMMENT_RE.sub("", out)
        out = _LINE_COMMENT_RE.sub("", out)
        out = _LINEBREAK_RE.sub("", out).strip()
        if out == prev:
            return out


class CallbackRegistry:
    """
    key -> normalized source for one serialization pass.

    Create one per render; never share an instance between concurrent passes.
    """

    def __init__(self) -> None:
        self._functions: dict[str, str] = {}

    def __len__(self) -> int:
        return len(self._functions)

    def __iter__(self) -> Iterator[tuple[str, str]]:
        return iter(self._functions.items())

    def __contains__(self, key: object) -> bool:
        return key in self._functions

    def register(self, source: str) -> str:
        js = normalize(source)
        key = hashlib.md5(js.encode("utf-8")).hexdigest()
        self._functions[key] = js
        return key

    def substitute(self, encoded: str) -> str:
        """Replace every quoted key in ``encoded`` with its bare source."""
        for key, js in self._functions.items():
            encoded = encoded.replace(f'"{key}"', js)
        return encoded


def script_safe_json(value: Any) -> str:
    # "<\/" is the same JSON string as "</" but cannot close a <script> block
    return json.dumps(value).replace("</", "<\\/")


def _register_expressions(node: Any, registry: CallbackRegistry) -> Any:
    if isinstance(node, RawExpression):
        return registry.register(node.source)
    if isinstance(node, dict):
        return {k: _register_expressions(v, registry) for k, v in node.items()}
    if isinstance(node, (list, tuple)):
        return [_register_expressions(v, registry) for v in node]
    return node


def encode_document(document: Any, registry: CallbackRegistry | None = None) -> str:
    """
    JSON-encode ``document`` with every RawExpression emitted as bare code.

    Expressions are swapped for registry keys, the result is encoded, then the
    quoted keys are substituted back with the normalized sources. "</" in
    data strings is written as "<\\/" so the output can sit inside <script>.
    """
    if registry is None:
        registry = CallbackRegistry()
    data = _register_expressions(document, registry)
    return registry.substitute(script_safe_json(data))
