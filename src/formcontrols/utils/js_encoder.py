"""Encode option mappings as script object literals.

``json.dumps`` quotes every string, which is wrong for options that have to
reach the browser as live script: a ``new Date(...)`` call, a callback
``function (...) {...}`` or a ``document.querySelector(...)`` lookup. Such
values are swapped for unique placeholders before serialization and spliced
back in, unquoted, afterwards.
"""
from __future__ import annotations

import json
import re
import uuid
from typing import Any, Mapping

_EXPRESSION_PATTERNS = (
    re.compile(r'new\s+Date\([^)]*\)', re.S),  # dates
    re.compile(r'function\s*\(.*\)\s*\{.*\}', re.S),  # functions
    re.compile(r'document\.querySelector\s*\(.*\)', re.S),  # elements
)


class RawExpression(str):
    """A string that is emitted verbatim (unquoted) by :func:`encode_options`."""

    def __repr__(self) -> str:
        return f"RawExpression({str.__repr__(self)})"


def looks_like_expression(text: str) -> bool:
    """Return True if ``text`` matches one of the recognized expression shapes."""
    return any(p.search(text) for p in _EXPRESSION_PATTERNS)


def is_raw_expression(value: Any, detect_expressions: bool = True) -> bool:
    if isinstance(value, RawExpression):
        return True
    if detect_expressions and isinstance(value, str):
        return looks_like_expression(value)
    return False


class _Substitutions:
    """Placeholder bookkeeping for a single encode call."""

    def __init__(self, detect_expressions: bool):
        self.detect_expressions = detect_expressions
        self.nonce = uuid.uuid4().hex
        self.pairs: list[tuple[str, str]] = []

    def placeholder(self, expression: str) -> str:
        token = f"{{{{raw:{self.nonce}:{len(self.pairs)}}}}}"
        self.pairs.append((json.dumps(token), str(expression)))
        return token

    def mark(self, value: Any) -> Any:
        if is_raw_expression(value, self.detect_expressions):
            return self.placeholder(value)
        if isinstance(value, Mapping):
            return {k: self.mark(v) for k, v in value.items()}
        if isinstance(value, (list, tuple)):
            return [self.mark(v) for v in value]
        return value


def encode_options(options: Mapping[str, Any] | None, detect_expressions: bool = True) -> str:
    """Serialize ``options`` to a script object literal.

    Args:
        options: Mapping of option names to scalars, lists, nested mappings or
            :class:`RawExpression` values.
        detect_expressions: Also treat plain strings that look like
            expressions as raw. Disable to require explicit tagging.

    Returns:
        Compact JSON text with raw expressions embedded unquoted. ``</`` is
        escaped so the result can sit inside a ``<script>`` element.
    """
    subs = _Substitutions(detect_expressions)
    marked = subs.mark(dict(options or {}))

    encoded = json.dumps(marked, separators=(',', ':'), ensure_ascii=False)
    encoded = encoded.replace('</', '<\\/')

    for quoted, expression in subs.pairs:
        encoded = encoded.replace(quoted, expression)
    return encoded
