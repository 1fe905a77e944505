"""Compile ICU MessageFormat translations into a CommonJS formatter bundle.

Messages are parsed with ``pyicumessageformat`` and turned into JavaScript
functions of a single ``d`` (data) argument. Plural and ordinal categories
come from the CLDR rules shipped with Babel.
"""

from __future__ import annotations

import json
from functools import lru_cache
from typing import Any, Mapping

import rjsmin
from babel import Locale, UnknownLocaleError
from babel.plural import PluralRule, to_javascript
from pyicumessageformat import Parser

from .hierarchy import language_tokens

_PARSER = Parser()

_RUNTIME = """\
var number = function (value, offset) {
  if (isNaN(value)) throw new Error("'" + value + "' isn't a number.");
  return value - (offset || 0);
};
var plural = function (value, offset, rule, data) {
  if ({}.hasOwnProperty.call(data, "=" + value)) return data["=" + value];
  if (offset) value -= offset;
  var key = rule(value);
  return {}.hasOwnProperty.call(data, key) ? data[key] : data.other;
};
var select = function (value, data) {
  return {}.hasOwnProperty.call(data, value) ? data[value] : data.other;
};
"""

_ORDINAL_TYPES = frozenset({"selectordinal"})
_PLURAL_TYPES = frozenset({"plural", "selectordinal"})


class MessageSyntaxError(ValueError):
    """Raised when a translation is not valid ICU MessageFormat."""


def js_string(value: str) -> str:
    """Return ``value`` as a JavaScript string literal."""

    literal = json.dumps(value, ensure_ascii=False)
    return literal.replace("\u2028", "\\u2028").replace("\u2029", "\\u2029")


@lru_cache(maxsize=None)
def plural_functions(lang: str) -> tuple[str, str]:
    """Return the cardinal and ordinal category functions for ``lang``.

    The most specific locale Babel knows is used; unknown languages map
    every number to ``other``.
    """

    tokens = language_tokens(lang)
    for depth in range(len(tokens), 0, -1):
        try:
            locale = Locale.parse("_".join(tokens[:depth]))
        except (UnknownLocaleError, ValueError):
            continue
        return to_javascript(locale.plural_form), to_javascript(locale.ordinal_form)
    fallback = to_javascript(PluralRule({}))
    return fallback, fallback


def compile_message(message: str) -> str:
    """Compile ``message`` into a JavaScript function expression."""

    try:
        nodes = _PARSER.parse(message)
    except (SyntaxError, ValueError, TypeError) as error:
        raise MessageSyntaxError(f"{message!r}: {error}") from error
    return f"function(d) {{ return {_concat(nodes, None)}; }}"


def _concat(nodes: list[Any], plural: Mapping[str, Any] | None) -> str:
    parts = [_node(node, plural) for node in nodes]
    if not parts:
        return '""'
    if not isinstance(nodes[0], str):
        parts.insert(0, '""')
    return " + ".join(parts)


def _node(node: Any, plural: Mapping[str, Any] | None) -> str:
    if isinstance(node, str):
        return js_string(node)

    name = js_string(str(node.get("name")))
    value = f"d[{name}]"
    if node.get("hash"):
        offset = int((plural or {}).get("offset") or 0)
        return f"number({value}, {offset})"

    node_type = node.get("type")
    options = node.get("options")
    if node_type in _PLURAL_TYPES and isinstance(options, Mapping):
        offset = int(node.get("offset") or 0)
        rule = "ordinalRule" if node_type in _ORDINAL_TYPES else "cardinalRule"
        return f"plural({value}, {offset}, {rule}, {_options(options, node)})"
    if node_type == "select" and isinstance(options, Mapping):
        return f"select({value}, {_options(options, None)})"
    if node_type == "number":
        return f"number({value}, 0)"
    return value


def _options(options: Mapping[str, Any], plural: Mapping[str, Any] | None) -> str:
    entries = ", ".join(
        f"{js_string(str(selector))}: {_concat(list(branch), plural)}"
        for selector, branch in options.items()
    )
    return f"{{ {entries} }}"


def render_bundle(lang: str, formatters: Mapping[str, str], *, minify: bool = False) -> str:
    """Render the module mapping each source message to its compiled formatter."""

    cardinal, ordinal = plural_functions(lang)
    lines = [
        "/* eslint-disable */",
        _RUNTIME.rstrip("\n"),
        # Babel leaves unsupported CLDR operands as free variables.
        f"var cardinalRule = (function () {{ var e = 0, c = 0; return {cardinal}; }})();",
        f"var ordinalRule = (function () {{ var e = 0, c = 0; return {ordinal}; }})();",
        "module.exports = {",
    ]
    for message in sorted(formatters):
        lines.append(f"  {js_string(message)}: {formatters[message]},")
    lines.append("};")
    source = "\n".join(lines) + "\n"
    if minify:
        return rjsmin.jsmin(source)
    return source


__all__ = [
    "MessageSyntaxError",
    "compile_message",
    "js_string",
    "plural_functions",
    "render_bundle",
]
