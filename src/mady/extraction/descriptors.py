"""Structured message descriptors: ICU descriptor files and embedded catalogs.

Descriptors follow the shape produced by the react-intl extraction toolchain::

    {"id": "app.greeting", "defaultMessage": "Hello", "description": "...",
     "start": {"line": 3, "column": 10}, "end": {"line": 3, "column": 42}}
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Iterator, Mapping

from mady.errors import ExtractionError

EMBEDDED_CATALOG_EXTENSIONS = frozenset({".js", ".jsx", ".mjs", ".cjs"})

_DESCRIPTOR_CALLS = frozenset({"defineMessage", "formatMessage"})
_DESCRIPTOR_MAP_CALLS = frozenset({"defineMessages"})
_DESCRIPTOR_ELEMENTS = frozenset({"FormattedMessage", "FormattedHTMLMessage"})
_DESCRIPTOR_FIELDS = ("id", "defaultMessage", "description")


@dataclass(frozen=True)
class CodeLocation:
    line: int
    column: int


@dataclass(frozen=True)
class MessageDescriptor:
    """A message declared with an external id, as opposed to a bare call site."""

    id: str
    default_message: str
    description: str | None = None
    start: CodeLocation | None = None
    end: CodeLocation | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> MessageDescriptor | None:
        """Build a descriptor, or ``None`` when ``id``/``defaultMessage`` are missing."""

        message_id = data.get("id")
        default_message = data.get("defaultMessage")
        if not isinstance(message_id, str) or not isinstance(default_message, str):
            return None
        if not message_id or not default_message:
            return None
        description = data.get("description")
        return cls(
            id=message_id,
            default_message=default_message,
            description=description if isinstance(description, str) else None,
            start=_location(data.get("start")),
            end=_location(data.get("end")),
        )


def _location(value: Any) -> CodeLocation | None:
    if isinstance(value, Mapping) and "line" in value and "column" in value:
        return CodeLocation(line=int(value["line"]), column=int(value["column"]))
    return None


def parse_descriptor_file(path: str, contents: str) -> list[MessageDescriptor]:
    """Parse a JSON array of descriptors; entries that are not descriptors are ignored."""

    try:
        payload = json.loads(contents)
    except json.JSONDecodeError as error:
        raise ExtractionError(path, f"invalid JSON: {error}") from error

    if not isinstance(payload, list):
        return []
    descriptors = []
    for entry in payload:
        if isinstance(entry, Mapping):
            descriptor = MessageDescriptor.from_mapping(entry)
            if descriptor is not None:
                descriptors.append(descriptor)
    return descriptors


class EmbeddedCatalogExtractor:
    """Extract descriptors declared inside JavaScript sources using ``esprima``."""

    def __init__(self) -> None:
        import esprima

        self._esprima = esprima

    def extract(self, path: str, contents: str) -> list[MessageDescriptor]:
        nodes: list[Any] = []

        def collect(node: Any, metadata: Any) -> Any:
            if getattr(node, "type", None) in {"CallExpression", "JSXOpeningElement"}:
                nodes.append(node)
            return node

        options = {"jsx": True, "loc": True, "tolerant": True}
        try:
            self._esprima.parseModule(contents, options, collect)
        except Exception as module_error:
            nodes.clear()
            try:
                self._esprima.parseScript(contents, options, collect)
            except Exception:
                raise ExtractionError(path, str(module_error)) from module_error

        descriptors: list[MessageDescriptor] = []
        for node in nodes:
            if node.type == "CallExpression":
                descriptors.extend(self._from_call(node))
            else:
                descriptor = self._from_element(node)
                if descriptor is not None:
                    descriptors.append(descriptor)
        descriptors.sort(key=_position)
        return descriptors

    def _from_call(self, node: Any) -> Iterator[MessageDescriptor]:
        name = _callee_name(node.callee)
        arguments = list(getattr(node, "arguments", None) or [])
        if not arguments or getattr(arguments[0], "type", None) != "ObjectExpression":
            return
        if name in _DESCRIPTOR_MAP_CALLS:
            for prop in arguments[0].properties:
                value = getattr(prop, "value", None)
                if getattr(value, "type", None) == "ObjectExpression":
                    descriptor = _from_object(value)
                    if descriptor is not None:
                        yield descriptor
        elif name in _DESCRIPTOR_CALLS:
            descriptor = _from_object(arguments[0])
            if descriptor is not None:
                yield descriptor

    def _from_element(self, node: Any) -> MessageDescriptor | None:
        if getattr(node.name, "name", None) not in _DESCRIPTOR_ELEMENTS:
            return None
        fields: dict[str, Any] = {}
        for attribute in node.attributes or []:
            attribute_name = getattr(getattr(attribute, "name", None), "name", None)
            if attribute_name not in _DESCRIPTOR_FIELDS:
                continue
            value = attribute.value
            if getattr(value, "type", None) == "JSXExpressionContainer":
                value = value.expression
            literal = _string_literal(value)
            if literal is not None:
                fields[attribute_name] = literal
        return MessageDescriptor.from_mapping({**fields, **_node_range(node)})


def _callee_name(callee: Any) -> str | None:
    if getattr(callee, "type", None) == "Identifier":
        return callee.name
    if getattr(callee, "type", None) == "MemberExpression" and not getattr(
        callee, "computed", False
    ):
        return getattr(callee.property, "name", None)
    return None


def _string_literal(node: Any) -> str | None:
    if getattr(node, "type", None) == "Literal" and isinstance(node.value, str):
        return node.value
    if getattr(node, "type", None) == "TemplateLiteral" and not node.expressions:
        return "".join(_cooked(quasi.value) for quasi in node.quasis)
    return None


def _cooked(value: Any) -> str:
    if isinstance(value, Mapping):
        return value.get("cooked") or ""
    return getattr(value, "cooked", None) or ""


def _from_object(node: Any) -> MessageDescriptor | None:
    fields: dict[str, Any] = {}
    for prop in node.properties:
        key = getattr(prop, "key", None)
        name = getattr(key, "name", None) or getattr(key, "value", None)
        if name in _DESCRIPTOR_FIELDS:
            literal = _string_literal(getattr(prop, "value", None))
            if literal is not None:
                fields[name] = literal
    return MessageDescriptor.from_mapping({**fields, **_node_range(node)})


def _node_range(node: Any) -> dict[str, Any]:
    loc = getattr(node, "loc", None)
    if loc is None:
        return {}
    return {
        "start": {"line": loc.start.line, "column": loc.start.column},
        "end": {"line": loc.end.line, "column": loc.end.column},
    }


def _position(descriptor: MessageDescriptor) -> tuple[int, int]:
    if descriptor.start is None:
        return (0, 0)
    return (descriptor.start.line, descriptor.start.column)


__all__ = [
    "CodeLocation",
    "EMBEDDED_CATALOG_EXTENSIONS",
    "EmbeddedCatalogExtractor",
    "MessageDescriptor",
    "parse_descriptor_file",
]
