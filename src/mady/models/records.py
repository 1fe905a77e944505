"""Pydantic records persisted by the key and translation stores."""

from __future__ import annotations

from typing import Any, ClassVar, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from mady import codec
from mady.errors import RecordValidationError

CONTEXT_SEPARATOR = "_"

__all__ = [
    "CONTEXT_SEPARATOR",
    "Key",
    "Record",
    "Translation",
    "build_record",
    "key_id_for",
    "join_message",
    "split_message",
]


def split_message(message: str) -> tuple[str | None, str]:
    """Split a raw message into ``(context, text)`` on the first separator."""

    tokens = message.split(CONTEXT_SEPARATOR)
    if len(tokens) >= 2:
        return tokens[0], CONTEXT_SEPARATOR.join(tokens[1:])
    return None, message


def join_message(context: str | None, text: str) -> str:
    """Return the source message a ``(context, text)`` pair was written as."""

    if context is None:
        return text
    return f"{context}{CONTEXT_SEPARATOR}{text}"


def key_id_for(context: str | None, text: str) -> str:
    """Derive the stable key id for a ``(context, text)`` pair."""

    return codec.encode(join_message(context, text))


class Record(BaseModel):
    """Frozen record serialised with camelCase aliases."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    optional_fields: ClassVar[frozenset[str]] = frozenset()

    def to_payload(self) -> dict[str, Any]:
        """Return the JSON-ready representation stored on disk."""

        payload = self.model_dump(mode="json", by_alias=True)
        for name in self.optional_fields:
            if payload.get(name) is None:
                payload.pop(name, None)
        return payload

    def merged(self, attrs: Mapping[str, Any]) -> Record:
        """Return a validated copy with ``attrs`` (field names or aliases) applied."""

        aliases = {
            name: field.alias or name for name, field in type(self).model_fields.items()
        }
        payload = self.to_payload()
        payload.update({aliases.get(name, name): value for name, value in attrs.items()})
        return build_record(type(self), payload)


class Key(Record):
    """A message identity extracted from source code."""

    optional_fields: ClassVar[frozenset[str]] = frozenset({"reactIntlId", "description"})

    id: str
    context: str | None = None
    text: str
    first_used: str | None = Field(default=None, alias="firstUsed")
    unused_since: str | None = Field(default=None, alias="unusedSince")
    sources: tuple[str, ...] = ()
    react_intl_id: str | None = Field(default=None, alias="reactIntlId")
    description: str | None = None

    @property
    def message(self) -> str:
        """The literal message the key was extracted from."""

        return join_message(self.context, self.text)


class Translation(Record):
    """A single language's rendering of a key."""

    id: str
    key_id: str = Field(alias="keyId")
    lang: str
    translation: str | None = None
    fuzzy: bool = False

    @field_validator("lang")
    @classmethod
    def _require_lang(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("Translation language must be specified")
        return value

    @field_validator("fuzzy", mode="before")
    @classmethod
    def _coerce_fuzzy(cls, value: Any) -> bool:
        return bool(value)


def build_record(model: type[Record], data: Mapping[str, Any]) -> Record:
    """Validate ``data`` into ``model``, surfacing failures as engine errors."""

    try:
        return model.model_validate(dict(data))
    except ValidationError as error:
        raise RecordValidationError(
            f"Invalid {model.__name__.lower()} attributes: {error}"
        ) from error
