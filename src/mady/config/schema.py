"""Pydantic model describing the per-directory engine configuration."""

from __future__ import annotations

import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing_extensions import Self

from mady.errors import ConfigurationError
from mady.models import canonical_tag

DB_VERSION = 2


class EngineConfig(BaseModel):
    """Configuration persisted as ``config.json`` in a locale directory."""

    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True)

    src_paths: tuple[str, ...] = Field(alias="srcPaths")
    src_extensions: tuple[str, ...] = Field(alias="srcExtensions")
    langs: tuple[str, ...]
    msg_function_names: tuple[str, ...] = Field(alias="msgFunctionNames")
    msg_regexps: tuple[str, ...] = Field(default=(), alias="msgRegexps")
    minify: bool = Field(default=False, alias="fMinify")
    js_output: bool = Field(default=True, alias="fJsOutput")
    json_output: bool = Field(default=True, alias="fJsonOutput")
    react_intl_output: bool = Field(default=True, alias="fReactIntlOutput")
    db_version: int = Field(default=DB_VERSION, alias="dbVersion")

    @field_validator("src_extensions", mode="before")
    @classmethod
    def _normalise_extensions(cls, value: Any) -> Any:
        if isinstance(value, (list, tuple)):
            return tuple(
                ext if str(ext).startswith(".") else f".{ext}" for ext in value
            )
        return value

    @field_validator("langs")
    @classmethod
    def _validate_langs(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        if not value:
            raise ConfigurationError("At least one language must be configured")
        if any(not lang.strip() for lang in value):
            raise ConfigurationError("Language tags must be non-empty")
        if len({canonical_tag(lang) for lang in value}) != len(value):
            raise ConfigurationError("Language tags must be unique (`-` and `_` are equivalent)")
        return value

    @field_validator("msg_regexps")
    @classmethod
    def _validate_regexps(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        for expression in value:
            try:
                compiled = re.compile(expression, re.MULTILINE)
            except re.error as error:
                raise ConfigurationError(
                    f"Invalid message regular expression {expression!r}: {error}"
                ) from error
            if compiled.groups < 1:
                raise ConfigurationError(
                    f"Message regular expression {expression!r} needs a capture group"
                )
        return value

    @model_validator(mode="after")
    def _validate_sources(self) -> Self:
        if not self.msg_function_names and not self.msg_regexps:
            raise ConfigurationError(
                "Configure at least one message function name or regular expression"
            )
        return self

    def to_payload(self) -> dict[str, Any]:
        """Return the JSON-ready representation written to ``config.json``."""

        return self.model_dump(mode="json", by_alias=True)


__all__ = ["DB_VERSION", "EngineConfig"]
