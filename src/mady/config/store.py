"""Configuration store backed by ``config.json`` in a locale directory."""

from __future__ import annotations

import json
import logging
from copy import deepcopy
from functools import lru_cache
from pathlib import Path
from typing import Any, Mapping

import yaml
from pydantic import ValidationError

from mady.errors import ConfigurationError
from mady.storage.json_files import read_json, write_json

from .migrations import migrate
from .schema import DB_VERSION, EngineConfig

_LOGGER = logging.getLogger(__name__)

CONFIG_DIRECTORY = Path(__file__).resolve().parent / "data"
DEFAULTS_FILE = CONFIG_DIRECTORY / "defaults.yaml"
CONFIG_FILENAME = "config.json"


def _load_yaml(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, dict):
        raise ConfigurationError("Configuration file must define a mapping at the top level")
    return data


@lru_cache(maxsize=1)
def _load_defaults() -> dict[str, Any]:
    data = _load_yaml(DEFAULTS_FILE)
    data.setdefault("dbVersion", DB_VERSION)
    return data


def default_config_payload() -> dict[str, Any]:
    """Return a fresh copy of the built-in configuration defaults."""

    return deepcopy(_load_defaults())


def _validate(payload: Mapping[str, Any]) -> EngineConfig:
    try:
        return EngineConfig.model_validate(dict(payload))
    except ValidationError as error:
        raise ConfigurationError(f"Configuration validation failed: {error}") from error


class ConfigStore:
    """Owns the engine configuration of a single locale directory."""

    def __init__(self, locale_dir: Path) -> None:
        self.locale_dir = Path(locale_dir)
        self.path = self.locale_dir / CONFIG_FILENAME
        self._config: EngineConfig | None = None

    @property
    def config(self) -> EngineConfig:
        if self._config is None:
            raise ConfigurationError("Configuration has not been loaded")
        return self._config

    def load(self) -> bool:
        """Read, upgrade, default and persist the configuration.

        Returns ``True`` when a schema migration ran.
        """

        migrated = False
        if self.path.exists():
            _LOGGER.info("Reading file %s...", self.path)
            try:
                raw = read_json(self.path)
            except json.JSONDecodeError as error:
                raise ConfigurationError(f"Could not parse {self.path}: {error}") from error
            if not isinstance(raw, dict):
                raise ConfigurationError(f"{self.path} must contain a JSON object")
            if raw.get("dbVersion") != DB_VERSION:
                raw = migrate(self.locale_dir, raw)
                migrated = True
        else:
            raw = {}

        payload = {**default_config_payload(), **raw}
        self._save(_validate(payload))
        return migrated

    def update(self, attrs: Mapping[str, Any]) -> EngineConfig:
        """Merge ``attrs`` into the configuration, validate and persist it."""

        if "dbVersion" in attrs or "db_version" in attrs:
            raise ConfigurationError("The database version cannot be changed directly")
        payload = {**self.config.to_payload(), **_aliased(attrs)}
        updated = _validate(payload)
        self._save(updated)
        _LOGGER.debug("New config: %s", updated.to_payload())
        return updated

    def _save(self, config: EngineConfig) -> None:
        write_json(self.path, config.to_payload())
        self._config = config


def _aliased(attrs: Mapping[str, Any]) -> dict[str, Any]:
    """Translate Python field names in ``attrs`` into their on-disk aliases."""

    aliases = {
        name: field.alias
        for name, field in EngineConfig.model_fields.items()
        if field.alias
    }
    return {aliases.get(name, name): value for name, value in attrs.items()}


__all__ = [
    "CONFIG_DIRECTORY",
    "CONFIG_FILENAME",
    "ConfigStore",
    "DEFAULTS_FILE",
    "default_config_payload",
]
