"""Versioned upgrade hooks for locale directories written by older releases."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable

from mady.errors import MigrationError
from mady.storage.json_files import read_json, write_json

from .schema import DB_VERSION

_LOGGER = logging.getLogger(__name__)

LEGACY_TRANSLATIONS_FILE = "translations.json"

Migration = Callable[[Path, dict[str, Any]], dict[str, Any]]


def _split_translations_file(locale_dir: Path, config: dict[str, Any]) -> dict[str, Any]:
    """Move a single legacy ``translations.json`` into per-language files."""

    legacy_path = locale_dir / LEGACY_TRANSLATIONS_FILE
    if not legacy_path.exists():
        return config

    legacy = read_json(legacy_path)
    if not isinstance(legacy, dict):
        raise MigrationError(f"{legacy_path.name} must contain a mapping of translations")

    by_lang: dict[str, dict[str, Any]] = {}
    for translation_id, translation in legacy.items():
        if not isinstance(translation, dict) or not translation.get("lang"):
            _LOGGER.warning("Skipping malformed legacy translation %s", translation_id)
            continue
        entry = {**translation, "id": translation.get("id", translation_id)}
        by_lang.setdefault(entry["lang"], {})[entry["id"]] = entry

    langs = list(config.get("langs") or [])
    for lang, translations in by_lang.items():
        lang_path = locale_dir / f"{lang}.json"
        existing = read_json(lang_path) if lang_path.exists() else {}
        write_json(lang_path, {**translations, **existing})
        if lang not in langs:
            langs.append(lang)

    legacy_path.rename(legacy_path.with_suffix(".v1.json"))
    _LOGGER.info(
        "Split %s into %d language file(s)", LEGACY_TRANSLATIONS_FILE, len(by_lang)
    )
    return {**config, "langs": langs} if langs else config


MIGRATIONS: dict[int, Migration] = {
    1: _split_translations_file,
}


def migrate(
    locale_dir: Path,
    config: dict[str, Any],
    *,
    target: int = DB_VERSION,
    migrations: dict[int, Migration] | None = None,
) -> dict[str, Any]:
    """Upgrade ``config`` (and the files it describes) to ``target``.

    A missing ``dbVersion`` is treated as version 1.
    """

    registry = MIGRATIONS if migrations is None else migrations
    version = config.get("dbVersion")
    version = 1 if version is None else version
    if not isinstance(version, int):
        raise MigrationError(f"Unsupported database version {version!r}")
    if version > target:
        raise MigrationError(
            f"Database version {version} is newer than supported version {target}"
        )

    upgraded = dict(config)
    while version < target:
        step = registry.get(version)
        if step is None:
            raise MigrationError(f"No migration from database version {version}")
        _LOGGER.info("Upgrading database %d -> %d", version, version + 1)
        upgraded = step(locale_dir, upgraded)
        version += 1

    upgraded["dbVersion"] = target
    return upgraded


__all__ = ["LEGACY_TRANSLATIONS_FILE", "MIGRATIONS", "Migration", "migrate"]
