"""Import flat per-language catalogs written by legacy tooling.

A legacy directory holds one ``<lang>.json`` per language, mapping the source
message to its translation, either directly (``{"greeting_Hello": "Hola"}``)
or wrapped (``{"greeting_Hello": {"translated": "Hola", ...}}``).
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Iterable, Mapping

from mady.models import Key, Translation, key_id_for, split_message
from mady.storage import read_json

_LOGGER = logging.getLogger(__name__)

_RESERVED_STEMS = frozenset({"config", "keys", "translations"})


@dataclass(frozen=True)
class ImportSummary:
    langs_added: tuple[str, ...] = ()
    keys_created: int = 0
    translations_created: int = 0


@dataclass
class LegacyImport:
    """Records to add so the database covers every legacy catalog entry."""

    langs: list[str] = field(default_factory=list)
    keys: list[Key] = field(default_factory=list)
    translations: list[Translation] = field(default_factory=list)

    def summary(self) -> ImportSummary:
        return ImportSummary(
            langs_added=tuple(self.langs),
            keys_created=len(self.keys),
            translations_created=len(self.translations),
        )


def _legacy_text(value: Any) -> str | None:
    if isinstance(value, Mapping):
        value = value.get("translated") or value.get("translation")
    if isinstance(value, str) and value:
        return value
    return None


def read_legacy_catalogs(directory: Path) -> dict[str, dict[str, str]]:
    """Return ``{lang: {message: translation}}`` for each catalog in ``directory``."""

    catalogs: dict[str, dict[str, str]] = {}
    for path in sorted(Path(directory).glob("*.json")):
        lang = path.stem
        if "." in lang or lang.startswith("_") or lang in _RESERVED_STEMS:
            continue
        try:
            payload = read_json(path)
        except json.JSONDecodeError as error:
            _LOGGER.warning("Skipping unreadable legacy catalog %s: %s", path, error)
            continue
        if not isinstance(payload, Mapping):
            _LOGGER.warning("Skipping legacy catalog %s: not a JSON object", path)
            continue
        entries = {}
        for message, value in payload.items():
            text = _legacy_text(value)
            if text is not None:
                entries[str(message)] = text
        catalogs[lang] = entries
    return catalogs


def plan_legacy_import(
    catalogs: Mapping[str, Mapping[str, str]],
    *,
    langs: Iterable[str],
    keys: Mapping[str, Key],
    translations: Iterable[Translation],
    now: str,
    new_id: Callable[[], str],
) -> LegacyImport:
    """Work out the languages, keys and translations missing from the database.

    Existing translations for a ``(key, lang)`` pair are never overwritten.
    """

    plan = LegacyImport()
    known_langs = set(langs)
    known_keys = set(keys)
    covered = {(item.key_id, item.lang) for item in translations}

    for lang, entries in catalogs.items():
        if lang not in known_langs:
            known_langs.add(lang)
            plan.langs.append(lang)
        for message, text in entries.items():
            context, key_text = split_message(message)
            key_id = key_id_for(context, key_text)
            if key_id not in known_keys:
                known_keys.add(key_id)
                plan.keys.append(
                    Key(id=key_id, context=context, text=key_text, first_used=now)
                )
            if (key_id, lang) in covered:
                continue
            covered.add((key_id, lang))
            plan.translations.append(
                Translation(id=new_id(), key_id=key_id, lang=lang, translation=text)
            )
    return plan


__all__ = [
    "ImportSummary",
    "LegacyImport",
    "plan_legacy_import",
    "read_legacy_catalogs",
]
