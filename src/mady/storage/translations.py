"""Translation store: one ``<lang>.json`` file per language, queried globally."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, Iterable, Mapping
from uuid import uuid4

from mady.errors import RecordNotFoundError, RecordValidationError
from mady.models import Translation, build_record, canonical_tag

from .json_files import read_json, read_json_or_create, write_json

_LOGGER = logging.getLogger(__name__)


def translations_path(locale_dir: Path, lang: str) -> Path:
    return Path(locale_dir) / f"{lang}.json"


class TranslationStore:
    """Sole writer of the per-language translation files.

    Translations live in a single insertion-ordered mapping; that order is the
    storage order the compiler relies on when several translations target the
    same key and language. Tags that differ only in their separator (``pt-BR``,
    ``pt_BR``) are stored under the spelling the language was loaded with.
    """

    def __init__(
        self,
        locale_dir: Path,
        *,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        self.locale_dir = Path(locale_dir)
        self._id_factory = id_factory or (lambda: str(uuid4()))
        self._translations: dict[str, Translation] = {}
        self._loaded_langs: set[str] = set()
        self._labels: dict[str, str] = {}

    def load(self, langs: Iterable[str], optional_langs: Iterable[str] = ()) -> None:
        """Read the files of ``langs`` (creating them) and of ``optional_langs`` if present."""

        langs = list(langs)
        optional_langs = list(optional_langs)
        for lang in langs:
            self._labels[canonical_tag(lang)] = lang
        for lang in optional_langs:
            self._labels.setdefault(canonical_tag(lang), lang)

        for lang in langs:
            if lang in self._loaded_langs:
                continue
            self._read(lang, read_json_or_create(translations_path(self.locale_dir, lang), {}))
        for lang in optional_langs:
            if lang in self._loaded_langs:
                continue
            path = translations_path(self.locale_dir, lang)
            if path.exists():
                _LOGGER.info("Reading file %s...", path)
                self._read(lang, read_json(path))

    def label(self, lang: str) -> str:
        """Return the spelling ``lang`` is stored under."""

        return self._labels.get(canonical_tag(lang), lang)

    def _read(self, lang: str, raw: Any) -> None:
        if not isinstance(raw, dict):
            raise RecordValidationError(f"Translations for '{lang}' must be a JSON object")
        for translation_id, attrs in raw.items():
            translation = build_record(Translation, {"id": translation_id, **attrs})
            self._translations[translation.id] = self._relabelled(translation)
        self._loaded_langs.add(lang)

    def get_all(self) -> list[Translation]:
        return list(self._translations.values())

    def get(self, translation_id: str) -> Translation | None:
        return self._translations.get(translation_id)

    def get_by_lang(self, lang: str) -> list[Translation]:
        lang = self.label(lang)
        return [item for item in self._translations.values() if item.lang == lang]

    def get_by_key(self, key_id: str) -> list[Translation]:
        return [item for item in self._translations.values() if item.key_id == key_id]

    def create(self, attrs: Mapping[str, Any]) -> Translation:
        lang = attrs.get("lang")
        key_id = attrs.get("keyId", attrs.get("key_id"))
        if not lang:
            raise RecordValidationError("Translation language must be specified")
        if key_id is None:
            raise RecordValidationError("Translation key must be specified")

        payload = {
            "id": self._id_factory(),
            "keyId": key_id,
            "lang": self.label(lang),
            "translation": attrs.get("translation"),
            "fuzzy": attrs.get("fuzzy", False),
        }
        translation = build_record(Translation, payload)
        self._commit(
            {**self._translations, translation.id: translation}, [translation.lang]
        )
        return translation

    def update(self, translation_id: str, attrs: Mapping[str, Any]) -> Translation:
        current = self._require(translation_id)
        updated = self._relabelled(current.merged(attrs))
        if updated.id != current.id:
            raise RecordValidationError("Translation ids are immutable")
        self._commit(
            {**self._translations, translation_id: updated}, [updated.lang, current.lang]
        )
        return updated

    def delete(self, translation_id: str) -> Translation:
        translation = self._require(translation_id)
        translations = dict(self._translations)
        del translations[translation_id]
        self._commit(translations, [translation.lang])
        return translation

    def add_many(self, translations: Iterable[Translation]) -> list[Translation]:
        """Append already-built translations and rewrite the affected files."""

        added = [self._relabelled(item) for item in translations]
        self._commit(
            {**self._translations, **{item.id: item for item in added}},
            [item.lang for item in added],
        )
        return added

    def new_id(self) -> str:
        return self._id_factory()

    def _relabelled(self, translation: Translation) -> Translation:
        lang = self.label(translation.lang)
        if lang == translation.lang:
            return translation
        return translation.model_copy(update={"lang": lang})

    def _require(self, translation_id: str) -> Translation:
        translation = self._translations.get(translation_id)
        if translation is None:
            raise RecordNotFoundError(f"Unknown translation '{translation_id}'")
        return translation

    def _commit(self, translations: dict[str, Translation], langs: Iterable[str]) -> None:
        """Write the files of ``langs`` from ``translations``, then make it the live mapping.

        Files already rewritten are restored from the live mapping when a later
        write fails.
        """

        written: list[str] = []
        try:
            for lang in dict.fromkeys(langs):
                self._write(translations, lang)
                written.append(lang)
        except OSError:
            for lang in written:
                self._write(self._translations, lang)
            raise
        self._translations = translations
        self._loaded_langs.update(written)

    def _write(self, translations: Mapping[str, Translation], lang: str) -> None:
        write_json(
            translations_path(self.locale_dir, lang),
            {item.id: item.to_payload() for item in translations.values() if item.lang == lang},
        )


__all__ = ["TranslationStore", "translations_path"]
