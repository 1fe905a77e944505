"""Engine facade owning the stores of one locale directory.

Every mutating entry point runs as one step of a serialised pipeline::

    IDLE -> SCANNING | MUTATING -> RESOLVING -> COMPILING -> IDLE

The instance lock is the queue: a second mutation waits until the running one
has written its records and regenerated every output bundle. Readers receive
lists and dicts of frozen records, never the live maps.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from enum import Enum
from pathlib import Path
from threading import RLock
from typing import Any, Callable, Iterator, Mapping

from mady.compiler import OutputOptions, resolve_candidates, write_bundles
from mady.compiler.hierarchy import hierarchy_languages
from mady.config import ConfigStore, EngineConfig
from mady.extraction import ScanOptions, SourceScanner, resolve_catalog_toolchain
from mady.importers import ImportSummary, plan_legacy_import, read_legacy_catalogs
from mady.models import Key, Translation
from mady.storage import Clock, KeyStore, TranslationStore

_LOGGER = logging.getLogger(__name__)


class PipelineState(str, Enum):
    IDLE = "idle"
    SCANNING = "scanning"
    MUTATING = "mutating"
    RESOLVING = "resolving"
    COMPILING = "compiling"


class LocaleDatabase:
    """Keys, translations and configuration of a single locale directory."""

    def __init__(
        self,
        locale_dir: str | Path,
        *,
        structured_messages: bool = False,
        catalog_toolchain: bool | None = None,
        source_root: str | Path | None = None,
        clock: Clock | None = None,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        self.locale_dir = Path(locale_dir)
        self.structured_messages = structured_messages
        self.source_root = Path(source_root) if source_root is not None else None
        self.catalog_toolchain = False
        self._requested_toolchain = catalog_toolchain
        self._config = ConfigStore(self.locale_dir)
        self._keys = KeyStore(self.locale_dir, clock=clock)
        self._translations = TranslationStore(self.locale_dir, id_factory=id_factory)
        self._lock = RLock()
        self._state = PipelineState.IDLE

    @property
    def state(self) -> PipelineState:
        return self._state

    def initialize(self, *, recompile: bool = False) -> None:
        """Load configuration, keys and translations; compile when asked or migrated."""

        with self._lock:
            if not self.locale_dir.exists():
                _LOGGER.debug("Creating folder %s...", self.locale_dir)
                self.locale_dir.mkdir(parents=True)
            migrated = self._config.load()
            self._keys.load()
            self._load_translations(self._config.config.langs)
            if not self.structured_messages:
                self.catalog_toolchain = resolve_catalog_toolchain(self._requested_toolchain)
            if migrated or recompile:
                self._compile()

    # ------------------------------------------------------------------
    # Config
    # ------------------------------------------------------------------
    def get_config(self) -> EngineConfig:
        return self._config.config

    def update_config(
        self, attrs: Mapping[str, Any] | None = None, **changes: Any
    ) -> EngineConfig:
        with self._pipeline(PipelineState.MUTATING):
            config = self._config.update({**(attrs or {}), **changes})
            self._load_translations(config.langs)
            self._compile()
            return config

    # ------------------------------------------------------------------
    # Keys
    # ------------------------------------------------------------------
    def get_keys(self) -> list[Key]:
        return self._keys.get_all()

    def get_key(self, key_id: str) -> Key | None:
        return self._keys.get(key_id)

    def create_key(self, attrs: Mapping[str, Any]) -> Key:
        with self._pipeline(PipelineState.MUTATING):
            key = self._keys.create(attrs)
            self._compile()
            return key

    def update_key(self, key_id: str, attrs: Mapping[str, Any]) -> Key:
        with self._pipeline(PipelineState.MUTATING):
            key = self._keys.update(key_id, attrs)
            self._compile()
            return key

    def delete_key(self, key_id: str) -> Key:
        with self._pipeline(PipelineState.MUTATING):
            key = self._keys.delete(key_id)
            self._compile()
            return key

    def scan(self) -> dict[str, Key]:
        """Rescan the configured sources and reconcile the key store."""

        with self._pipeline(PipelineState.SCANNING):
            options = ScanOptions.from_config(
                self._config.config,
                structured_messages=self.structured_messages,
                embedded_catalog=self.catalog_toolchain,
                root=self.source_root,
            )
            fresh = SourceScanner(options).scan()
            keys = self._keys.reconcile(fresh)
            self._compile()
            return keys

    # ------------------------------------------------------------------
    # Translations
    # ------------------------------------------------------------------
    def get_translations(self) -> list[Translation]:
        return self._translations.get_all()

    def get_lang_translations(self, lang: str) -> list[Translation]:
        return self._translations.get_by_lang(lang)

    def get_key_translations(self, key_id: str) -> list[Translation]:
        return self._translations.get_by_key(key_id)

    def get_translation(self, translation_id: str) -> Translation | None:
        return self._translations.get(translation_id)

    def create_translation(self, attrs: Mapping[str, Any]) -> Translation:
        with self._pipeline(PipelineState.MUTATING):
            translation = self._translations.create(attrs)
            self._compile()
            return translation

    def update_translation(self, translation_id: str, attrs: Mapping[str, Any]) -> Translation:
        with self._pipeline(PipelineState.MUTATING):
            translation = self._translations.update(translation_id, attrs)
            self._compile()
            return translation

    def delete_translation(self, translation_id: str) -> Translation:
        with self._pipeline(PipelineState.MUTATING):
            translation = self._translations.delete(translation_id)
            self._compile()
            return translation

    # ------------------------------------------------------------------
    # Compilation and import
    # ------------------------------------------------------------------
    def compile_translations(self) -> list[Path]:
        with self._pipeline(PipelineState.RESOLVING):
            return self._compile()

    def import_legacy(self, directory: str | Path) -> ImportSummary:
        """Merge flat legacy catalogs from ``directory`` and recompile once."""

        with self._pipeline(PipelineState.MUTATING):
            catalogs = read_legacy_catalogs(Path(directory))
            config = self._config.config
            plan = plan_legacy_import(
                catalogs,
                langs=config.langs,
                keys=self._keys.as_mapping(),
                translations=self._translations.get_all(),
                now=self._keys.now(),
                new_id=self._translations.new_id,
            )
            if plan.langs:
                config = self._config.update({"langs": [*config.langs, *plan.langs]})
                self._load_translations(config.langs)
            if plan.keys:
                self._keys.add_many(plan.keys)
            if plan.translations:
                self._translations.add_many(plan.translations)
            summary = plan.summary()
            _LOGGER.info(
                "Imported %d key(s) and %d translation(s) from %s",
                summary.keys_created,
                summary.translations_created,
                directory,
            )
            self._compile()
            return summary

    # ------------------------------------------------------------------
    # Pipeline helpers
    # ------------------------------------------------------------------
    @contextmanager
    def _pipeline(self, state: PipelineState) -> Iterator[None]:
        with self._lock:
            self._state = state
            try:
                yield
            finally:
                self._state = PipelineState.IDLE

    def _load_translations(self, langs: tuple[str, ...]) -> None:
        implied = [lang for lang in hierarchy_languages(langs) if lang not in langs]
        self._translations.load(langs, implied)

    def _compile(self) -> list[Path]:
        config = self._config.config
        _LOGGER.info("Compiling translations for %s", ", ".join(config.langs))
        self._state = PipelineState.RESOLVING
        resolved = resolve_candidates(config.langs, self._translations.get_all())
        self._state = PipelineState.COMPILING
        return write_bundles(
            self.locale_dir, resolved, self._keys.as_mapping(), OutputOptions.from_config(config)
        )


def open_database(
    locale_dir: str | Path,
    *,
    recompile: bool = False,
    structured_messages: bool = False,
    **options: Any,
) -> LocaleDatabase:
    """Create and initialise the engine for ``locale_dir``."""

    database = LocaleDatabase(locale_dir, structured_messages=structured_messages, **options)
    database.initialize(recompile=recompile)
    return database


__all__ = ["LocaleDatabase", "PipelineState", "open_database"]
