"""Flatten resolved translations and write the per-language output bundles."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Mapping

from mady.config import EngineConfig
from mady.errors import CompilationError
from mady.models import Key, Translation
from mady.storage import dumps, write_text

from .catalogs import flat_catalog, react_intl_catalog
from .javascript import MessageSyntaxError, compile_message, render_bundle

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class OutputOptions:
    js: bool = True
    json: bool = True
    react_intl: bool = True
    minify: bool = False

    @classmethod
    def from_config(cls, config: EngineConfig) -> OutputOptions:
        return cls(
            js=config.js_output,
            json=config.json_output,
            react_intl=config.react_intl_output,
            minify=config.minify,
        )


@dataclass(frozen=True)
class Artifact:
    filename: str
    content: str


def flatten(keys: Mapping[str, Key], candidates: Iterable[Translation]) -> dict[str, str]:
    """Resolve one text per key id; later candidates override earlier ones.

    Candidates pointing at unknown keys or carrying no text are ignored.
    """

    flattened: dict[str, str] = {}
    for candidate in candidates:
        if candidate.key_id not in keys or not candidate.translation:
            continue
        flattened[candidate.key_id] = candidate.translation
    return flattened


def compile_language(
    lang: str,
    keys: Mapping[str, Key],
    candidates: Iterable[Translation],
    options: OutputOptions,
) -> list[Artifact]:
    """Return the enabled output artifacts of ``lang``."""

    flattened = flatten(keys, candidates)
    artifacts: list[Artifact] = []
    if options.js:
        formatters: dict[str, str] = {}
        for key_id, text in flattened.items():
            try:
                formatters[keys[key_id].message] = compile_message(text)
            except MessageSyntaxError as error:
                raise CompilationError(lang, str(error)) from error
        artifacts.append(
            Artifact(f"{lang}.js", render_bundle(lang, formatters, minify=options.minify))
        )
    if options.json:
        artifacts.append(
            Artifact(f"{lang}.out.json", dumps(flat_catalog(keys, flattened)) + "\n")
        )
    if options.react_intl:
        artifacts.append(
            Artifact(
                f"{lang}.reactIntl.json",
                dumps(react_intl_catalog(keys, flattened)) + "\n",
            )
        )
    return artifacts


def write_bundles(
    locale_dir: Path,
    resolved: Mapping[str, list[Translation]],
    keys: Mapping[str, Key],
    options: OutputOptions,
) -> list[Path]:
    """Compile each resolved language and write its artifacts to ``locale_dir``.

    Files written for languages compiled before a failure are left in place.
    """

    written: list[Path] = []
    for lang, candidates in resolved.items():
        try:
            artifacts = compile_language(lang, keys, candidates, options)
        except CompilationError as error:
            _LOGGER.error("Could not compile translations for %s: %s", lang, error)
            raise
        for artifact in artifacts:
            path = Path(locale_dir) / artifact.filename
            write_text(path, artifact.content)
            written.append(path)
    return written


__all__ = [
    "Artifact",
    "OutputOptions",
    "compile_language",
    "flatten",
    "write_bundles",
]
