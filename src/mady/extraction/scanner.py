"""Walk source directories and extract message keys.

Two mutually exclusive modes are supported. Pattern mode matches calls to the
configured message functions (plus raw custom expressions) and, when the
annotation toolchain is available, also collects descriptors declared inside
JavaScript sources. Structured mode reads ``.json`` descriptor files only.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Iterator

from mady.config import EngineConfig
from mady.errors import ExtractionError
from mady.models import Key, build_record, key_id_for, split_message

from .descriptors import (
    EMBEDDED_CATALOG_EXTENSIONS,
    EmbeddedCatalogExtractor,
    MessageDescriptor,
    parse_descriptor_file,
)
from .patterns import build_regexps, find_messages

_LOGGER = logging.getLogger(__name__)

STRUCTURED_EXTENSIONS = (".json",)


@dataclass(frozen=True)
class ScanOptions:
    """Everything a scan needs, captured from the configuration at request time."""

    src_paths: tuple[str, ...]
    src_extensions: tuple[str, ...]
    function_names: tuple[str, ...] = ()
    regexps: tuple[str, ...] = ()
    structured_messages: bool = False
    embedded_catalog: bool = False
    root: Path | None = None

    @classmethod
    def from_config(
        cls,
        config: EngineConfig,
        *,
        structured_messages: bool = False,
        embedded_catalog: bool = False,
        root: Path | None = None,
    ) -> ScanOptions:
        return cls(
            src_paths=config.src_paths,
            src_extensions=config.src_extensions,
            function_names=config.msg_function_names,
            regexps=config.msg_regexps,
            structured_messages=structured_messages,
            embedded_catalog=embedded_catalog,
            root=root,
        )

    @property
    def extensions(self) -> frozenset[str]:
        if self.structured_messages:
            return frozenset(STRUCTURED_EXTENSIONS)
        return frozenset(self.src_extensions)


@dataclass
class _Occurrences:
    attrs: dict[str, Any]
    sources: list[str] = field(default_factory=list)


class SourceScanner:
    """Single-pass extractor producing a fresh ``keyId -> Key`` mapping."""

    def __init__(self, options: ScanOptions) -> None:
        self.options = options
        self._regexps = build_regexps(options.function_names, options.regexps)
        self._catalog = (
            EmbeddedCatalogExtractor()
            if options.embedded_catalog and not options.structured_messages
            else None
        )

    def scan(self) -> dict[str, Key]:
        occurrences: dict[str, _Occurrences] = {}
        for path in self._iter_files():
            source = self._display(path)
            _LOGGER.info("Processing %s...", source)
            try:
                contents = path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as error:
                _LOGGER.warning("Skipping unreadable file %s: %s", source, error)
                continue

            if self.options.structured_messages:
                self._extract_descriptors(occurrences, source, contents, parse_descriptor_file)
                continue

            for message in find_messages(contents, self._regexps):
                context, text = split_message(message)
                _add_occurrence(occurrences, {"context": context, "text": text}, source)
            if self._catalog is not None and path.suffix in EMBEDDED_CATALOG_EXTENSIONS:
                self._extract_descriptors(
                    occurrences, source, contents, self._catalog.extract
                )

        return {
            key_id: build_record(
                Key,
                {
                    **entry.attrs,
                    "id": key_id,
                    "firstUsed": None,
                    "unusedSince": None,
                    "sources": entry.sources,
                },
            )
            for key_id, entry in occurrences.items()
        }

    def _extract_descriptors(
        self,
        occurrences: dict[str, _Occurrences],
        source: str,
        contents: str,
        parse: Callable[[str, str], list[MessageDescriptor]],
    ) -> None:
        try:
            descriptors = parse(source, contents)
        except ExtractionError as error:
            _LOGGER.error("Error extracting messages: %s", error)
            return
        for descriptor in descriptors:
            attrs = {
                "context": descriptor.id,
                "text": descriptor.default_message,
                "reactIntlId": descriptor.id,
                "description": descriptor.description,
            }
            reference = source
            if descriptor.start is not None and descriptor.end is not None:
                start, end = descriptor.start, descriptor.end
                reference += f" ({start.line}:{start.column}-{end.line}:{end.column})"
            _add_occurrence(occurrences, attrs, reference)

    def _iter_files(self) -> Iterator[Path]:
        extensions = self.options.extensions
        for src_path in self.options.src_paths:
            base = self._resolve(src_path)
            if base.is_file():
                if base.suffix in extensions:
                    yield base
                continue
            if not base.is_dir():
                _LOGGER.warning("Source path %s does not exist", base)
                continue
            for dirpath, dirnames, filenames in os.walk(base):
                dirnames.sort()
                for filename in sorted(filenames):
                    if Path(filename).suffix in extensions:
                        yield Path(dirpath) / filename

    def _resolve(self, src_path: str) -> Path:
        path = Path(src_path)
        if self.options.root is not None and not path.is_absolute():
            return self.options.root / path
        return path

    def _display(self, path: Path) -> str:
        root = self.options.root
        if root is not None:
            try:
                return path.relative_to(root).as_posix()
            except ValueError:
                pass
        return path.as_posix()


def _add_occurrence(
    occurrences: dict[str, _Occurrences], attrs: dict[str, Any], source: str
) -> None:
    key_id = key_id_for(attrs["context"], attrs["text"])
    entry = occurrences.get(key_id)
    if entry is None:
        entry = occurrences[key_id] = _Occurrences(attrs=attrs)
    entry.sources.append(source)


__all__ = ["STRUCTURED_EXTENSIONS", "ScanOptions", "SourceScanner"]
