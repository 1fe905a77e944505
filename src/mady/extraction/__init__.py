"""Source scanning and message extraction."""

from .capabilities import catalog_toolchain_available, resolve_catalog_toolchain
from .descriptors import (
    CodeLocation,
    EmbeddedCatalogExtractor,
    MessageDescriptor,
    parse_descriptor_file,
)
from .patterns import build_regexps, find_messages
from .scanner import ScanOptions, SourceScanner

__all__ = [
    "CodeLocation",
    "EmbeddedCatalogExtractor",
    "MessageDescriptor",
    "ScanOptions",
    "SourceScanner",
    "build_regexps",
    "catalog_toolchain_available",
    "find_messages",
    "parse_descriptor_file",
    "resolve_catalog_toolchain",
]
