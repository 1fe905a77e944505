"""Locale hierarchy resolution and output bundle compilation."""

from .catalogs import flat_catalog, react_intl_catalog
from .compiler import (
    Artifact,
    OutputOptions,
    compile_language,
    flatten,
    write_bundles,
)
from .hierarchy import (
    LanguageTree,
    canonical_tag,
    hierarchy_languages,
    language_tokens,
    resolve_candidates,
)
from .javascript import MessageSyntaxError, compile_message, render_bundle

__all__ = [
    "Artifact",
    "LanguageTree",
    "MessageSyntaxError",
    "OutputOptions",
    "canonical_tag",
    "compile_language",
    "compile_message",
    "flat_catalog",
    "flatten",
    "hierarchy_languages",
    "language_tokens",
    "react_intl_catalog",
    "render_bundle",
    "resolve_candidates",
    "write_bundles",
]
