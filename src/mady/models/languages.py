"""Language tag normalisation shared by the stores, the schema and the resolver."""

from __future__ import annotations

import re

_TAG_SEPARATORS = re.compile(r"[-_]")


def language_tokens(lang: str) -> list[str]:
    return _TAG_SEPARATORS.split(lang)


def canonical_tag(lang: str) -> str:
    """Return the hyphen-joined form used to identify hierarchy nodes."""

    return "-".join(language_tokens(lang))


__all__ = ["canonical_tag", "language_tokens"]
