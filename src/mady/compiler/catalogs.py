"""JSON projections of a flattened translation map."""

from __future__ import annotations

from typing import Any, Mapping

from mady.models import Key


def flat_catalog(keys: Mapping[str, Key], flattened: Mapping[str, str]) -> dict[str, str]:
    """Map each key's external id (or source message) to its translation."""

    out: dict[str, str] = {}
    for key_id, text in flattened.items():
        key = keys[key_id]
        out[key.react_intl_id or key.message] = text
    return dict(sorted(out.items()))


def react_intl_catalog(
    keys: Mapping[str, Key], flattened: Mapping[str, str]
) -> dict[str, dict[str, Any]]:
    """Map external catalog ids to ``{translation, description}`` entries."""

    out: dict[str, dict[str, Any]] = {}
    for key_id, text in flattened.items():
        key = keys[key_id]
        if key.react_intl_id:
            out[key.react_intl_id] = {"translation": text, "description": key.description}
    return dict(sorted(out.items()))


__all__ = ["flat_catalog", "react_intl_catalog"]
