"""JSON file helpers shared by the stores and the compiler."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

_LOGGER = logging.getLogger(__name__)


def dumps(payload: Any) -> str:
    """Serialise ``payload`` the way every engine-owned JSON file is written."""

    return json.dumps(payload, ensure_ascii=False, indent=2)


def read_json(path: Path) -> Any:
    with Path(path).open("r", encoding="utf-8") as handle:
        return json.load(handle)


def read_json_or_create(path: Path, default: Any) -> Any:
    """Return the parsed content of ``path``, creating it with ``default`` first if absent."""

    path = Path(path)
    if not path.exists():
        write_json(path, default)
    _LOGGER.info("Reading file %s...", path)
    return read_json(path)


def write_text(path: Path, content: str) -> None:
    """Replace ``path`` with ``content`` without leaving a truncated file behind."""

    path = Path(path)
    _LOGGER.debug("Writing file %s...", path)
    descriptor, temporary = tempfile.mkstemp(
        dir=path.parent, prefix=f".{path.name}.", suffix=".tmp"
    )
    try:
        with os.fdopen(descriptor, "w", encoding="utf-8") as handle:
            handle.write(content)
        os.replace(temporary, path)
    except BaseException:
        Path(temporary).unlink(missing_ok=True)
        raise


def write_json(path: Path, payload: Any) -> None:
    write_text(path, dumps(payload) + "\n")


__all__ = ["dumps", "read_json", "read_json_or_create", "write_json", "write_text"]
