"""Key store: persisted ``keyId -> Key`` mapping and scan reconciliation."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Iterable, Mapping

from mady.errors import RecordNotFoundError, RecordValidationError
from mady.models import Key, build_record, key_id_for

from .json_files import read_json_or_create, write_json

_LOGGER = logging.getLogger(__name__)

KEYS_FILENAME = "keys.json"

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(moment: datetime) -> str:
    """Render ``moment`` as an ISO-8601 UTC string with millisecond precision."""

    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class KeyStore:
    """Sole writer of ``keys.json``; every mutation is written through."""

    def __init__(self, locale_dir: Path, *, clock: Clock | None = None) -> None:
        self.path = Path(locale_dir) / KEYS_FILENAME
        self._clock = clock or utc_now
        self._keys: dict[str, Key] = {}

    def now(self) -> str:
        return format_timestamp(self._clock())

    def load(self) -> None:
        raw = read_json_or_create(self.path, {})
        if not isinstance(raw, dict):
            raise RecordValidationError(f"{self.path} must contain a JSON object")
        keys: dict[str, Key] = {}
        for key_id, attrs in raw.items():
            key = build_record(Key, {"id": key_id, **attrs})
            keys[key.id] = key
        self._keys = keys

    def get_all(self) -> list[Key]:
        return list(self._keys.values())

    def as_mapping(self) -> dict[str, Key]:
        return dict(self._keys)

    def get(self, key_id: str) -> Key | None:
        return self._keys.get(key_id)

    def create(self, attrs: Mapping[str, Any]) -> Key:
        """Create a key, collapsing into the existing record for the same message."""

        text = attrs.get("text")
        if not text:
            raise RecordValidationError("Key text must be specified")
        context = attrs.get("context") or None
        key_id = key_id_for(context, text)

        existing = self._keys.get(key_id)
        if existing is not None:
            extra = {
                name: value
                for name, value in attrs.items()
                if name not in {"id", "context", "text", "firstUsed", "first_used", "sources"}
            }
            key = existing.merged(extra)
        else:
            payload = {
                **attrs,
                "id": key_id,
                "context": context,
                "text": text,
                "sources": [],
            }
            payload.pop("first_used", None)
            payload["firstUsed"] = attrs.get("firstUsed") or attrs.get("first_used") or self.now()
            key = build_record(Key, payload)

        self._commit({**self._keys, key_id: key})
        return key

    def update(self, key_id: str, attrs: Mapping[str, Any]) -> Key:
        current = self._require(key_id)
        updated = current.merged(attrs)
        if (updated.id, updated.context, updated.text) != (
            current.id,
            current.context,
            current.text,
        ):
            raise RecordValidationError(
                "Key id, context and text are immutable; create a new key instead"
            )
        self._commit({**self._keys, key_id: updated})
        return updated

    def delete(self, key_id: str) -> Key:
        key = self._require(key_id)
        keys = dict(self._keys)
        del keys[key_id]
        self._commit(keys)
        return key

    def add_many(self, keys: Iterable[Key]) -> list[Key]:
        """Insert already-built keys (replacing same-id records) and persist once."""

        added = list(keys)
        self._commit({**self._keys, **{key.id: key for key in added}})
        return added

    def reconcile(self, fresh: Mapping[str, Key]) -> dict[str, Key]:
        """Merge a fresh scan into the stored keys and persist the result.

        Stored keys keep their position and ``firstUsed``; keys missing from
        the scan lose their sources and are flagged ``unusedSince``; new keys
        are appended in scan order with ``firstUsed`` set to now.
        """

        now = self.now()
        merged: dict[str, Key] = {}
        unused: list[str] = []
        for key_id, stored in self._keys.items():
            scanned = fresh.get(key_id)
            if scanned is None:
                unused.append(key_id)
                merged[key_id] = stored.model_copy(
                    update={"unused_since": stored.unused_since or now, "sources": ()}
                )
            else:
                merged[key_id] = scanned.model_copy(
                    update={"first_used": stored.first_used or now, "unused_since": None}
                )

        new: list[str] = []
        for key_id, scanned in fresh.items():
            if key_id in merged:
                continue
            new.append(key_id)
            merged[key_id] = scanned.model_copy(
                update={"first_used": now, "unused_since": None}
            )

        if unused:
            _LOGGER.debug(
                "Unused keys: %d %s", len(unused), [merged[key_id].message for key_id in unused]
            )
        if new:
            _LOGGER.debug("New keys: %d %s", len(new), [merged[key_id].message for key_id in new])

        self._commit(merged)
        return dict(merged)

    def _require(self, key_id: str) -> Key:
        key = self._keys.get(key_id)
        if key is None:
            raise RecordNotFoundError(f"Unknown key '{key_id}'")
        return key

    def _commit(self, keys: dict[str, Key]) -> None:
        """Persist ``keys`` and only then make them the live mapping."""

        write_json(self.path, {key_id: key.to_payload() for key_id, key in keys.items()})
        self._keys = keys


__all__ = ["KEYS_FILENAME", "Clock", "KeyStore", "format_timestamp", "utc_now"]
