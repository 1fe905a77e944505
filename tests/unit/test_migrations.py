import json
from pathlib import Path

import pytest

from mady.config import DB_VERSION, ConfigStore, migrate
from mady.errors import MigrationError


def _read(path: Path) -> dict:
    return json.loads(path.read_text(encoding="utf-8"))


def test_legacy_translations_file_is_split_per_language(tmp_path: Path) -> None:
    """Version 1 directories keep every translation after the upgrade."""

    (tmp_path / "config.json").write_text(
        json.dumps({"dbVersion": 1, "langs": ["en"]}), encoding="utf-8"
    )
    (tmp_path / "translations.json").write_text(
        json.dumps(
            {
                "t1": {"id": "t1", "keyId": "k1", "lang": "en", "translation": "Hi"},
                "t2": {"id": "t2", "keyId": "k1", "lang": "es", "translation": "Hola"},
                "bad": {"keyId": "k1"},
            }
        ),
        encoding="utf-8",
    )
    store = ConfigStore(tmp_path)

    migrated = store.load()

    assert migrated is True
    assert store.config.db_version == DB_VERSION
    assert store.config.langs == ("en", "es")
    assert set(_read(tmp_path / "en.json")) == {"t1"}
    assert _read(tmp_path / "es.json")["t2"]["translation"] == "Hola"
    assert not (tmp_path / "translations.json").exists()
    assert (tmp_path / "translations.v1.json").exists()


def test_existing_language_files_win_over_legacy_entries(tmp_path: Path) -> None:
    (tmp_path / "translations.json").write_text(
        json.dumps({"t1": {"keyId": "k1", "lang": "en", "translation": "old"}}),
        encoding="utf-8",
    )
    (tmp_path / "en.json").write_text(
        json.dumps({"t1": {"id": "t1", "keyId": "k1", "lang": "en", "translation": "new"}}),
        encoding="utf-8",
    )

    migrate(tmp_path, {"langs": ["en"]})

    assert _read(tmp_path / "en.json")["t1"]["translation"] == "new"


def test_missing_version_is_treated_as_version_one(tmp_path: Path) -> None:
    calls = []

    def step(locale_dir: Path, config: dict) -> dict:
        calls.append(config.get("dbVersion"))
        return config

    upgraded = migrate(tmp_path, {}, target=2, migrations={1: step})

    assert calls == [None]
    assert upgraded["dbVersion"] == 2


def test_newer_versions_are_rejected(tmp_path: Path) -> None:
    with pytest.raises(MigrationError):
        migrate(tmp_path, {"dbVersion": DB_VERSION + 1})


def test_gaps_in_the_registry_are_rejected(tmp_path: Path) -> None:
    with pytest.raises(MigrationError):
        migrate(tmp_path, {"dbVersion": 1}, target=3, migrations={1: lambda _d, c: c})
