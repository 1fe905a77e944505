import json
from pathlib import Path

import pytest

from mady.config import DB_VERSION, ConfigStore, EngineConfig, default_config_payload
from mady.config import store as store_module
from mady.errors import ConfigurationError


def _write_config(locale_dir: Path, payload: dict) -> None:
    locale_dir.mkdir(parents=True, exist_ok=True)
    (locale_dir / "config.json").write_text(json.dumps(payload), encoding="utf-8")


def test_missing_config_is_created_from_defaults(tmp_path: Path) -> None:
    """A fresh directory receives the packaged defaults on disk."""

    store = ConfigStore(tmp_path)

    migrated = store.load()

    assert migrated is False
    persisted = json.loads((tmp_path / "config.json").read_text(encoding="utf-8"))
    assert persisted["srcPaths"] == ["src"]
    assert persisted["srcExtensions"] == [".js", ".jsx", ".coffee", ".cjsx"]
    assert persisted["langs"] == ["en"]
    assert persisted["msgFunctionNames"] == ["_t"]
    assert persisted["dbVersion"] == DB_VERSION
    assert store.config.langs == ("en",)


def test_missing_fields_are_filled_and_unknown_fields_kept(tmp_path: Path) -> None:
    """Partial files are completed from defaults without losing extra settings."""

    _write_config(
        tmp_path,
        {"dbVersion": DB_VERSION, "langs": ["en", "es"], "teamName": "web"},
    )
    store = ConfigStore(tmp_path)

    store.load()

    persisted = json.loads((tmp_path / "config.json").read_text(encoding="utf-8"))
    assert persisted["langs"] == ["en", "es"]
    assert persisted["msgFunctionNames"] == ["_t"]
    assert persisted["teamName"] == "web"


def test_corrupt_config_raises(tmp_path: Path) -> None:
    """Unparseable files are reported instead of silently replaced."""

    tmp_path.joinpath("config.json").write_text("{not json", encoding="utf-8")

    with pytest.raises(ConfigurationError):
        ConfigStore(tmp_path).load()


def test_update_merges_and_persists(tmp_path: Path) -> None:
    """Updates accept field names or aliases and are written through."""

    store = ConfigStore(tmp_path)
    store.load()

    updated = store.update({"langs": ["en", "fr"], "minify": True})

    assert updated.langs == ("en", "fr")
    assert updated.minify is True
    persisted = json.loads((tmp_path / "config.json").read_text(encoding="utf-8"))
    assert persisted["fMinify"] is True
    assert persisted["langs"] == ["en", "fr"]


def test_update_rejects_database_version_changes(tmp_path: Path) -> None:
    store = ConfigStore(tmp_path)
    store.load()

    with pytest.raises(ConfigurationError):
        store.update({"dbVersion": 1})


@pytest.mark.parametrize(
    "changes",
    [
        {"langs": []},
        {"langs": ["en", "en"]},
        {"langs": ["pt_BR", "pt-BR"]},
        {"msgRegexps": ["(unclosed"]},
        {"msgRegexps": ["no groups"]},
        {"msgFunctionNames": [], "msgRegexps": []},
    ],
)
def test_invalid_updates_leave_configuration_untouched(tmp_path: Path, changes: dict) -> None:
    """Schema violations raise before anything is persisted."""

    store = ConfigStore(tmp_path)
    store.load()
    before = (tmp_path / "config.json").read_text(encoding="utf-8")

    with pytest.raises(ConfigurationError):
        store.update(changes)

    assert (tmp_path / "config.json").read_text(encoding="utf-8") == before
    assert store.config.langs == ("en",)


def test_extensions_gain_a_leading_dot() -> None:
    payload = {**default_config_payload(), "srcExtensions": ["ts", ".tsx"]}

    config = EngineConfig.model_validate(payload)

    assert config.src_extensions == (".ts", ".tsx")


def test_default_payload_is_a_fresh_copy() -> None:
    first = default_config_payload()
    first["langs"].append("xx")

    assert default_config_payload()["langs"] == ["en"]


def test_failed_update_write_keeps_the_loaded_configuration(
    tmp_path: Path, monkeypatch
) -> None:
    store = ConfigStore(tmp_path)
    store.load()

    def failing_write(path: Path, payload) -> None:
        raise OSError("disk full")

    monkeypatch.setattr(store_module, "write_json", failing_write)

    with pytest.raises(OSError):
        store.update({"langs": ["en", "fr"]})

    assert store.config.langs == ("en",)
