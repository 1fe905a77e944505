import json
from pathlib import Path

from mady.importers import plan_legacy_import, read_legacy_catalogs
from mady.models import Key, Translation, key_id_for


def _write(directory: Path, name: str, payload) -> None:
    (directory / name).write_text(json.dumps(payload), encoding="utf-8")


def test_reader_accepts_flat_and_wrapped_entries(tmp_path: Path) -> None:
    _write(tmp_path, "es.json", {"greeting_Hello": "Hola", "Bye": {"translated": "Adiós"}})
    _write(tmp_path, "fr.json", {"Empty": "", "Odd": 3})
    _write(tmp_path, "keys.json", {"x": {}})
    _write(tmp_path, "es.out.json", {"greeting_Hello": "Hola"})
    (tmp_path / "de.json").write_text("{", encoding="utf-8")

    catalogs = read_legacy_catalogs(tmp_path)

    assert catalogs == {
        "es": {"greeting_Hello": "Hola", "Bye": "Adiós"},
        "fr": {},
    }


def test_plan_adds_missing_records_without_overwriting() -> None:
    """Existing ``(key, lang)`` translations are left alone."""

    hello = Key(id=key_id_for("greeting", "Hello"), context="greeting", text="Hello")
    existing = Translation(id="t0", key_id=hello.id, lang="en", translation="Hi")
    ids = iter(["t1", "t2", "t3"])

    plan = plan_legacy_import(
        {
            "en": {"greeting_Hello": "Hello!", "Bye": "Bye"},
            "es": {"greeting_Hello": "Hola"},
        },
        langs=["en"],
        keys={hello.id: hello},
        translations=[existing],
        now="2024-01-01T00:00:00.000Z",
        new_id=lambda: next(ids),
    )

    assert plan.langs == ["es"]
    assert [(key.context, key.text, key.first_used) for key in plan.keys] == [
        (None, "Bye", "2024-01-01T00:00:00.000Z")
    ]
    assert [(item.id, item.lang, item.translation) for item in plan.translations] == [
        ("t1", "en", "Bye"),
        ("t2", "es", "Hola"),
    ]
    summary = plan.summary()
    assert summary.langs_added == ("es",)
    assert summary.keys_created == 1
    assert summary.translations_created == 2
