import pytest

from mady import codec
from mady.errors import RecordValidationError
from mady.models import Key, Translation, build_record, key_id_for, split_message


@pytest.mark.parametrize(
    ("message", "expected"),
    [
        ("greeting_Hello there", ("greeting", "Hello there")),
        ("Hello there", (None, "Hello there")),
        ("menu_file_Open", ("menu", "file_Open")),
        ("_leading", ("", "leading")),
    ],
)
def test_split_message_uses_first_token_as_context(
    message: str, expected: tuple[str | None, str]
) -> None:
    """Only the first ``_`` separates the context from the text."""

    assert split_message(message) == expected


def test_key_id_encodes_the_source_message() -> None:
    """Key ids are the codec token of the context-qualified message."""

    assert key_id_for("greeting", "Hello") == codec.encode("greeting_Hello")
    assert key_id_for(None, "Hello") == codec.encode("Hello")


def test_key_payload_uses_camel_case_and_drops_unset_optional_fields() -> None:
    """Only catalog fields that carry a value are persisted."""

    key = Key(
        id=key_id_for("greeting", "Hello"),
        context="greeting",
        text="Hello",
        first_used="2024-01-01T00:00:00.000Z",
        sources=["src/app.js"],
    )

    payload = key.to_payload()

    assert payload["firstUsed"] == "2024-01-01T00:00:00.000Z"
    assert payload["unusedSince"] is None
    assert payload["sources"] == ["src/app.js"]
    assert "reactIntlId" not in payload
    assert "description" not in payload
    assert key.message == "greeting_Hello"


def test_merged_accepts_field_names_and_aliases() -> None:
    """Partial updates may use either the Python name or the stored alias."""

    translation = Translation(id="t1", key_id="k1", lang="en", translation="Hi")

    updated = translation.merged({"keyId": "k2", "fuzzy": 1})
    renamed = updated.merged({"translation": "Hello"})

    assert updated.key_id == "k2"
    assert updated.fuzzy is True
    assert renamed.translation == "Hello"
    assert translation.key_id == "k1"


def test_build_record_wraps_validation_failures() -> None:
    """Invalid attributes surface as engine validation errors."""

    with pytest.raises(RecordValidationError):
        build_record(Translation, {"id": "t1", "keyId": "k1", "lang": " "})

    with pytest.raises(RecordValidationError):
        build_record(Key, {"id": "k1"})
