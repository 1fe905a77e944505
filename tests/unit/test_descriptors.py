import pytest

from mady.errors import ExtractionError
from mady.extraction import resolve_catalog_toolchain
from mady.extraction.descriptors import (
    CodeLocation,
    EmbeddedCatalogExtractor,
    MessageDescriptor,
    parse_descriptor_file,
)


def test_descriptor_files_ignore_incomplete_entries() -> None:
    descriptors = parse_descriptor_file(
        "messages.json",
        '[{"id": "a", "defaultMessage": "A", "start": {"line": 1, "column": 2}},'
        ' {"id": "b"}, "noise"]',
    )

    assert descriptors == [
        MessageDescriptor(id="a", default_message="A", start=CodeLocation(1, 2))
    ]


def test_descriptor_files_must_be_json() -> None:
    with pytest.raises(ExtractionError) as excinfo:
        parse_descriptor_file("messages.json", "[")

    assert excinfo.value.path == "messages.json"


def test_forced_missing_toolchain_warns() -> None:
    with pytest.warns(UserWarning, match="catalog"):
        assert resolve_catalog_toolchain(False) is False


def test_extractor_reads_calls_and_elements() -> None:
    """Descriptors from calls and JSX elements are returned in source order."""

    pytest.importorskip("esprima")
    source = "\n".join(
        [
            "const m = defineMessages({",
            "  a: {id: 'first', defaultMessage: 'First'},",
            "});",
            "intl.formatMessage({id: 'second', defaultMessage: `Second`});",
            "const el = <FormattedMessage id=\"third\" defaultMessage=\"Third\" />;",
            "const dynamic = defineMessage({id: name, defaultMessage: 'skip'});",
        ]
    )

    descriptors = EmbeddedCatalogExtractor().extract("view.jsx", source)

    assert [item.id for item in descriptors] == ["first", "second", "third"]
    assert [item.default_message for item in descriptors] == ["First", "Second", "Third"]
    assert descriptors[0].start == CodeLocation(line=2, column=5)

