"""Records shared by the stores, the scanner and the compiler."""

from .languages import canonical_tag, language_tokens
from .records import (
    CONTEXT_SEPARATOR,
    Key,
    Record,
    Translation,
    build_record,
    join_message,
    key_id_for,
    split_message,
)

__all__ = [
    "CONTEXT_SEPARATOR",
    "Key",
    "Record",
    "Translation",
    "build_record",
    "canonical_tag",
    "join_message",
    "key_id_for",
    "language_tokens",
    "split_message",
]
