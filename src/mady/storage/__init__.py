"""Write-through JSON persistence for keys and translations."""

from .json_files import dumps, read_json, read_json_or_create, write_json, write_text
from .keys import KEYS_FILENAME, Clock, KeyStore, format_timestamp, utc_now
from .translations import TranslationStore, translations_path

__all__ = [
    "KEYS_FILENAME",
    "Clock",
    "KeyStore",
    "TranslationStore",
    "dumps",
    "format_timestamp",
    "read_json",
    "read_json_or_create",
    "translations_path",
    "utc_now",
    "write_json",
    "write_text",
]
