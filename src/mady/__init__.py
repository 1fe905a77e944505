"""Translation database engine: key extraction, locale fallback and bundle compilation."""

from .engine import LocaleDatabase, PipelineState, open_database
from .errors import (
    CompilationError,
    ConfigurationError,
    ExtractionError,
    LocaleDatabaseError,
    MigrationError,
    RecordNotFoundError,
    RecordValidationError,
)
from .models import Key, Translation

__all__ = [
    "CompilationError",
    "ConfigurationError",
    "ExtractionError",
    "Key",
    "LocaleDatabase",
    "LocaleDatabaseError",
    "MigrationError",
    "PipelineState",
    "RecordNotFoundError",
    "RecordValidationError",
    "Translation",
    "open_database",
]
