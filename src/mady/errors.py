"""Exception hierarchy raised by the translation database engine."""

from __future__ import annotations


class LocaleDatabaseError(Exception):
    """Base class for every error raised by the engine."""


class RecordValidationError(LocaleDatabaseError, ValueError):
    """Raised when a record is created or updated with invalid attributes."""


class RecordNotFoundError(LocaleDatabaseError, KeyError):
    """Raised when an update or delete targets an unknown record id."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else "record not found"


class ConfigurationError(LocaleDatabaseError, ValueError):
    """Raised when configuration values violate schema expectations."""


class MigrationError(LocaleDatabaseError):
    """Raised when a stored schema version has no known upgrade path."""


class ExtractionError(LocaleDatabaseError):
    """Raised when a single source file cannot be parsed for messages."""

    def __init__(self, path: str, message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = path


class CompilationError(LocaleDatabaseError):
    """Raised when the translations of a language fail to compile."""

    def __init__(self, lang: str, message: str) -> None:
        super().__init__(f"Could not compile translations for '{lang}': {message}")
        self.lang = lang


__all__ = [
    "CompilationError",
    "ConfigurationError",
    "ExtractionError",
    "LocaleDatabaseError",
    "MigrationError",
    "RecordNotFoundError",
    "RecordValidationError",
]
