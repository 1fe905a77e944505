"""Engine configuration: schema, packaged defaults and schema migrations."""

from .migrations import MIGRATIONS, migrate
from .schema import DB_VERSION, EngineConfig
from .store import CONFIG_FILENAME, ConfigStore, default_config_payload

__all__ = [
    "CONFIG_FILENAME",
    "ConfigStore",
    "DB_VERSION",
    "EngineConfig",
    "MIGRATIONS",
    "default_config_payload",
    "migrate",
]
