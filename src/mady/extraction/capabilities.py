"""Start-up detection of optional extraction toolchains."""

from __future__ import annotations

import logging
from importlib import util as importlib_util
from warnings import warn

_LOGGER = logging.getLogger(__name__)

CATALOG_TOOLCHAIN_MODULE = "esprima"


def catalog_toolchain_available() -> bool:
    """Return ``True`` when the embedded-catalog parser can be imported."""

    return importlib_util.find_spec(CATALOG_TOOLCHAIN_MODULE) is not None


def resolve_catalog_toolchain(requested: bool | None = None) -> bool:
    """Resolve the embedded-catalog capability flag once, warning when it is off.

    ``requested`` forces the flag; ``None`` probes the environment.
    """

    available = catalog_toolchain_available() if requested is None else requested
    if not available:
        message = (
            "Embedded message catalog extraction is disabled. Install the 'catalog' "
            "extra (esprima) to extract defineMessages/FormattedMessage declarations."
        )
        _LOGGER.warning(message)
        warn(message, stacklevel=2)
    return available


__all__ = [
    "CATALOG_TOOLCHAIN_MODULE",
    "catalog_toolchain_available",
    "resolve_catalog_toolchain",
]
