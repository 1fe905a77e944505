"""Test configuration utilities and shared fixtures."""

import sys
from pathlib import Path

# Ensure the ``src`` directory is importable when tests are executed without an
# editable install.
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from datetime import datetime, timedelta, timezone  # noqa: E402
from itertools import count  # noqa: E402

import pytest  # noqa: E402

from mady import LocaleDatabase, open_database  # noqa: E402


class FakeClock:
    def __init__(self, start: datetime) -> None:
        self.current = start

    def advance(self, delta: timedelta) -> None:
        self.current += delta

    def __call__(self) -> datetime:
        return self.current


class SequentialIds:
    """Deterministic translation id factory."""

    def __init__(self) -> None:
        self._counter = count(1)

    def __call__(self) -> str:
        return f"tr-{next(self._counter)}"


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock(datetime(2024, 1, 1, tzinfo=timezone.utc))


@pytest.fixture()
def locale_dir(tmp_path: Path) -> Path:
    """Return a locale directory that does not exist yet."""

    return tmp_path / "locales"


@pytest.fixture()
def project_root(tmp_path: Path) -> Path:
    """Provide a project with an empty ``src`` tree to scan."""

    (tmp_path / "src").mkdir()
    return tmp_path


@pytest.fixture()
def database(locale_dir: Path, project_root: Path, clock: FakeClock) -> LocaleDatabase:
    """Open an engine on a fresh locale directory with pattern extraction only."""

    with pytest.warns(UserWarning):
        return open_database(
            locale_dir,
            source_root=project_root,
            catalog_toolchain=False,
            clock=clock,
            id_factory=SequentialIds(),
        )
