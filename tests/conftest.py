"""Shared pytest fixtures and fakes for the lcmap-data test suite.

Guidelines
----------
* No network access in any test — the Cassandra driver is never reached.
* The environment is injected through ``MappingEnvironment``; tests never
  mutate ``os.environ``.
* The ingest backend is replaced by a recording fake.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import pytest

from lcmap_data.core.config import MappingEnvironment
from lcmap_data.core.system import System


# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------

class FakeSession:
    """Records executed statements; raises on any containing *fail_on*."""

    def __init__(self, fail_on: str | None = None) -> None:
        self.executed: list[str] = []
        self.fail_on = fail_on

    def execute(self, statement: str) -> None:
        if self.fail_on is not None and self.fail_on in statement:
            raise RuntimeError(f"rejected: {statement}")
        self.executed.append(statement)


class FakeDatabase:
    def __init__(self, session: FakeSession | None = None, fail_start: bool = False) -> None:
        self._session = session or FakeSession()
        self.fail_start = fail_start
        self.starts = 0
        self.stops = 0

    @property
    def session(self) -> FakeSession:
        return self._session

    def start(self) -> None:
        self.starts += 1
        if self.fail_start:
            raise RuntimeError("cluster unreachable")

    def stop(self) -> None:
        self.stops += 1


class RecordingIngestor:
    """Records (operation, staged file names) for each call."""

    def __init__(self, fail_on: str | None = None) -> None:
        self.calls: list[tuple[str, list[str]]] = []
        self.staging_dirs: list[Path] = []
        self.fail_on = fail_on

    def _record(self, operation: str, staging_dir: Path) -> None:
        names = sorted(p.name for p in staging_dir.iterdir())
        self.staging_dirs.append(staging_dir)
        self.calls.append((operation, names))
        if self.fail_on is not None and self.fail_on in names:
            raise RuntimeError(f"{operation} failed on {self.fail_on}")

    def ingest(self, staging_dir: Path, system: System) -> None:
        self._record("ingest", staging_dir)

    def adopt(self, staging_dir: Path, system: System) -> None:
        self._record("adopt", staging_dir)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def env() -> MappingEnvironment:
    return MappingEnvironment(
        {
            "LCMAP_HOSTS": "cass-1, cass-2,cass-3",
            "LCMAP_USER": "lcmap",
            "LCMAP_PASS": "secret",
            "LCMAP_SPEC_KEYSPACE": "lcmap_specs",
            "LCMAP_SPEC_TABLE": "tile_specs",
        }
    )


@pytest.fixture
def database() -> FakeDatabase:
    return FakeDatabase()


@pytest.fixture
def ingestor() -> RecordingIngestor:
    return RecordingIngestor()


@pytest.fixture
def make_system(database: FakeDatabase, ingestor: RecordingIngestor):
    """Return a factory building a started-able System from a config."""

    def factory(config: Mapping[str, Any] | None = None) -> System:
        return System(config or {}, database, ingestor)

    return factory
