"""Protocols (interfaces) consumed by the core layer.

These define the contracts that infrastructure adapters must satisfy.
Core code depends ONLY on these protocols — never on concrete
implementations — so the Cassandra driver, the process environment and
the ingest backend can all be replaced in tests.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from lcmap_data.core.system import System


class EnvironmentProvider(Protocol):
    """Source of environment-style configuration values."""

    def get(self, name: str, default: str = "") -> str:
        """Return the value of *name*, or *default* when it is unset."""
        ...  # pragma: no cover


class Session(Protocol):
    """The one database primitive this tool needs: run a statement."""

    def execute(self, statement: str) -> Any:
        """Send *statement* to the cluster and wait for the result."""
        ...  # pragma: no cover


class Database(Protocol):
    """A lifecycle-managed database component owned by the System."""

    @property
    def session(self) -> Session:
        """The open session.

        Raises
        ------
        ConnectionFailedError
            When the component has not been started.
        """
        ...  # pragma: no cover

    def start(self) -> None:
        ...  # pragma: no cover

    def stop(self) -> None:
        ...  # pragma: no cover


class Ingestor(Protocol):
    """Contract for the tiling / spec-adoption backend.

    Both operations receive a staging directory holding one unpacked
    archive and the running :class:`~lcmap_data.core.system.System`.
    Implementations must map backend-specific exceptions to
    :class:`~lcmap_data.exceptions.LcmapDataError` subclasses.
    """

    def ingest(self, staging_dir: Path, system: System) -> None:
        """Tile the raster data found in *staging_dir* and persist it."""
        ...  # pragma: no cover

    def adopt(self, staging_dir: Path, system: System) -> None:
        """Derive and persist tile specs from the archive's metadata."""
        ...  # pragma: no cover
