"""Custom exception hierarchy for lcmap-data.

All exceptions that cross layer boundaries must inherit from
:class:`LcmapDataError`.  Raw third-party exceptions (e.g. from the
Cassandra driver) must NEVER propagate beyond the infrastructure layer —
they must be caught and re-raised as a typed subclass defined here.

Hierarchy
---------
LcmapDataError
├── OptionParseError
├── ConfigurationError
├── DependencyMissingError
├── DatabaseError
│   ├── ConnectionFailedError
│   └── StatementExecutionError
├── SchemaFileError
├── StagingError
└── IngestError
"""

from __future__ import annotations


class LcmapDataError(Exception):
    """Base exception for all lcmap-data errors.

    Every operator-visible error condition maps to a subclass of this
    exception so that the CLI error boundary can log a clean message
    alongside the traceback.
    """

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance logged below the error message."""


# --- Command line / configuration -------------------------------------------

class OptionParseError(LcmapDataError):
    """Raised when the command line cannot be parsed."""


class ConfigurationError(LcmapDataError):
    """Raised when the merged configuration cannot be used."""


class DependencyMissingError(LcmapDataError):
    """Raised when a required runtime dependency is not installed."""


# --- Database ---------------------------------------------------------------

class DatabaseError(LcmapDataError):
    """Base class for failures talking to Cassandra."""


class ConnectionFailedError(DatabaseError):
    """Raised when the cluster cannot be reached or authentication fails."""


class StatementExecutionError(DatabaseError):
    """Raised when a single CQL statement is rejected."""


class SchemaFileError(LcmapDataError):
    """Raised when the CQL schema file cannot be read."""


# --- Archives / ingest ------------------------------------------------------

class StagingError(LcmapDataError):
    """Raised when an archive cannot be unpacked into a staging directory."""


class IngestError(LcmapDataError):
    """Raised when the ingest backend is unavailable or fails."""
