"""Core layer — configuration, statements, and the runtime lifecycle.

Rules
-----
* No ``print()`` calls.
* No imports from ``cli`` or ``infra``.
* Collaborators (database, environment, ingest backend) arrive through
  the protocols in :mod:`lcmap_data.core.protocols`.
"""

from lcmap_data.core.config import (
    MappingEnvironment,
    OsEnvironment,
    deep_merge,
    load_config,
    merge_config,
    parse_host_list,
)
from lcmap_data.core.models import Command, Failure, Ok, OptionSpec, ParsedArgs
from lcmap_data.core.protocols import Database, EnvironmentProvider, Ingestor, Session
from lcmap_data.core.statements import execute_cql, execute_statements, split_statements
from lcmap_data.core.system import System

__all__: list[str] = [
    "Command",
    "Database",
    "EnvironmentProvider",
    "Failure",
    "Ingestor",
    "MappingEnvironment",
    "Ok",
    "OptionSpec",
    "OsEnvironment",
    "ParsedArgs",
    "Session",
    "System",
    "deep_merge",
    "execute_cql",
    "execute_statements",
    "load_config",
    "merge_config",
    "parse_host_list",
    "split_statements",
]
