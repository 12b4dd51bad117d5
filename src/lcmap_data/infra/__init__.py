"""Infrastructure layer — external system integration.

This layer wraps all interaction with the Cassandra driver, the
filesystem, and the ingest backend.  Every raw third-party exception
must be caught here and re-raised as a
:class:`~lcmap_data.exceptions.LcmapDataError` subclass.

Rules
-----
* No imports from ``cli``.
* No operator-facing output (no ``print()``, no Rich rendering).
"""

from lcmap_data.infra.cassandra_db import CassandraDatabase, default_cluster_factory
from lcmap_data.infra.ingest_backend import UnconfiguredIngestor, load_ingestor
from lcmap_data.infra.staging import staged_archive

__all__: list[str] = [
    "CassandraDatabase",
    "UnconfiguredIngestor",
    "default_cluster_factory",
    "load_ingestor",
    "staged_archive",
]
