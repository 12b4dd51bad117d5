"""lcmap-data — schema loading and archive ingestion for LCMAP.

Loads a CQL schema into Cassandra and ingests archived raster data as
tiles, one batch command per invocation.
"""

from lcmap_data.version import __version__

__all__: list[str] = ["__version__"]
