"""Run the lcmap-data batch CLI with ``python -m lcmap_data``.

Handy on hosts where only the package is installed and the
``lcmap-data`` console script is not on ``PATH``, e.g.
``python -m lcmap_data -c resources/schema.cql exec``.
"""

from __future__ import annotations

from lcmap_data.cli.app import cli

if __name__ == "__main__":
    cli()
