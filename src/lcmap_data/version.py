"""Single source of truth for the lcmap-data version string."""

from __future__ import annotations

__version__: str = "0.5.0"
