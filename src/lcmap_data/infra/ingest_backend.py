"""Resolve the ingest backend named in the configuration.

The tiling and spec-adoption algorithms live outside this package.  The
backend is named by a ``module:attribute`` path (``LCMAP_INGEST_BACKEND``);
the attribute is either an object satisfying
:class:`~lcmap_data.core.protocols.Ingestor` or a zero-argument factory
returning one.
"""

from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from lcmap_data.exceptions import IngestError

if TYPE_CHECKING:
    from lcmap_data.core.protocols import Ingestor
    from lcmap_data.core.system import System

logger = logging.getLogger(__name__)


class UnconfiguredIngestor:
    """Placeholder used when no backend is configured.

    Construction succeeds so that ``exec`` and ``info`` keep working;
    only ``tile`` and ``spec`` fail, and only once they reach an archive.
    """

    def _fail(self) -> None:
        raise IngestError(
            "No ingest backend is configured.",
            hint="Set LCMAP_INGEST_BACKEND to a 'module:attribute' path.",
        )

    def ingest(self, staging_dir: Path, system: System) -> None:
        self._fail()

    def adopt(self, staging_dir: Path, system: System) -> None:
        self._fail()


def load_ingestor(path: str | None) -> Ingestor:
    """Import and return the backend at *path* (``module:attribute``).

    Raises
    ------
    IngestError
        When the path is malformed, the module cannot be imported, or
        the attribute lacks ``ingest``/``adopt``.
    """
    if not path:
        return UnconfiguredIngestor()

    module_name, sep, attribute = path.partition(":")
    if not sep or not module_name or not attribute:
        raise IngestError(
            f"Invalid ingest backend path: {path!r}",
            hint="Expected the form 'package.module:attribute'.",
        )

    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise IngestError(f"Cannot import ingest backend module {module_name!r}: {exc}") from exc

    try:
        target: Any = getattr(module, attribute)
    except AttributeError as exc:
        raise IngestError(f"Module {module_name!r} has no attribute {attribute!r}") from exc

    if _is_ingestor(target) and not isinstance(target, type):
        backend = target
    elif callable(target):
        backend = target()
    else:
        backend = None
    if not _is_ingestor(backend):
        raise IngestError(
            f"Ingest backend {path!r} does not provide ingest() and adopt().",
        )
    logger.debug("Loaded ingest backend %s", path)
    return backend


def _is_ingestor(candidate: Any) -> bool:
    return callable(getattr(candidate, "ingest", None)) and callable(
        getattr(candidate, "adopt", None)
    )
