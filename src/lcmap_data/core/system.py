"""The runtime assembled for one invocation.

A :class:`System` owns the live resources a command needs — at minimum
the database component — for exactly one command.  It is built
unstarted; :meth:`System.start` acquires, :meth:`System.stop` releases.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from lcmap_data.core.config import get_in
from lcmap_data.core.models import ConfigTree, ConfigValue
from lcmap_data.core.protocols import Database, Ingestor, Session

logger = logging.getLogger(__name__)


class System:
    """Lifecycle container for the database component and ingest backend.

    Parameters
    ----------
    config:
        The fully merged configuration.
    database:
        Any object satisfying the :class:`Database` protocol.
    ingestor:
        Any object satisfying the :class:`Ingestor` protocol.

    Usage::

        with System(config, database, ingestor) as system:
            system.session.execute("...")
    """

    def __init__(
        self,
        config: Mapping[str, ConfigValue],
        database: Database,
        ingestor: Ingestor,
    ) -> None:
        self.config: ConfigTree = dict(config)
        self.database: Database = database
        self.ingestor: Ingestor = ingestor
        self._started: bool = False

    # ------------------------------------------------------------------
    # Context manager
    # ------------------------------------------------------------------

    def __enter__(self) -> System:
        return self.start()

    def __exit__(self, *_args: object) -> None:
        self.stop()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def started(self) -> bool:
        return self._started

    def start(self) -> System:
        """Connect the database.  A second call is a no-op."""
        if self._started:
            return self
        logger.debug("Starting system")
        # Mark first so stop() releases a partially started database.
        self._started = True
        self.database.start()
        return self

    def stop(self) -> None:
        """Release every acquired resource.  Safe to call at any point."""
        if not self._started:
            return
        logger.debug("Stopping system")
        self._started = False
        self.database.stop()

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def session(self) -> Session:
        return self.database.session

    def option(self, key: str, default: ConfigValue = None) -> ConfigValue:
        """Return ``opts.<key>`` from the merged configuration."""
        return get_in(self.config, "opts", key, default=default)
