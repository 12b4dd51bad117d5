"""Cassandra-backed implementation of :class:`~lcmap_data.core.protocols.Database`.

This module is the **only** place in the codebase that imports the
``cassandra`` driver.  Driver exceptions raised while connecting are
caught here and re-raised as
:class:`~lcmap_data.exceptions.ConnectionFailedError`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from typing import Any

from lcmap_data.exceptions import (
    ConfigurationError,
    ConnectionFailedError,
    DependencyMissingError,
    LcmapDataError,
)

logger = logging.getLogger(__name__)

ClusterFactory = Callable[[Sequence[str], Mapping[str, Any]], Any]
"""Builds an unconnected cluster object from hosts and credentials."""


def default_cluster_factory(hosts: Sequence[str], credentials: Mapping[str, Any]) -> Any:
    """Return a ``cassandra.cluster.Cluster`` for *hosts*.

    A ``PlainTextAuthProvider`` is attached only when a username is set.
    """
    try:
        from cassandra.auth import PlainTextAuthProvider
        from cassandra.cluster import Cluster
    except ModuleNotFoundError as exc:
        raise DependencyMissingError(
            "cassandra-driver is not installed. Install with: pip install cassandra-driver",
        ) from exc

    username = credentials.get("username") or ""
    auth_provider = None
    if username:
        auth_provider = PlainTextAuthProvider(
            username=username,
            password=credentials.get("password") or "",
        )
    return Cluster(contact_points=list(hosts), auth_provider=auth_provider)


class CassandraDatabase:
    """Database component owning one cluster connection and its session.

    Parameters
    ----------
    hosts:
        Contact points for the cluster.
    credentials:
        Mapping with ``username`` and ``password`` keys.
    cluster_factory:
        Builds the cluster object; defaults to
        :func:`default_cluster_factory`.
    """

    def __init__(
        self,
        hosts: Sequence[str],
        credentials: Mapping[str, Any] | None = None,
        *,
        cluster_factory: ClusterFactory | None = None,
    ) -> None:
        self.hosts: tuple[str, ...] = tuple(hosts)
        self.credentials: dict[str, Any] = dict(credentials or {})
        self._cluster_factory: ClusterFactory = cluster_factory or default_cluster_factory
        self._cluster: Any = None
        self._session: Any = None

    @property
    def session(self) -> Any:
        if self._session is None:
            raise ConnectionFailedError("The database session is not open.")
        return self._session

    def start(self) -> None:
        """Build the cluster and open a session.

        Raises
        ------
        ConfigurationError
            When no hosts are configured.
        ConnectionFailedError
            When the driver cannot connect.
        """
        if self._session is not None:
            return
        if not self.hosts:
            raise ConfigurationError(
                "No database hosts configured.",
                hint="Set LCMAP_HOSTS or pass -h/--hosts.",
            )

        logger.info("Connecting to %s", ", ".join(self.hosts))
        self._cluster = self._cluster_factory(self.hosts, self.credentials)
        try:
            self._session = self._cluster.connect()
        except LcmapDataError:
            raise
        except Exception as exc:
            raise ConnectionFailedError(
                f"Cannot connect to {', '.join(self.hosts)}: {exc}",
                hint="Check the hosts, credentials and that the cluster is up.",
            ) from exc

    def stop(self) -> None:
        """Shut down the session and cluster, whichever exist."""
        session, cluster = self._session, self._cluster
        self._session = None
        self._cluster = None
        try:
            if session is not None:
                session.shutdown()
        finally:
            if cluster is not None:
                cluster.shutdown()
                logger.debug("Closed connection to %s", ", ".join(self.hosts))
