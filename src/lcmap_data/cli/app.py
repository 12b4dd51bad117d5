"""CLI application entry point and the top-level failure boundary.

The whole invocation — parse flags, load environment defaults, merge,
build and start the system, dispatch one command, stop the system — runs
inside :func:`run`, which never raises: it returns :class:`Ok` or
:class:`Failure`.  :func:`main` is the only place that turns that result
into a process exit code.

Architecture notes
------------------
* No business logic lives here — the work is delegated to the core and
  infrastructure layers through :mod:`lcmap_data.cli.commands`.
* The system is stopped on every path once it has been built, including
  when the command fails.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable, Mapping, Sequence

from lcmap_data.cli import exit_codes
from lcmap_data.cli.commands import dispatch
from lcmap_data.cli.console import configure_logging, console
from lcmap_data.cli.options import option_specs, parse_args
from lcmap_data.core.config import OsEnvironment, get_in, load_config, merge_config
from lcmap_data.core.models import ConfigValue, Failure, Ok, RunResult
from lcmap_data.core.protocols import EnvironmentProvider
from lcmap_data.core.system import System
from lcmap_data.exceptions import LcmapDataError
from lcmap_data.infra.cassandra_db import CassandraDatabase
from lcmap_data.infra.ingest_backend import load_ingestor

logger = logging.getLogger(__name__)

SystemBuilder = Callable[[Mapping[str, ConfigValue]], System]


# ---------------------------------------------------------------------------
# System assembly
# ---------------------------------------------------------------------------

def build_system(config: Mapping[str, ConfigValue]) -> System:
    """Wire the Cassandra component and ingest backend for *config*.

    Nothing is connected until :meth:`System.start`.
    """
    database = CassandraDatabase(
        get_in(config, "db", "hosts", default=[]) or [],
        get_in(config, "db", "credentials", default={}) or {},
    )
    ingestor = load_ingestor(get_in(config, "ingest", "backend", default="") or "")
    return System(config, database, ingestor)


# ---------------------------------------------------------------------------
# Run sequence
# ---------------------------------------------------------------------------

def run(
    argv: Sequence[str],
    env: EnvironmentProvider,
    build: SystemBuilder = build_system,
) -> RunResult:
    """Execute one invocation and report how it ended.

    An unrecognized command is still :class:`Ok`.  Any exception raised
    along the way is returned as :class:`Failure` after the system (if it
    was built) has been stopped.
    """
    try:
        parsed = parse_args(argv, option_specs(env))
        combined = merge_config(load_config(env), parsed)
        system = build(combined)
        try:
            system.start()
            dispatch(parsed.command, system, parsed)
        finally:
            system.stop()
    except Exception as exc:  # noqa: BLE001
        return Failure(exc)
    return Ok()


def _log_failure(detail: BaseException) -> None:
    if isinstance(detail, LcmapDataError):
        logger.error("%s", detail, exc_info=detail)
        if detail.hint:
            logger.error("Hint: %s", detail.hint)
        return
    logger.error(
        "Unexpected error: %s: %s",
        type(detail).__name__,
        detail,
        exc_info=detail,
    )


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def main(
    argv: Sequence[str] | None = None,
    env: EnvironmentProvider | None = None,
    build: SystemBuilder = build_system,
) -> int:
    """Run the lcmap-data CLI.

    Parameters
    ----------
    argv:
        Explicit argument list.  When ``None`` (default), ``sys.argv[1:]``
        is used.
    env:
        Source of environment defaults.  When ``None``, the process
        environment is read.
    build:
        Factory turning the merged configuration into a :class:`System`.

    Returns
    -------
    int
        OS process exit code.
    """
    configure_logging()
    result = run(
        sys.argv[1:] if argv is None else argv,
        OsEnvironment() if env is None else env,
        build,
    )
    if isinstance(result, Failure):
        _log_failure(result.detail)
        return exit_codes.FAILURE
    return exit_codes.SUCCESS


def cli() -> None:
    """Console-script entry point: run :func:`main` and exit with its code."""
    try:
        code = main()
    except KeyboardInterrupt:
        console.print("\n[yellow]Aborted by user.[/yellow]")
        code = exit_codes.KEYBOARD_INTERRUPT
    sys.exit(code)
