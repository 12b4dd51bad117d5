"""Command handlers and the dispatcher that selects one.

Every handler has the signature ``(system, parsed) -> None`` and holds
no business logic of its own: schema loading lives in
:mod:`lcmap_data.core.statements`, archive staging in
:mod:`lcmap_data.infra.staging`, and tiling in the ingest backend.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from pathlib import Path

from rich.pretty import Pretty

from lcmap_data.cli.console import get_stdout_console
from lcmap_data.cli.options import DEFAULT_CQL_PATH
from lcmap_data.core.models import Command, ParsedArgs
from lcmap_data.core.statements import execute_cql
from lcmap_data.core.system import System
from lcmap_data.infra.staging import staged_archive
from lcmap_data.utils.hashing import record_checksum

logger = logging.getLogger(__name__)

Handler = Callable[[System, ParsedArgs], None]
ArchiveStep = Callable[[Path, System], None]


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------

def exec_cql(system: System, parsed: ParsedArgs) -> None:
    """Execute the CQL schema file (useful for creating schema and seeding data)."""
    logger.info("Running command: 'exec'")
    path = system.option("cql") or DEFAULT_CQL_PATH
    execute_cql(system.session, str(path))


def _process_archives(
    system: System,
    paths: Sequence[str],
    step: ArchiveStep,
    *,
    after: Callable[[str], None] | None = None,
) -> None:
    """Stage each archive in turn and run *step* on it.

    Archives are handled strictly one after another; the first failure
    stops the loop.
    """
    if not paths:
        logger.warning("No archive paths given; nothing to do.")
        return
    for index, path in enumerate(paths, start=1):
        logger.info("Processing archive %d/%d: %s", index, len(paths), path)
        with staged_archive(path) as staging_dir:
            step(staging_dir, system)
        if after is not None:
            after(path)


def _checksum_recorder(outfile: str) -> Callable[[str], None]:
    def record(path: str) -> None:
        checksum = record_checksum(path, outfile)
        logger.info("Recorded %s for %s in %s", checksum, path, outfile)

    return record


def make_tiles(system: System, parsed: ParsedArgs) -> None:
    """Generate tiles from each archive operand."""
    logger.info("Running command: 'tile'")

    after = None
    if system.option("checksum_ingest"):
        after = _checksum_recorder(str(system.option("checksum_outfile")))
    _process_archives(system, parsed.operands, system.ingestor.ingest, after=after)


def make_specs(system: System, parsed: ParsedArgs) -> None:
    """Generate tile specs from each archive operand."""
    logger.info("Running command: 'spec'")
    _process_archives(system, parsed.operands, system.ingestor.adopt)


def info(system: System, parsed: ParsedArgs) -> None:
    """Print the merged configuration."""
    logger.info("Running command: 'info'")
    get_stdout_console().print(Pretty(system.config, expand_all=True))


HANDLERS: Mapping[Command, Handler] = {
    Command.EXEC: exec_cql,
    Command.TILE: make_tiles,
    Command.SPEC: make_specs,
    Command.INFO: info,
}


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------

def dispatch(name: str | None, system: System, parsed: ParsedArgs) -> bool:
    """Run the handler for *name*.

    Returns ``False`` without running anything when *name* is not a
    known command; the error is logged and the run carries on.
    """
    handler = HANDLERS.get(Command.from_name(name))
    if handler is None:
        logger.error("Invalid command: %s", name)
        return False
    handler(system, parsed)
    return True
