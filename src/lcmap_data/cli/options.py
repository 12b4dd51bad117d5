"""The option table and the parser built from it.

Defaults are read from the :class:`EnvironmentProvider` once, when the
table is built — not each time a value is looked up.
"""

from __future__ import annotations

import argparse
import re
import tempfile
from collections.abc import Sequence
from pathlib import Path

from lcmap_data.core.config import (
    HOSTS_VAR,
    PASS_VAR,
    SPEC_KEYSPACE_VAR,
    SPEC_TABLE_VAR,
    USER_VAR,
    parse_host_list,
)
from lcmap_data.core.models import Command, OptionSpec, ParsedArgs
from lcmap_data.core.protocols import EnvironmentProvider
from lcmap_data.exceptions import OptionParseError
from lcmap_data.version import __version__

PROG = "lcmap-data"
DEFAULT_CQL_PATH = "resources/schema.cql"
DEFAULT_BATCH_SIZE = 50
CHECKSUM_FILENAME = "ingest-hashes.txt"

_INTEGER = re.compile(r"[+-]?[0-9]+")


def positive_int(raw: str) -> int:
    """Parse a strictly positive integer flag value."""
    if not _INTEGER.fullmatch(raw):
        raise argparse.ArgumentTypeError(f"not an integer: {raw!r}")
    value = int(raw)
    if value < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {value}")
    return value


def option_specs(env: EnvironmentProvider) -> tuple[OptionSpec, ...]:
    """Return the option table with defaults drawn from *env*."""
    return (
        OptionSpec(
            "-h", "--hosts", "HOST1,HOST2,HOST3", "List of hosts",
            parse_fn=parse_host_list,
            default=parse_host_list(env.get(HOSTS_VAR)),
        ),
        OptionSpec(
            "-u", "--username", "USERNAME", "Cassandra user ID",
            default=env.get(USER_VAR),
        ),
        OptionSpec(
            "-p", "--password", "PASSWORD", "Cassandra password",
            default=env.get(PASS_VAR),
        ),
        OptionSpec(
            "-k", "--spec-keyspace", "SPEC_KEYSPACE", "Keyspace holding tile specs",
            default=env.get(SPEC_KEYSPACE_VAR),
        ),
        OptionSpec(
            "-t", "--spec-table", "SPEC_TABLE", "Table holding tile specs",
            default=env.get(SPEC_TABLE_VAR),
        ),
        OptionSpec(
            "-c", "--cql", "PATH_TO_CQL", "CQL file run by 'exec'",
            default=DEFAULT_CQL_PATH,
        ),
        OptionSpec(
            "-b", "--batch-size", "LCMAP_INGEST_BATCH_SIZE",
            "The size to partition jobs into for operations that "
            "parallelize tasks, such as tiling.",
            parse_fn=positive_int,
            default=DEFAULT_BATCH_SIZE,
        ),
        OptionSpec(
            "-m", "--checksum-ingest", None, "Perform checksum on ingested tiles?",
            default=False,
        ),
        OptionSpec(
            None, "--checksum-outfile", "FILENAME", "Save the checksums to a particular file.",
            default=str(Path(tempfile.gettempdir()) / CHECKSUM_FILENAME),
        ),
    )


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------

class _OptionParser(argparse.ArgumentParser):
    """Argument parser that raises instead of exiting on bad input."""

    def error(self, message: str) -> None:  # type: ignore[override]
        raise OptionParseError(
            message,
            hint=f"Run '{self.prog} --help' for usage.",
        )


def build_parser(specs: Sequence[OptionSpec]) -> argparse.ArgumentParser:
    """Construct the argument parser described by *specs*.

    ``-h`` belongs to ``--hosts``, so help is only available as ``--help``.
    """
    commands = ", ".join(c.value for c in Command if c is not Command.UNRECOGNIZED)
    parser = _OptionParser(
        prog=PROG,
        description="Load the LCMAP schema and ingest archived raster data as tiles.",
        epilog=f"Commands: {commands}. 'tile' and 'spec' take one or more archive paths.",
        add_help=False,
        allow_abbrev=False,
    )
    parser.add_argument("--help", action="help", help="Show this message and exit.")
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    for spec in specs:
        flags = [flag for flag in (spec.short, spec.long) if flag]
        if spec.is_flag:
            parser.add_argument(
                *flags,
                dest=spec.key,
                action="store_true",
                default=bool(spec.default),
                help=spec.help,
            )
        elif spec.parse_fn is not None:
            parser.add_argument(
                *flags,
                dest=spec.key,
                metavar=spec.metavar,
                type=spec.parse_fn,
                default=spec.default,
                help=spec.help,
            )
        else:
            parser.add_argument(
                *flags,
                dest=spec.key,
                metavar=spec.metavar,
                default=spec.default,
                help=spec.help,
            )

    parser.add_argument(
        "arguments",
        nargs="*",
        metavar="COMMAND",
        help="Command name followed by its operands.",
    )
    return parser


def parse_args(argv: Sequence[str], specs: Sequence[OptionSpec]) -> ParsedArgs:
    """Parse *argv* into typed options plus positional arguments.

    Flags and positionals may be interleaved; positionals keep their
    arrival order.

    Raises
    ------
    OptionParseError
        On an unknown flag, a missing value, or a value the flag's
        parser rejects.
    """
    parser = build_parser(specs)
    namespace = parser.parse_intermixed_args(list(argv))
    values = vars(namespace)
    arguments = tuple(values.pop("arguments", None) or ())
    return ParsedArgs(options=values, arguments=arguments)
