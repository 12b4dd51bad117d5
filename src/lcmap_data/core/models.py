"""Domain models for lcmap-data.

All models are **frozen** dataclasses or enums — immutable value objects
with no behaviour beyond data access.  They carry zero I/O and zero
dependencies on external packages.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

ConfigValue = Union[str, int, bool, None, list[str], "ConfigTree"]
"""A configuration leaf (scalar or host list) or a nested mapping."""

ConfigTree = dict[str, ConfigValue]
"""A nested configuration mapping."""


# ---------------------------------------------------------------------------
# Command line options
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class OptionSpec:
    """Declarative description of one command line flag.

    A spec without a ``metavar`` takes no value: the flag is a boolean
    whose presence sets it to ``True``.
    """

    short: str | None
    """Short flag (e.g. ``-h``), or ``None``."""

    long: str
    """Long flag (e.g. ``--hosts``).  Also determines the option key."""

    metavar: str | None
    """Placeholder text for the value, or ``None`` for boolean flags."""

    help: str = ""
    """Help text shown by ``--help``."""

    parse_fn: Callable[[str], Any] | None = None
    """Converter applied to the raw string value."""

    default: Any = None
    """Value used when the flag is absent (already computed)."""

    @property
    def key(self) -> str:
        """Option key in :attr:`ParsedArgs.options` (``--spec-table`` → ``spec_table``)."""
        return self.long.lstrip("-").replace("-", "_")

    @property
    def is_flag(self) -> bool:
        return self.metavar is None


@dataclass(frozen=True, slots=True)
class ParsedArgs:
    """Result of parsing the command line.

    ``arguments[0]``, if present, names the command; the rest are its
    operands.
    """

    options: Mapping[str, Any]
    arguments: tuple[str, ...] = ()

    @property
    def command(self) -> str | None:
        return self.arguments[0] if self.arguments else None

    @property
    def operands(self) -> tuple[str, ...]:
        return self.arguments[1:]


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

class Command(Enum):
    """The fixed set of subcommands, plus a variant for anything else."""

    EXEC = "exec"
    TILE = "tile"
    SPEC = "spec"
    INFO = "info"
    UNRECOGNIZED = "<unrecognized>"

    @classmethod
    def from_name(cls, name: str | None) -> Command:
        """Exact-match *name* against the known commands."""
        for member in cls:
            if member is not cls.UNRECOGNIZED and member.value == name:
                return member
        return cls.UNRECOGNIZED


# ---------------------------------------------------------------------------
# Run outcome
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Ok:
    """The run completed (including an unrecognized command)."""


@dataclass(frozen=True, slots=True)
class Failure:
    """The run was aborted by an uncaught exception."""

    detail: BaseException


RunResult = Union[Ok, Failure]
