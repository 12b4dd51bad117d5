"""CQL statement splitting and sequential execution.

A schema file is a plain list of statements terminated by ``;``.
Statements are sent one at a time, in file order, with no transaction
around them; the first rejected statement stops the run.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from lcmap_data.core.protocols import Session
from lcmap_data.exceptions import LcmapDataError, SchemaFileError, StatementExecutionError

logger = logging.getLogger(__name__)

STATEMENT_TERMINATOR = ";"


def split_statements(cql_text: str) -> list[str]:
    """Split *cql_text* on ``;`` and drop blank fragments.

    >>> split_statements("CREATE TABLE a;  ; CREATE TABLE b;")
    ['CREATE TABLE a', 'CREATE TABLE b']
    """
    fragments = (fragment.strip() for fragment in cql_text.split(STATEMENT_TERMINATOR))
    return [fragment for fragment in fragments if fragment]


def execute_statements(session: Session, statements: Iterable[str]) -> int:
    """Execute *statements* in order and return how many were sent.

    Raises
    ------
    StatementExecutionError
        On the first statement the session rejects.
    """
    count = 0
    for number, statement in enumerate(statements, start=1):
        logger.debug("Executing statement %d: %s", number, statement)
        try:
            session.execute(statement)
        except LcmapDataError:
            raise
        except Exception as exc:
            raise StatementExecutionError(
                f"Statement {number} failed: {exc}",
                hint=f"Offending statement: {statement}",
            ) from exc
        count += 1
    return count


def read_schema(path: str | Path) -> str:
    """Return the full text of the schema file at *path*."""
    try:
        return Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise SchemaFileError(
            f"Cannot read CQL file {path}: {exc.strerror or exc}",
            hint="Pass the schema location with -c/--cql.",
        ) from exc


def execute_cql(session: Session, path: str | Path) -> int:
    """Execute every statement in the schema file at *path*."""
    statements = split_statements(read_schema(path))
    executed = execute_statements(session, statements)
    logger.info("Executed %d statement(s) from %s", executed, path)
    return executed
