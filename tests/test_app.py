"""Tests for the run sequence and failure boundary (cli/app.py).

The database and ingest backend are injected through the ``build``
parameter — no cluster is contacted.

Coverage:
* Exit codes for success, unknown commands, and failures.
* The system is stopped on every path once built.
* Parse errors and failures are returned as Failure, never raised.
* build_system wiring from the merged configuration.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest

from lcmap_data.cli import exit_codes
from lcmap_data.cli.app import build_system, cli, main, run
from lcmap_data.core.config import MappingEnvironment
from lcmap_data.core.models import Failure, Ok
from lcmap_data.core.system import System
from lcmap_data.exceptions import OptionParseError, SchemaFileError
from lcmap_data.infra.cassandra_db import CassandraDatabase
from lcmap_data.infra.ingest_backend import UnconfiguredIngestor
from tests.conftest import FakeDatabase, FakeSession, RecordingIngestor


class _Builder:
    """Records the merged configuration and hands out a fake System."""

    def __init__(
        self,
        database: FakeDatabase | None = None,
        ingestor: RecordingIngestor | None = None,
    ) -> None:
        self.database = database or FakeDatabase()
        self.ingestor = ingestor or RecordingIngestor()
        self.configs: list[Mapping[str, Any]] = []

    def __call__(self, config: Mapping[str, Any]) -> System:
        self.configs.append(config)
        return System(config, self.database, self.ingestor)


# ---------------------------------------------------------------------------
# run
# ---------------------------------------------------------------------------

class TestRun:
    def test_info_is_ok(self, env: MappingEnvironment) -> None:
        builder = _Builder()
        assert run(["info"], env, builder) == Ok()
        assert (builder.database.starts, builder.database.stops) == (1, 1)

    def test_merged_config_reaches_builder(self, env: MappingEnvironment) -> None:
        builder = _Builder()
        run(["-u", "admin", "-b", "7", "info"], env, builder)

        config = builder.configs[0]
        assert config["db"]["hosts"] == ["cass-1", "cass-2", "cass-3"]
        assert config["db"]["credentials"] == {"username": "admin", "password": "secret"}
        assert config["opts"]["batch_size"] == 7
        assert config["spec"]["keyspace"] == "lcmap_specs"

    def test_unrecognized_command_is_ok(self, env: MappingEnvironment) -> None:
        builder = _Builder()
        assert run(["bogus"], env, builder) == Ok()
        assert builder.database.stops == 1
        assert builder.ingestor.calls == []

    def test_no_command_is_ok(self, env: MappingEnvironment) -> None:
        assert run([], env, _Builder()) == Ok()

    def test_parse_error_is_failure(self, env: MappingEnvironment) -> None:
        builder = _Builder()
        result = run(["-b", "many", "info"], env, builder)
        assert isinstance(result, Failure)
        assert isinstance(result.detail, OptionParseError)
        assert builder.configs == []

    def test_handler_failure_still_stops_system(
        self, env: MappingEnvironment, tmp_path: Path,
    ) -> None:
        builder = _Builder()
        result = run(["-c", str(tmp_path / "absent.cql"), "exec"], env, builder)

        assert isinstance(result, Failure)
        assert isinstance(result.detail, SchemaFileError)
        assert builder.database.stops == 1

    def test_start_failure_still_stops_system(self, env: MappingEnvironment) -> None:
        builder = _Builder(database=FakeDatabase(fail_start=True))
        result = run(["info"], env, builder)

        assert isinstance(result, Failure)
        assert builder.database.stops == 1

    def test_exec_runs_schema(self, env: MappingEnvironment, tmp_path: Path) -> None:
        schema = tmp_path / "schema.cql"
        schema.write_text("CREATE KEYSPACE k; CREATE TABLE k.t (id int PRIMARY KEY);")
        session = FakeSession()
        builder = _Builder(database=FakeDatabase(session))

        assert run(["exec", "--cql", str(schema)], env, builder) == Ok()
        assert session.executed == [
            "CREATE KEYSPACE k",
            "CREATE TABLE k.t (id int PRIMARY KEY)",
        ]

    def test_statement_failure_stops_batch(self, env: MappingEnvironment, tmp_path: Path) -> None:
        schema = tmp_path / "schema.cql"
        schema.write_text("A; BAD; C;")
        session = FakeSession(fail_on="BAD")
        builder = _Builder(database=FakeDatabase(session))

        assert isinstance(run(["-c", str(schema), "exec"], env, builder), Failure)
        assert session.executed == ["A"]
        assert builder.database.stops == 1

    def test_tile_stops_at_first_bad_archive(
        self, env: MappingEnvironment, tmp_path: Path,
    ) -> None:
        builder = _Builder()
        second = tmp_path / "second"
        second.mkdir()
        (second / "band.tif").write_bytes(b"x")

        result = run(["tile", str(tmp_path / "first.tar.gz"), str(second)], env, builder)

        assert isinstance(result, Failure)
        assert builder.ingestor.calls == []


# ---------------------------------------------------------------------------
# main / cli
# ---------------------------------------------------------------------------

class TestMain:
    def test_success_exit_code(self, env: MappingEnvironment) -> None:
        assert main(["info"], env=env, build=_Builder()) == exit_codes.SUCCESS

    def test_unrecognized_exit_code(
        self, env: MappingEnvironment, caplog: pytest.LogCaptureFixture,
    ) -> None:
        with caplog.at_level(logging.ERROR, logger="lcmap_data"):
            assert main(["bogus"], env=env, build=_Builder()) == exit_codes.SUCCESS
        assert "Invalid command: bogus" in caplog.text

    def test_failure_exit_code_and_log(
        self, env: MappingEnvironment, caplog: pytest.LogCaptureFixture,
    ) -> None:
        with caplog.at_level(logging.ERROR, logger="lcmap_data"):
            code = main(["--batch-size", "x", "info"], env=env, build=_Builder())
        assert code == exit_codes.FAILURE
        assert "batch-size" in caplog.text
        assert "Hint:" in caplog.text

    def test_unexpected_error_is_logged(
        self, env: MappingEnvironment, caplog: pytest.LogCaptureFixture,
    ) -> None:
        def explode(config: Mapping[str, Any]) -> System:
            raise KeyError("boom")

        with caplog.at_level(logging.ERROR, logger="lcmap_data"):
            assert main(["info"], env=env, build=explode) == exit_codes.FAILURE
        assert "Unexpected error: KeyError" in caplog.text

    def test_cli_exits_with_main_code(self) -> None:
        with patch("lcmap_data.cli.app.main", return_value=exit_codes.FAILURE):
            with pytest.raises(SystemExit) as exc_info:
                cli()
        assert exc_info.value.code == exit_codes.FAILURE

    def test_cli_keyboard_interrupt(self) -> None:
        with patch("lcmap_data.cli.app.main", side_effect=KeyboardInterrupt):
            with pytest.raises(SystemExit) as exc_info:
                cli()
        assert exc_info.value.code == exit_codes.KEYBOARD_INTERRUPT


# ---------------------------------------------------------------------------
# build_system
# ---------------------------------------------------------------------------

class TestBuildSystem:
    def test_wires_database_from_db_block(self) -> None:
        system = build_system(
            {
                "db": {"hosts": ["h1", "h2"], "credentials": {"username": "u", "password": "p"}},
                "ingest": {"backend": ""},
            }
        )
        assert isinstance(system.database, CassandraDatabase)
        assert system.database.hosts == ("h1", "h2")
        assert system.database.credentials == {"username": "u", "password": "p"}
        assert isinstance(system.ingestor, UnconfiguredIngestor)
        assert not system.started

    def test_tolerates_sparse_config(self) -> None:
        system = build_system({})
        assert system.database.hosts == ()
