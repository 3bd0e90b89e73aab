import json
import pathlib

import pytest
from click.testing import CliRunner
from sqlalchemy import func, inspect, select
from sqlalchemy.orm import Session

from alchemist_indexer import __version__
from alchemist_indexer.cli import cli
from alchemist_indexer.config import settings
from alchemist_indexer.database import get_current_database_version, get_latest_database_version
from alchemist_indexer.database.models import UserTable
from alchemist_indexer.database.operations import (
    backup_sqlite_database,
    create_new_sqlite_database,
    get_scoped_sqlite_session,
    get_sqlite_engine,
)
from alchemist_indexer.exceptions import BackupExists
from tests.conftest import ALICE


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def database_path(tmp_path: pathlib.Path, monkeypatch: pytest.MonkeyPatch) -> pathlib.Path:
    path = tmp_path / "alchemist_indexer.db"
    monkeypatch.setattr(settings.database, "path", path)
    return path


def count_users(database_path: pathlib.Path) -> int:
    engine = get_sqlite_engine(database_path)
    with Session(engine) as session:
        count = session.scalar(select(func.count()).select_from(UserTable))
    engine.dispose()
    assert count is not None
    return count


def database_revision(database_path: pathlib.Path) -> str | None:
    db_session = get_scoped_sqlite_session(database_path)
    revision = get_current_database_version(db_session)
    db_session.remove()
    return revision


def test_cli_help(runner: CliRunner):
    result = runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    for command in ("config", "database", "replay", "stats", "position"):
        assert command in result.output


def test_cli_version(runner: CliRunner):
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_cli_config_show_default(runner: CliRunner):
    result = runner.invoke(cli, ["config", "show"])
    assert result.exit_code == 0
    assert "[database]" in result.output


def test_cli_config_show_json(runner: CliRunner):
    result = runner.invoke(cli, ["config", "show", "--json"])
    assert result.exit_code == 0
    config = json.loads(result.output)
    assert config["default_dialect"] == "v3"
    assert config["contracts"] == {}


def test_cli_config_show_toml(runner: CliRunner):
    result = runner.invoke(cli, ["config", "show", "--toml"])
    assert result.exit_code == 0
    assert "[database]" in result.output


def test_cli_database_init(runner: CliRunner, database_path: pathlib.Path):
    result = runner.invoke(cli, ["database", "init"])
    assert result.exit_code == 0, result.output
    assert database_path.exists()
    assert database_revision(database_path) == get_latest_database_version()
    assert "users" in inspect(get_sqlite_engine(database_path)).get_table_names()

    result = runner.invoke(cli, ["database", "init"])
    assert result.exit_code == 1
    assert "already exists" in result.output


def test_backup_exists(database_path: pathlib.Path):
    create_new_sqlite_database(database_path)
    backup_path = backup_sqlite_database(database_path)
    assert backup_path == database_path.with_name("alchemist_indexer.db.bak")

    with pytest.raises(BackupExists) as exc_info:
        backup_sqlite_database(database_path)
    assert exc_info.value.path == backup_path


def test_cli_database_backup(runner: CliRunner, database_path: pathlib.Path):
    assert runner.invoke(cli, ["database", "init"]).exit_code == 0
    backup_path = database_path.with_name("alchemist_indexer.db.bak")

    result = runner.invoke(cli, ["database", "backup"])
    assert result.exit_code == 0, result.output
    assert backup_path.exists()
    assert database_revision(backup_path) == get_latest_database_version()

    # An existing backup is only replaced after confirmation
    result = runner.invoke(cli, ["database", "backup"], input="n")
    assert result.exit_code == 1
    assert "A backup already exists" in result.output

    result = runner.invoke(cli, ["database", "backup"], input="y")
    assert result.exit_code == 0, result.output
    assert backup_path.exists()


def test_cli_database_commands_require_database(
    runner: CliRunner,
    database_path: pathlib.Path,
):
    for command in ("backup", "upgrade", "compact"):
        result = runner.invoke(cli, ["database", command])
        assert result.exit_code == 1
        assert "No database found" in result.output
    assert not database_path.exists()


def test_cli_database_compact(runner: CliRunner, database_path: pathlib.Path):
    assert runner.invoke(cli, ["database", "init"]).exit_code == 0

    result = runner.invoke(cli, ["database", "compact"])
    assert result.exit_code == 0, result.output
    assert count_users(database_path) == 0


def test_cli_database_reset(runner: CliRunner, database_path: pathlib.Path):
    assert runner.invoke(cli, ["database", "init"]).exit_code == 0
    engine = get_sqlite_engine(database_path)
    with Session(engine) as session:
        session.add(UserTable(address=ALICE, total_positions=1, created_at=0))
        session.commit()
    engine.dispose()
    assert count_users(database_path) == 1

    result = runner.invoke(cli, ["database", "reset"], input="n")
    assert result.exit_code == 1
    assert count_users(database_path) == 1

    result = runner.invoke(cli, ["database", "reset"], input="")
    assert result.exit_code == 1

    result = runner.invoke(cli, ["database", "reset"], input="y")
    assert result.exit_code == 0, result.output
    assert count_users(database_path) == 0
    assert database_revision(database_path) == get_latest_database_version()


def test_cli_database_upgrade(runner: CliRunner, database_path: pathlib.Path):
    # An empty file is a SQLite database without a schema revision
    database_path.touch()
    assert database_revision(database_path) is None

    result = runner.invoke(cli, ["database", "upgrade"], input="n")
    assert result.exit_code == 1

    result = runner.invoke(cli, ["database", "upgrade"], input="")
    assert result.exit_code == 1
    assert database_revision(database_path) is None

    result = runner.invoke(cli, ["database", "upgrade"], input="y")
    assert result.exit_code == 0, result.output
    assert database_revision(database_path) == get_latest_database_version()
    assert count_users(database_path) == 0

    result = runner.invoke(cli, ["database", "upgrade", "--force"])
    assert result.exit_code == 0, result.output
    assert "already at the latest revision" in result.output
