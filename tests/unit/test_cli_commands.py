"""Tests for the sqlbind command line."""

from pathlib import Path

import pytest
from click.testing import CliRunner

from sqlbind._serialization import decode_json
from sqlbind.cli import add_inspection_commands, get_sqlbind_group

CONF = """postgres dbname=app

GET /users/:id
user: SELECT * FROM users WHERE id = :id
"""


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def cli():  # type: ignore[no-untyped-def]
    return add_inspection_commands()


def test_group_commands() -> None:
    group = add_inspection_commands(get_sqlbind_group())
    assert {"tokens", "bind", "routes"} <= set(group.commands)


def test_tokens(runner: CliRunner, cli) -> None:  # type: ignore[no-untyped-def]
    result = runner.invoke(cli, ["tokens", "SELECT :a"])
    assert result.exit_code == 0, result.output
    assert "IDENTIFIER" in result.output
    assert "WHITESPACE" in result.output
    assert "EOF" in result.output
    assert "':a'" in result.output


def test_bind_json(runner: CliRunner, cli) -> None:  # type: ignore[no-untyped-def]
    result = runner.invoke(cli, ["bind", "SELECT :a, :b, :a", "--driver", "postgres", "--format", "json"])
    assert result.exit_code == 0, result.output
    payload = decode_json(result.stdout)
    assert payload["rewritten_sql"] == "SELECT $1, $2, $3"
    assert payload["parameters"] == ["a", "b", "a"]
    assert payload["placeholder"] == {"style": "numbered", "marker": "$"}


def test_bind_text(runner: CliRunner, cli) -> None:  # type: ignore[no-untyped-def]
    result = runner.invoke(cli, ["bind", "SELECT :a", "-d", "mysql"])
    assert result.exit_code == 0, result.output
    assert "SELECT ?" in result.output
    assert "simple(?)" in result.output


def test_bind_strict_unknown_driver(runner: CliRunner, cli) -> None:  # type: ignore[no-untyped-def]
    result = runner.invoke(cli, ["bind", "SELECT :a", "--driver", "oracle", "--strict"])
    assert result.exit_code == 1
    assert "Unknown database driver 'oracle'" in result.output


def test_bind_requires_driver(runner: CliRunner, cli) -> None:  # type: ignore[no-untyped-def]
    result = runner.invoke(cli, ["bind", "SELECT :a"])
    assert result.exit_code == 2


def test_routes_json(runner: CliRunner, cli, tmp_path: Path) -> None:  # type: ignore[no-untyped-def]
    (tmp_path / "app.conf").write_text(CONF)
    result = runner.invoke(cli, ["routes", str(tmp_path / "app"), "--format", "json"])
    assert result.exit_code == 0, result.output
    payload = decode_json(result.stdout)
    assert payload["driver"] == "postgres"
    assert payload["placeholder"] == "numbered($)"
    (route,) = payload["routes"]
    assert route["method"] == "GET"
    assert route["pattern"] == "/users/:id"
    assert route["queries"][0]["rewritten_sql"] == "SELECT * FROM users WHERE id = $1"


def test_routes_text(runner: CliRunner, cli, tmp_path: Path) -> None:  # type: ignore[no-untyped-def]
    (tmp_path / "app.conf").write_text(CONF)
    result = runner.invoke(cli, ["routes", str(tmp_path / "app.conf")])
    assert result.exit_code == 0, result.output
    assert "GET /users/:id" in result.output
    assert "id = $1" in result.output


def test_routes_missing_config(runner: CliRunner, cli, tmp_path: Path) -> None:  # type: ignore[no-untyped-def]
    result = runner.invoke(cli, ["routes", str(tmp_path / "nothing")])
    assert result.exit_code == 1
    assert "Config file not found" in result.output
