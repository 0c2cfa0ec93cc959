"""Tests for the command line interface."""

import uuid
from unittest.mock import patch

from typer.testing import CliRunner

from cli import typer_app

runner = CliRunner()


def test_build_id():
    result = runner.invoke(typer_app, ["build-id"])

    assert result.exit_code == 0
    uuid.UUID(result.stdout.strip())


def test_routes():
    result = runner.invoke(typer_app, ["routes"], env={"COLUMNS": "200"})

    assert result.exit_code == 0
    for path in ("/todos", "/client.js", "/styles.css", "/health", "/livereload/{build_id}"):
        assert path in result.stdout


def test_serve_runs_factory():
    with patch("cli.uvicorn.run") as run:
        result = runner.invoke(typer_app, ["serve", "--port", "9000"])

    assert result.exit_code == 0
    args, kwargs = run.call_args
    assert args == ("todo_app:application",)
    assert kwargs["factory"] is True
    assert kwargs["port"] == 9000
