"""
CLI test fixtures.

Keeps every invocation away from the real home/project configuration and
from reconfiguring the root logger under CliRunner.
"""
import sys
from unittest.mock import Mock

import pytest
import yaml
from click.testing import CliRunner

from bro.utils.logging_config import logging_config


ECHO_BUNDLER = (
    "import sys\n"
    "entry = sys.argv[1]\n"
    "src = sys.stdin.read() if entry == '-' else open(entry).read()\n"
    "sys.stdout.write('/*bundled*/' + src)\n"
)

FAILING_BUNDLER = (
    "import sys\n"
    "sys.stderr.write('ParseError: Unexpected token')\n"
    "sys.exit(1)\n"
)


@pytest.fixture(autouse=True)
def cli_workspace(tmp_path, monkeypatch):
    """Run each CLI test from an empty project directory with an empty home."""
    home = tmp_path / "home"
    home.mkdir()
    project = tmp_path / "project"
    project.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(project)
    monkeypatch.setattr(logging_config, "configure_logging", Mock())
    return project


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def entry(cli_workspace):
    src = cli_workspace / "src"
    src.mkdir()
    path = src / "main.js"
    path.write_text("var a = 1;", encoding="utf-8")
    return path


def _write_config(directory, command, **extra):
    path = directory / "bro.yaml"
    settings = {"command": command, "out_dir": str(directory / "dist")}
    settings.update(extra)
    path.write_text(yaml.safe_dump(settings), encoding="utf-8")
    return path


@pytest.fixture
def echo_config(cli_workspace):
    """Configuration file pointing at a bundler that echoes its input."""
    return _write_config(cli_workspace, [sys.executable, "-c", ECHO_BUNDLER])


@pytest.fixture
def failing_config(cli_workspace):
    """Configuration file pointing at a bundler that always fails."""
    return _write_config(cli_workspace, [sys.executable, "-c", FAILING_BUNDLER])


@pytest.fixture
def watch_config(cli_workspace, inline_command, inline_list_command):
    """Configuration file pointing at an inlining bundler that lists its inputs."""
    return _write_config(cli_workspace, inline_command, list_command=inline_list_command)
