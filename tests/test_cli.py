from __future__ import annotations

import json
import logging

import pytest
import structlog
from typer.testing import CliRunner

from devhub_gateway import cli
from devhub_gateway.config import load_config

runner = CliRunner()


@pytest.fixture(autouse=True)
def _isolated(monkeypatch, tmp_path):
    # the CLI configures logging against the runner's streams; put it back afterwards
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    monkeypatch.chdir(tmp_path)
    load_config.cache_clear()
    yield
    load_config.cache_clear()
    root.handlers[:] = handlers
    root.setLevel(level)
    structlog.reset_defaults()


def test_action_prints_function_call():
    body = json.dumps({"inputs": {"handle": "near"}})
    result = runner.invoke(cli.app, ["action", "create_community", body])
    assert result.exit_code == 0, result.output
    data = json.loads(result.stdout)
    assert data["type"] == "FunctionCall"
    assert data["params"]["methodName"] == "create_community"
    assert data["params"]["args"] == {"inputs": {"handle": "near"}}


def test_action_invalid_input_exits_nonzero():
    result = runner.invoke(cli.app, ["action", "add_member", "{}"])
    assert result.exit_code == 1


def test_action_unknown_route():
    result = runner.invoke(cli.app, ["action", "get_proposal", "{}"])
    assert result.exit_code == 2


def test_manifest_command():
    result = runner.invoke(cli.app, ["manifest"])
    assert result.exit_code == 0, result.output
    doc = json.loads(result.stdout)
    assert "/api/get_community" in doc["paths"]
    assert doc["x-mb"]["assistant"]["tools"] == [{"type": "generate-transaction"}]


def test_view_rejects_bad_pair():
    result = runner.invoke(cli.app, ["view", "get_community", "handle"])
    assert result.exit_code == 2
