"""Tests for the migration-agent CLI."""

from unittest.mock import MagicMock, patch

import httpx
from typer.testing import CliRunner

from migration_agent import __version__
from migration_agent.api.cli.commands.client import build_send_request
from migration_agent.api.cli.main import app

runner = CliRunner()


def mock_response(payload):
    response = MagicMock()
    response.json.return_value = payload
    response.raise_for_status.return_value = None
    return response


COMPLETED = {
    "jsonrpc": "2.0",
    "id": 1,
    "result": {
        "id": "task-42",
        "kind": "task",
        "status": {"state": "completed"},
        "artifacts": [
            {
                "artifactId": "a-1",
                "name": "Migration Pathway Recommendation",
                "parts": [{"type": "text", "text": "Express Entry is the fastest route."}],
            }
        ],
    },
}


def test_help_lists_commands():
    result = runner.invoke(app, ["--help"])

    assert result.exit_code == 0
    assert "serve" in result.output
    assert "client" in result.output


def test_version():
    result = runner.invoke(app, ["version"])

    assert result.exit_code == 0
    assert __version__ in result.output


def test_build_send_request():
    request = build_send_request("move to Canada", task_id="t-1", request_id=7)

    assert request == {
        "jsonrpc": "2.0",
        "method": "tasks/send",
        "params": {
            "id": "t-1",
            "message": {"role": "user", "parts": [{"type": "text", "text": "move to Canada"}]},
        },
        "id": 7,
    }


def test_build_send_request_without_task_id():
    assert "id" not in build_send_request("hello")["params"]


def test_query_prints_result():
    with patch("httpx.post", return_value=mock_response(COMPLETED)) as post:
        result = runner.invoke(app, ["client", "query", "move to Canada", "--url", "http://agent:9000/"])

    assert result.exit_code == 0
    assert "task-42" in result.output
    assert "completed" in result.output
    assert "Express Entry" in result.output
    args, kwargs = post.call_args
    assert args[0] == "http://agent:9000/"
    assert kwargs["json"]["params"]["message"]["parts"][0]["text"] == "move to Canada"


def test_query_rpc_error_exits_nonzero():
    payload = {
        "jsonrpc": "2.0",
        "id": 1,
        "error": {"code": -32602, "message": "Invalid params", "data": "message: Field required"},
    }
    with patch("httpx.post", return_value=mock_response(payload)):
        result = runner.invoke(app, ["client", "query", "hello"])

    assert result.exit_code == 1
    assert "Invalid params" in result.output
    assert "-32602" in result.output
    assert "Field required" in result.output


def test_query_failed_task_exits_nonzero():
    payload = {
        "jsonrpc": "2.0",
        "id": 1,
        "result": {
            "id": "task-9",
            "status": {
                "state": "failed",
                "message": {"parts": [{"type": "text", "text": "Failed to generate pathways: boom"}]},
            },
            "artifacts": [],
        },
    }
    with patch("httpx.post", return_value=mock_response(payload)):
        result = runner.invoke(app, ["client", "query", "hello"])

    assert result.exit_code == 1
    assert "Failed to generate pathways: boom" in result.output


def test_query_connection_error():
    with patch("httpx.post", side_effect=httpx.ConnectError("connection refused")):
        result = runner.invoke(app, ["client", "query", "hello"])

    assert result.exit_code == 1
    assert "connection refused" in result.output


def test_card():
    card = {"name": "Migration Pathways Agent", "skills": []}
    with patch("httpx.get", return_value=mock_response(card)) as get:
        result = runner.invoke(app, ["client", "card"])

    assert result.exit_code == 0
    assert "Migration Pathways Agent" in result.output
    assert get.call_args.args[0] == "http://localhost:8080/.well-known/agent.json"


def test_serve_runs_uvicorn_factory(monkeypatch):
    monkeypatch.delenv("PORT", raising=False)
    with patch("uvicorn.run") as run:
        result = runner.invoke(app, ["serve", "--port", "9000", "--log-level", "DEBUG"])

    assert result.exit_code == 0
    args, kwargs = run.call_args
    assert args[0] == "migration_agent.api.server:create_app"
    assert kwargs["factory"] is True
    assert kwargs["port"] == 9000
    assert kwargs["log_level"] == "debug"
