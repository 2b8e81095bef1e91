"""Tests for the policy-enforcer CLI."""
from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from aumos_policy_enforcer.cli.main import cli

_CONFIG_YAML = """\
version: "1"
enforcement_mode: ENFORCING
on_deny_redirect_to: /access-denied
paths:
  - name: orders
    path: /orders/{id}
    scopes: [view]
    methods:
      - method: DELETE
        scopes: [delete]
"""


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture()
def config_file(tmp_path: Path) -> str:
    path = tmp_path / "enforcer.yaml"
    path.write_text(_CONFIG_YAML, encoding="utf-8")
    return str(path)


@pytest.fixture()
def token_file(tmp_path: Path) -> str:
    path = tmp_path / "token.json"
    claims = {
        "sub": "alice",
        "authorization": {"permissions": [{"rsid": "orders", "scopes": ["view"]}]},
    }
    path.write_text(json.dumps(claims), encoding="utf-8")
    return str(path)


class TestVersion:
    def test_version_command(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["version"])
        assert result.exit_code == 0
        assert "aumos-policy-enforcer" in result.output


class TestValidate:
    def test_valid_config(self, runner: CliRunner, config_file: str) -> None:
        result = runner.invoke(cli, ["validate", "--config", config_file])
        assert result.exit_code == 0
        assert "VALID" in result.output

    def test_invalid_config(self, runner: CliRunner, tmp_path: Path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text("enforcement_mode: sometimes\n", encoding="utf-8")
        result = runner.invoke(cli, ["validate", "--config", str(path)])
        assert result.exit_code == 1
        assert "INVALID" in result.output


class TestPaths:
    def test_lists_protected_paths(self, runner: CliRunner, config_file: str) -> None:
        result = runner.invoke(cli, ["paths", "-c", config_file])
        assert result.exit_code == 0
        assert "/orders/{id}" in result.output

    def test_empty_config(self, runner: CliRunner, tmp_path: Path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("version: '1'\n", encoding="utf-8")
        result = runner.invoke(cli, ["paths", "-c", str(path)])
        assert result.exit_code == 0
        assert "No protected paths configured." in result.output


class TestCheck:
    def test_granted_exits_zero(self, runner: CliRunner, config_file: str, token_file: str) -> None:
        result = runner.invoke(
            cli, ["check", "-p", "/orders/42", "-t", token_file, "-c", config_file]
        )
        assert result.exit_code == 0
        assert "GRANTED" in result.output

    def test_denied_exits_one(self, runner: CliRunner, config_file: str, token_file: str) -> None:
        result = runner.invoke(
            cli, ["check", "-p", "/orders/42", "-m", "DELETE", "-t", token_file, "-c", config_file]
        )
        assert result.exit_code == 1
        assert "DENIED" in result.output
        assert "403" in result.output

    def test_anonymous_is_challenged(self, runner: CliRunner, config_file: str) -> None:
        result = runner.invoke(
            cli, ["check", "-p", "/orders/42", "--anonymous", "-c", config_file]
        )
        assert result.exit_code == 1
        assert "401" in result.output

    def test_token_or_anonymous_required(self, runner: CliRunner, config_file: str) -> None:
        result = runner.invoke(cli, ["check", "-p", "/orders/42", "-c", config_file])
        assert result.exit_code == 2

    def test_invalid_token_file(self, runner: CliRunner, config_file: str, tmp_path: Path) -> None:
        path = tmp_path / "token.json"
        path.write_text("{not json", encoding="utf-8")
        result = runner.invoke(
            cli, ["check", "-p", "/orders/42", "-t", str(path), "-c", config_file]
        )
        assert result.exit_code == 2


class TestAudit:
    @pytest.fixture()
    def audit_log(self, tmp_path: Path) -> str:
        path = tmp_path / "decisions.jsonl"
        records = [
            {"event": "authorization_decision", "method": "GET", "path": "/orders/1",
             "granted": True, "reason": "granted"},
            {"event": "authorization_decision", "method": "DELETE", "path": "/orders/1",
             "granted": False, "reason": "insufficient-permissions"},
            {"event": "startup"},
        ]
        path.write_text("".join(json.dumps(r) + "\n" for r in records), encoding="utf-8")
        return str(path)

    def test_summarises_decisions(self, runner: CliRunner, audit_log: str) -> None:
        result = runner.invoke(cli, ["audit", "--log", audit_log])
        assert result.exit_code == 0
        assert "insufficient-permissions" in result.output
        assert "Granted: 1" in result.output
        assert "Denied: 1" in result.output

    def test_denied_only(self, runner: CliRunner, audit_log: str) -> None:
        result = runner.invoke(cli, ["audit", "--log", audit_log, "--denied"])
        assert result.exit_code == 0
        assert "DELETE" in result.output
        assert "GET" not in result.output

    def test_empty_log(self, runner: CliRunner, tmp_path: Path) -> None:
        path = tmp_path / "empty.jsonl"
        path.write_text("", encoding="utf-8")
        result = runner.invoke(cli, ["audit", "--log", str(path)])
        assert result.exit_code == 0
        assert "No decisions recorded" in result.output
