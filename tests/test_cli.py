"""CLI payload commands (no network)."""

import json

import pytest
from typer.testing import CliRunner

from perception.cli.app import app

runner = CliRunner()


@pytest.fixture
def config_dir(tmp_path):
    (tmp_path / "default.toml").write_text('[ledger]\nmodule_address = "0xcafe"\n')
    return tmp_path


def invoke(config_dir, *args):
    return runner.invoke(app, ["--config-dir", str(config_dir), *args])


def test_buy_payload(config_dir, monkeypatch):
    monkeypatch.delenv("PERCEPTION_MODULE_ADDRESS", raising=False)
    result = invoke(config_dir, "tx", "payload", "buy", "3", "100", "--side", "no", "--agreement", "40")
    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert payload["function"] == "0xcafe::perception_market::buy_no"
    assert payload["arguments"] == ["3", "100", "40"]


def test_create_market_in_past_rejected(config_dir):
    result = invoke(
        config_dir, "tx", "payload", "create-market", "Old?", "--date", "2000-01-01", "--time", "12:00"
    )
    assert result.exit_code == 2


def test_settle_payload(config_dir, monkeypatch):
    monkeypatch.delenv("PERCEPTION_MODULE_ADDRESS", raising=False)
    result = invoke(config_dir, "tx", "payload", "settle", "5", "--result", "yes")
    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout)["arguments"] == ["5", "true"]


def test_invalid_agreement_rejected(config_dir):
    result = invoke(config_dir, "tx", "payload", "buy", "3", "100", "--agreement", "150")
    assert result.exit_code == 2


def test_root_help_describes_commands():
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "perception_market" in result.stdout
    for command in ("markets", "positions", "tx"):
        assert command in result.stdout
