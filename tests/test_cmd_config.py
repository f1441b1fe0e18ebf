"""Tests for memoclaw.cli.commands.config - init and config."""

import json
import stat

import pytest
import yaml
from eth_account import Account

from memoclaw.cli.commands.config import cmd_config, cmd_init, config_issues
from memoclaw.config import get_config_file_path, get_persisted_config_path
from memoclaw.errors import ConfigError, ValidationError

# ============================================================================
# init
# ============================================================================


class TestCmdInit:
    def test_creates_wallet_config(self, cli_args, capsys):
        cmd_init(cli_args("init"))

        path = get_persisted_config_path()
        saved = json.loads(path.read_text())
        assert Account.from_key(saved["privateKey"]).address == saved["address"]
        assert saved["url"] == "https://api.memoclaw.com"
        assert stat.S_IMODE(path.stat().st_mode) == 0o600
        out = capsys.readouterr().out
        assert "MemoClaw initialized!" in out
        assert saved["address"] in out

    def test_refuses_to_overwrite(self, cli_args, capsys):
        cmd_init(cli_args("init"))
        first = json.loads(get_persisted_config_path().read_text())
        capsys.readouterr()

        with pytest.raises(ConfigError, match="already exists"):
            cmd_init(cli_args("init"))
        assert json.loads(get_persisted_config_path().read_text()) == first
        err = capsys.readouterr().err
        assert first["address"] in err
        assert "--force" in err

    def test_force_overwrites(self, cli_args):
        cmd_init(cli_args("init"))
        first = json.loads(get_persisted_config_path().read_text())
        cmd_init(cli_args("init", "--force"))
        second = json.loads(get_persisted_config_path().read_text())
        assert second["address"] != first["address"]

    def test_json(self, cli_args, capsys):
        cmd_init(cli_args("init", "--json", "--url", "http://localhost:3000"))
        data = json.loads(capsys.readouterr().out)
        assert data["url"] == "http://localhost:3000"
        assert data["configPath"] == str(get_persisted_config_path())
        assert data["address"].startswith("0x")


# ============================================================================
# config
# ============================================================================


class TestCmdConfig:
    def test_path(self, cli_args, capsys):
        cmd_config(cli_args("config", "path"))
        assert capsys.readouterr().out == f"{get_config_file_path()}\n"

    def test_init_writes_yaml(self, cli_args, monkeypatch):
        monkeypatch.setenv("MEMOCLAW_NAMESPACE", "work")
        cmd_config(cli_args("config", "init"))
        data = yaml.safe_load(get_config_file_path().read_text())
        assert data == {"url": "https://api.memoclaw.com", "namespace": "work", "timeout": 30}

    def test_show_masks_key(self, cli_args, capsys):
        cmd_config(cli_args("config", "--json"))
        data = json.loads(capsys.readouterr().out)
        assert data["MEMOCLAW_PRIVATE_KEY"] == "0xac09…ff80"
        assert data["MEMOCLAW_URL"] == "https://api.memoclaw.com"
        assert data["NO_COLOR"] == "(not set)"

    def test_show_text(self, cli_args, capsys):
        cmd_config(cli_args("config", "show"))
        out = capsys.readouterr().out
        assert "MemoClaw Configuration" in out
        assert "0xac09…ff80" in out

    def test_check_valid(self, cli_args, capsys):
        cmd_config(cli_args("config", "check"))
        captured = capsys.readouterr()
        assert "Configuration looks good!" in captured.out
        assert "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266" in captured.err

    def test_check_json_reports_issues(self, cli_args, capsys, monkeypatch):
        monkeypatch.delenv("MEMOCLAW_PRIVATE_KEY")
        cmd_config(cli_args("config", "check", "--json"))
        assert json.loads(capsys.readouterr().out) == {
            "valid": False,
            "issues": ["MEMOCLAW_PRIVATE_KEY is not set"],
        }

    def test_unknown_action(self, cli_args):
        with pytest.raises(ValidationError, match="Usage: config"):
            cmd_config(cli_args("config", "reset"))


class TestConfigIssues:
    @pytest.mark.parametrize(
        "key,expected",
        [
            (None, "not set"),
            ("abc", "should start with 0x"),
            ("0x1234", "wrong length (6, expected 66)"),
        ],
    )
    def test_problems(self, key, expected):
        issues = config_issues(key)
        assert len(issues) == 1
        assert expected in issues[0]

    def test_valid(self):
        assert config_issues("0x" + "a" * 64) == []
