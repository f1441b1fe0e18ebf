"""
Pytest fixtures and test configuration for MemoClaw tests.
"""

import pytest

from memoclaw import auth, client, colors, output
from memoclaw.args import ParsedArgs, parse_args

# Well-known development key (Hardhat account #0); never holds funds.
TEST_PRIVATE_KEY = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Point config at a temp dir, use a test wallet and reset process state."""
    for name in (
        "MEMOCLAW_URL",
        "MEMOCLAW_NAMESPACE",
        "MEMOCLAW_TIMEOUT",
        "NO_COLOR",
        "DEBUG",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("MEMOCLAW_HOME", str(tmp_path / "home"))
    monkeypatch.setenv("MEMOCLAW_PRIVATE_KEY", TEST_PRIVATE_KEY)
    monkeypatch.setattr(colors, "_disabled", False)

    auth.reset_account()
    client.set_request_timeout(client.DEFAULT_TIMEOUT)
    output.configure_output(ParsedArgs())
    yield
    auth.reset_account()
    output.configure_output(ParsedArgs())


@pytest.fixture
def cli_args():
    """Build ParsedArgs from argv tokens and install their output config."""

    def _build(*tokens):
        args = parse_args(list(tokens))
        output.configure_output(args)
        return args

    return _build
