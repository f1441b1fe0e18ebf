"""Tests for memoclaw.auth - wallet signing and payment headers."""

import sys
from types import ModuleType
from unittest.mock import MagicMock, patch

import pytest
from eth_account import Account
from eth_account.messages import encode_defunct

from memoclaw import auth
from memoclaw.errors import AuthError

TEST_ADDRESS = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"


class TestGetAccount:
    def test_loads_from_env(self):
        assert auth.get_account().address == TEST_ADDRESS

    def test_cached(self):
        assert auth.get_account() is auth.get_account()

    def test_missing_key(self, monkeypatch):
        monkeypatch.delenv("MEMOCLAW_PRIVATE_KEY")
        with pytest.raises(AuthError, match="MEMOCLAW_PRIVATE_KEY"):
            auth.get_account()

    def test_invalid_key(self, monkeypatch):
        monkeypatch.setenv("MEMOCLAW_PRIVATE_KEY", "0xnothex")
        with pytest.raises(AuthError, match="Invalid wallet private key"):
            auth.get_account()


class TestWalletAuthHeader:
    def test_signature_recovers_address(self):
        with patch("memoclaw.auth.time.time", return_value=1700000000.4):
            header = auth.get_wallet_auth_header()

        address, timestamp, signature = header.split(":")
        assert address == TEST_ADDRESS
        assert timestamp == "1700000000"
        assert signature.startswith("0x")

        message = encode_defunct(text="memoclaw-auth:1700000000")
        assert Account.recover_message(message, signature=signature) == TEST_ADDRESS


class TestGenerateWallet:
    def test_key_matches_address(self):
        private_key, address = auth.generate_wallet()
        assert private_key.startswith("0x")
        assert len(private_key) == 66
        assert Account.from_key(private_key).address == address


class TestCreatePaymentHeaders:
    def test_builds_x_payment_header(self):
        """The x402 client selects requirements and signs the header."""
        fake_client = MagicMock()
        fake_client.select_payment_requirements.return_value = "requirements"
        fake_client.create_payment_header.return_value = "encoded-payment"
        fake_required = MagicMock(accepts=["a"], x402_version=1)

        base = ModuleType("x402.clients.base")
        base.x402Client = MagicMock(return_value=fake_client)
        types_mod = ModuleType("x402.types")
        types_mod.x402PaymentRequiredResponse = MagicMock(return_value=fake_required)
        modules = {
            "x402": ModuleType("x402"),
            "x402.clients": ModuleType("x402.clients"),
            "x402.clients.base": base,
            "x402.types": types_mod,
        }

        response = MagicMock()
        response.json.return_value = {"x402Version": 1, "accepts": ["a"]}
        with patch.dict(sys.modules, modules):
            headers = auth.create_payment_headers(response)

        assert headers["X-PAYMENT"] == "encoded-payment"
        base.x402Client.assert_called_once_with(auth.get_account())
        fake_client.select_payment_requirements.assert_called_once_with(["a"])
        fake_client.create_payment_header.assert_called_once_with("requirements", 1)
