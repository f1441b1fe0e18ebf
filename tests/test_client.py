"""Tests for memoclaw.client - requests, error mapping and x402 retry."""

from unittest.mock import MagicMock, patch

import httpx
import pytest

from memoclaw import client
from memoclaw.errors import APIError, NetworkError, PaymentError

AUTH_HEADER = "0xf39F:1700000000:0xsig"


def _make_response(status_code=200, json_data=None, headers=None):
    """Create a mock httpx.Response."""
    resp = MagicMock()
    resp.status_code = status_code
    resp.is_success = 200 <= status_code < 300
    resp.headers = headers or {}
    if isinstance(json_data, Exception):
        resp.json.side_effect = json_data
    else:
        resp.json.return_value = json_data if json_data is not None else {}
    return resp


@pytest.fixture
def mock_http():
    with patch("memoclaw.auth.get_wallet_auth_header", return_value=AUTH_HEADER), patch(
        "memoclaw.client.httpx.request"
    ) as mock_request:
        yield mock_request


# ============================================================================
# request
# ============================================================================


class TestRequest:
    def test_success_returns_json(self, mock_http):
        mock_http.return_value = _make_response(200, {"id": "m1"})

        result = client.request("POST", "/v1/store", body={"content": "hi"})

        assert result == {"id": "m1"}
        method, url = mock_http.call_args[0]
        kwargs = mock_http.call_args[1]
        assert method == "POST"
        assert url == "https://api.memoclaw.com/v1/store"
        assert kwargs["json"] == {"content": "hi"}
        assert kwargs["headers"]["x-wallet-auth"] == AUTH_HEADER
        assert kwargs["timeout"] == 30.0

    def test_params_drop_none_and_stringify(self, mock_http):
        mock_http.return_value = _make_response(200, {"memories": []})

        client.request("GET", "/v1/memories", params={"limit": 5, "namespace": None})

        assert mock_http.call_args[1]["params"] == {"limit": "5"}

    def test_empty_params_sent_as_none(self, mock_http):
        mock_http.return_value = _make_response(200, {})
        client.request("GET", "/v1/memories", params={"namespace": None})
        assert mock_http.call_args[1]["params"] is None

    def test_uses_configured_timeout(self, mock_http):
        mock_http.return_value = _make_response(200, {})
        client.set_request_timeout(5)
        client.request("GET", "/v1/memories")
        assert mock_http.call_args[1]["timeout"] == 5

    def test_error_object_message(self, mock_http):
        mock_http.return_value = _make_response(
            404, {"error": {"code": "NOT_FOUND", "message": "Memory not found"}}
        )
        with pytest.raises(APIError, match="Memory not found") as exc_info:
            client.request("GET", "/v1/memories/x")
        assert exc_info.value.status_code == 404

    def test_error_string_message(self, mock_http):
        mock_http.return_value = _make_response(400, {"error": "bad input"})
        with pytest.raises(APIError, match="bad input"):
            client.request("POST", "/v1/store")

    def test_error_without_body(self, mock_http):
        mock_http.return_value = _make_response(500, ValueError("no json"))
        with pytest.raises(APIError, match="HTTP 500"):
            client.request("GET", "/v1/memories")

    def test_invalid_json_on_success(self, mock_http):
        mock_http.return_value = _make_response(200, ValueError("no json"))
        with pytest.raises(APIError, match="Invalid JSON"):
            client.request("GET", "/v1/memories")


# ============================================================================
# Transport errors
# ============================================================================


class TestTransportErrors:
    def test_timeout(self, mock_http):
        mock_http.side_effect = httpx.ReadTimeout("slow")
        client.set_request_timeout(2.5)
        with pytest.raises(NetworkError, match=r"timed out after 2.5s"):
            client.request("GET", "/v1/memories")

    def test_connection_refused(self, mock_http):
        mock_http.side_effect = httpx.ConnectError("Connection refused")
        with pytest.raises(NetworkError, match="Cannot connect to https://api.memoclaw.com"):
            client.request("GET", "/v1/memories")

    def test_dns_failure(self, mock_http):
        mock_http.side_effect = httpx.ConnectError("[Errno -2] Name or service not known")
        with pytest.raises(NetworkError, match="DNS lookup failed"):
            client.request("GET", "/v1/memories")

    def test_other_http_error(self, mock_http):
        mock_http.side_effect = httpx.RemoteProtocolError("peer closed")
        with pytest.raises(NetworkError, match="Network error: peer closed"):
            client.request("GET", "/v1/memories")


# ============================================================================
# x402 payment retry
# ============================================================================


class TestPaymentRetry:
    def test_402_retries_with_payment_header(self, mock_http):
        mock_http.side_effect = [
            _make_response(402, {"x402Version": 1, "accepts": []}),
            _make_response(200, {"id": "paid"}),
        ]
        with patch(
            "memoclaw.auth.create_payment_headers", return_value={"X-PAYMENT": "payload"}
        ):
            result = client.request("POST", "/v1/recall", body={"query": "q"})

        assert result == {"id": "paid"}
        assert mock_http.call_count == 2
        retry_headers = mock_http.call_args_list[1][1]["headers"]
        assert retry_headers["X-PAYMENT"] == "payload"
        assert "x-wallet-auth" not in retry_headers
        assert mock_http.call_args_list[1][1]["json"] == {"query": "q"}

    def test_payment_failure_raises_payment_error(self, mock_http):
        mock_http.return_value = _make_response(402, {"accepts": []})
        with patch(
            "memoclaw.auth.create_payment_headers", side_effect=RuntimeError("no funds")
        ):
            with pytest.raises(PaymentError, match="Free tier exhausted") as exc_info:
                client.request("POST", "/v1/store")
        assert "no funds" in str(exc_info.value)
        assert mock_http.call_count == 1

    def test_retry_failure_is_api_error(self, mock_http):
        mock_http.side_effect = [
            _make_response(402, {}),
            _make_response(402, {"error": {"message": "Payment rejected"}}),
        ]
        with patch("memoclaw.auth.create_payment_headers", return_value={"X-PAYMENT": "p"}):
            with pytest.raises(APIError, match="Payment rejected"):
                client.request("POST", "/v1/store")


# ============================================================================
# Free tier status
# ============================================================================


class TestFreeTierStatus:
    def test_returns_body(self, mock_http):
        mock_http.return_value = _make_response(200, {"free_tier_remaining": 90})
        assert client.free_tier_status() == {"free_tier_remaining": 90}

    def test_failure_returns_none(self, mock_http):
        mock_http.return_value = _make_response(401, {})
        assert client.free_tier_status() is None

    def test_require_uses_api_message(self, mock_http):
        mock_http.return_value = _make_response(401, {"error": {"message": "Bad signature"}})
        with pytest.raises(APIError, match="Bad signature"):
            client.require_free_tier_status()

    def test_require_generic_message(self, mock_http):
        mock_http.return_value = _make_response(500, ValueError("no json"))
        with pytest.raises(APIError, match="Failed to get status"):
            client.require_free_tier_status()
