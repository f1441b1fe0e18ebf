"""HTTP layer for the MemoClaw API.

Every call signs an ``x-wallet-auth`` header. A 402 answer means the free
tier is used up; the request is then retried once with an x402 payment.
Transport failures are mapped to :class:`~memoclaw.errors.NetworkError`
so raw ``httpx`` exceptions never reach command handlers.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from memoclaw import auth
from memoclaw.config import get_api_url
from memoclaw.errors import APIError, NetworkError, PaymentError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0

_timeout = DEFAULT_TIMEOUT

_DNS_MARKERS = ("Name or service not known", "nodename nor servname", "getaddrinfo", "No address")


def set_request_timeout(seconds: float) -> None:
    global _timeout
    _timeout = seconds


def get_request_timeout() -> float:
    return _timeout


def _send(method: str, url: str, **kwargs) -> httpx.Response:
    """Issue one HTTP call, translating transport errors."""
    base_url = get_api_url()
    try:
        return httpx.request(method, url, timeout=_timeout, **kwargs)
    except httpx.TimeoutException as e:
        raise NetworkError(f"Request timed out after {_timeout:g}s") from e
    except httpx.ConnectError as e:
        if any(marker in str(e) for marker in _DNS_MARKERS):
            raise NetworkError(
                f"DNS lookup failed for {base_url} - check your internet connection"
            ) from e
        raise NetworkError(f"Cannot connect to {base_url} - is the server running?") from e
    except httpx.HTTPError as e:
        raise NetworkError(f"Network error: {e}") from e


def _error_message(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return f"HTTP {response.status_code}"
    error = data.get("error") if isinstance(data, dict) else None
    if isinstance(error, dict) and error.get("message"):
        return error["message"]
    if isinstance(error, str) and error:
        return error
    return f"HTTP {response.status_code}"


def request(
    method: str,
    path: str,
    body: Optional[Dict[str, Any]] = None,
    params: Optional[Dict[str, Any]] = None,
) -> Any:
    """Call the API and return the decoded JSON body.

    Args:
        method: HTTP method.
        path: API path such as ``/v1/store``.
        body: JSON request body, if any.
        params: Query parameters; None values are dropped.

    Raises:
        NetworkError: The API could not be reached.
        PaymentError: The free tier is exhausted and payment failed.
        APIError: The API answered with a non-success status.
    """
    url = f"{get_api_url()}{path}"
    query = {k: str(v) for k, v in (params or {}).items() if v is not None}
    headers = {
        "Content-Type": "application/json",
        "x-wallet-auth": auth.get_wallet_auth_header(),
    }

    response = _send(method, url, headers=headers, json=body, params=query or None)

    remaining = response.headers.get("x-free-tier-remaining")
    if remaining is not None:
        logger.debug(f"Free tier remaining: {remaining}")

    if response.status_code == 402:
        logger.debug("402 from %s %s, switching to x402 payment", method, path)
        try:
            payment_headers = auth.create_payment_headers(response)
        except Exception as e:
            logger.debug(f"x402 payment failed: {e}")
            raise PaymentError(
                "Free tier exhausted. Run `memoclaw status` to check usage, "
                "or visit memoclaw.com/pricing for paid plans.\n"
                f"(x402 payment failed: {e})"
            ) from e
        retry_headers = {"Content-Type": "application/json", **payment_headers}
        response = _send(method, url, headers=retry_headers, json=body, params=query or None)
        logger.debug("x402 retry returned %s", response.status_code)

    if not response.is_success:
        raise APIError(_error_message(response), status_code=response.status_code)

    try:
        return response.json()
    except ValueError as e:
        raise APIError(f"Invalid JSON in response (HTTP {response.status_code})") from e


def free_tier_status() -> Optional[Dict[str, Any]]:
    """Fetch ``/v1/free-tier/status``. Returns None when the call fails."""
    url = f"{get_api_url()}/v1/free-tier/status"
    response = _send("GET", url, headers={"x-wallet-auth": auth.get_wallet_auth_header()})
    if not response.is_success:
        logger.debug(f"Free tier status returned {response.status_code}")
        return None
    return response.json()


def require_free_tier_status() -> Dict[str, Any]:
    """Like :func:`free_tier_status` but raises with the API's message."""
    url = f"{get_api_url()}/v1/free-tier/status"
    response = _send("GET", url, headers={"x-wallet-auth": auth.get_wallet_auth_header()})
    if not response.is_success:
        message = _error_message(response)
        if message.startswith("HTTP "):
            message = "Failed to get status"
        raise APIError(message, status_code=response.status_code)
    return response.json()
