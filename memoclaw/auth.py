"""Wallet identity and x402 payments.

The wallet private key is the user's identity: every request carries an
``x-wallet-auth`` header signed with it. When the free tier is exhausted
the API answers 402 and the request is retried once with an x402 payment
header built by the ``x402`` client library.
"""

import logging
import time
from typing import Dict, Tuple

from eth_account import Account
from eth_account.messages import encode_defunct

from memoclaw.config import get_private_key
from memoclaw.errors import AuthError

logger = logging.getLogger(__name__)

_account = None


def _hex(value) -> str:
    text = value.hex() if hasattr(value, "hex") else str(value)
    return text if text.startswith("0x") else f"0x{text}"


def get_account():
    """Return the wallet account for the configured private key."""
    global _account
    if _account is None:
        private_key = get_private_key()
        if not private_key:
            raise AuthError(
                "MEMOCLAW_PRIVATE_KEY environment variable required "
                "(set it with: export MEMOCLAW_PRIVATE_KEY=0x... or run `memoclaw init`)"
            )
        try:
            _account = Account.from_key(private_key)
        except (ValueError, TypeError) as e:
            raise AuthError(f"Invalid wallet private key: {e}") from e
    return _account


def reset_account() -> None:
    global _account
    _account = None


def get_wallet_auth_header() -> str:
    """Build ``<address>:<timestamp>:<signature>`` for ``x-wallet-auth``."""
    account = get_account()
    timestamp = int(time.time())
    message = encode_defunct(text=f"memoclaw-auth:{timestamp}")
    signed = account.sign_message(message)
    return f"{account.address}:{timestamp}:{_hex(signed.signature)}"


def create_payment_headers(response) -> Dict[str, str]:
    """Turn a 402 response into x402 payment headers for the retry."""
    from x402.clients.base import x402Client
    from x402.types import x402PaymentRequiredResponse

    payment_required = x402PaymentRequiredResponse(**response.json())
    logger.debug("Payment required: %s", payment_required)

    client = x402Client(get_account())
    requirements = client.select_payment_requirements(payment_required.accepts)
    header = client.create_payment_header(requirements, payment_required.x402_version)
    return {
        "X-PAYMENT": header,
        "Access-Control-Expose-Headers": "X-PAYMENT-RESPONSE",
    }


def generate_wallet() -> Tuple[str, str]:
    """Create a new wallet. Returns ``(private_key, address)``."""
    account = Account.create()
    return _hex(account.key), account.address
