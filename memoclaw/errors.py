"""Error hierarchy for the MemoClaw CLI.

Command handlers raise these; only the dispatch boundary in
``memoclaw.cli.__main__`` catches them and turns them into an exit code.
"""

from typing import Optional


class MemoClawError(Exception):
    """Base for all memoclaw errors."""

    pass


class ValidationError(MemoClawError, ValueError):
    """Raised when user input fails a client-side check."""

    pass


class ConfigError(MemoClawError):
    """Raised when configuration is missing or malformed."""

    pass


class AuthError(MemoClawError):
    """Raised when no usable wallet key is configured."""

    pass


class NetworkError(MemoClawError):
    """Raised when the API cannot be reached (refused, DNS, timeout)."""

    pass


class PaymentError(MemoClawError):
    """Raised when the free tier is exhausted and the x402 payment fails."""

    pass


class APIError(MemoClawError):
    """Raised when the API answers with a non-success status.

    Attributes:
        status_code: HTTP status of the failed response, if known.
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class OutputFileError(MemoClawError):
    """Raised when the ``--output`` file cannot be created."""

    pass
