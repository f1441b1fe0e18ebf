"""Input validation shared by command handlers.

Handlers call these before building a request body; failures raise
:class:`~memoclaw.errors.ValidationError` and are reported at the
dispatch boundary.
"""

import logging
from typing import List, Optional
from urllib.parse import urlparse

from memoclaw.errors import ValidationError

logger = logging.getLogger(__name__)

MAX_CONTENT_LENGTH = 8192

RELATION_TYPES = ("related_to", "derived_from", "contradicts", "supersedes", "supports")


def validate_content_length(content: str, label: str = "Content") -> str:
    """Reject content longer than the API accepts."""
    if len(content) > MAX_CONTENT_LENGTH:
        raise ValidationError(
            f"{label} exceeds the {MAX_CONTENT_LENGTH} character limit (got {len(content)} chars)"
        )
    return content


def validate_importance(value: str) -> float:
    """Parse an importance score, which must lie in [0, 1]."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        number = None
    if number is None or number != number or number < 0 or number > 1:
        raise ValidationError(f'Importance must be a number between 0 and 1 (got "{value}")')
    return number


def validate_similarity(value: str) -> float:
    """Parse a similarity threshold in [0, 1]."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        number = None
    if number is None or number != number or number < 0 or number > 1:
        raise ValidationError(f'Similarity must be a number between 0 and 1 (got "{value}")')
    return number


def validate_relation_type(value: str) -> str:
    if value not in RELATION_TYPES:
        raise ValidationError(
            f'Invalid relation type "{value}". Valid: {", ".join(RELATION_TYPES)}'
        )
    return value


def parse_int(value, default: int) -> int:
    """Lenient integer parsing for limits, offsets and intervals.

    Accepts a leading integer (``"10abc"`` -> 10) and falls back to
    *default* for missing or unparseable values.
    """
    if value is None or value is True or value is False:
        return default
    text = str(value).strip()
    end = 0
    while end < len(text) and (text[end].isdigit() or (end == 0 and text[end] in "+-")):
        end += 1
    try:
        return int(text[:end])
    except ValueError:
        return default


def parse_tags(value: Optional[str]) -> List[str]:
    """Split ``"a, b,c"`` into ``["a", "b", "c"]``."""
    if not value:
        return []
    return [tag.strip() for tag in value.split(",")]


def validate_backend_url(url: str) -> "str | None":
    """Validate an API URL before the wallet signature is sent to it.

    Rejects non-http/https schemes, URLs with no host, and plaintext HTTP
    to anything other than localhost/127.0.0.1.

    Returns:
        The URL unchanged if valid, or ``None`` if rejected (with a
        warning logged for the rejection reason).
    """
    if not url:
        return None
    parsed = urlparse(url)
    if parsed.scheme not in {"https", "http"}:
        logger.warning("Invalid API url scheme; only http/https allowed.")
        return None
    if not parsed.netloc:
        logger.warning("Invalid API url; missing host.")
        return None
    if parsed.scheme == "http":
        host = parsed.hostname or ""
        if host not in {"localhost", "127.0.0.1"}:
            logger.warning("Refusing non-local http API url for security.")
            return None
    return url
