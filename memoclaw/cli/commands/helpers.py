"""Shared helper functions for CLI commands."""

import logging
import time
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from memoclaw import colors, output
from memoclaw.errors import MemoClawError, ValidationError
from memoclaw.validation import parse_int

logger = logging.getLogger(__name__)

DEFAULT_WATCH_INTERVAL_MS = 5000


def require(value: Optional[str], message: str) -> str:
    """Raise ``ValidationError(message)`` when a positional is missing."""
    if not value:
        raise ValidationError(message)
    return value


def positional(args, index: int) -> Optional[str]:
    """The *index*-th argument after the command name, if present."""
    rest = args.rest
    return rest[index] if index < len(rest) else None


def memories_of(result: Any, key: str = "memories") -> List[Dict[str, Any]]:
    """Pull the memory list out of a response (``memories`` or ``data``)."""
    if not isinstance(result, dict):
        return []
    return result.get(key) or result.get("data") or []


def short_id(value: Optional[str]) -> str:
    return value[:8] if value else "?"


def tags_of(memory: Dict[str, Any]) -> List[str]:
    metadata = memory.get("metadata") or {}
    return metadata.get("tags") or []


def _parse_timestamp(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00")).astimezone()


def format_date(value: Optional[str]) -> str:
    """Render an ISO timestamp as a local date."""
    if not value:
        return ""
    try:
        return _parse_timestamp(value).strftime("%Y-%m-%d")
    except ValueError:
        return value[:10]


def format_datetime(value: Optional[str]) -> str:
    """Render an ISO timestamp as a local date and time."""
    if not value:
        return ""
    try:
        return _parse_timestamp(value).strftime("%Y-%m-%d %H:%M:%S")
    except ValueError:
        return value


def fixed(value: Any, digits: int) -> str:
    """Format a number with *digits* decimals, or "" for non-numbers."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return ""
    return f"{value:.{digits}f}"


def similarity_color(similarity: Optional[float]) -> Callable[[str], str]:
    score = similarity or 0
    if score > 0.8:
        return colors.green
    if score > 0.5:
        return colors.yellow
    return colors.red


def plural(count: int, word: str) -> str:
    return f"{count} {word}{'' if count == 1 else 's'}"


def watch_interval(args) -> float:
    """Polling interval in seconds from ``--watch-interval`` (milliseconds)."""
    return parse_int(args.value("watchInterval"), DEFAULT_WATCH_INTERVAL_MS) / 1000


def watch_loop(
    fetch: Callable[[], Any],
    fingerprint: Callable[[Any], Any],
    show: Callable[[Any], None],
    interval: float,
) -> None:
    """Poll *fetch* forever, re-rendering whenever *fingerprint* changes.

    Fetch errors are logged and retried on the next cycle. The loop ends
    only when interrupted (Ctrl+C).
    """
    output.write(colors.dim("Watching for changes... Press Ctrl+C to stop."))
    last = None
    while True:
        try:
            result = fetch()
            current = fingerprint(result)
            if current != last:
                if last is not None:
                    output.write(colors.dim("─" * 40))
                last = current
                show(result)
        except MemoClawError as e:
            logger.debug(f"Watch error: {e}")
        time.sleep(interval)
