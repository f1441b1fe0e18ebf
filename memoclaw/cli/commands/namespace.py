"""Namespace commands for MemoClaw CLI - list, stats."""

import logging
from collections import Counter

from memoclaw import client, colors, output
from memoclaw.cli.commands.helpers import memories_of, plural, positional
from memoclaw.errors import ValidationError
from memoclaw.output import Column

logger = logging.getLogger(__name__)

SCAN_LIMIT = 1000


def _scan():
    result = client.request("GET", "/v1/memories", params={"limit": SCAN_LIMIT})
    return memories_of(result)


def cmd_namespace(args):
    """List namespaces or count memories per namespace."""
    action = positional(args, 0)

    if action in (None, "list"):
        namespaces = sorted({m["namespace"] for m in _scan() if m.get("namespace")})
        if output.get_config().json_mode:
            output.render({"namespaces": namespaces, "count": len(namespaces)})
        elif not namespaces:
            output.write(colors.dim("No namespaces found."))
        else:
            output.table(
                [{"namespace": ns} for ns in namespaces],
                [Column("namespace", "NAMESPACE", 30)],
            )
            output.write(colors.dim(f"─ {plural(len(namespaces), 'namespace')}"))

    elif action == "stats":
        counts = Counter({"": 0})
        counts.update(m.get("namespace") or "" for m in _scan())
        rows = [
            {"namespace": ns or "(default)", "count": str(count)}
            for ns, count in sorted(counts.items(), key=lambda item: -item[1])
        ]
        if output.get_config().json_mode:
            output.render({"namespaces": rows})
        else:
            output.table(
                rows,
                [Column("namespace", "NAMESPACE", 30), Column("count", "COUNT", 10)],
            )

    else:
        raise ValidationError("Usage: namespace [list|stats]")
