"""List command for MemoClaw CLI - paginated memory table with sorting and column selection."""

import logging
from datetime import datetime

from memoclaw import client, colors, output
from memoclaw.cli.commands.helpers import (
    fixed,
    format_date,
    memories_of,
    tags_of,
    watch_interval,
    watch_loop,
)
from memoclaw.output import Column, truncate

logger = logging.getLogger(__name__)


def _column_map(content_width: int):
    return {
        "id": Column("id", "ID", 10),
        "content": Column("content", "CONTENT", content_width),
        "importance": Column("importance", "IMP", 5),
        "tags": Column("tags", "TAGS", 20),
        "created": Column("created", "CREATED", 12),
        "updated": Column("updated", "UPDATED", 12),
        "namespace": Column("namespace", "NAMESPACE", 15),
        "type": Column("memory_type", "TYPE", 10),
    }


DEFAULT_COLUMNS = ("id", "content", "importance", "tags", "created")


def select_columns(selection, content_width: int):
    """Resolve ``--columns id,content,...`` into table columns.

    Unknown names become a generic 20-wide column keyed by the name.
    """
    known = _column_map(content_width)
    if not selection:
        return [known[name] for name in DEFAULT_COLUMNS]
    names = [name.strip() for name in selection.split(",")]
    return [known.get(name) or Column(name, name.upper(), 20) for name in names]


def _nested(memory, key):
    value = memory.get(key)
    if value is None and "." in key:
        value = memory
        for part in key.split("."):
            value = value.get(part) if isinstance(value, dict) else None
    return value


def _sort_value(memory, key):
    value = _nested(memory, key)
    if key == "importance":
        try:
            return float(value)
        except (TypeError, ValueError):
            return 0.0
    if isinstance(value, str) and "-" in value:
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00")).timestamp()
        except ValueError:
            pass
    return value


def sort_memories(memories, key: str, reverse: bool = False):
    """Client-side sort by a (possibly dotted) field.

    ISO timestamps compare chronologically and ``importance`` numerically.
    Memories missing the field sort last.
    """
    present = [m for m in memories if _sort_value(m, key) is not None]
    missing = [m for m in memories if _sort_value(m, key) is None]
    try:
        ordered = sorted(present, key=lambda m: _sort_value(m, key), reverse=reverse)
    except TypeError:
        ordered = sorted(present, key=lambda m: str(_sort_value(m, key)), reverse=reverse)
    return ordered + missing


def build_rows(memories, columns):
    rows = []
    for mem in memories:
        row = {}
        for col in columns:
            value = mem.get(col.key)
            if col.key == "content" and isinstance(value, str):
                value = truncate(value, col.width or 50)
            elif col.key == "importance" and value is not None:
                value = fixed(value, 2) or str(value)
            elif col.key == "tags":
                value = ", ".join(tags_of(mem))
            elif col.key in ("created", "updated") and mem.get(f"{col.key}_at"):
                value = format_date(mem[f"{col.key}_at"])
            elif value is None:
                value = ""
            else:
                value = str(value)
            row[col.key] = value
        rows.append(row)
    return rows


def _list_params(args):
    params = {}
    if args.value("limit") is not None:
        params["limit"] = args.value("limit")
    if args.value("offset") is not None:
        params["offset"] = args.value("offset")
    if args.value("namespace"):
        params["namespace"] = args.value("namespace")
    return params


def _show_watch_page(result):
    memories = memories_of(result)
    if not memories:
        output.write(colors.dim("No memories found."))
        return
    width = output.get_config().truncate
    columns = select_columns(None, width or 52)
    output.table(build_rows(memories, columns), columns)
    total = result.get("total", len(memories))
    output.write(colors.dim(f"─ {len(memories)} of {total} memories"))


def cmd_list(args):
    """List memories as a table."""
    params = _list_params(args)

    if args.has("watch"):
        watch_loop(
            fetch=lambda: client.request("GET", "/v1/memories", params=params),
            fingerprint=lambda result: result.get("total", len(memories_of(result))),
            show=_show_watch_page,
            interval=watch_interval(args),
        )
        return

    result = client.request("GET", "/v1/memories", params=params)
    config = output.get_config()
    if config.json_mode:
        output.render(result)
        return

    memories = memories_of(result)
    sort_by = args.value("sortBy")
    if sort_by and memories:
        memories = sort_memories(memories, sort_by, reverse=args.has("reverse"))

    if not memories:
        output.write(colors.dim("No memories found."))
        return

    columns = select_columns(args.value("columns"), config.truncate or 52)
    output.table(build_rows(memories, columns), columns, wide=args.has("wide"))
    if result.get("total") is not None:
        output.write(colors.dim(f"─ {len(memories)} of {result['total']} memories"))
