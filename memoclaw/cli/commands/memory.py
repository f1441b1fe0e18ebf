"""Single-memory commands for MemoClaw CLI - store, get, update, delete, history."""

import logging

from memoclaw import client, colors, output
from memoclaw.cli.commands.helpers import (
    format_datetime,
    positional,
    require,
    short_id,
    tags_of,
)
from memoclaw.errors import ValidationError
from memoclaw.output import Column
from memoclaw.validation import parse_tags, validate_content_length, validate_importance

logger = logging.getLogger(__name__)


def build_store_body(content: str, args) -> dict:
    """Request body for ``POST /v1/store`` from the content and flags."""
    validate_content_length(content)
    body = {"content": content}
    importance = args.value("importance")
    if importance is not None:
        body["importance"] = validate_importance(importance)
    if args.has("tags"):
        body["metadata"] = {"tags": parse_tags(args.value("tags"))}
    if args.value("namespace"):
        body["namespace"] = args.value("namespace")
    if args.value("memoryType"):
        body["memory_type"] = args.value("memoryType")
    if args.value("sessionId"):
        body["session_id"] = args.value("sessionId")
    if args.value("agentId"):
        body["agent_id"] = args.value("agentId")
    if args.value("expiresAt"):
        body["expires_at"] = args.value("expiresAt")
    if args.has("immutable"):
        body["immutable"] = True
    if args.has("pinned"):
        body["pinned"] = True
    return body


def store_memory(content: str, args) -> None:
    result = client.request("POST", "/v1/store", build_store_body(content, args))
    if output.get_config().json_mode:
        output.render(result)
        return
    memory_id = result.get("id") if isinstance(result, dict) else None
    suffix = f" ({colors.cyan(memory_id)})" if memory_id else ""
    output.success(f"Memory stored{suffix}")
    if isinstance(result, dict) and result.get("importance") is not None:
        output.info(f"Importance: {result['importance']}")


def cmd_store(args):
    """Store a memory from an argument, ``--content`` or piped stdin."""
    content = positional(args, 0) or args.value("content")
    if not content:
        content = output.read_stdin()
    if not content:
        raise ValidationError(
            "Content required. Provide as argument, --content flag, or pipe via stdin."
        )
    store_memory(content, args)


def show_memory(memory_id: str) -> None:
    result = client.request("GET", f"/v1/memories/{memory_id}")
    if output.get_config().json_mode:
        output.render(result)
        return

    mem = result.get("memory") or result
    label = colors.bold
    output.write(f"{label('ID:')}         {mem.get('id') or memory_id}")
    output.write(f"{label('Content:')}    {mem.get('content', '')}")
    if mem.get("importance") is not None:
        output.write(f"{label('Importance:')} {mem['importance']}")
    if mem.get("namespace"):
        output.write(f"{label('Namespace:')}  {mem['namespace']}")
    if tags_of(mem):
        output.write(f"{label('Tags:')}       {', '.join(tags_of(mem))}")
    if mem.get("memory_type"):
        output.write(f"{label('Type:')}       {mem['memory_type']}")
    if mem.get("created_at"):
        output.write(f"{label('Created:')}    {format_datetime(mem['created_at'])}")
    if mem.get("updated_at"):
        output.write(f"{label('Updated:')}    {format_datetime(mem['updated_at'])}")
    if mem.get("pinned"):
        output.write(f"{label('Pinned:')}     {colors.green('yes')}")


def cmd_get(args):
    """Show a single memory."""
    show_memory(require(positional(args, 0), "Memory ID required"))


def delete_memory(memory_id: str) -> None:
    result = client.request("DELETE", f"/v1/memories/{memory_id}")
    if output.get_config().json_mode:
        output.render(result)
    else:
        output.success(f"Memory {colors.cyan(memory_id[:8] + '…')} deleted")


def cmd_delete(args):
    """Delete a memory by ID."""
    delete_memory(require(positional(args, 0), "Memory ID required"))


def cmd_update(args):
    """Patch fields of an existing memory."""
    memory_id = require(positional(args, 0), "Memory ID required")

    body = {}
    content = args.value("content")
    if content:
        body["content"] = validate_content_length(content)
    importance = args.value("importance")
    if importance is not None:
        body["importance"] = validate_importance(importance)
    if args.value("memoryType"):
        body["memory_type"] = args.value("memoryType")
    if args.value("namespace"):
        body["namespace"] = args.value("namespace")
    if args.has("tags"):
        body["metadata"] = {"tags": parse_tags(args.value("tags"))}
    if args.value("expiresAt"):
        body["expires_at"] = args.value("expiresAt")
    pinned = args.get("pinned")
    if pinned is not None:
        body["pinned"] = pinned is True or pinned == "true"

    if not body:
        raise ValidationError("No fields to update. Use --content, --importance, --tags, etc.")

    result = client.request("PATCH", f"/v1/memories/{memory_id}", body)
    if output.get_config().json_mode:
        output.render(result)
    else:
        output.success(f"Memory {colors.cyan(memory_id[:8] + '…')} updated")


def cmd_history(args):
    """Show the change history of a memory."""
    memory_id = require(positional(args, 0), "Memory ID required")
    result = client.request("GET", f"/v1/memories/{memory_id}/history")
    if output.get_config().json_mode:
        output.render(result)
        return

    history = result.get("history") or []
    if not history:
        output.write(colors.dim("No history entries found."))
        return

    rows = []
    for entry in history:
        changes = entry.get("changes") or {}
        rows.append(
            {
                "id": short_id(entry.get("id")),
                "date": format_datetime(entry.get("created_at")) or "—",
                "fields": ", ".join(changes.keys()) or "—",
            }
        )
    output.table(
        rows,
        [
            Column("id", "ID", 10),
            Column("date", "DATE", 22),
            Column("fields", "CHANGED FIELDS", 40),
        ],
    )
