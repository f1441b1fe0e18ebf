"""Relation commands for MemoClaw CLI - list, create, delete, and the graph view."""

import logging

from memoclaw import client, colors, output
from memoclaw.cli.commands.helpers import positional, require, short_id
from memoclaw.errors import ValidationError
from memoclaw.output import Column
from memoclaw.validation import validate_relation_type

logger = logging.getLogger(__name__)

RELATION_COLORS = {
    "contradicts": colors.red,
    "supersedes": colors.yellow,
    "supports": colors.green,
    "derived_from": colors.magenta,
    "related_to": colors.blue,
}

USAGE = "Usage: relations [list|create|delete]"


def cmd_relations(args):
    """Manage links between memories."""
    action = positional(args, 0)
    target = args.rest[1:]

    if not action:
        raise ValidationError(USAGE)

    if action == "list":
        memory_id = require(target[0] if target else None, "Memory ID required")
        result = client.request("GET", f"/v1/memories/{memory_id}/relations")
        if output.get_config().json_mode:
            output.render(result)
            return
        relations = result.get("relations") or []
        if not relations:
            output.write(colors.dim("No relations found."))
            return
        rows = [
            {
                "id": short_id(r.get("id")),
                "type": r.get("relation_type") or "?",
                "target": short_id(r.get("target_id")),
            }
            for r in relations
        ]
        output.table(
            rows,
            [Column("id", "ID", 10), Column("type", "TYPE", 16), Column("target", "TARGET", 10)],
        )

    elif action == "create":
        if len(target) < 3 or not all(target[:3]):
            raise ValidationError("Usage: relations create <memory-id> <target-id> <type>")
        source_id, target_id, relation_type = target[:3]
        validate_relation_type(relation_type)
        result = client.request(
            "POST",
            f"/v1/memories/{source_id}/relations",
            {"target_id": target_id, "relation_type": relation_type},
        )
        if output.get_config().json_mode:
            output.render(result)
        else:
            link = f"{source_id[:8]}… {colors.cyan(relation_type)} → {target_id[:8]}…"
            output.success(f"Relation created: {link}")

    elif action == "delete":
        if len(target) < 2 or not all(target[:2]):
            raise ValidationError("Usage: relations delete <memory-id> <relation-id>")
        memory_id, relation_id = target[:2]
        result = client.request("DELETE", f"/v1/memories/{memory_id}/relations/{relation_id}")
        if output.get_config().json_mode:
            output.render(result)
        else:
            output.success("Relation deleted")

    else:
        raise ValidationError(USAGE)


def _label(memory) -> str:
    content = memory.get("content") or ""
    return content[:40] + "…" if len(content) > 40 else content


def cmd_graph(args):
    """Draw a memory and its outgoing relations as a tree."""
    memory_id = require(positional(args, 0), "Memory ID required")
    result = client.request("GET", f"/v1/memories/{memory_id}")
    memory = result.get("memory") or result
    relations = client.request("GET", f"/v1/memories/{memory_id}/relations").get("relations") or []

    if output.get_config().json_mode:
        output.render({"memory": memory, "relations": relations})
        return

    output.write("")
    root = f"[{short_id(memory.get('id'))}]"
    output.write(f"  {colors.bold(colors.cyan(root))} {_label(memory)}")
    if not relations:
        output.write(f"  {colors.dim('  └── (no relations)')}")
    for pos, rel in enumerate(relations):
        branch = "└" if pos == len(relations) - 1 else "├"
        relation_type = rel.get("relation_type") or "?"
        paint = RELATION_COLORS.get(relation_type, colors.dim)
        node = f"[{short_id(rel.get('target_id'))}]"
        output.write(
            f"  {colors.dim(f'  {branch}──')} {paint(relation_type)} {colors.dim('→')} "
            f"{colors.cyan(node)}"
        )
    output.write("")
