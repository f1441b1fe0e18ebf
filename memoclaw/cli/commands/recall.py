"""Retrieval commands for MemoClaw CLI - recall, search, context."""

import logging

from memoclaw import client, colors, output
from memoclaw.cli.commands.helpers import (
    fixed,
    memories_of,
    plural,
    positional,
    require,
    short_id,
    similarity_color,
    tags_of,
    watch_interval,
    watch_loop,
)
from memoclaw.output import truncate
from memoclaw.validation import parse_int, parse_tags, validate_similarity

logger = logging.getLogger(__name__)


def build_recall_body(query: str, args) -> dict:
    body = {"query": query}
    if args.value("limit") is not None:
        body["limit"] = parse_int(args.value("limit"), 10)
    if args.value("minSimilarity") is not None:
        body["min_similarity"] = validate_similarity(args.value("minSimilarity"))
    if args.value("namespace"):
        body["namespace"] = args.value("namespace")
    if args.has("tags"):
        body["filters"] = {"tags": parse_tags(args.value("tags"))}
    return body


def _print_recall_results(result, show_ids: bool = True) -> None:
    memories = memories_of(result)
    if not memories:
        output.write(colors.dim("No memories found."))
        return

    width = output.get_config().truncate
    for mem in memories:
        similarity = mem.get("similarity")
        score = fixed(similarity, 3) or "???"
        content = mem.get("content") or ""
        if width:
            content = truncate(content, width)
        output.write(f"{similarity_color(similarity)(f'[{score}]')} {content}")
        if tags_of(mem):
            output.write(f"  {colors.dim('tags: ' + ', '.join(tags_of(mem)))}")
        if show_ids and mem.get("id"):
            output.write(f"  {colors.dim('id: ' + mem['id'])}")
    output.write(colors.dim(f"─ {plural(len(memories), 'result')}"))


def recall_memories(query: str, args) -> None:
    body = build_recall_body(query, args)
    config = output.get_config()

    if args.has("watch"):
        watch_loop(
            fetch=lambda: client.request("POST", "/v1/recall", body),
            fingerprint=lambda result: len(memories_of(result)),
            show=lambda result: _print_recall_results(result, show_ids=False),
            interval=watch_interval(args),
        )
        return

    result = client.request("POST", "/v1/recall", body)

    if config.json_mode:
        output.render(result)
    elif config.format in ("csv", "tsv", "yaml"):
        rows = [
            {
                "id": mem.get("id") or "",
                "similarity": fixed(mem.get("similarity"), 3),
                "content": mem.get("content") or "",
                "importance": fixed(mem.get("importance"), 2),
                "tags": ", ".join(tags_of(mem)),
            }
            for mem in memories_of(result)
        ]
        output.render(rows)
    elif args.has("raw"):
        for mem in memories_of(result):
            output.write(mem.get("content") or "")
    else:
        _print_recall_results(result)


def cmd_recall(args):
    """Semantic similarity search."""
    recall_memories(require(positional(args, 0), "Query required"), args)


def cmd_search(args):
    """Free text search (no embedding cost)."""
    query = require(positional(args, 0), "Query required")
    params = {"q": query}
    if args.value("limit") is not None:
        params["limit"] = args.value("limit")
    if args.value("namespace"):
        params["namespace"] = args.value("namespace")
    if args.value("tags"):
        params["tags"] = args.value("tags")

    result = client.request("GET", "/v1/memories/search", params=params)
    config = output.get_config()

    if config.json_mode:
        output.render(result)
        return

    memories = memories_of(result)
    if args.has("raw"):
        for mem in memories:
            output.write(mem.get("content") or "")
        return

    if not memories:
        output.write(colors.dim("No memories found."))
        return

    width = config.truncate or 80
    for mem in memories:
        content = mem.get("content") or ""
        if not config.no_truncate:
            content = truncate(content, width)
        output.write(f"{colors.cyan(short_id(mem.get('id')))}  {content}")
        if tags_of(mem):
            output.write(f"  {colors.dim('tags: ' + ', '.join(tags_of(mem)))}")
    output.write(colors.dim(f"─ {plural(len(memories), 'result')} (text search, free)"))


def cmd_context(args):
    """Summarise what the memories say about a query."""
    query = require(positional(args, 0), "Query required")
    body = {"query": query}
    if args.value("namespace"):
        body["namespace"] = args.value("namespace")
    if args.value("limit") is not None:
        body["limit"] = parse_int(args.value("limit"), 10)

    result = client.request("POST", "/v1/context", body)
    if output.get_config().json_mode:
        output.render(result)
        return

    context = None
    if isinstance(result, dict):
        context = result.get("context") or result.get("text") or result.get("content")
    if context:
        output.write(context)
    else:
        output.render(result)
