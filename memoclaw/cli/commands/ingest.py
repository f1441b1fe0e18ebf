"""Bulk text commands for MemoClaw CLI - extract, ingest, consolidate."""

import logging
from pathlib import Path

from memoclaw import client, output
from memoclaw.cli.commands.helpers import positional
from memoclaw.errors import ValidationError
from memoclaw.validation import validate_similarity

logger = logging.getLogger(__name__)


def _attach_session(body: dict, args) -> None:
    if args.value("namespace"):
        body["namespace"] = args.value("namespace")
    if args.value("sessionId"):
        body["session_id"] = args.value("sessionId")
    if args.value("agentId"):
        body["agent_id"] = args.value("agentId")


def cmd_extract(args):
    """Extract structured memories from free text."""
    text = positional(args, 0) or output.read_stdin()
    if not text:
        raise ValidationError("Text required. Provide as argument or pipe via stdin.")

    body = {"text": text}
    _attach_session(body, args)
    result = client.request("POST", "/v1/memories/extract", body)
    output.render(result)


def cmd_ingest(args):
    """Ingest a conversation or document, creating memories from it."""
    body = {}
    if args.value("text"):
        body["text"] = args.value("text")
    _attach_session(body, args)
    auto_relate = args.get("autoRelate")
    body["auto_relate"] = auto_relate is None or auto_relate != "false"

    file_path = args.value("file")
    if not body.get("text") and file_path:
        path = Path(file_path)
        if not path.exists():
            raise ValidationError(f"File not found: {file_path}")
        body["text"] = path.read_text(encoding="utf-8")

    if not body.get("text"):
        stdin = output.read_stdin()
        if stdin:
            body["text"] = stdin

    if not body.get("text"):
        raise ValidationError("Text required (use --text, --file, or pipe via stdin)")

    result = client.request("POST", "/v1/ingest", body)
    if output.get_config().json_mode:
        output.render(result)
        return
    count = result.get("memories_created", result.get("count", "?"))
    output.success(f"Ingested text → {count} memories created")


def cmd_consolidate(args):
    """Merge near-duplicate memories."""
    body = {}
    if args.value("namespace"):
        body["namespace"] = args.value("namespace")
    if args.value("minSimilarity") is not None:
        body["min_similarity"] = validate_similarity(args.value("minSimilarity"))
    if args.value("mode"):
        body["mode"] = args.value("mode")
    if args.has("dryRun"):
        body["dry_run"] = True

    result = client.request("POST", "/v1/memories/consolidate", body)
    if output.get_config().json_mode:
        output.render(result)
        return
    if args.has("dryRun"):
        output.info("Dry run — no changes applied")
    merged = result.get("merged_count", result.get("merged", "?"))
    output.success(f"Consolidated: {merged} memories merged")
    if result.get("clusters"):
        output.info(f"Clusters found: {len(result['clusters'])}")
