"""Data commands for MemoClaw CLI - export, import, purge."""

import json
import logging
import sys
import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from pathlib import Path

from memoclaw import client, colors, output
from memoclaw.cli.commands.helpers import memories_of
from memoclaw.errors import MemoClawError, ValidationError
from memoclaw.output import progress_bar
from memoclaw.validation import parse_int

logger = logging.getLogger(__name__)

EXPORT_VERSION = 1
EXPORT_PAGE_SIZE = 1000
IMPORT_BATCH_SIZE = 100
PURGE_PAGE_SIZE = 100
MAX_CONSECUTIVE_FAILURES = 3

# Optional fields copied from an exported memory into a batch entry
IMPORT_FIELDS = (
    "importance",
    "metadata",
    "memory_type",
    "session_id",
    "agent_id",
    "expires_at",
    "pinned",
    "immutable",
)

SINGLE_STORE_FIELDS = ("content", "importance", "metadata", "namespace")


def cmd_export(args):
    """Export all memories as a versioned JSON document."""
    page_size = parse_int(args.value("limit"), EXPORT_PAGE_SIZE) or EXPORT_PAGE_SIZE
    params = {"limit": page_size, "offset": 0}
    if args.value("namespace"):
        params["namespace"] = args.value("namespace")

    exported = []
    while True:
        result = client.request("GET", "/v1/memories", params=dict(params))
        page = memories_of(result)
        exported.extend(page)
        if len(page) < page_size:
            break
        params["offset"] += page_size
        output.status(colors.dim(f"Fetched {len(exported)} memories..."), end="\r")

    document = {
        "version": EXPORT_VERSION,
        "exported_at": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        "count": len(exported),
        "memories": exported,
    }
    output.write(json.dumps(document, indent=2, ensure_ascii=False))
    output.status(f"{colors.green('✓')} Exported {len(exported)} memories")


def _load_import_source(args):
    file_path = args.value("file")
    if file_path:
        try:
            return Path(file_path).read_text(encoding="utf-8")
        except OSError as e:
            raise ValidationError(f"Cannot read {file_path}: {e}") from e
    text = output.read_stdin()
    if not text:
        raise ValidationError("Provide --file <path> or pipe JSON via stdin")
    return text


def import_entry(memory: dict, namespace=None) -> dict:
    """Batch entry for one exported memory."""
    entry = {"content": memory.get("content")}
    for key in IMPORT_FIELDS:
        if memory.get(key) is not None:
            entry[key] = memory[key]
    ns = memory.get("namespace") or namespace
    if ns:
        entry["namespace"] = ns
    return entry


def cmd_import(args):
    """Import memories from an export file or stdin in batches."""
    try:
        data = json.loads(_load_import_source(args))
    except json.JSONDecodeError as e:
        raise ValidationError(f"Invalid JSON: {e}") from e

    memories = data.get("memories", data) if isinstance(data, dict) else data
    if not isinstance(memories, list):
        raise ValidationError("Invalid format: expected { memories: [...] } or [...]")

    namespace = args.value("namespace")
    concurrency = max(1, parse_int(args.value("concurrency"), 1))
    batches = [
        memories[i : i + IMPORT_BATCH_SIZE] for i in range(0, len(memories), IMPORT_BATCH_SIZE)
    ]
    counts = {"imported": 0, "failed": 0}
    lock = threading.Lock()

    def process_batch(chunk):
        entries = [import_entry(mem, namespace) for mem in chunk]
        try:
            client.request("POST", "/v1/store/batch", {"memories": entries})
            with lock:
                counts["imported"] += len(chunk)
        except MemoClawError as e:
            logger.debug(f"Batch failed, falling back to individual stores: {e}")
            for entry in entries:
                single = {k: entry[k] for k in SINGLE_STORE_FIELDS if k in entry}
                try:
                    client.request("POST", "/v1/store", single)
                    with lock:
                        counts["imported"] += 1
                except MemoClawError as inner:
                    logger.debug(f"Failed to import: {inner}")
                    with lock:
                        counts["failed"] += 1
        with lock:
            done = counts["imported"] + counts["failed"]
        output.status(f"\r  {progress_bar(done, len(memories))}", end="")

    if concurrency == 1:
        for chunk in batches:
            process_batch(chunk)
    else:
        with ThreadPoolExecutor(max_workers=concurrency) as pool:
            list(pool.map(process_batch, batches))
    output.status("")

    imported, failed = counts["imported"], counts["failed"]
    if output.get_config().json_mode:
        output.render({"imported": imported, "failed": failed, "total": len(memories)})
    else:
        suffix = f" ({colors.red(f'{failed} failed')})" if failed else ""
        output.success(f"Imported {imported}/{len(memories)} memories{suffix}")


def _confirm_purge(namespace) -> bool:
    if not sys.stdin.isatty():
        raise ValidationError("Use --force or --yes to confirm purge in non-interactive mode")
    scope = f' in namespace "{namespace}"' if namespace else ""
    try:
        answer = input(colors.red(f'⚠ Delete ALL memories{scope}? Type "yes" to confirm: '))
    except EOFError:
        answer = ""
    return answer.strip().lower() == "yes"


def cmd_purge(args):
    """Delete every memory (optionally only one namespace)."""
    namespace = args.value("namespace")
    if not (args.has("force") or args.has("yes")):
        if not _confirm_purge(namespace):
            output.write(colors.dim("Aborted."))
            return

    params = {"limit": PURGE_PAGE_SIZE, "offset": 0}
    if namespace:
        params["namespace"] = namespace

    deleted = 0
    failed_in_row = 0
    use_bulk = True

    while True:
        result = client.request("GET", "/v1/memories", params=dict(params))
        page = memories_of(result)
        if not page:
            break

        total = result.get("total") or deleted
        ids = [mem.get("id") for mem in page]
        batch_deleted = 0

        if use_bulk:
            try:
                bulk = client.request("POST", "/v1/memories/bulk-delete", {"ids": ids})
                batch_deleted = len(ids)
                if isinstance(bulk, dict) and bulk.get("deleted") is not None:
                    batch_deleted = bulk["deleted"]
                deleted += batch_deleted
                failed_in_row = 0
                output.status(f"\r  {progress_bar(deleted, total or deleted)}", end="")
            except MemoClawError as e:
                logger.debug(f"Bulk delete unavailable, deleting one by one: {e}")
                use_bulk = False

        if not use_bulk:
            for memory_id in ids:
                try:
                    client.request("DELETE", f"/v1/memories/{memory_id}")
                except MemoClawError as e:
                    logger.debug(f"Failed to delete {memory_id}: {e}")
                    continue
                deleted += 1
                batch_deleted += 1
                failed_in_row = 0
                output.status(f"\r  {progress_bar(deleted, total or deleted)}", end="")

        if batch_deleted == 0:
            failed_in_row += 1
            if failed_in_row >= MAX_CONSECUTIVE_FAILURES:
                output.warn(
                    f"Aborting: {MAX_CONSECUTIVE_FAILURES} consecutive batches "
                    "failed to delete any memories"
                )
                break

    output.status("")
    if output.get_config().json_mode:
        output.render({"deleted": deleted})
    else:
        output.success(f"Purged {deleted} memories")
