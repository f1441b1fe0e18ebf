"""Migrate command for MemoClaw CLI - import markdown notes as memories."""

import logging
from pathlib import Path

from memoclaw import client, colors, output
from memoclaw.cli.commands.helpers import positional, require
from memoclaw.errors import MemoClawError, ValidationError
from memoclaw.output import progress_bar

logger = logging.getLogger(__name__)

MIGRATE_BATCH_SIZE = 5

IGNORED_DIRS = frozenset(
    {
        "node_modules", ".git", ".next", ".nuxt", "dist", "build", ".output",
        "__pycache__", ".venv", "venv", "env", ".env", ".tox",
        ".cache", ".tmp", "tmp", "coverage", ".nyc_output",
        "vendor", "target", ".gradle", ".mvn",
        "skills", ".openclaw", ".clawd",
    }
)


def find_markdown_files(root: Path):
    """Collect ``(path, relative name)`` for every .md file under *root*.

    Directories in ``IGNORED_DIRS`` are skipped at any depth.
    """
    if root.is_file():
        if root.suffix != ".md":
            raise ValidationError("Path must be a .md file or a directory containing .md files")
        return [(root, root.name)]

    found = []
    for entry in sorted(root.iterdir()):
        if entry.is_dir():
            if entry.name not in IGNORED_DIRS:
                found.extend(
                    (path, str(Path(entry.name) / name))
                    for path, name in find_markdown_files(entry)
                )
        elif entry.name.endswith(".md"):
            found.append((entry, entry.name))
    return found


def cmd_migrate(args):
    """Send markdown files to the API to be turned into memories."""
    target = require(
        positional(args, 0), "Path required. Usage: memoclaw migrate <path-to-file-or-directory>"
    )
    root = Path(target).resolve()
    if not root.exists():
        raise ValidationError(f"Path not found: {root}")

    files = find_markdown_files(root)
    if not files:
        raise ValidationError("No .md files found")

    config = output.get_config()
    noun = "file" if len(files) == 1 else "files"
    output.info(f"Found {colors.bold(str(len(files)))} markdown {noun}")

    totals = {"created": 0, "deduplicated": 0, "errors": 0, "processed": 0}
    for start in range(0, len(files), MIGRATE_BATCH_SIZE):
        batch = files[start : start + MIGRATE_BATCH_SIZE]
        payload = [
            {"filename": name, "content": path.read_text(encoding="utf-8")}
            for path, name in batch
        ]
        try:
            result = client.request("POST", "/v1/migrate", {"files": payload})
        except MemoClawError as e:
            totals["errors"] += len(batch)
            if not config.quiet:
                output.write_error(f"\n{colors.red('Error:')} Batch failed: {e}")
            continue

        totals["created"] += result.get("memories_created") or 0
        totals["deduplicated"] += result.get("memories_deduplicated") or 0
        totals["processed"] += result.get("files_processed") or 0
        totals["errors"] += len(result.get("errors") or [])
        if not config.json_mode:
            done = min(start + MIGRATE_BATCH_SIZE, len(files))
            output.status(f"\r  {progress_bar(done, len(files))}", end="")

    if not config.json_mode:
        output.status("")

    if config.json_mode:
        output.render(
            {
                "files_found": len(files),
                "files_processed": totals["processed"],
                "memories_created": totals["created"],
                "memories_deduplicated": totals["deduplicated"],
                "errors": totals["errors"],
            }
        )
        return

    output.write("")
    output.success("Migration complete!")
    output.write(f"  Files processed:      {colors.cyan(str(totals['processed']))}")
    output.write(f"  Memories created:     {colors.green(str(totals['created']))}")
    output.write(f"  Deduplicated:         {colors.dim(str(totals['deduplicated']))}")
    if totals["errors"]:
        output.write(f"  Errors:               {colors.red(str(totals['errors']))}")
