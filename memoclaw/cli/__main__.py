"""
MemoClaw CLI - command-line interface for the MemoClaw memory API.

Usage:
    memoclaw store "User prefers dark mode" --importance 0.8 --tags ui
    memoclaw recall "ui preferences" --limit 5
    memoclaw list --sort-by importance --reverse
    memoclaw status
"""

import logging
import os
import sys

from memoclaw import __version__, client, colors, output
from memoclaw.args import parse_args
from memoclaw.cli.commands import (
    cmd_browse,
    cmd_config,
    cmd_consolidate,
    cmd_context,
    cmd_count,
    cmd_delete,
    cmd_export,
    cmd_extract,
    cmd_get,
    cmd_graph,
    cmd_history,
    cmd_import,
    cmd_ingest,
    cmd_init,
    cmd_list,
    cmd_migrate,
    cmd_namespace,
    cmd_purge,
    cmd_recall,
    cmd_relations,
    cmd_search,
    cmd_stats,
    cmd_status,
    cmd_store,
    cmd_suggested,
    cmd_update,
)
from memoclaw.cli.help import print_help
from memoclaw.config import apply_config_defaults
from memoclaw.errors import MemoClawError, OutputFileError
from memoclaw.validation import parse_int

logging.basicConfig(level=logging.WARNING)
logger = logging.getLogger(__name__)

COMMANDS = {
    "store": cmd_store,
    "recall": cmd_recall,
    "list": cmd_list,
    "get": cmd_get,
    "update": cmd_update,
    "delete": cmd_delete,
    "ingest": cmd_ingest,
    "extract": cmd_extract,
    "search": cmd_search,
    "context": cmd_context,
    "consolidate": cmd_consolidate,
    "relations": cmd_relations,
    "suggested": cmd_suggested,
    "status": cmd_status,
    "export": cmd_export,
    "import": cmd_import,
    "stats": cmd_stats,
    "browse": cmd_browse,
    "config": cmd_config,
    "graph": cmd_graph,
    "purge": cmd_purge,
    "count": cmd_count,
    "namespace": cmd_namespace,
    "init": cmd_init,
    "history": cmd_history,
    "migrate": cmd_migrate,
}


def main(argv=None) -> int:
    """Run one CLI invocation and return the process exit code."""
    args = parse_args(sys.argv[1:] if argv is None else argv)

    if args.has("noColor"):
        colors.disable_color()
    if os.environ.get("DEBUG") or args.has("verbose"):
        logging.getLogger().setLevel(logging.DEBUG)

    apply_config_defaults(args)
    try:
        output.configure_output(args)
    except OutputFileError as e:
        output.print_error(str(e))
        return 1

    if args.has("version"):
        output.write(f"memoclaw {__version__}")
        return 0

    command = args.command
    if command is None or command == "help":
        print_help(args.rest[0] if command == "help" and args.rest else None)
        return 0
    if args.has("help"):
        print_help(command)
        return 0

    handler = COMMANDS.get(command)
    if handler is None:
        print(f"{colors.red('Unknown command:')} {command}", file=sys.stderr)
        print(f"Run {colors.cyan('memoclaw --help')} for usage.", file=sys.stderr)
        return 1

    timeout = parse_int(args.value("timeout"), 0)
    if timeout > 0:
        client.set_request_timeout(timeout)

    logger.debug("Dispatching %s with flags %s", command, sorted(args.flags))
    try:
        handler(args)
    except (MemoClawError, ValueError) as e:
        output.print_error(str(e))
        return 1
    except OSError as e:
        logger.debug("OS error in %s", command, exc_info=True)
        output.print_error(str(e))
        return 1
    except KeyboardInterrupt:
        output.status("")
        return 130
    return 0


def cli() -> None:
    """Console-script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    cli()
