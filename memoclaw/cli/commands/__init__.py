"""CLI command modules for MemoClaw.

Each module groups related command handlers. Every handler takes the
:class:`~memoclaw.args.ParsedArgs` for the invocation.
"""

from memoclaw.cli.commands.browse import cmd_browse
from memoclaw.cli.commands.config import cmd_config, cmd_init
from memoclaw.cli.commands.data import cmd_export, cmd_import, cmd_purge
from memoclaw.cli.commands.ingest import cmd_consolidate, cmd_extract, cmd_ingest
from memoclaw.cli.commands.list_cmd import cmd_list
from memoclaw.cli.commands.memory import (
    cmd_delete,
    cmd_get,
    cmd_history,
    cmd_store,
    cmd_update,
)
from memoclaw.cli.commands.migrate import cmd_migrate
from memoclaw.cli.commands.namespace import cmd_namespace
from memoclaw.cli.commands.recall import cmd_context, cmd_recall, cmd_search
from memoclaw.cli.commands.relations import cmd_graph, cmd_relations
from memoclaw.cli.commands.status import cmd_count, cmd_stats, cmd_status, cmd_suggested

__all__ = [
    "cmd_browse",
    "cmd_config",
    "cmd_consolidate",
    "cmd_context",
    "cmd_count",
    "cmd_delete",
    "cmd_export",
    "cmd_extract",
    "cmd_get",
    "cmd_graph",
    "cmd_history",
    "cmd_import",
    "cmd_ingest",
    "cmd_init",
    "cmd_list",
    "cmd_migrate",
    "cmd_namespace",
    "cmd_purge",
    "cmd_recall",
    "cmd_relations",
    "cmd_search",
    "cmd_stats",
    "cmd_status",
    "cmd_store",
    "cmd_suggested",
    "cmd_update",
]
