"""Usage text for the MemoClaw CLI."""

from memoclaw import colors, output

COMMANDS = {
    "store": ("store <content>", "Store a memory (content may also come from stdin)"),
    "recall": ("recall <query>", "Semantic search over memories"),
    "search": ("search <query>", "Free text search over memories"),
    "context": ("context <query>", "Fetch memories relevant to a task"),
    "list": ("list", "List memories as a table"),
    "get": ("get <id>", "Show a single memory"),
    "update": ("update <id>", "Update fields of a memory"),
    "delete": ("delete <id>", "Delete a memory"),
    "history": ("history <id>", "Show the change history of a memory"),
    "ingest": ("ingest", "Extract memories from text, a file or stdin"),
    "extract": ("extract <text>", "Extract facts from text"),
    "consolidate": ("consolidate", "Merge similar memories"),
    "relations": ("relations <list|create|delete>", "Manage memory relations"),
    "graph": ("graph <id>", "Show a memory and its relations as a tree"),
    "suggested": ("suggested", "Show memories suggested for review"),
    "status": ("status", "Show wallet and free tier usage"),
    "stats": ("stats", "Show memory statistics"),
    "count": ("count", "Count memories"),
    "namespace": ("namespace <list|stats>", "Inspect namespaces"),
    "export": ("export", "Export memories as JSON"),
    "import": ("import [file]", "Import memories from a JSON export"),
    "purge": ("purge", "Delete all memories (asks for confirmation)"),
    "migrate": ("migrate <path>", "Import markdown files as memories"),
    "browse": ("browse", "Browse memories interactively"),
    "config": ("config <show|check|init|path>", "Inspect or create configuration"),
    "init": ("init", "Create a wallet and write the config file"),
}

GLOBAL_OPTIONS = """Global options:
  -j, --json            Output JSON
  -f, --format <fmt>    Output format: table, json, yaml, csv, tsv
  -F, --field <path>    Print a single field (dot path) from the response
  -O, --output <file>   Write output to a file
  -q, --quiet           Suppress non-essential output
  -p, --pretty          Indent JSON output
  -s, --truncate [n]    Truncate long text (default 80 characters)
      --no-truncate     Never truncate
  -n, --namespace <ns>  Namespace to operate on
  -T, --timeout <sec>   Request timeout in seconds
      --no-color        Disable colors
  -h, --help            Show help
  -v, --version         Show version"""


def print_help(command=None):
    """Print general usage, or the one-line usage of *command*."""
    if command in COMMANDS:
        usage, description = COMMANDS[command]
        output.write(f"{colors.bold('Usage:')} memoclaw {usage}")
        output.write("")
        output.write(f"  {description}")
        return

    output.write(f"{colors.bold('MemoClaw')} - memory for AI agents")
    output.write("")
    output.write(f"{colors.bold('Usage:')} memoclaw <command> [options]")
    output.write("")
    output.write("Commands:")
    for usage, description in COMMANDS.values():
        output.write(f"  {usage.ljust(34)}{colors.dim(description)}")
    output.write("")
    output.write(GLOBAL_OPTIONS)
