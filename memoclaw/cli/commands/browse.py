"""Interactive browser for MemoClaw CLI."""

import logging

from memoclaw import client, colors, output
from memoclaw.cli.commands.helpers import memories_of, short_id
from memoclaw.cli.commands.memory import delete_memory, show_memory, store_memory
from memoclaw.cli.commands.recall import recall_memories
from memoclaw.cli.commands.status import cmd_stats
from memoclaw.errors import MemoClawError

logger = logging.getLogger(__name__)

PAGE_SIZE = 10

BROWSE_HELP = """Commands:
  list / ls          List memories (paginated)
  next / n           Next page
  prev / p           Previous page
  get <id>           Show memory details
  recall <query>     Search memories
  store <content>    Store a new memory
  delete <id>        Delete a memory
  stats              Show stats
  q / quit           Exit browser"""


class Browser:
    """Paginated read-eval-print loop over the memory list."""

    def __init__(self, args, prompt=input):
        self.args = args
        self.prompt = prompt
        self.offset = 0

    def show_page(self) -> int:
        params = {"limit": PAGE_SIZE, "offset": self.offset}
        if self.args.value("namespace"):
            params["namespace"] = self.args.value("namespace")
        result = client.request("GET", "/v1/memories", params=params)
        memories = memories_of(result)
        for mem in memories:
            content = mem.get("content") or ""
            text = content[:60] + "…" if len(content) > 60 else content
            output.write(f"  {colors.cyan(short_id(mem.get('id')))}  {text}")
        if memories:
            total = result.get("total")
            of_total = f" of {total}" if total else ""
            output.write(
                colors.dim(f"─ showing {self.offset + 1}-{self.offset + len(memories)}{of_total}")
            )
        return len(memories)

    def handle(self, command: str, argument: str) -> None:
        if command == "help":
            output.write(BROWSE_HELP)
        elif command in ("list", "ls"):
            self.offset = 0
            if not self.show_page():
                output.write(colors.dim("No memories."))
        elif command in ("next", "n"):
            self.offset += PAGE_SIZE
            if not self.show_page():
                output.write(colors.dim("No more memories."))
                self.offset = max(0, self.offset - PAGE_SIZE)
        elif command in ("prev", "p"):
            self.offset = max(0, self.offset - PAGE_SIZE)
            self.show_page()
        elif command == "get":
            self._with_argument(argument, "get <id>", show_memory)
        elif command in ("recall", "search"):
            self._with_argument(argument, "recall <query>", lambda q: recall_memories(q, self.args))
        elif command == "store":
            self._with_argument(argument, "store <content>", lambda c: store_memory(c, self.args))
        elif command in ("delete", "rm"):
            self._with_argument(argument, "delete <id>", delete_memory)
        elif command == "stats":
            cmd_stats(self.args)
        else:
            output.write(colors.dim('Unknown command. Type "help" for available commands.'))

    def _with_argument(self, argument, usage, action) -> None:
        if not argument:
            output.write(colors.red(f"Usage: {usage}"))
            return
        action(argument)

    def run(self) -> None:
        hint = colors.dim('(type "help" or "q" to quit)')
        output.write(f"{colors.bold('MemoClaw Interactive Browser')} {hint}")
        if self.args.value("namespace"):
            output.write(colors.dim(f"Namespace: {self.args.value('namespace')}"))
        output.write("")

        while True:
            try:
                line = self.prompt(f"{colors.cyan('memoclaw>')} ").strip()
            except EOFError:
                break
            if not line:
                continue
            if line in ("q", "quit", "exit"):
                break
            command, _, argument = line.partition(" ")
            try:
                self.handle(command, argument.strip())
            except MemoClawError as e:
                output.write(f"{colors.red('Error:')} {e}")
            output.write("")

        output.write(colors.dim("Bye!"))


def cmd_browse(args):
    """Browse memories interactively."""
    Browser(args).run()
