"""
Command-line tokenizer for the MemoClaw CLI.

A single left-to-right pass turns argv into a map of flags plus an ordered
list of positionals. Parsing never fails: anything that is not a
recognisable flag becomes a positional, and validation is left to the
command handlers.

Flag values are either ``True`` (given without a value) or a string. They
are never converted to numbers here, so ``--limit 0`` keeps ``"0"``.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Union

FlagValue = Union[bool, str]

# Flags whose presence alone means True; they never consume the next token.
BOOLEAN_FLAGS = frozenset(
    {
        "help",
        "version",
        "raw",
        "json",
        "quiet",
        "dryRun",
        "verbose",
        "noColor",
        "force",
        "count",
        "wide",
        "pretty",
        "watch",
        "interactive",
        "yes",
        "reverse",
        "noTruncate",
        "immutable",
        "pinned",
        "batch",
    }
)

SHORT_FLAGS: Dict[str, str] = {
    "-h": "help",
    "-v": "version",
    "-j": "json",
    "-q": "quiet",
    "-n": "namespace",
    "-l": "limit",
    "-t": "tags",
    "-o": "offset",
    "-f": "format",
    "-p": "pretty",
    "-i": "interactive",
    "-w": "watch",
    "-d": "dryRun",
    "-c": "concurrency",
    "-s": "truncate",
    "-y": "yes",
    "-T": "timeout",
    "-x": "text",
    "-e": "expiresAt",
    "-C": "category",
    "-S": "sessionId",
    "-A": "agentId",
    "-r": "reverse",
    "-m": "sortBy",
    "-k": "columns",
    "-O": "output",
    "-F": "field",
}

_KEBAB_RE = re.compile(r"-([a-z])")
_NUMERIC_VALUE_RE = re.compile(r"^--?\d")


def to_camel_case(name: str) -> str:
    """Convert ``min-similarity`` to ``minSimilarity``.

    Only a lowercase letter right after a hyphen is affected; digits and
    other characters pass through with their hyphen intact.
    """
    return _KEBAB_RE.sub(lambda m: m.group(1).upper(), name)


@dataclass
class ParsedArgs:
    """Flags and positionals produced by :func:`parse_args`.

    Attributes:
        positionals: Command name followed by its arguments, in order.
        flags: camelCase flag name -> ``True`` or the string value.
    """

    positionals: List[str] = field(default_factory=list)
    flags: Dict[str, FlagValue] = field(default_factory=dict)

    @property
    def command(self) -> Optional[str]:
        return self.positionals[0] if self.positionals else None

    @property
    def rest(self) -> List[str]:
        return self.positionals[1:]

    def get(self, name: str, default=None):
        """Raw flag value: ``True``, a string, or *default* when absent."""
        return self.flags.get(name, default)

    def has(self, name: str) -> bool:
        """True when the flag was given, with or without a value.

        An explicit empty value (``--tags=``) counts as not set, matching
        how handlers treat empty strings.
        """
        return bool(self.flags.get(name))

    def value(self, name: str) -> Optional[str]:
        """The flag's string value, or None when absent or given bare.

        This is the guard every handler uses before treating a flag as
        data: ``"0"`` comes back as ``"0"``, a bare ``--limit`` as None.
        """
        val = self.flags.get(name)
        if val is None or val is True or val is False:
            return None
        return val

    def set_default(self, name: str, value: FlagValue) -> None:
        """Fill in a flag that was not given on the command line."""
        if name not in self.flags:
            self.flags[name] = value


def _takes_value(token: Optional[str]) -> bool:
    return token is not None and not token.startswith("-")


def parse_args(tokens: Sequence[str]) -> ParsedArgs:
    """Tokenize argv into a :class:`ParsedArgs`.

    Rules, in priority order for each token:

    1. ``-X=value`` with a known alias binds the literal text after ``=``.
    2. ``-X`` with a known alias: boolean flags bind True, value flags take
       the next token unless it is missing or starts with ``-``.
    3. ``-XYZ`` where every letter is a known alias: all but the last bind
       True (a value flag in the middle is demoted to True), the last
       follows rule 2. Any unknown letter makes the whole token positional.
    4. ``--`` stops flag parsing; every later token is positional.
    5. ``--name`` / ``--name=value``: inline values bind as given (even
       empty), boolean flags bind True, otherwise the next token is the
       value unless it starts with ``--`` (negative numbers are allowed).
    6. Anything else is positional.
    """
    result = ParsedArgs()
    args = list(tokens)
    i = 0
    while i < len(args):
        arg = args[i]

        if len(arg) >= 2 and arg[0] == "-" and arg[1] != "-":
            if "=" in arg:
                flag_part, _, value_part = arg.partition("=")
                if flag_part in SHORT_FLAGS:
                    result.flags[SHORT_FLAGS[flag_part]] = value_part
                    i += 1
                    continue

            if len(arg) == 2 and arg in SHORT_FLAGS:
                key = SHORT_FLAGS[arg]
                nxt = args[i + 1] if i + 1 < len(args) else None
                if key in BOOLEAN_FLAGS:
                    result.flags[key] = True
                    i += 1
                elif _takes_value(nxt):
                    result.flags[key] = nxt
                    i += 2
                else:
                    result.flags[key] = True
                    i += 1
            elif len(arg) > 2 and arg not in SHORT_FLAGS:
                chars = arg[1:]
                if all(f"-{ch}" in SHORT_FLAGS for ch in chars):
                    for pos, ch in enumerate(chars):
                        key = SHORT_FLAGS[f"-{ch}"]
                        last = pos == len(chars) - 1
                        if key in BOOLEAN_FLAGS or not last:
                            result.flags[key] = True
                            continue
                        nxt = args[i + 1] if i + 1 < len(args) else None
                        if _takes_value(nxt):
                            result.flags[key] = nxt
                            i += 1
                        else:
                            result.flags[key] = True
                    i += 1
                else:
                    result.positionals.append(arg)
                    i += 1
            else:
                result.positionals.append(arg)
                i += 1

        elif arg == "--":
            result.positionals.extend(args[i + 1 :])
            break

        elif arg.startswith("--"):
            name, eq, inline_value = arg[2:].partition("=")
            key = to_camel_case(name)
            if eq:
                result.flags[key] = inline_value
                i += 1
            elif key in BOOLEAN_FLAGS:
                result.flags[key] = True
                i += 1
            else:
                nxt = args[i + 1] if i + 1 < len(args) else None
                if nxt is not None and (
                    not nxt.startswith("--") or _NUMERIC_VALUE_RE.match(nxt)
                ):
                    result.flags[key] = nxt
                    i += 2
                else:
                    result.flags[key] = True
                    i += 1

        else:
            result.positionals.append(arg)
            i += 1

    return result
