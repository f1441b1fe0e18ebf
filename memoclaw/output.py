"""
Output rendering for the MemoClaw CLI.

All command output goes through this module so that ``--json``,
``--quiet``, ``--format``, ``--field`` and ``--output`` apply uniformly.
The configuration is built once at startup by :func:`configure_output`
and only read afterwards.

Formats:
    table  Human-readable default (strings verbatim, structures as JSON)
    json   Compact JSON, or 2-space indented with ``--pretty``
    yaml   Block-style YAML with 2-space indent
    csv    Header + rows, RFC 4180 quoting for commas and quotes
    tsv    Header + rows, tabs/newlines inside fields become spaces
"""

import json
import logging
import math
import sys
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

import yaml

from memoclaw import colors
from memoclaw.errors import OutputFileError

logger = logging.getLogger(__name__)

FORMATS = ("json", "table", "csv", "tsv", "yaml")
DEFAULT_TRUNCATE_WIDTH = 80
TABLE_MAX_WIDTH = 60
TABLE_WIDE_MAX_WIDTH = 120
ELLIPSIS = "…"

_MISSING = object()


@dataclass
class OutputConfig:
    """Process-wide rendering settings derived from the command line."""

    json: bool = False
    quiet: bool = False
    pretty: bool = False
    format: str = "table"
    truncate: int = 0
    no_truncate: bool = False
    output_file: Optional[str] = None
    field: Optional[str] = None

    @property
    def json_mode(self) -> bool:
        return self.json or self.format == "json"

    @classmethod
    def from_args(cls, args) -> "OutputConfig":
        """Derive the configuration from parsed arguments.

        Creates (or empties) the ``--output`` file immediately so an
        unwritable path fails before any command runs.
        """
        config = cls(
            json=args.has("json"),
            quiet=args.has("quiet"),
            pretty=args.has("pretty"),
        )

        field_path = args.value("field")
        if field_path:
            config.field = field_path
            config.json = True

        fmt = args.value("format")
        if fmt:
            fmt = fmt.lower()
            if fmt == "yml":
                fmt = "yaml"
            if fmt in FORMATS:
                config.format = fmt
        if args.has("json"):
            config.format = "json"

        truncate_value = args.get("truncate")
        if truncate_value is True:
            config.truncate = DEFAULT_TRUNCATE_WIDTH
        elif truncate_value:
            config.truncate = _leading_int(truncate_value)

        config.no_truncate = args.has("noTruncate")
        if config.no_truncate:
            config.truncate = 0

        output_path = args.value("output")
        if output_path:
            try:
                with open(output_path, "w", encoding="utf-8"):
                    pass
            except OSError as e:
                raise OutputFileError(f"Cannot write to output file {output_path}: {e}") from e
            config.output_file = output_path

        return config


@dataclass
class Column:
    """One table column. ``width`` is computed from the data when None."""

    key: str
    label: str
    width: Optional[int] = None


def _leading_int(value: str) -> int:
    text = value.strip()
    digits = ""
    for pos, ch in enumerate(text):
        if ch.isdigit() or (pos == 0 and ch in "+-"):
            digits += ch
        else:
            break
    try:
        return int(digits)
    except ValueError:
        return 0


def stringify(value: Any) -> str:
    """Render a single cell value as text."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False)
    return str(value)


def to_json(data: Any, pretty: bool = False) -> str:
    if pretty:
        return json.dumps(data, indent=2, ensure_ascii=False, default=str)
    return json.dumps(data, separators=(",", ":"), ensure_ascii=False, default=str)


def to_yaml(data: Any) -> str:
    text = yaml.safe_dump(
        data,
        indent=2,
        width=120,
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
    )
    # Scalars get an explicit document end marker.
    if text.endswith("\n...\n"):
        text = text[: -len("...\n")]
    return text.rstrip("\n")


def extract_field(data: Any, path: str) -> Any:
    """Walk a dot path into nested dicts/lists.

    Returns the module sentinel ``_MISSING`` when any step is absent.
    """
    value = data
    for part in path.split("."):
        if isinstance(value, dict):
            if part not in value:
                return _MISSING
            value = value[part]
        elif isinstance(value, list) and part.isdigit() and int(part) < len(value):
            value = value[int(part)]
        else:
            return _MISSING
    return value


def csv_escape(text: str) -> str:
    if "," in text or '"' in text:
        return '"' + text.replace('"', '""') + '"'
    return text


def tsv_escape(text: str) -> str:
    return text.replace("\t", " ").replace("\n", " ")


def truncate(text: str, width: int) -> str:
    """Shorten *text* to exactly *width* characters ending in an ellipsis.

    A width of zero or less means unlimited.
    """
    if width <= 0 or len(text) <= width:
        return text
    return text[: width - 1] + ELLIPSIS


def progress_bar(current: int, total: int, width: int = 30) -> str:
    """``█████░░░ 5/10``; the bar caps at full even when current > total."""
    if total > 0:
        fraction = min(current / total, 1)
    else:
        fraction = 1 if current > 0 else 0
    filled = int(math.floor(fraction * width + 0.5))
    bar = colors.green("█" * filled) + colors.dim("░" * (width - filled))
    return f"{bar} {current}/{total}"


class Renderer:
    """Writes command output according to an :class:`OutputConfig`."""

    def __init__(self, config: Optional[OutputConfig] = None):
        self.config = config or OutputConfig()

    # -- sinks ------------------------------------------------------------

    def _emit(self, line: str, stream) -> None:
        if self.config.output_file:
            with open(self.config.output_file, "a", encoding="utf-8") as f:
                f.write(line + "\n")
        else:
            print(line, file=stream)

    def write(self, *parts: str) -> None:
        self._emit(" ".join(parts), sys.stdout)

    def write_error(self, *parts: str) -> None:
        self._emit(" ".join(parts), sys.stderr)

    # -- messages ---------------------------------------------------------

    def success(self, message: str) -> None:
        if self.config.quiet or self.config.json_mode:
            return
        self.write(f"{colors.green('✓')} {message}")

    def info(self, message: str) -> None:
        if self.config.quiet or self.config.json_mode:
            return
        self.write_error(f"{colors.blue('ℹ')} {message}")

    def warn(self, message: str) -> None:
        self.write_error(f"{colors.yellow('⚠')} {message}")

    def status(self, text: str, end: str = "\n") -> None:
        """Transient progress/notice text on stderr; never sent to the output file."""
        if self.config.quiet:
            return
        print(text, end=end, file=sys.stderr, flush=True)

    def print_error(self, message: str) -> None:
        """Dispatch-boundary error line on stderr, never suppressed."""
        if self.config.json_mode:
            print(json.dumps({"error": message}, separators=(",", ":")), file=sys.stderr)
        else:
            print(f"{colors.red('Error:')} {message}", file=sys.stderr)

    # -- structured output ------------------------------------------------

    def render(self, data: Any) -> None:
        """Serialize a response payload in the configured format."""
        config = self.config
        if config.quiet:
            return

        if config.field:
            value = extract_field(data, config.field)
            if value is _MISSING:
                return
            if value is None or isinstance(value, (dict, list)):
                self.write(to_json(value, config.pretty))
            else:
                self.write(stringify(value))
            return

        if config.json_mode:
            self.write(to_json(data, config.pretty))
        elif config.format == "yaml":
            self.write(to_yaml(data))
        elif config.format in ("csv", "tsv"):
            self._render_delimited(data)
        elif isinstance(data, str):
            self.write(data)
        else:
            self.write(to_json(data, pretty=True))

    def _render_delimited(self, data: Any) -> None:
        if isinstance(data, str):
            self.write(data)
            return
        if not isinstance(data, list) or not all(isinstance(row, dict) for row in data):
            self.write(to_json(data, pretty=True))
            return
        if not data:
            return

        tsv = self.config.format == "tsv"
        sep = "\t" if tsv else ","
        escape = tsv_escape if tsv else csv_escape
        headers = list(data[0].keys())
        self.write(sep.join(headers))
        for row in data:
            self.write(sep.join(escape(stringify(row.get(h))) for h in headers))

    def table(
        self,
        rows: Sequence[Dict[str, Any]],
        columns: Optional[Sequence[Column]] = None,
        wide: bool = False,
    ) -> None:
        """Draw rows as an aligned text table.

        Widths not given explicitly are sized to the longest label or cell,
        capped at 60 characters (120 with *wide*).
        """
        if not rows:
            return

        if self.config.json_mode or self.config.format in ("yaml", "csv", "tsv"):
            self.render(list(rows))
            return

        if columns is None:
            columns = [Column(key, key.upper()) for key in rows[0].keys()]

        cap = TABLE_WIDE_MAX_WIDTH if wide else TABLE_MAX_WIDTH
        sized: List[Column] = []
        for col in columns:
            width = col.width
            if not width:
                width = max([len(col.label)] + [len(stringify(r.get(col.key))) for r in rows])
                width = min(width, cap)
            sized.append(Column(col.key, col.label, width))

        header = "  ".join(col.label.ljust(col.width) for col in sized)
        self.write(colors.bold(header))
        self.write(colors.dim("──".join("─" * col.width for col in sized)))

        for row in rows:
            cells = []
            for col in sized:
                text = stringify(row.get(col.key))
                if len(text) > col.width:
                    cells.append(text[: col.width - 1] + ELLIPSIS)
                else:
                    cells.append(text.ljust(col.width))
            self.write("  ".join(cells))


# Process renderer, replaced wholesale by configure_output()
_renderer = Renderer()


def configure_output(args) -> OutputConfig:
    """Install the output configuration for this process.

    Builds a fresh :class:`OutputConfig` every time, so calling it again
    with the same arguments yields the same state.
    """
    global _renderer
    config = OutputConfig.from_args(args)
    _renderer = Renderer(config)
    logger.debug("Output configured: %s", config)
    return config


def get_config() -> OutputConfig:
    return _renderer.config


def write(*parts: str) -> None:
    _renderer.write(*parts)


def write_error(*parts: str) -> None:
    _renderer.write_error(*parts)


def render(data: Any) -> None:
    _renderer.render(data)


def table(rows, columns=None, wide: bool = False) -> None:
    _renderer.table(rows, columns, wide=wide)


def success(message: str) -> None:
    _renderer.success(message)


def info(message: str) -> None:
    _renderer.info(message)


def warn(message: str) -> None:
    _renderer.warn(message)


def status(text: str, end: str = "\n") -> None:
    _renderer.status(text, end=end)


def print_error(message: str) -> None:
    _renderer.print_error(message)


def read_stdin() -> Optional[str]:
    """Read piped stdin. Returns None for an interactive terminal or empty input."""
    if sys.stdin is None or sys.stdin.isatty():
        return None
    text = sys.stdin.read().strip()
    return text or None
