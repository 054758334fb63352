"""Terminal output for the specsdk CLI.

Two streams, two jobs:

* **stdout** carries data a caller may want to pipe: the ``inspect`` tables
  and document summaries, as a Rich table, tab-separated text or JSON.
* **stderr** carries every diagnostic: progress lines, the "Generated N
  files" summary, warnings, errors and the records of the ``specsdk``
  logger, so that generation warnings (a path parameter not marked
  required, an operation id that had to be renamed) never end up mixed
  with data.

Colour is dropped when ``NO_COLOR`` is set, ``TERM`` is ``dumb`` or
``--no-color`` is given; in that case diagnostics are written as plain
``Prefix: message`` lines.

:class:`OutputManager` is built once per invocation in
:func:`specsdk.app.main_callback` and installed with :func:`set_output`;
commands then use the module-level shortcuts (:func:`info`,
:func:`error`, ...) instead of passing the manager around.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from enum import Enum
from typing import Any, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table

_LOGGER_NAME = "specsdk"
_HANDLER_MARKER = "_specsdk_handler"


class OutputFormat(str, Enum):
    """How stdout data is written.

    ``AUTO`` becomes ``RICH`` on an interactive, colour-capable terminal and
    ``PLAIN`` otherwise.
    """

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


class OutputManager:
    """Writes data to stdout and diagnostics to stderr.

    Args:
        format: Format for stdout data. ``AUTO`` is resolved immediately.
        no_color: Force plain, uncoloured diagnostics.
        quiet: Hide info, success, suggestion and progress messages.
            Warnings and errors are always shown.
        verbose: Show debug messages and DEBUG log records.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet
        self._verbose = verbose
        self._format = _resolve_format(format, self._no_color)

        self._stdout = Console(
            file=sys.stdout,
            no_color=self._no_color,
            force_terminal=self._format == OutputFormat.RICH,
        )
        self._stderr = Console(file=sys.stderr, no_color=self._no_color, stderr=True)

    @property
    def format(self) -> OutputFormat:
        """The resolved output format (never ``AUTO``)."""
        return self._format

    # -- logging ----------------------------------------------------------

    def configure_logging(self) -> None:
        """Send records of the ``specsdk`` logger hierarchy to stderr.

        The threshold is WARNING, lowered to DEBUG by ``verbose`` and raised
        to ERROR by ``quiet``.  Calling this again swaps the handler rather
        than adding a second one.
        """
        logger = logging.getLogger(_LOGGER_NAME)
        for existing in list(logger.handlers):
            if getattr(existing, _HANDLER_MARKER, False):
                logger.removeHandler(existing)

        handler: logging.Handler
        if self._no_color:
            handler = logging.StreamHandler(sys.stderr)
            handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
        else:
            handler = RichHandler(
                console=self._stderr,
                show_time=False,
                show_path=self._verbose,
                markup=False,
            )
        setattr(handler, _HANDLER_MARKER, True)

        logger.addHandler(handler)
        logger.setLevel(
            logging.DEBUG if self._verbose else logging.ERROR if self._quiet else logging.WARNING
        )
        logger.propagate = False

    # -- stdout -----------------------------------------------------------

    def print_data(self, text: str) -> None:
        """Write one line of raw data to stdout."""
        print(text, file=sys.stdout, flush=True)

    def format_response(self, data: Any) -> None:
        """Write a dict or list to stdout.

        JSON mode dumps it as indented JSON, plain mode as ``key<TAB>value``
        lines (one line of values per dict in a list), and Rich mode as
        highlighted JSON.
        """
        if self._format == OutputFormat.PLAIN:
            for line in _plain_lines(data):
                self.print_data(line)
            return

        dumped = json.dumps(data, indent=2, ensure_ascii=False, default=str)
        if self._format == OutputFormat.JSON:
            self.print_data(dumped)
        else:
            self._stdout.print(Syntax(dumped, "json", theme="monokai", word_wrap=True))

    def print_table(
        self,
        headers: list[str],
        rows: list[list[str]],
        title: Optional[str] = None,
    ) -> None:
        """Write a table to stdout.

        JSON mode emits a list of objects keyed by header, plain mode a
        tab-separated header line followed by one line per row.  The title
        is only shown in Rich mode.
        """
        if self._format == OutputFormat.JSON:
            records = [dict(zip(headers, row)) for row in rows]
            self.print_data(json.dumps(records, indent=2, ensure_ascii=False))
            return

        if self._format == OutputFormat.PLAIN:
            for line in [headers, *rows]:
                self.print_data("\t".join(line))
            return

        table = Table(title=title, show_header=True, header_style="bold cyan")
        for header in headers:
            table.add_column(header)
        for row in rows:
            table.add_row(*(escape(cell) for cell in row))
        self._stdout.print(table)

    # -- stderr -----------------------------------------------------------

    def _diagnostic(self, message: str, prefix: str = "", style: str = "") -> None:
        if self._no_color:
            print(f"{prefix}{message}", file=sys.stderr, flush=True)
            return
        text = f"{escape(prefix)}{escape(message)}"
        self._stderr.print(f"[{style}]{text}[/{style}]" if style else text)

    def info(self, message: str) -> None:
        """Status line; hidden by ``quiet``."""
        if not self._quiet:
            self._diagnostic(message)

    def success(self, message: str) -> None:
        """Green completion line; hidden by ``quiet``."""
        if not self._quiet:
            self._diagnostic(message, style="green")

    def warning(self, message: str) -> None:
        """Yellow ``Warning:`` line, shown even when quiet."""
        self._diagnostic(message, "Warning: ", "yellow")

    def error(self, message: str) -> None:
        """Bold red ``Error:`` line, always shown."""
        self._diagnostic(message, "Error: ", "bold red")

    def suggest(self, message: str) -> None:
        """Dimmed next step (``→ ...``); hidden by ``quiet``."""
        if not self._quiet:
            self._diagnostic(message, "→ ", "dim")

    def debug(self, message: str) -> None:
        """Dimmed ``[debug]`` line, only with ``verbose``."""
        if self._verbose:
            self._diagnostic(message, "[debug] ", "dim")

    def progress(self, message: str) -> None:
        """Dimmed progress line, shown only on an interactive terminal."""
        if not self._quiet and _is_tty():
            self._diagnostic(message, style="dim")


def _resolve_format(requested: OutputFormat, no_color: bool) -> OutputFormat:
    if requested != OutputFormat.AUTO:
        return requested
    return OutputFormat.RICH if _is_tty() and not no_color else OutputFormat.PLAIN


def _plain_lines(data: Any) -> list[str]:
    if isinstance(data, dict):
        return [f"{key}\t{value}" for key, value in data.items()]
    if isinstance(data, list):
        return [
            "\t".join(str(v) for v in item.values()) if isinstance(item, dict) else str(item)
            for item in data
        ]
    return [str(data)]


def _is_tty() -> bool:
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    """``NO_COLOR`` (any value, even empty) or ``TERM=dumb`` disables colour."""
    return os.environ.get("NO_COLOR") is not None or os.environ.get("TERM") == "dumb"


# -- global instance --------------------------------------------------------

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """The installed :class:`OutputManager`, or a default one."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    """Forget the installed manager (used between tests)."""
    global _output
    _output = None


def format_response(data: Any) -> None:
    get_output().format_response(data)


def info(message: str) -> None:
    get_output().info(message)


def success(message: str) -> None:
    get_output().success(message)


def error(message: str) -> None:
    get_output().error(message)


def suggest(message: str) -> None:
    get_output().suggest(message)


def debug(message: str) -> None:
    get_output().debug(message)


def progress(message: str) -> None:
    get_output().progress(message)
