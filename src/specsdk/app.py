"""Typer application and console entry point.

Commands:

* ``specsdk generate`` -- render ``sdk.ts``, ``hooks.ts``, ``API.md``,
  ``index.html``, ``package.json`` and ``tsconfig.json``.
* ``specsdk inspect endpoints|schemas|info`` -- read-only views of what
  the generator sees.

The root callback turns the global flags into the process-wide
:class:`~specsdk.output.OutputManager` and hooks the ``specsdk`` logger up
to stderr before any command runs.
"""

from __future__ import annotations

import logging
import signal
import sys
from typing import Any

import typer

from specsdk import __version__
from specsdk.commands.generate import generate_command
from specsdk.commands.inspect import inspect_app
from specsdk.exit_codes import EXIT_GENERIC_FAILURE
from specsdk.output import OutputFormat, OutputManager, set_output

logger = logging.getLogger(__name__)

EXIT_INTERRUPTED = 130

app = typer.Typer(
    name="specsdk",
    help="Generate TypeScript SDKs, React hooks and docs from OpenAPI 3.x specs.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

app.command("generate")(generate_command)
app.add_typer(inspect_app, name="inspect", help="Inspect endpoints and schemas of a spec.")


def _show_version(value: bool) -> None:
    if value:
        typer.echo(f"specsdk {__version__}")
        raise typer.Exit()


def _requested_format(json_output: bool, plain_output: bool) -> OutputFormat:
    if json_output:
        return OutputFormat.JSON
    if plain_output:
        return OutputFormat.PLAIN
    return OutputFormat.AUTO


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False, "--version", callback=_show_version, is_eager=True, help="Show version and exit."
    ),
    json_output: bool = typer.Option(False, "--json", help="Write data as JSON."),
    plain_output: bool = typer.Option(False, "--plain", help="Write data as tab-separated text."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only show warnings and errors."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug output."),
) -> None:
    """Set up output and logging for the selected command.

    ``--json`` wins over ``--plain``; without either, Rich output is used on
    a terminal and plain text otherwise.
    """
    output = OutputManager(
        format=_requested_format(json_output, plain_output),
        no_color=no_color,
        quiet=quiet,
        verbose=verbose,
    )
    set_output(output)
    output.configure_logging()
    logger.debug("Output format: %s", output.format.value)


def _on_sigint(signum: int, frame: Any) -> None:  # noqa: ANN401
    sys.stderr.write("\nCancelled.\n")
    sys.exit(EXIT_INTERRUPTED)


def main() -> None:
    """Console-script entry point.

    Commands already turn :class:`~specsdk.exceptions.SpecsdkError` into
    exit codes; anything that still escapes is reported here.  A stray
    ``SpecsdkError`` exits with its own code, any other exception with
    :data:`~specsdk.exit_codes.EXIT_GENERIC_FAILURE` (traceback logged at
    debug level).
    """
    from specsdk.exceptions import SpecsdkError
    from specsdk.output import error

    signal.signal(signal.SIGINT, _on_sigint)
    try:
        app()
    except SpecsdkError as exc:
        error(str(exc))
        sys.exit(exc.exit_code)
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(EXIT_INTERRUPTED)
    except Exception as exc:
        logger.debug("Unhandled exception", exc_info=True)
        error(f"Unexpected error: {exc}")
        sys.exit(EXIT_GENERIC_FAILURE)
