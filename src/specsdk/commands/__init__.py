"""Built-in CLI sub-commands for specsdk.

This package groups the Typer sub-command modules that form the CLI's
top-level command tree:

* :mod:`~specsdk.commands.generate` -- render every artifact into an
  output directory.
* :mod:`~specsdk.commands.inspect` -- examine the endpoints, schemas and
  metadata of one or more documents without writing anything.

Each module either exports a :class:`typer.Typer` sub-application (for
multi-command groups like ``inspect``) or a plain callback function
registered directly on the root app (for single commands like
``generate``).

Commands report failures through :func:`handle_errors`, which prints a
:class:`~specsdk.exceptions.SpecsdkError` to stderr and exits with its
code.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

import typer

from specsdk.exceptions import SpecsdkError


@contextmanager
def handle_errors() -> Iterator[None]:
    """Turn a :class:`~specsdk.exceptions.SpecsdkError` into a clean exit.

    Example::

        with handle_errors():
            documents = load_specifications(inputs)
    """
    from specsdk.output import error

    try:
        yield
    except SpecsdkError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
