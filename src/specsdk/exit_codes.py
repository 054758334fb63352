"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~specsdk.exceptions.SpecsdkError` subclass.
Build scripts can inspect the exit code to tell a broken spec apart from a
broken invocation without parsing stderr.

Example::

    $ specsdk generate -i openapi.yaml -o ./sdk
    $ echo $?
    4   # EXIT_REFERENCE_ERROR -- a $ref points nowhere
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing required options."""

EXIT_SPEC_PARSE_ERROR = 3
"""A specification could not be read or parsed as JSON/YAML."""

EXIT_REFERENCE_ERROR = 4
"""A ``$ref`` inside a specification could not be resolved."""

EXIT_RENDER_ERROR = 5
"""An artifact template failed to render or could not be written."""
