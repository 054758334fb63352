"""Exception hierarchy for specsdk.

All exceptions inherit from :class:`SpecsdkError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`specsdk.exit_codes`.
The top-level error handler in :func:`specsdk.app.main` catches
``SpecsdkError`` and exits with the appropriate code.

Only fatal conditions are modelled here. Structural anomalies found after a
document has been resolved (a path parameter not marked required, a response
without a schema, an unknown ``type``) are logged and degrade the output;
they never raise.

Subclass hierarchy::

    SpecsdkError (exit 1)
    +-- InvalidUsageError           (exit 2)
    +-- SpecParseError              (exit 3)
    |   +-- ReferenceResolutionError (exit 4)
    +-- RenderError                 (exit 5)
    +-- ConfigError                 (exit 1)
"""

from specsdk.exit_codes import (
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_REFERENCE_ERROR,
    EXIT_RENDER_ERROR,
    EXIT_SPEC_PARSE_ERROR,
)


class SpecsdkError(Exception):
    """Base exception for all specsdk errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`specsdk.exit_codes`. The entry point catches
    this exception type and calls ``sys.exit(exc.exit_code)``.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(SpecsdkError):
    """Raised for invalid CLI arguments or missing required options."""

    exit_code = EXIT_INVALID_USAGE


class SpecParseError(SpecsdkError):
    """Raised when a specification cannot be read, parsed, or is not OpenAPI 3.x."""

    exit_code = EXIT_SPEC_PARSE_ERROR


class ReferenceResolutionError(SpecParseError):
    """Raised when a ``$ref`` points to a location that does not exist.

    Resolution is fail-fast: the whole load is aborted and no partially
    resolved document is handed to the extractor.
    """

    exit_code = EXIT_REFERENCE_ERROR


class RenderError(SpecsdkError):
    """Raised when an artifact template fails to render or cannot be written."""

    exit_code = EXIT_RENDER_ERROR


class ConfigError(SpecsdkError):
    """Raised for configuration problems (invalid project file, bad option values)."""

    exit_code = EXIT_GENERIC_FAILURE
