"""Schema-to-type projection shared by every renderer.

* :mod:`~specsdk.typegen.schema` -- tagged schema variants and
  :func:`~specsdk.typegen.schema.parse_schema`.
* :mod:`~specsdk.typegen.expressions` -- language-independent type
  expressions.
* :mod:`~specsdk.typegen.projector` -- :func:`project_type`, the pure
  schema -> type expression mapping.
* :mod:`~specsdk.typegen.typescript` -- TypeScript rendering of type
  expressions and per-endpoint types.
"""

from specsdk.typegen.projector import collect_named_schemas, project_type
from specsdk.typegen.schema import parse_schema
from specsdk.typegen.typescript import render_type, schema_to_type

__all__ = [
    "collect_named_schemas",
    "parse_schema",
    "project_type",
    "render_type",
    "schema_to_type",
]
