"""Schema-resolution pipeline: filter, prune, and synthesize types.

Sub-modules:

* :mod:`~specgen.codegen.filter` -- include/exclude rules on operations and
  schema properties.
* :mod:`~specgen.codegen.collector` -- reachable-reference collection.
* :mod:`~specgen.codegen.prune` -- fixpoint removal of unused components.
* :mod:`~specgen.codegen.schema` and :mod:`~specgen.codegen.union` -- type
  synthesis, including ``anyOf``/``oneOf`` handling.
* :mod:`~specgen.codegen.operations` -- per-operation definitions.
* :mod:`~specgen.codegen.pipeline` -- the orchestrator tying them together.
"""

from specgen.codegen.filter import filter_document
from specgen.codegen.pipeline import generate, prepare_document
from specgen.codegen.prune import prune_document

__all__ = ["filter_document", "generate", "prepare_document", "prune_document"]
