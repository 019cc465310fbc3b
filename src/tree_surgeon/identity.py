"""IdResolver Protocol and the two built-in identity strategies.

A resolver is asked once per node, in visitation order, for the id of that
node given the node's own data attributes.  Any class with a conformant
``resolve`` method passes ``isinstance`` checks.

Example::

    from tree_surgeon.identity import SequentialIdResolver

    ids = SequentialIdResolver()
    ids.resolve({"a": 1})   # "id_0"
    ids.resolve({})         # "id_1"
"""

from __future__ import annotations

import itertools
from collections.abc import Callable
from typing import Protocol, runtime_checkable

from tree_surgeon.model import NodeData, NodeId

__all__ = ["FieldIdResolver", "IdResolver", "SequentialIdResolver"]


@runtime_checkable
class IdResolver(Protocol):
    """Structural protocol for identity strategies."""

    def resolve(self, data: NodeData) -> NodeId: ...


class SequentialIdResolver:
    """Generates ``f"{prefix}{n}"`` ids from a per-instance counter.

    Each instance owns its counter, so two decompositions never share state.
    """

    def __init__(self, prefix: str = "id_") -> None:
        self._prefix = prefix
        self._counter = itertools.count()

    def resolve(self, data: NodeData) -> NodeId:
        return f"{self._prefix}{next(self._counter)}"


class FieldIdResolver:
    """Reads a node's id from its own data via a caller-supplied function.

    No uniqueness check is made.  Exceptions raised by ``id_of`` propagate
    unchanged.
    """

    def __init__(self, id_of: Callable[[NodeData], NodeId]) -> None:
        self._id_of = id_of

    def resolve(self, data: NodeData) -> NodeId:
        return self._id_of(data)
