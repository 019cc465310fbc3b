"""Decomposer: flattens a nested document into a RelationalModel.

Walks the document depth-first (attribute-key order, then array-index order)
and splits every node into:
- data attributes, kept verbatim in the node's ``NodeData``;
- relationship attributes (an object, or a non-empty list of objects), each
  child becoming its own node plus one ``Relation`` tagged with the key.

Ids are assigned in visitation (pre-)order by an ``IdResolver``, so with the
default sequential resolver the root is always ``id_0``.  The edge into a child
is emitted before any edge out of that child.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from loguru import logger

from tree_surgeon.config import DecomposeConfig, MixedArrayMode
from tree_surgeon.identity import FieldIdResolver, IdResolver, SequentialIdResolver
from tree_surgeon.model import NodeData, NodeId, Relation, RelationalModel

__all__ = ["Decomposer", "MixedArrayError", "decompose", "decompose_with_ids"]


class MixedArrayError(ValueError):
    """A list mixes node-shaped objects with other values."""


@dataclass
class Decomposer:
    """Converts one document tree into a ``RelationalModel``.

    A ``Decomposer`` is single-use: its resolver keeps state across calls (a
    sequential resolver would number a second document from where the first
    stopped), so a second ``decompose`` call raises ``RuntimeError``.  Build a
    fresh instance per document; the module-level functions do this for you.

    Duplicate ids returned by the resolver are not detected: the node visited
    later overwrites the earlier entry in ``nodes``.

    Example::

        decomposer = Decomposer(SequentialIdResolver())
        model = decomposer.decompose({"keep": {"match": "no"}, "size": 3})
        # model.nodes     == {"id_0": {"size": 3}, "id_1": {"match": "no"}}
        # model.relations == (Relation("id_0", "id_1", "keep"),)
    """

    resolver: IdResolver
    config: DecomposeConfig = field(default_factory=DecomposeConfig)
    _nodes: dict[NodeId, NodeData] = field(default_factory=dict, init=False)
    _relations: list[Relation] = field(default_factory=list, init=False)
    _used: bool = field(default=False, init=False)

    def decompose(self, tree: dict[str, Any]) -> RelationalModel:
        """Flatten ``tree`` into a new ``RelationalModel``.

        Raises:
            TypeError: If ``tree`` is not a dict.
            RuntimeError: If this instance has already decomposed a document.
            MixedArrayError: If a list mixes objects with other values and the
                config's ``mixed_arrays`` is ``REJECT``.
        """
        if not isinstance(tree, dict):
            raise TypeError(f"Document root must be a dict, got {type(tree)!r}")
        if self._used:
            msg = "Decomposer is single-use; create a new instance per document"
            raise RuntimeError(msg)

        self._used = True
        root = self._visit(tree, parent=None, kind=None)

        logger.debug(
            f"Decomposed tree into {len(self._nodes)} nodes "
            f"and {len(self._relations)} relations"
        )
        return RelationalModel(
            root=root, nodes=self._nodes, relations=tuple(self._relations)
        )

    def _visit(
        self, node: dict[str, Any], parent: NodeId | None, kind: str | None
    ) -> NodeId:
        data: NodeData = {}
        children: list[tuple[str, list[dict[str, Any]]]] = []

        for key, value in node.items():
            nested = self._children_of(key, value)
            if nested is None:
                data[key] = value
            else:
                children.append((key, nested))

        node_id = self.resolver.resolve(data)
        if kind is not None:
            self._relations.append(Relation(parent, node_id, kind))
        self._nodes[node_id] = data

        for key, nested in children:
            for child in nested:
                self._visit(child, parent=node_id, kind=key)

        return node_id

    def _children_of(self, key: str, value: Any) -> list[dict[str, Any]] | None:
        """Return the child nodes held by an attribute, or None for a data attribute."""
        if isinstance(value, dict):
            return [value]
        if not isinstance(value, list) or not value:
            return None

        objects = sum(1 for item in value if isinstance(item, dict))
        if objects == len(value):
            return value
        if objects == 0:
            return None

        if self.config.mixed_arrays is MixedArrayMode.KEEP_AS_DATA:
            return None
        msg = (
            f"Attribute {key!r} mixes {objects} object(s) with "
            f"{len(value) - objects} non-object value(s)"
        )
        raise MixedArrayError(msg)


def decompose(
    tree: dict[str, Any], config: DecomposeConfig | None = None
) -> RelationalModel:
    """Flatten ``tree``, generating sequential ids (``id_0`` is the root).

    Args:
        tree:   The document to flatten.  Must be a dict.
        config: Decomposition settings.  Defaults to ``DecomposeConfig()``.

    Returns:
        A new ``RelationalModel``.
    """
    config = config if config is not None else DecomposeConfig()
    resolver = SequentialIdResolver(prefix=config.id_prefix)
    return Decomposer(resolver, config).decompose(tree)


def decompose_with_ids(
    tree: dict[str, Any],
    id_of: Callable[[NodeData], NodeId],
    config: DecomposeConfig | None = None,
) -> RelationalModel:
    """Flatten ``tree``, taking each node's id from ``id_of(node_data)``.

    ``id_of`` receives only the node's data attributes.  The caller must make
    sure it returns distinct ids for distinct nodes.

    Args:
        tree:   The document to flatten.  Must be a dict.
        id_of:  Function mapping a node's data to its id.
        config: Decomposition settings.  ``id_prefix`` is ignored.

    Returns:
        A new ``RelationalModel``.
    """
    config = config if config is not None else DecomposeConfig()
    return Decomposer(FieldIdResolver(id_of), config).decompose(tree)
