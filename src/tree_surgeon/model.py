"""Relation and RelationalModel value types for the flattened tree form.

A document tree is represented relationally as a node table (``nodes``) plus an
ordered sequence of ``(parent, child, kind)`` edges (``relations``).  Both types
are frozen: every operation in this package builds a new ``RelationalModel``
instead of mutating the one it was given.

The plain-dict shape used by hand-written inputs is::

    {
        "Root": "id_0",
        "Nodes": {"id_0": {}, "id_1": {"match": "no"}},
        "Relations": [{"Parent": "id_0", "Child": "id_1", "Kind": "keep"}],
    }

``RelationalModel.from_dict`` and ``RelationalModel.to_dict`` convert between
that shape and the typed value.
"""

from __future__ import annotations

from collections.abc import Hashable, Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

__all__ = ["NodeData", "NodeId", "Relation", "RelationalModel"]

# Type aliases
NodeId = Hashable
NodeData = dict[str, Any]


@dataclass(frozen=True, slots=True)
class Relation:
    """A single parent -> child edge.

    Attributes:
        parent: Id of the node holding the attribute.
        child:  Id of the nested node.
        kind:   The attribute key the child was nested under in tree form.
    """

    parent: NodeId
    child: NodeId
    kind: str


@dataclass(frozen=True, slots=True)
class RelationalModel:
    """Flattened ``{root, nodes, relations}`` form of a document tree.

    Attributes:
        root:      Id of the top node.  May be absent from ``nodes`` after the
                   root has been chopped; composition then yields ``{}``.
        nodes:     Mapping of node id to that node's data attributes.
        relations: Edges in significant order.  Within one ``(parent, kind)``
                   group the order is the array order on recomposition.

    The node table is copied into a read-only mapping, so later changes to the
    caller's dict do not reach the model.  Per-node data dicts are shared, not
    copied.  Models compare by value but are not hashable.
    """

    root: NodeId
    nodes: Mapping[NodeId, NodeData] = field(default_factory=dict)
    relations: tuple[Relation, ...] = ()

    __hash__ = None  # type: ignore[assignment]

    def __post_init__(self) -> None:
        object.__setattr__(self, "nodes", MappingProxyType(dict(self.nodes)))
        # Accept any sequence of relations but always store a tuple.
        if not isinstance(self.relations, tuple):
            object.__setattr__(self, "relations", tuple(self.relations))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> RelationalModel:
        """Build a model from the ``Root``/``Nodes``/``Relations`` dict shape.

        Raises:
            KeyError:  If a top-level or relation key is missing.
            TypeError: If ``Nodes`` is not a mapping or ``Relations`` is not a
                       sequence of mappings.
        """
        nodes = data["Nodes"]
        raw_relations = data["Relations"]
        if not isinstance(nodes, Mapping):
            msg = f"Nodes must be a mapping, got {type(nodes)!r}"
            raise TypeError(msg)
        if isinstance(raw_relations, (str, bytes)) or not isinstance(
            raw_relations, Sequence
        ):
            msg = f"Relations must be a sequence, got {type(raw_relations)!r}"
            raise TypeError(msg)

        relations = []
        for raw in raw_relations:
            if not isinstance(raw, Mapping):
                msg = f"Each relation must be a mapping, got {type(raw)!r}"
                raise TypeError(msg)
            relations.append(Relation(raw["Parent"], raw["Child"], raw["Kind"]))

        return cls(
            root=data["Root"],
            nodes={node_id: dict(attrs) for node_id, attrs in nodes.items()},
            relations=tuple(relations),
        )

    def to_dict(self) -> dict[str, Any]:
        """Return the ``Root``/``Nodes``/``Relations`` dict shape (fresh containers)."""
        return {
            "Root": self.root,
            "Nodes": {node_id: dict(attrs) for node_id, attrs in self.nodes.items()},
            "Relations": [
                {"Parent": r.parent, "Child": r.child, "Kind": r.kind}
                for r in self.relations
            ],
        }
