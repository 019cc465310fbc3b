"""The chop family: structural pruning over a RelationalModel.

Every operation picks a set of node ids to remove, drops those nodes and
every relation touching them, and returns a new model.  The input model is
never modified.  ``root`` is carried over unchanged even when the root itself
is removed; composing such a model yields ``{}``.

- chop:              matching nodes and all their descendants.
- chop_after:        descendants of matching nodes; the matches stay, childless.
- chop_by_kind:      like chop, but only for nodes reached under a given kind.
- chop_childless:    matching nodes that have no children.
- chop_nodes_by_ids: like chop, with the ids given explicitly.

Predicates receive a node's data.  An exception raised by a predicate
propagates unchanged.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable

from loguru import logger

from tree_surgeon.model import NodeData, NodeId, Relation, RelationalModel

__all__ = [
    "NodeFilter",
    "chop",
    "chop_after",
    "chop_by_kind",
    "chop_childless",
    "chop_nodes_by_ids",
]

# Type alias for a caller-supplied match predicate
NodeFilter = Callable[[NodeData], bool]


def chop(filter: NodeFilter, model: RelationalModel) -> RelationalModel:
    """Remove every node whose data matches ``filter``, with its subtree.

    Args:
        filter: Predicate over a node's data.
        model:  The model to prune.

    Returns:
        A new model without the matching nodes, their descendants, and any
        relation touching them.
    """
    seed = {node_id for node_id, data in model.nodes.items() if filter(data)}
    return _remove("chop", _descendant_closure(seed, model.relations), model)


def chop_after(filter: NodeFilter, model: RelationalModel) -> RelationalModel:
    """Remove the descendants of every node whose data matches ``filter``.

    The matching nodes themselves are kept (unless they sit below another
    matching node) and end up with no children.
    """
    matched = {node_id for node_id, data in model.nodes.items() if filter(data)}
    seed = {r.child for r in model.relations if r.parent in matched}
    return _remove("chop_after", _descendant_closure(seed, model.relations), model)


def chop_by_kind(
    kind: str, filter: NodeFilter, model: RelationalModel
) -> RelationalModel:
    """Remove matching nodes reached under ``kind``, with their subtrees.

    A node is eligible only when its incoming relation has the given kind, so
    the root is never removed and a matching node nested under any other key
    is kept.

    Args:
        kind:   The relationship label to restrict removal to.
        filter: Predicate over a node's data.
        model:  The model to prune.
    """
    seed = {
        r.child
        for r in model.relations
        if r.kind == kind
        and r.child in model.nodes
        and filter(model.nodes[r.child])
    }
    closure = _descendant_closure(seed, model.relations)
    return _remove("chop_by_kind", closure, model)


def chop_childless(filter: NodeFilter, model: RelationalModel) -> RelationalModel:
    """Remove nodes whose data matches ``filter`` and that have no children.

    A matching node with children is kept; its descendants are each judged on
    their own.  A parent left childless by this call is not re-examined.
    """
    parents = {r.parent for r in model.relations}
    doomed = {
        node_id
        for node_id, data in model.nodes.items()
        if node_id not in parents and filter(data)
    }
    return _remove("chop_childless", doomed, model)


def chop_nodes_by_ids(
    ids: Iterable[NodeId], model: RelationalModel
) -> RelationalModel:
    """Remove the nodes listed in ``ids``, with their subtrees.

    Ids that are not in the model are ignored.
    """
    return _remove(
        "chop_nodes_by_ids", _descendant_closure(set(ids), model.relations), model
    )


def _descendant_closure(
    seed: set[NodeId], relations: tuple[Relation, ...]
) -> set[NodeId]:
    """Return ``seed`` plus every node reachable from it through ``relations``."""
    children: dict[NodeId, list[NodeId]] = {}
    for relation in relations:
        children.setdefault(relation.parent, []).append(relation.child)

    closure = set(seed)
    pending = list(seed)
    while pending:
        for child in children.get(pending.pop(), ()):
            if child not in closure:
                closure.add(child)
                pending.append(child)
    return closure


def _remove(
    operation: str, doomed: set[NodeId], model: RelationalModel
) -> RelationalModel:
    nodes = {
        node_id: data
        for node_id, data in model.nodes.items()
        if node_id not in doomed
    }
    relations = tuple(
        r
        for r in model.relations
        if r.parent not in doomed and r.child not in doomed
    )
    logger.debug(
        f"{operation} removed {len(model.nodes) - len(nodes)} nodes "
        f"and {len(model.relations) - len(relations)} relations"
    )
    return RelationalModel(root=model.root, nodes=nodes, relations=relations)
