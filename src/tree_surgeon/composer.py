"""compose(): rebuilds the nested document from a RelationalModel.

Relations are grouped by parent (sequence order kept) and then by kind
(first-appearance order kept).  A kind group holding one relation becomes a
bare nested object; a group holding several becomes a list in relation order.
A single-element list in the original document therefore comes back as a bare
object: the relational form does not record the difference.

Removed nodes are tolerated rather than rejected:
- a missing root composes to ``{}``;
- a relation whose child is missing from ``nodes`` is skipped, and is not
  counted when deciding between a bare object and a list.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Any

from loguru import logger

from tree_surgeon.model import NodeId, Relation, RelationalModel

__all__ = ["compose"]


def compose(model: RelationalModel) -> dict[str, Any]:
    """Rebuild the document tree held by ``model``.

    The model is not modified.  Each node starts from a shallow copy of its
    data, so attribute values (lists, for example) are shared with the model.

    Args:
        model: The relational form to compose.

    Returns:
        The nested document, or ``{}`` when the root is not in ``model.nodes``.
    """
    if model.root not in model.nodes:
        logger.debug(f"Root {model.root!r} not present, composing empty document")
        return {}

    outgoing: defaultdict[NodeId, list[Relation]] = defaultdict(list)
    skipped = 0
    for relation in model.relations:
        if relation.child not in model.nodes:
            skipped += 1
            continue
        outgoing[relation.parent].append(relation)

    if skipped:
        logger.debug(f"Skipped {skipped} relations pointing at removed nodes")

    return _materialize(model, model.root, outgoing)


def _materialize(
    model: RelationalModel,
    node_id: NodeId,
    outgoing: defaultdict[NodeId, list[Relation]],
) -> dict[str, Any]:
    document = dict(model.nodes[node_id])

    by_kind: dict[str, list[dict[str, Any]]] = {}
    for relation in outgoing.get(node_id, ()):
        child = _materialize(model, relation.child, outgoing)
        by_kind.setdefault(relation.kind, []).append(child)

    for kind, children in by_kind.items():
        # A kind overwrites a data attribute of the same name.
        document[kind] = children[0] if len(children) == 1 else children

    return document
