"""Tree surgeon - tree/relational conversion and pruning for JSON documents."""

from __future__ import annotations

from loguru import logger

from tree_surgeon.chop import (
    chop,
    chop_after,
    chop_by_kind,
    chop_childless,
    chop_nodes_by_ids,
)
from tree_surgeon.composer import compose
from tree_surgeon.config import DecomposeConfig, MixedArrayMode
from tree_surgeon.decomposer import (
    Decomposer,
    MixedArrayError,
    decompose,
    decompose_with_ids,
)
from tree_surgeon.identity import FieldIdResolver, IdResolver, SequentialIdResolver
from tree_surgeon.model import Relation, RelationalModel

# Library logging is silent until the application calls logger.enable("tree_surgeon").
logger.disable("tree_surgeon")

__version__: str = "0.1.0"
__all__: list[str] = [
    "DecomposeConfig",
    "Decomposer",
    "FieldIdResolver",
    "IdResolver",
    "MixedArrayError",
    "MixedArrayMode",
    "Relation",
    "RelationalModel",
    "SequentialIdResolver",
    "chop",
    "chop_after",
    "chop_by_kind",
    "chop_childless",
    "chop_nodes_by_ids",
    "compose",
    "decompose",
    "decompose_with_ids",
]
