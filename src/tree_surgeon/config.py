"""DecomposeConfig and MixedArrayMode for decomposition settings.

DecomposeConfig is a frozen (immutable) dataclass holding the decomposition
parameters.  MixedArrayMode selects what happens to a list that mixes
node-shaped objects with other values.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum, auto

__all__ = ["DecomposeConfig", "MixedArrayMode"]


class MixedArrayMode(StrEnum):
    """How to decompose a list mixing objects with non-object elements.

    - REJECT:       Raise ``MixedArrayError`` naming the offending key.
    - KEEP_AS_DATA: Keep the whole list verbatim in the node's data.
    """

    REJECT = auto()
    KEEP_AS_DATA = auto()


@dataclass(frozen=True, slots=True)
class DecomposeConfig:
    """Immutable configuration for decomposition.

    Attributes:
        id_prefix: Prefix of generated node ids (``"id_"`` gives ``id_0``,
            ``id_1``, ...).  Unused by ``decompose_with_ids``.
        mixed_arrays: Policy for lists mixing objects with other values.
    """

    id_prefix: str = "id_"
    mixed_arrays: MixedArrayMode = MixedArrayMode.REJECT

    def __post_init__(self) -> None:
        if not isinstance(self.id_prefix, str) or not self.id_prefix:
            msg = f"id_prefix must be a non-empty string, got {self.id_prefix!r}"
            raise ValueError(msg)
        if not isinstance(self.mixed_arrays, MixedArrayMode):
            msg = f"mixed_arrays must be a MixedArrayMode, got {self.mixed_arrays!r}"
            raise ValueError(msg)
