"""
Sparse storage for stage results.

A tensor is kept as the list of its nonzero components, each an index tuple
plus the rendered text of its expression. Stages exchange these lists and
reinflate them into dense numpy object arrays (unlisted entries are Zero) by
re-parsing the text, so structure the parser cannot read is lost between
stages.
"""
from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, List, Sequence, Tuple

import numpy as np

from .errors import ComputationError
from .symbolic import ZERO, Expression, parse


@dataclass(frozen=True)
class TensorComponent:
    indices: Tuple[int, ...]
    expression: str

    def __post_init__(self):
        object.__setattr__(self, "indices", tuple(int(i) for i in self.indices))

    @classmethod
    def from_expression(cls, indices: Sequence[int], expr: Expression) -> 'TensorComponent':
        return cls(tuple(indices), expr.format())

    def parse(self) -> Expression:
        return parse(self.expression)

    def to_dict(self) -> Dict[str, Any]:
        return {"indices": list(self.indices), "expression": self.expression}


@dataclass
class StageResult:
    """
    Nonzero components of one pipeline stage.

    Attributes:
        components: the nonzero TensorComponents, in index order.
        dimension: size n of the originating metric.
    """
    components: List[TensorComponent] = field(default_factory=list)
    dimension: int = 0

    rank: ClassVar[int] = 0
    kind: ClassVar[str] = "tensor"
    # Key of the component list in the JSON form.
    components_key: ClassVar[str] = "components"

    def __len__(self) -> int:
        return len(self.components)

    def __iter__(self):
        return iter(self.components)

    def as_dict(self) -> Dict[Tuple[int, ...], str]:
        return {c.indices: c.expression for c in self.components}

    def to_dict(self) -> Dict[str, Any]:
        return {
            self.components_key: [c.to_dict() for c in self.components],
            "dimension": self.dimension,
        }

    def to_dense(self, n: int) -> np.ndarray:
        """
        Reinflate into an n^rank object array of Expressions, Zero where unlisted.

        Raises:
            ComputationError: dimension differs from n, or a component has the
                wrong number of indices or an index outside [0, n).
        """
        if self.dimension != n:
            raise ComputationError(
                f"{self.kind} has dimension {self.dimension}, expected {n}")
        dense = np.full((n,) * self.rank, ZERO, dtype=object)
        for component in self.components:
            indices = component.indices
            if len(indices) != self.rank:
                raise ComputationError(
                    f"{self.kind} component {list(indices)} must have {self.rank} indices")
            if any(i < 0 or i >= n for i in indices):
                raise ComputationError(
                    f"{self.kind} component {list(indices)} is out of range for dimension {n}")
            dense[indices] = component.parse()
        return dense


class ChristoffelResult(StageResult):
    rank = 3
    kind = "christoffel_symbols"
    components_key = "symbols"


class RiemannResult(StageResult):
    rank = 4
    kind = "riemann_tensor"


class RicciResult(StageResult):
    rank = 2
    kind = "ricci_tensor"


class EinsteinResult(StageResult):
    rank = 2
    kind = "einstein_tensor"

# End of tensor.py
