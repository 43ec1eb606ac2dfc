import logging
from typing import Callable, List, Optional, Sequence, Tuple

import sympy as sp
from sympy.utilities.lambdify import lambdify

from .errors import ComputationError, InvalidMetricError
from .symbolic import ONE, ZERO, Divide, Expression, Multiply, Subtract, parse

logger = logging.getLogger(__name__)


class MetricTensor:
    """
    Represents a metric g_{ij} as an n x n matrix of symbolic expressions.

    Attributes:
        rows: list of rows, each a list of Expression.
        dimension: number of rows (n).

    Symmetry g_{ij} = g_{ji} is a convention of the caller and is not checked.
    Entries are read with ``metric[i, j]``.
    """
    def __init__(self, rows: Sequence[Sequence[Expression]]):
        self.rows: List[List[Expression]] = [list(row) for row in rows]
        self.dimension = len(self.rows)

    def __getitem__(self, key: Tuple[int, int]) -> Expression:
        i, j = key
        return self.rows[i][j]

    def __eq__(self, other) -> bool:
        if not isinstance(other, MetricTensor):
            return NotImplemented
        return self.rows == other.rows

    def __len__(self) -> int:
        return self.dimension

    def simplify(self) -> 'MetricTensor':
        """
        Return a copy with every entry simplified once.
        """
        return MetricTensor([[entry.simplify() for entry in row] for row in self.rows])

    def to_strings(self) -> List[List[str]]:
        return [[str(entry) for entry in row] for row in self.rows]

    def to_sympy(self) -> sp.Matrix:
        return sp.Matrix(self.dimension, self.dimension,
                         lambda i, j: self.rows[i][j].to_sympy())

    def to_latex(self) -> str:
        """
        Export the metric matrix as a LaTeX matrix.
        """
        return sp.latex(self.to_sympy())

    def lambdify_matrix(self, symbols: Sequence[str]) -> Callable:
        """
        Create a function that evaluates the metric matrix numerically.

        Args:
            symbols: names of every coordinate and parameter the entries use,
                in the order the returned callable expects its arguments.

        Returns:
            Callable taking one value per symbol and returning a numpy array.
        """
        matrix = self.to_sympy()
        args = [sp.Symbol(name) for name in symbols]
        missing = matrix.free_symbols - set(args)
        if missing:
            names = ", ".join(sorted(str(s) for s in missing))
            raise ComputationError(f"Cannot evaluate metric numerically, unbound symbols: {names}")
        return lambdify(args, matrix, 'numpy')

    def __repr__(self) -> str:
        return f"<MetricTensor dim={self.dimension} rows={self.to_strings()}>"


def parse_metric(metric_strings: Sequence[Sequence[str]],
                 coords: Optional[Sequence[str]] = None) -> MetricTensor:
    """
    Parse a square matrix of textual expressions into a MetricTensor.

    Raises:
        InvalidMetricError: a row length differs from the row count, or
            ``coords`` is given with a length other than the row count.
    """
    n = len(metric_strings)
    for row in metric_strings:
        if len(row) != n:
            raise InvalidMetricError("Metric tensor must be square")
    if coords is not None and len(coords) != n:
        raise InvalidMetricError(
            f"Metric tensor must be {n}x{n} for {len(coords)} coordinates")
    return MetricTensor([[parse(cell) for cell in row] for row in metric_strings])


def identity_metric(n: int) -> MetricTensor:
    return MetricTensor([[ONE if i == j else ZERO for j in range(n)] for i in range(n)])


def invert(metric: MetricTensor) -> MetricTensor:
    """
    Symbolic inverse g^{ij} of the metric.

    Only the 2x2 case is a true inverse (closed form via determinant and
    cofactors). Any other size returns the identity as a placeholder and logs
    a warning; results built on it are not physically meaningful.
    """
    n = metric.dimension
    if n != 2:
        logger.warning(
            "Symbolic inverse is only implemented for 2x2 metrics; "
            "using the identity as a placeholder for a %dx%d metric", n, n)
        return identity_metric(n)

    a, b = metric[0, 0], metric[0, 1]
    c, d = metric[1, 0], metric[1, 1]

    if b.simplify().is_zero() and c.simplify().is_zero():
        return MetricTensor([
            [Divide(ONE, a).simplify(), ZERO],
            [ZERO, Divide(ONE, d).simplify()],
        ])

    det = Subtract(Multiply(a, d), Multiply(b, c))
    inv_det = Divide(ONE, det)
    rows = [
        [Multiply(inv_det, d), Multiply(inv_det, Subtract(ZERO, b))],
        [Multiply(inv_det, Subtract(ZERO, c)), Multiply(inv_det, a)],
    ]
    return MetricTensor(rows).simplify()

# End of metric_tensor.py
