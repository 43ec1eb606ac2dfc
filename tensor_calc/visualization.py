"""
Visualization of metric and curvature components.

Components are read with sympy's parser (which understands the full infix
text the package parser keeps opaque), lambdified with the numpy backend and
plotted with matplotlib against one coordinate while every other symbol is
held at a fixed value.
"""
import logging
import os
from typing import Dict, Optional, Sequence, Tuple, Union

import matplotlib
import numpy as np
import sympy as sp
from sympy import lambdify
from sympy.core.function import AppliedUndef

from .errors import ComputationError
from .metric_tensor import MetricTensor
from .symbolic import Expression, sympify_text
from .tensor import StageResult

logger = logging.getLogger(__name__)

# Backend Configuration
# --------------------
# Non-interactive Agg when no display is available, so plotting works headless.
if os.environ.get('DISPLAY', '') == '':
    logger.info('No display found. Using non-interactive Agg backend')
    matplotlib.use('Agg')
else:
    try:
        matplotlib.use('Qt5Agg')
    except ImportError:
        try:
            matplotlib.use('TkAgg')
        except ImportError:
            logger.warning('Could not initialize interactive backend. Using non-interactive Agg backend')
            matplotlib.use('Agg')

import matplotlib.pyplot as plt  # noqa: E402


class ComponentPlotter:
    """
    Plots expressions along a single coordinate.

    Attributes:
        variable: name of the coordinate on the horizontal axis.
        bounds: (min, max) range of that coordinate.
        fixed: values for every other symbol the expressions use.
        num: number of sample points.
    """
    def __init__(
        self,
        variable: str,
        bounds: Tuple[float, float],
        fixed: Optional[Dict[str, float]] = None,
        num: int = 200
    ):
        self.variable = variable
        self.bounds = bounds
        self.fixed = dict(fixed or {})
        self.num = num

    def sample_points(self) -> np.ndarray:
        return np.linspace(self.bounds[0], self.bounds[1], self.num)

    def evaluate(self, expr: Union[Expression, str]) -> Tuple[np.ndarray, np.ndarray]:
        """
        Numerically evaluate an expression (or component text) over the sample points.

        Raises:
            ComputationError: the expression cannot be read, or uses a symbol
                that is neither the plotted coordinate nor in ``fixed``.
        """
        sym_expr = sympify_text(expr)
        args = [sp.Symbol(self.variable)] + [sp.Symbol(name) for name in self.fixed]
        missing = sym_expr.free_symbols - set(args)
        if missing:
            names = ", ".join(sorted(str(s) for s in missing))
            raise ComputationError(f"Cannot evaluate '{expr}' numerically, unbound symbols: {names}")
        undefined = sym_expr.atoms(AppliedUndef)
        if undefined:
            names = ", ".join(sorted(str(f) for f in undefined))
            raise ComputationError(f"Cannot evaluate '{expr}' numerically, undefined functions: {names}")
        func = lambdify(args, sym_expr, 'numpy')
        xs = self.sample_points()
        ys = np.asarray(func(xs, *self.fixed.values()), dtype=float)
        # constant expressions come back as scalars
        return xs, np.broadcast_to(ys, xs.shape)

    def plot_expression(self, expr: Union[Expression, str], ax=None,
                        label: Optional[str] = None, **kwargs):
        """
        Plot one expression; returns the matplotlib Axes.
        """
        if ax is None:
            fig, ax = plt.subplots(figsize=(8, 5))
        xs, ys = self.evaluate(expr)
        ax.plot(xs, ys, label=label or str(expr), **kwargs)
        ax.set_xlabel(self.variable)
        return ax

    def plot_metric(self, metric: MetricTensor, ax=None, diagonal_only: bool = True, **kwargs):
        """
        Plot the metric components g_{ij} that are not identically zero.
        """
        if ax is None:
            fig, ax = plt.subplots(figsize=(8, 5))
        n = metric.dimension
        for i in range(n):
            for j in range(i if diagonal_only else 0, i + 1 if diagonal_only else n):
                entry = metric[i, j]
                if entry.simplify().is_zero():
                    continue
                self.plot_expression(entry, ax=ax, label=f"g_{i}{j}", **kwargs)
        ax.set_title("Metric components")
        ax.legend()
        return ax

    def plot_result(self, result: StageResult, ax=None,
                    indices: Optional[Sequence[Tuple[int, ...]]] = None, **kwargs):
        """
        Plot the stored components of a stage result, optionally a subset.
        """
        if ax is None:
            fig, ax = plt.subplots(figsize=(8, 5))
        wanted = {tuple(i) for i in indices} if indices is not None else None
        for component in result.components:
            if wanted is not None and component.indices not in wanted:
                continue
            label = f"{result.kind}{list(component.indices)}"
            self.plot_expression(component.expression, ax=ax, label=label, **kwargs)
        ax.set_title(result.kind.replace("_", " ").capitalize())
        ax.legend()
        return ax

# End of visualization.py
