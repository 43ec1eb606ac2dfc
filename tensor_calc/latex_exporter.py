from typing import List

import sympy as sp

from .metric_tensor import MetricTensor
from .symbolic import Expression, sympify_text
from .tensor import StageResult, TensorComponent


def _latex(text: str) -> str:
    return sp.latex(sympify_text(text))


class LaTeXExporter:
    """
    Consolidate LaTeX export for the objects of the tensor_calc package.

    Components are stored as text, so each one is re-read with sympy's
    parser (sympify_text) before rendering.

    Methods:
      - metric            : export metric matrices
      - christoffel       : export Christoffel symbols
      - riemann_tensor    : export Riemann curvature components
      - ricci_tensor      : export Ricci tensor components
      - ricci_scalar      : export the Ricci scalar
      - einstein_tensor   : export Einstein tensor components
      - general           : export any Expression
    """

    @staticmethod
    def _write(filename: str, lines: List[str]) -> None:
        with open(filename, 'w') as f:
            f.write("\n".join(lines))

    @staticmethod
    def component_lines(result: StageResult, symbol: str,
                        upper: int = 1) -> List[str]:
        """
        One LaTeX line per stored component, e.g. ``\\Gamma^{0}_{11} = ...``.

        ``upper`` is how many leading indices are contravariant.
        """
        lines: List[str] = []
        for component in result.components:
            idx = [str(i) for i in component.indices]
            head = f"^{{{''.join(idx[:upper])}}}" if upper else ""
            tail = f"_{{{''.join(idx[upper:])}}}"
            lines.append(rf"{symbol}{head}{tail} = {_latex(component.expression)} \\")
        return lines

    @staticmethod
    def metric(metric: MetricTensor, filename: str) -> None:
        """
        Export a metric matrix g_{ij} to a .tex file.
        """
        LaTeXExporter._write(filename, [r"\[", metric.to_latex(), r"\]"])

    @staticmethod
    def christoffel(result: StageResult, filename: str) -> None:
        """
        Export nonzero Christoffel symbols Γ^k_{ij}.
        """
        LaTeXExporter._write(filename, LaTeXExporter.component_lines(result, r"\Gamma"))

    @staticmethod
    def riemann_tensor(result: StageResult, filename: str) -> None:
        """
        Export nonzero Riemann tensor components R^i_{jkl}.
        """
        LaTeXExporter._write(filename, LaTeXExporter.component_lines(result, "R"))

    @staticmethod
    def ricci_tensor(result: StageResult, filename: str) -> None:
        LaTeXExporter._write(filename, LaTeXExporter.component_lines(result, "R", upper=0))

    @staticmethod
    def ricci_scalar(scalar: TensorComponent, filename: str) -> None:
        LaTeXExporter._write(filename, [rf"R = {_latex(scalar.expression)}"])

    @staticmethod
    def einstein_tensor(result: StageResult, filename: str) -> None:
        LaTeXExporter._write(filename, LaTeXExporter.component_lines(result, "G", upper=0))

    @staticmethod
    def general(expr: Expression, filename: str) -> None:
        """
        Export any expression to LaTeX.
        """
        LaTeXExporter._write(filename, [r"\[", expr.to_latex(), r"\]"])

# End of latex_exporter.py
