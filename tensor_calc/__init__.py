"""tensor_calc/ # root package
├── __init__.py # imports and version info
├── errors.py # TensorError hierarchy
├── symbolic.py # Expression tree: parse, simplify, derivative, format
├── metric_tensor.py # MetricTensor, parse_metric, invert
├── tensor.py # TensorComponent and sparse stage results
├── curvature.py # Christoffel -> Riemann -> Ricci -> scalar -> Einstein
├── solutions.py # exact-solution catalog, field-equation bookkeeping
├── latex_exporter.py # LaTeX export utilities
├── visualization.py # matplotlib plots of components
└── cli.py # tensor-calc command line"""

# tensor_calc/__init__.py
"""
tensor_calc: symbolic curvature tensors from a textual spacetime metric.

Modules:
  symbolic        - Expression algebra (parse, simplify, derivative, format)
  metric_tensor   - MetricTensor, parse_metric and the symbolic inverse
  tensor          - TensorComponent and sparse stage results
  curvature       - Christoffel, Riemann, Ricci, Ricci scalar, Einstein stages
  solutions       - Catalog of exact vacuum solutions and field equations
  latex_exporter  - Utilities to export results to LaTeX
  visualization   - Numeric plots of metric and curvature components
  cli             - JSON command-line interface

Usage:
  from tensor_calc import parse_metric, CurvatureCalculator
"""
__version__ = "0.1.0"

# core imports
from .errors import TensorError, InvalidMetricError, ComputationError, JsonError
from .symbolic import (Expression, Zero, One, ZERO, ONE, Variable, Constant, Add, Subtract,
                       Multiply, Divide, Power, Function, parse, sympify_text)
from .metric_tensor import MetricTensor, parse_metric, invert
from .tensor import (TensorComponent, StageResult, ChristoffelResult, RiemannResult,
                     RicciResult, EinsteinResult)
from .curvature import (christoffel_symbols, riemann_tensor, ricci_tensor, ricci_scalar,
                        einstein_tensor, CurvatureCalculator)
from .solutions import (SymmetryType, EinsteinSolution, StressEnergyTensor, BoundaryCondition,
                        EinsteinEquationSystem, solve_vacuum_einstein_equations,
                        verify_einstein_solution, construct_einstein_field_equations,
                        einstein_constraint_equations)
from .latex_exporter import LaTeXExporter

# package-level shortcuts
__all__ = [
    "TensorError", "InvalidMetricError", "ComputationError", "JsonError",
    "Expression", "Zero", "One", "ZERO", "ONE", "Variable", "Constant", "Add", "Subtract",
    "Multiply", "Divide", "Power", "Function", "parse", "sympify_text",
    "MetricTensor", "parse_metric", "invert",
    "TensorComponent", "StageResult", "ChristoffelResult", "RiemannResult",
    "RicciResult", "EinsteinResult",
    "christoffel_symbols", "riemann_tensor", "ricci_tensor", "ricci_scalar",
    "einstein_tensor", "CurvatureCalculator",
    "SymmetryType", "EinsteinSolution", "StressEnergyTensor", "BoundaryCondition",
    "EinsteinEquationSystem", "solve_vacuum_einstein_equations", "verify_einstein_solution",
    "construct_einstein_field_equations", "einstein_constraint_equations",
    "LaTeXExporter",
]
