"""
Catalog of exact vacuum solutions and field-equation bookkeeping.

The catalog is pure data: each SymmetryType maps to a builder returning
ready-made metrics. Nothing here solves a PDE, and verify_einstein_solution
is a stub that reports fixed answers instead of substituting the metric back
into the field equations.
"""
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from .curvature import einstein_tensor
from .errors import ComputationError
from .metric_tensor import MetricTensor
from .symbolic import ZERO, Expression, Function, Variable, parse
from .tensor import TensorComponent

logger = logging.getLogger(__name__)


class SymmetryType(Enum):
    SPHERICAL = "spherical"
    COSMOLOGICAL = "cosmological"
    AXISYMMETRIC = "axisymmetric"

    @classmethod
    def from_tag(cls, tag: str) -> 'SymmetryType':
        try:
            return cls(tag)
        except ValueError:
            raise ComputationError(f"Unknown symmetry ansatz: {tag}") from None


# ---------------- Bookkeeping structures ----------------

def _parse_mapping(data: Mapping[str, str]) -> Dict[str, Expression]:
    return {name: parse(text) for name, text in data.items()}


def _format_mapping(data: Mapping[str, Expression]) -> Dict[str, str]:
    return {name: str(expr) for name, expr in data.items()}


@dataclass
class StressEnergyTensor:
    """
    Matter content T_{μν}, carried for display only.

    Attributes:
        components: n x n matrix of Expression.
        tensor_type: "perfect_fluid", "electromagnetic", "vacuum", ...
        parameters: named parameters of the matter model.
    """
    components: List[List[Expression]]
    tensor_type: str = "vacuum"
    parameters: Dict[str, Expression] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'StressEnergyTensor':
        return cls(
            components=[[parse(cell) for cell in row] for row in data["components"]],
            tensor_type=data.get("tensor_type", "vacuum"),
            parameters=_parse_mapping(data.get("parameters", {})),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "components": [[str(cell) for cell in row] for row in self.components],
            "tensor_type": self.tensor_type,
            "parameters": _format_mapping(self.parameters),
        }


@dataclass
class BoundaryCondition:
    coordinate: str
    value: Expression
    condition_type: str  # "dirichlet", "neumann", "asymptotic"
    component_indices: List[int] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'BoundaryCondition':
        return cls(
            coordinate=data["coordinate"],
            value=parse(data["value"]),
            condition_type=data["condition_type"],
            component_indices=[int(i) for i in data.get("component_indices", [])],
        )


@dataclass
class EinsteinSolution:
    metric: MetricTensor
    coordinates: List[str]
    solution_type: str  # "exact", "perturbative", "numerical", "unknown"
    constraints_satisfied: bool
    physical_parameters: Dict[str, Expression] = field(default_factory=dict)
    solution_domain: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "metric_tensor": self.metric.to_strings(),
            "coordinates": list(self.coordinates),
            "solution_type": self.solution_type,
            "constraints_satisfied": self.constraints_satisfied,
            "physical_parameters": _format_mapping(self.physical_parameters),
            "solution_domain": self.solution_domain,
        }


@dataclass
class EinsteinEquationSystem:
    field_equations: List[TensorComponent]
    constraint_equations: List[TensorComponent] = field(default_factory=list)
    gauge_conditions: List[TensorComponent] = field(default_factory=list)
    unknowns: List[str] = field(default_factory=list)
    known_parameters: Dict[str, Expression] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "field_equations": [c.to_dict() for c in self.field_equations],
            "constraint_equations": [c.to_dict() for c in self.constraint_equations],
            "gauge_conditions": [c.to_dict() for c in self.gauge_conditions],
            "unknowns": list(self.unknowns),
            "known_parameters": _format_mapping(self.known_parameters),
        }


# ---------------- Solution catalog ----------------

def _metric_from_entries(entries: Mapping[Tuple[int, int], str], n: int = 4) -> MetricTensor:
    rows = [[ZERO] * n for _ in range(n)]
    for (i, j), text in entries.items():
        rows[i][j] = parse(text)
    return MetricTensor(rows)


def _require_4d(coordinates: Sequence[str], message: str) -> None:
    if len(coordinates) != 4:
        raise ComputationError(message)


def _spherically_symmetric_vacuum(coordinates: List[str],
                                  boundary_conditions: Sequence[BoundaryCondition]
                                  ) -> List[EinsteinSolution]:
    # ds² = -f(r)dt² + h(r)dr² + r²(dθ² + sin²θ dφ²)
    _require_4d(coordinates, "Spherical symmetry requires 4D coordinates [t, r, theta, phi]")
    schwarzschild = EinsteinSolution(
        metric=_metric_from_entries({
            (0, 0): "-(1 - 2*M/r)",
            (1, 1): "1/(1 - 2*M/r)",
            (2, 2): "r^2",
            (3, 3): "r^2 * sin(theta)^2",
        }),
        coordinates=list(coordinates),
        solution_type="exact",
        constraints_satisfied=True,
        physical_parameters={"M": Variable("M")},
        solution_domain="r > 2M",
    )
    reissner_nordstrom = EinsteinSolution(
        metric=_metric_from_entries({
            (0, 0): "-(1 - 2*M/r + Q^2/r^2)",
            (1, 1): "1/(1 - 2*M/r + Q^2/r^2)",
            (2, 2): "r^2",
            (3, 3): "r^2 * sin(theta)^2",
        }),
        coordinates=list(coordinates),
        solution_type="exact",
        constraints_satisfied=True,
        physical_parameters={"M": Variable("M"), "Q": Variable("Q")},
        solution_domain="r > M + sqrt(M^2 - Q^2)",
    )
    return [schwarzschild, reissner_nordstrom]


def _flrw_universe(coordinates: List[str],
                   boundary_conditions: Sequence[BoundaryCondition]) -> List[EinsteinSolution]:
    # ds² = -dt² + a(t)²[dr²/(1-kr²) + r²(dθ² + sin²θ dφ²)]
    _require_4d(coordinates, "FLRW metric requires 4D coordinates [t, r, theta, phi]")
    flat_flrw = EinsteinSolution(
        metric=_metric_from_entries({
            (0, 0): "-1",
            (1, 1): "a(t)^2",
            (2, 2): "a(t)^2 * r^2",
            (3, 3): "a(t)^2 * r^2 * sin(theta)^2",
        }),
        coordinates=list(coordinates),
        solution_type="exact",
        constraints_satisfied=True,
        physical_parameters={
            "a(t)": Function("a", (Variable("t"),)),
            "H": Variable("H"),
            "Omega_m": Variable("Omega_m"),
            "Omega_Lambda": Variable("Omega_Lambda"),
        },
        solution_domain="t > 0, spatial homogeneity",
    )
    de_sitter = EinsteinSolution(
        metric=_metric_from_entries({
            (0, 0): "-1",
            (1, 1): "exp(H*t)^2",
            (2, 2): "exp(H*t)^2 * r^2",
            (3, 3): "exp(H*t)^2 * r^2 * sin(theta)^2",
        }),
        coordinates=list(coordinates),
        solution_type="exact",
        constraints_satisfied=True,
        physical_parameters={"H": Variable("H"), "Lambda": parse("3*H^2")},
        solution_domain="exponential expansion",
    )
    return [flat_flrw, de_sitter]


def _axisymmetric_vacuum(coordinates: List[str],
                         boundary_conditions: Sequence[BoundaryCondition]) -> List[EinsteinSolution]:
    if len(coordinates) != 4:
        return []
    # Simplified Kerr: the full metric has further cross terms.
    cross_term = "-2*M*r*a*sin(theta)^2/(r^2 + a^2*cos(theta)^2)"
    kerr = EinsteinSolution(
        metric=_metric_from_entries({
            (0, 0): "-(1 - 2*M*r/(r^2 + a^2*cos(theta)^2))",
            (1, 1): "(r^2 + a^2*cos(theta)^2)/(r^2 - 2*M*r + a^2)",
            (2, 2): "r^2 + a^2*cos(theta)^2",
            (3, 3): "sin(theta)^2 * (r^2 + a^2 + 2*M*r*a^2*sin(theta)^2/(r^2 + a^2*cos(theta)^2))",
            (0, 3): cross_term,
            (3, 0): cross_term,
        }),
        coordinates=list(coordinates),
        solution_type="exact",
        constraints_satisfied=True,
        physical_parameters={"M": Variable("M"), "a": Variable("a")},
        solution_domain="r > M + sqrt(M^2 - a^2)",
    )
    return [kerr]


_CATALOG: Dict[SymmetryType, Callable[[List[str], Sequence[BoundaryCondition]],
                                      List[EinsteinSolution]]] = {
    SymmetryType.SPHERICAL: _spherically_symmetric_vacuum,
    SymmetryType.COSMOLOGICAL: _flrw_universe,
    SymmetryType.AXISYMMETRIC: _axisymmetric_vacuum,
}


def solve_vacuum_einstein_equations(
    coordinates: Sequence[str],
    symmetry: Union[SymmetryType, str],
    boundary_conditions: Sequence[BoundaryCondition] = ()
) -> List[EinsteinSolution]:
    """
    Look up the known exact solutions for a symmetry ansatz.

    Boundary conditions are accepted for the record and do not select or
    modify the returned solutions.

    Raises:
        ComputationError: unknown symmetry tag, or a coordinate count the
            ansatz cannot use.
    """
    if not isinstance(symmetry, SymmetryType):
        symmetry = SymmetryType.from_tag(symmetry)
    solutions = _CATALOG[symmetry](list(coordinates), boundary_conditions)
    logger.debug("Catalog returned %d %s solution(s)", len(solutions), symmetry.value)
    return solutions


# ---------------- Field equations ----------------

def verify_einstein_solution(
    solution: EinsteinSolution,
    stress_energy: Optional[StressEnergyTensor] = None,
    cosmological_constant: Optional[Expression] = None
) -> bool:
    """
    Placeholder check of G_μν + Λ g_μν = 8π T_μν.

    The Einstein tensor is computed but not substituted into the equations:
    vacuum input always passes, and with matter only "exact" solutions pass.
    """
    einstein = einstein_tensor(solution.metric, solution.coordinates)
    logger.debug("Einstein tensor for verification has %d nonzero components", len(einstein))
    if stress_energy is None:
        return True
    return solution.solution_type == "exact"


def construct_einstein_field_equations(
    stress_energy: StressEnergyTensor,
    coordinates: Sequence[str],
    cosmological_constant: Optional[Expression] = None
) -> EinsteinEquationSystem:
    """
    Write out G_μν + Λ g_μν - 8π T_μν = 0 for every index pair.

    Unknowns are the metric components g_μν with μ <= ν.
    """
    n = len(stress_energy.components)
    lam = cosmological_constant if cosmological_constant is not None else ZERO
    field_equations = [
        TensorComponent((mu, nu), f"G_{mu}_{nu} + {lam} * g_{mu}_{nu} - 8 * pi * T_{mu}_{nu}")
        for mu in range(n) for nu in range(n)
    ]
    unknowns = [f"g_{mu}_{nu}" for mu in range(n) for nu in range(mu, n)]
    return EinsteinEquationSystem(
        field_equations=field_equations,
        unknowns=unknowns,
        known_parameters=dict(stress_energy.parameters),
    )


def einstein_constraint_equations(initial_data: MetricTensor,
                                  coordinates: Sequence[str]) -> List[TensorComponent]:
    """
    Hamiltonian and momentum constraints of the 3+1 initial value problem.
    """
    n = initial_data.dimension
    constraints = [TensorComponent((), "R + K^2 - K_ij * K^ij - 16 * pi * rho")]
    for i in range(n - 1):
        constraints.append(TensorComponent(
            (i,), f"D_j(K^{i}j - gamma^{i}j * K) - 8 * pi * j^{i}"))
    return constraints

# End of solutions.py
