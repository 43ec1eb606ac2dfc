"""
Command-line interface: ``tensor-calc <command> --metric JSON --coords JSON``.

Every command prints one JSON envelope

    {"result_type": ..., "data": ..., "coordinates": [...], "success": ..., "error": ...}

and exits with status 0 on success, 1 on failure.
"""
import argparse
import json
import logging
import sys
from typing import Any, Callable, Dict, List, Optional, Sequence

from .curvature import (christoffel_symbols, einstein_tensor, ricci_scalar, ricci_tensor,
                        riemann_tensor)
from .errors import JsonError, TensorError
from .metric_tensor import parse_metric
from .solutions import (BoundaryCondition, EinsteinSolution, StressEnergyTensor,
                        construct_einstein_field_equations, solve_vacuum_einstein_equations,
                        verify_einstein_solution)
from .symbolic import parse

logger = logging.getLogger(__name__)


def _load_json(text: str, what: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise JsonError(f"{what}: {exc}") from exc


def _load_metric(text: str) -> List[List[str]]:
    metric = _load_json(text, "metric")
    if not isinstance(metric, list) or not all(
            isinstance(row, list) and all(isinstance(cell, str) for cell in row) for row in metric):
        raise JsonError("metric: expected a two-dimensional array of strings")
    return metric


def _load_coords(text: str) -> List[str]:
    coords = _load_json(text, "coords")
    if not isinstance(coords, list) or not all(isinstance(c, str) for c in coords):
        raise JsonError("coords: expected an array of strings")
    return coords


def _load_object(text: str, what: str, factory: Callable[[Dict[str, Any]], Any]) -> Any:
    data = _load_json(text, what)
    try:
        return factory(data)
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        raise JsonError(f"{what}: {exc!r}") from exc


def envelope(result_type: str, data: Any, coordinates: Sequence[str]) -> Dict[str, Any]:
    return {
        "result_type": result_type,
        "data": data,
        "coordinates": list(coordinates),
        "success": True,
        "error": None,
    }


def error_envelope(error: Exception) -> Dict[str, Any]:
    return {
        "result_type": "error",
        "data": None,
        "coordinates": [],
        "success": False,
        "error": str(error),
    }


# ---------------- Commands ----------------

_STAGES = {
    "christoffel": christoffel_symbols,
    "riemann": riemann_tensor,
    "ricci": ricci_tensor,
    "ricci-scalar": ricci_scalar,
    "einstein": einstein_tensor,
}

_RESULT_TYPES = {
    "christoffel": "christoffel_symbols",
    "riemann": "riemann_tensor",
    "ricci": "ricci_tensor",
    "ricci-scalar": "ricci_scalar",
    "einstein": "einstein_tensor",
}


def run_stage(args: argparse.Namespace) -> Dict[str, Any]:
    coords = _load_coords(args.coords)
    metric = parse_metric(_load_metric(args.metric), coords)
    result = _STAGES[args.command](metric, coords)
    return envelope(_RESULT_TYPES[args.command], result.to_dict(), coords)


def run_solve_vacuum(args: argparse.Namespace) -> Dict[str, Any]:
    coords = _load_coords(args.coords)
    boundary_conditions: List[BoundaryCondition] = []
    if args.boundary_conditions:
        boundary_conditions = _load_object(
            args.boundary_conditions, "boundary_conditions",
            lambda data: [BoundaryCondition.from_dict(item) for item in data])
    solutions = solve_vacuum_einstein_equations(coords, args.symmetry, boundary_conditions)
    return envelope("vacuum_solutions", [s.to_dict() for s in solutions], coords)


def run_verify_solution(args: argparse.Namespace) -> Dict[str, Any]:
    coords = _load_coords(args.coords)
    metric = parse_metric(_load_metric(args.metric), coords)
    stress_energy = None
    if args.stress_energy:
        stress_energy = _load_object(args.stress_energy, "stress_energy", StressEnergyTensor.from_dict)
    lam = parse(args.lambda_) if args.lambda_ is not None else None
    solution = EinsteinSolution(
        metric=metric,
        coordinates=coords,
        solution_type="unknown",
        constraints_satisfied=False,
        solution_domain="to be determined",
    )
    is_valid = verify_einstein_solution(solution, stress_energy, lam)
    return envelope("solution_verification", is_valid, coords)


def run_construct_equations(args: argparse.Namespace) -> Dict[str, Any]:
    stress_energy = _load_object(args.stress_energy, "stress_energy", StressEnergyTensor.from_dict)
    coords = _load_coords(args.coords)
    lam = parse(args.lambda_) if args.lambda_ is not None else None
    system = construct_einstein_field_equations(stress_energy, coords, lam)
    return envelope("einstein_equations", system.to_dict(), coords)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tensor-calc", description="A CLI tool for symbolic tensor calculus")
    parser.add_argument('-v', '--verbose', action='store_true',
                        help="Log pipeline progress to stderr.")
    parser.add_argument('--indent', type=int, default=2,
                        help="Indentation of the JSON output.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    stage_help = {
        "christoffel": "Compute Christoffel symbols from a metric tensor",
        "riemann": "Compute Riemann curvature tensor",
        "ricci": "Compute Ricci tensor",
        "ricci-scalar": "Compute Ricci scalar",
        "einstein": "Compute Einstein tensor",
    }
    for name, help_text in stage_help.items():
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument('--metric', required=True, help="Metric tensor in JSON format")
        sub.add_argument('--coords', required=True, help="Coordinate variables in JSON array format")
        sub.set_defaults(handler=run_stage)

    sub = subparsers.add_parser('solve-vacuum', help="Solve Einstein field equations for vacuum spacetimes")
    sub.add_argument('--coords', required=True, help="Coordinate variables in JSON array format")
    sub.add_argument('--symmetry', required=True,
                     help='Symmetry ansatz: "spherical", "cosmological", "axisymmetric"')
    sub.add_argument('--boundary-conditions', default=None, help="Boundary conditions in JSON format")
    sub.set_defaults(handler=run_solve_vacuum)

    sub = subparsers.add_parser('verify-solution', help="Verify that a metric solves Einstein field equations")
    sub.add_argument('--metric', required=True, help="Metric tensor in JSON format")
    sub.add_argument('--coords', required=True, help="Coordinate variables in JSON array format")
    sub.add_argument('--stress-energy', default=None, help="Stress-energy tensor in JSON format")
    sub.add_argument('--lambda', dest='lambda_', default=None, help="Cosmological constant")
    sub.set_defaults(handler=run_verify_solution)

    sub = subparsers.add_parser('construct-equations', help="Construct Einstein field equation system")
    sub.add_argument('--stress-energy', required=True, help="Stress-energy tensor in JSON format")
    sub.add_argument('--coords', required=True, help="Coordinate variables in JSON array format")
    sub.add_argument('--lambda', dest='lambda_', default=None, help="Cosmological constant")
    sub.set_defaults(handler=run_construct_equations)
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    try:
        result = args.handler(args)
        status = 0
    except TensorError as exc:
        logger.debug("Command %s failed: %s", args.command, exc)
        result = error_envelope(exc)
        status = 1
    print(json.dumps(result, indent=args.indent, ensure_ascii=False))
    return status


if __name__ == "__main__":
    sys.exit(main())
