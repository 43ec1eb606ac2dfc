import pytest

from tensor_calc.errors import ComputationError
from tensor_calc.metric_tensor import parse_metric
from tensor_calc.solutions import (BoundaryCondition, EinsteinSolution, StressEnergyTensor,
                                   SymmetryType, construct_einstein_field_equations,
                                   einstein_constraint_equations, solve_vacuum_einstein_equations,
                                   verify_einstein_solution)
from tensor_calc.symbolic import Constant, Variable
from tensor_calc.tensor import TensorComponent

COORDS = ["t", "r", "theta", "phi"]


# ---------------- catalog ----------------

def test_spherical_catalog():
    solutions = solve_vacuum_einstein_equations(COORDS, "spherical")
    assert len(solutions) == 2
    schwarzschild, reissner_nordstrom = solutions
    assert schwarzschild.metric.to_strings() == [
        ["-(1 - 2*M/r)", "0", "0", "0"],
        ["0", "1/(1 - 2*M/r)", "0", "0"],
        ["0", "0", "r^2", "0"],
        ["0", "0", "0", "r^2 * sin(theta)^2"],
    ]
    assert schwarzschild.solution_type == "exact"
    assert schwarzschild.constraints_satisfied
    assert schwarzschild.physical_parameters == {"M": Variable("M")}
    assert schwarzschild.solution_domain == "r > 2M"
    assert set(reissner_nordstrom.physical_parameters) == {"M", "Q"}


def test_symmetry_accepts_enum_and_tag():
    by_tag = solve_vacuum_einstein_equations(COORDS, "cosmological")
    by_enum = solve_vacuum_einstein_equations(COORDS, SymmetryType.COSMOLOGICAL)
    assert [s.to_dict() for s in by_tag] == [s.to_dict() for s in by_enum]


def test_cosmological_catalog():
    flat_flrw, de_sitter = solve_vacuum_einstein_equations(COORDS, "cosmological")
    assert flat_flrw.metric.to_strings()[0][0] == "-1"
    assert flat_flrw.metric.to_strings()[1][1] == "a(t)^2"
    assert "Omega_Lambda" in flat_flrw.physical_parameters
    assert de_sitter.to_dict()["physical_parameters"]["Lambda"] == "3*H^2"


def test_axisymmetric_catalog_is_symmetric_kerr():
    (kerr,) = solve_vacuum_einstein_equations(COORDS, "axisymmetric")
    rows = kerr.metric.to_strings()
    assert rows[0][3] == rows[3][0] != "0"
    assert rows[1][2] == "0"


def test_axisymmetric_with_other_dimension_is_empty():
    assert solve_vacuum_einstein_equations(["t", "r", "theta"], "axisymmetric") == []


@pytest.mark.parametrize("tag, message", [
    ("spherical", "Spherical symmetry requires 4D coordinates"),
    ("cosmological", "FLRW metric requires 4D coordinates"),
])
def test_catalog_requires_four_coordinates(tag, message):
    with pytest.raises(ComputationError, match=message):
        solve_vacuum_einstein_equations(["t", "r"], tag)


def test_unknown_symmetry():
    with pytest.raises(ComputationError) as excinfo:
        solve_vacuum_einstein_equations(COORDS, "toroidal")
    assert str(excinfo.value) == "Computation error: Unknown symmetry ansatz: toroidal"


def test_boundary_conditions_do_not_change_catalog():
    bc = BoundaryCondition.from_dict({"coordinate": "r", "value": "1", "condition_type": "asymptotic"})
    assert bc.component_indices == []
    with_bc = solve_vacuum_einstein_equations(COORDS, "spherical", [bc])
    without = solve_vacuum_einstein_equations(COORDS, "spherical")
    assert [s.to_dict() for s in with_bc] == [s.to_dict() for s in without]


def test_solution_to_dict_keys():
    data = solve_vacuum_einstein_equations(COORDS, "spherical")[0].to_dict()
    assert set(data) == {"metric_tensor", "coordinates", "solution_type",
                         "constraints_satisfied", "physical_parameters", "solution_domain"}
    assert data["coordinates"] == COORDS


# ---------------- bookkeeping structures ----------------

def test_stress_energy_round_trip():
    data = {
        "components": [["rho", "0"], ["0", "p"]],
        "tensor_type": "perfect_fluid",
        "parameters": {"w": "0.5"},
    }
    tensor = StressEnergyTensor.from_dict(data)
    assert tensor.components[0][0] == Variable("rho")
    assert tensor.parameters == {"w": Constant(0.5)}
    assert tensor.to_dict() == data


def test_stress_energy_defaults():
    tensor = StressEnergyTensor.from_dict({"components": [["0"]]})
    assert tensor.tensor_type == "vacuum"
    assert tensor.parameters == {}


# ---------------- field equations ----------------

def _two_dimensional_solution(solution_type):
    coords = ["r", "theta"]
    return EinsteinSolution(
        metric=parse_metric([["1", "0"], ["0", "r^2"]], coords),
        coordinates=coords,
        solution_type=solution_type,
        constraints_satisfied=False,
    )


def test_verify_vacuum_always_passes():
    assert verify_einstein_solution(_two_dimensional_solution("unknown"))


@pytest.mark.parametrize("solution_type, expected", [
    ("exact", True),
    ("unknown", False),
    ("numerical", False),
])
def test_verify_with_matter_depends_on_solution_type(solution_type, expected):
    matter = StressEnergyTensor.from_dict({"components": [["rho", "0"], ["0", "p"]]})
    assert verify_einstein_solution(_two_dimensional_solution(solution_type), matter) is expected


def test_construct_field_equations():
    matter = StressEnergyTensor.from_dict({
        "components": [["rho", "0"], ["0", "p"]],
        "parameters": {"rho": "rho"},
    })
    system = construct_einstein_field_equations(matter, ["t", "x"])
    assert [c.indices for c in system.field_equations] == [(0, 0), (0, 1), (1, 0), (1, 1)]
    assert system.field_equations[0].expression == "G_0_0 + 0 * g_0_0 - 8 * pi * T_0_0"
    assert system.unknowns == ["g_0_0", "g_0_1", "g_1_1"]
    assert system.known_parameters == {"rho": Variable("rho")}
    assert system.constraint_equations == []
    assert system.gauge_conditions == []


def test_construct_field_equations_with_lambda():
    matter = StressEnergyTensor.from_dict({"components": [["0"]]})
    system = construct_einstein_field_equations(matter, ["t"], Variable("Lambda"))
    assert system.to_dict()["field_equations"] == [
        {"indices": [0, 0], "expression": "G_0_0 + Lambda * g_0_0 - 8 * pi * T_0_0"},
    ]


def test_constraint_equations():
    g = parse_metric([["-1", "0", "0"], ["0", "1", "0"], ["0", "0", "1"]])
    constraints = einstein_constraint_equations(g, ["t", "x", "y"])
    assert constraints == [
        TensorComponent((), "R + K^2 - K_ij * K^ij - 16 * pi * rho"),
        TensorComponent((0,), "D_j(K^0j - gamma^0j * K) - 8 * pi * j^0"),
        TensorComponent((1,), "D_j(K^1j - gamma^1j * K) - 8 * pi * j^1"),
    ]
