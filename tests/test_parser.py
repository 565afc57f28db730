import pytest

from mcp_simplex.lp.parser import parse_natural_language_spec
from mcp_simplex.lp.simplex import simplex_solve


def test_parser_outputs_expected_variables():
    spec = "maximize 3x + 2y subject to x + 2y <= 14, 3x - y >= 0, x <= 5, x,y >= 0"
    problem = parse_natural_language_spec(spec)

    assert problem.variable_names == ["x", "y"]
    assert problem.sense == "max"
    assert problem.objective == [3.0, 2.0]
    # Non-negativity bounds are implicit and dropped.
    assert len(problem.constraints) == 3
    assert problem.constraints[1].coefficients == [3.0, -1.0]
    assert problem.constraints[1].cmp == ">="


def test_parsed_problem_solves():
    problem = parse_natural_language_spec(
        "maximize 3x + 2y subject to x + 2y <= 14, 3x - y >= 0, x <= 5"
    )
    solution = simplex_solve(problem)

    assert solution.status == "optimal"
    assert solution.objective_value == pytest.approx(24.0)
    assert solution.x == pytest.approx({"x": 5.0, "y": 4.5})


def test_constants_move_to_rhs_and_equality_normalised():
    problem = parse_natural_language_spec("minimise a + b s.t. a + b + 2 = 6")

    assert problem.sense == "min"
    assert problem.constraints[0].cmp == "=="
    assert problem.constraints[0].rhs == pytest.approx(4.0)


def test_variables_only_in_constraints_get_zero_objective():
    problem = parse_natural_language_spec("max x subject to x + z <= 3")
    assert problem.variable_names == ["x", "z"]
    assert problem.objective == [1.0, 0.0]


@pytest.mark.parametrize(
    "spec",
    [
        "",
        "optimise x subject to x <= 1",
        "maximize subject to x <= 1",
        "maximize x subject to x 4",
        "maximize x",
    ],
)
def test_malformed_specs_raise(spec):
    with pytest.raises(ValueError):
        parse_natural_language_spec(spec)
