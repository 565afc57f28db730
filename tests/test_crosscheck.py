"""Random problems solved against SciPy's HiGHS as a reference."""

import random

import numpy as np
import pytest
from scipy.optimize import linprog

from mcp_simplex.lp.constraints import ConstraintSet, linear
from mcp_simplex.lp.simplex import solve
from mcp_simplex.schemas import SolveOptions


def make_case(seed: int):
    rng = random.Random(seed)
    variable_count = rng.randrange(2, 5)
    constraint_count = variable_count + rng.randrange(-1, 1)
    rows = []
    for _ in range(constraint_count):
        coefficients = [rng.randrange(-5, 10) for _ in range(variable_count)]
        kind = rng.randrange(-2, 3)
        if kind < 0:
            rows.append((coefficients, "<=", rng.randrange(0, 20)))
        elif kind == 0:
            rows.append((coefficients, "==", rng.randrange(0, 10)))
        else:
            rows.append((coefficients, ">=", rng.randrange(0, 20)))
    objective = [rng.randrange(-5, 10) for _ in range(variable_count)]
    sense = "max" if rng.random() < 0.5 else "min"
    return rows, objective, sense


def reference(rows, objective, sense):
    a_ub, b_ub, a_eq, b_eq = [], [], [], []
    for coefficients, cmp, rhs in rows:
        if cmp == "<=":
            a_ub.append(coefficients)
            b_ub.append(rhs)
        elif cmp == ">=":
            a_ub.append([-c for c in coefficients])
            b_ub.append(-rhs)
        else:
            a_eq.append(coefficients)
            b_eq.append(rhs)
    sense_factor = -1.0 if sense == "max" else 1.0

    def run(c):
        return linprog(
            c,
            A_ub=a_ub or None,
            b_ub=b_ub or None,
            A_eq=a_eq or None,
            b_eq=b_eq or None,
            bounds=[(0, None)] * len(objective),
            method="highs",
        )

    # HiGHS may report "infeasible or unbounded"; a zero objective settles feasibility.
    if run(np.zeros(len(objective))).status != 0:
        return "infeasible", None
    result = run(sense_factor * np.asarray(objective, dtype=float))
    if result.status == 0:
        return "optimal", sense_factor * result.fun
    return "unbounded", None


def build(rows) -> ConstraintSet:
    constraints = ConstraintSet()
    for coefficients, cmp, rhs in rows:
        builder = linear(*coefficients)
        if cmp == "<=":
            constraints.add(builder.less_or_equal(rhs))
        elif cmp == ">=":
            constraints.add(builder.greater_or_equal(rhs))
        else:
            constraints.add(builder.equal_to(rhs))
    return constraints


@pytest.mark.parametrize("seed", range(60))
def test_matches_highs(seed):
    rows, objective, sense = make_case(seed)
    expected_status, expected_objective = reference(rows, objective, sense)
    solution = solve(build(rows), objective, sense, SolveOptions(pivot_rule="bland"))

    assert solution.status == expected_status
    if solution.status == "optimal":
        assert solution.objective_value == pytest.approx(expected_objective, rel=1e-6, abs=1e-6)
        values = np.asarray(solution.values)
        assert (values >= -1e-9).all()
        for coefficients, cmp, rhs in rows:
            lhs = float(np.dot(coefficients, values))
            if cmp == "<=":
                assert lhs <= rhs + 1e-6
            elif cmp == ">=":
                assert lhs >= rhs - 1e-6
            else:
                assert lhs == pytest.approx(rhs, abs=1e-6)
