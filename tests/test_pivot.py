import numpy as np
import pytest

from mcp_simplex.lp.constraints import ConstraintSet, linear
from mcp_simplex.lp.pivot import (
    BasicSolutionType,
    collect_solution,
    has_alternate_optima,
    pivot,
    select_entering,
    select_leaving,
    try_get_basic_solution,
)
from mcp_simplex.lp.tableau import FIRST_CONSTRAINT_ROW, PHASE2_OBJECTIVE_ROW, build_tableau


def make_box_tableau():
    # maximise x1 + x2 subject to x1 + x2 <= 4, x1 <= 3, x2 <= 2
    constraints = ConstraintSet(
        [
            linear(1, 1).less_or_equal(4),
            linear(1).less_or_equal(3),
            linear(0, 1).less_or_equal(2),
        ]
    )
    return build_tableau(constraints, [1, 1])


def test_entering_prefers_lowest_index_on_ties():
    tableau = make_box_tableau()
    assert select_entering(tableau, 1e-9) == 0
    assert select_entering(tableau, 1e-9, rule="bland") == 0


def test_entering_picks_most_negative_reduced_cost():
    tableau = build_tableau(ConstraintSet([linear(1, 1).less_or_equal(4)]), [1, 3])
    assert select_entering(tableau, 1e-9) == 1
    assert select_entering(tableau, 1e-9, rule="bland") == 0


def test_leaving_uses_minimum_ratio():
    tableau = make_box_tableau()
    # Ratios for x1: 4/1 and 3/1; the third row has no x1 coefficient.
    assert select_leaving(tableau, 0, 1e-9) == FIRST_CONSTRAINT_ROW + 1


def test_leaving_ties_go_to_lowest_row():
    constraints = ConstraintSet([linear(1, 0).less_or_equal(2), linear(2, 1).less_or_equal(4)])
    tableau = build_tableau(constraints, [1, 1])
    assert select_leaving(tableau, 0, 1e-9) == FIRST_CONSTRAINT_ROW


def test_leaving_none_without_positive_coefficient():
    tableau = build_tableau(ConstraintSet([linear(1, -1).less_or_equal(1)]), [1, 0])
    assert select_leaving(tableau, 1, 1e-9) is None


def test_pivot_keeps_identity_and_updates_basis():
    tableau = make_box_tableau()
    row = FIRST_CONSTRAINT_ROW + 1
    pivot(tableau, 0, row, 1e-9)

    assert tableau.basic_variables[row] == 0
    tableau.check_basis()
    np.testing.assert_allclose(tableau.matrix[PHASE2_OBJECTIVE_ROW], [0, -1, 0, 1, 0, 3])
    np.testing.assert_allclose(tableau.matrix[FIRST_CONSTRAINT_ROW], [0, 1, 1, -1, 0, 1])


def test_basic_solution_types():
    constraints = ConstraintSet([linear(1, 1).less_or_equal(4), linear(1, -1).less_or_equal(0)])
    tableau = build_tableau(constraints, [1, 1])

    assert try_get_basic_solution(tableau, 2) == (BasicSolutionType.UNIQUE, 4.0)
    assert try_get_basic_solution(tableau, 3) == (BasicSolutionType.DEGENERATE, 0.0)
    assert try_get_basic_solution(tableau, 0) == (BasicSolutionType.NOT_BASIC, 0.0)


def test_collect_solution_and_alternate_optima():
    tableau = make_box_tableau()
    pivot(tableau, 0, FIRST_CONSTRAINT_ROW + 1, 1e-9)
    pivot(tableau, 1, FIRST_CONSTRAINT_ROW, 1e-9)

    np.testing.assert_allclose(collect_solution(tableau), [3, 1])
    assert tableau.objective_value() == pytest.approx(4.0)
    assert select_entering(tableau, 1e-9) is None
    assert has_alternate_optima(tableau)


def test_pivot_keeps_small_constraint_coefficients():
    constraints = ConstraintSet([linear(1, 0).less_or_equal(2), linear(1, 1e-12).less_or_equal(3)])
    tableau = build_tableau(constraints, [1, 1])
    pivot(tableau, 0, FIRST_CONSTRAINT_ROW, 1e-9)

    assert tableau.matrix[FIRST_CONSTRAINT_ROW + 1, 1] == pytest.approx(1e-12, rel=1e-6, abs=0)
    assert tableau.matrix[FIRST_CONSTRAINT_ROW + 1, tableau.target_column] == pytest.approx(1.0)
