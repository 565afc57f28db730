import logging
from typing import List, Sequence

import numpy as np

from .constraints import ConstraintSet
from .errors import SolverInvariantError
from ..schemas import Sense

logger = logging.getLogger(__name__)

PHASE1_OBJECTIVE_ROW = 0
PHASE2_OBJECTIVE_ROW = 1
FIRST_CONSTRAINT_ROW = 2


class Tableau:
    """
    Dense simplex tableau.

    Layout (rows x columns)::

                      x1 .. xn   s1 .. ss   a1 .. aa  | tgt
        I   (phase 1)                                 |
        II  (phase 2)                                 |
        constraint rows ...                           |

    Decision variables come first, then one slack/surplus column per inequality, then
    one artificial column per == or >= row. The last column is the right-hand side.
    ``basic_variables[row]`` holds the basic column for each constraint row; objective
    rows hold -1.
    """

    def __init__(
        self,
        variable_count: int,
        surplus_variable_count: int,
        artificial_variable_count: int,
        constraint_count: int,
        sense: Sense = "max",
    ) -> None:
        if constraint_count < 1:
            raise ValueError("Must have at least one constraint.")
        if variable_count < 1:
            raise ValueError("Must solve for at least one variable.")

        self.variable_count = variable_count
        self.surplus_variable_count = surplus_variable_count
        self.artificial_variable_count = artificial_variable_count
        self.constraint_count = constraint_count
        self.sense = sense

        self.first_surplus_variable = variable_count
        self.first_artificial_variable = variable_count + surplus_variable_count

        columns = self.first_artificial_variable + artificial_variable_count + 1
        rows = FIRST_CONSTRAINT_ROW + constraint_count
        self.matrix = np.zeros((rows, columns), dtype=float)
        self.basic_variables: List[int] = [-1] * rows
        self.is_phase1 = artificial_variable_count > 0

    @property
    def row_count(self) -> int:
        return self.matrix.shape[0]

    @property
    def column_count(self) -> int:
        return self.matrix.shape[1]

    @property
    def target_column(self) -> int:
        return self.column_count - 1

    @property
    def objective_row(self) -> int:
        return PHASE1_OBJECTIVE_ROW if self.is_phase1 else PHASE2_OBJECTIVE_ROW

    @property
    def constraint_rows(self) -> range:
        return range(FIRST_CONSTRAINT_ROW, self.row_count)

    @property
    def candidate_column_limit(self) -> int:
        """Columns [0, limit) may enter the basis in the current phase."""
        if self.is_phase1:
            return self.target_column
        return self.first_artificial_variable

    def is_artificial(self, column: int) -> bool:
        return self.first_artificial_variable <= column < self.target_column

    def end_phase1(self) -> None:
        self.is_phase1 = False

    def objective_value(self) -> float:
        value = float(self.matrix[PHASE2_OBJECTIVE_ROW, self.target_column])
        return value if self.sense == "max" else -value

    def infeasibility(self) -> float:
        """Remaining artificial mass; zero once phase I has found a feasible basis."""
        return -float(self.matrix[PHASE1_OBJECTIVE_ROW, self.target_column])

    def active_columns(self) -> List[int]:
        columns = list(range(self.candidate_column_limit))
        columns.append(self.target_column)
        return columns

    def active_rows(self) -> List[int]:
        rows = [PHASE2_OBJECTIVE_ROW, *self.constraint_rows]
        if self.is_phase1:
            rows.insert(0, PHASE1_OBJECTIVE_ROW)
        return rows

    def variable_name(self, column: int) -> str:
        if column == self.target_column:
            return "tgt"
        if 0 <= column < self.variable_count:
            return f"x{column + 1}"
        s = column - self.first_surplus_variable
        if 0 <= s < self.surplus_variable_count:
            return f"s{s + 1}"
        a = column - self.first_artificial_variable
        if 0 <= a < self.artificial_variable_count:
            return f"a{a + 1}"
        return "ERR"

    def row_name(self, row: int) -> str:
        if row == PHASE1_OBJECTIVE_ROW:
            return "I"
        if row == PHASE2_OBJECTIVE_ROW:
            return "II"
        return self.variable_name(self.basic_variables[row])

    def check_basis(self, tol: float = 1e-9) -> None:
        """Raise unless the basic columns form a permuted identity with zero reduced costs."""
        from .trace import render_tableau  # local import to avoid cycle

        basic = [self.basic_variables[row] for row in self.constraint_rows]
        if len(set(basic)) != len(basic) or min(basic) < 0:
            raise SolverInvariantError(
                f"Basis is not a set of distinct columns: {basic}", render_tableau(self)
            )
        expected = np.zeros(self.row_count)
        for row in self.constraint_rows:
            column = self.basic_variables[row]
            expected[:] = 0.0
            expected[row] = 1.0
            if not np.allclose(self.matrix[:, column], expected, rtol=0.0, atol=tol):
                logger.error("Basis identity broken at row %s, column %s", row, column)
                raise SolverInvariantError(
                    f"Column {self.variable_name(column)} is basic in row {row} but is not a unit column.",
                    render_tableau(self),
                )


def build_tableau(constraints: ConstraintSet, objective: Sequence[float], sense: Sense = "max") -> Tableau:
    """
    Lay out a two-phase tableau for ``constraints`` and ``objective``.

    Rows with a negative target are negated first, so every initial basic variable
    (slack or artificial) starts at a non-negative value. Both objective rows are then
    reduced against the initial basis.
    """

    if len(constraints) == 0:
        raise ValueError("Must have at least one constraint.")

    variable_count = max(constraints.variable_count, len(objective))
    normalised = [constraint.normalised() for constraint in constraints]
    artificial_count = sum(1 for constraint in normalised if constraint.relation_sign <= 0)

    tableau = Tableau(
        variable_count,
        constraints.surplus_variable_count,
        artificial_count,
        len(constraints),
        sense,
    )
    matrix = tableau.matrix
    next_surplus = tableau.first_surplus_variable
    next_artificial = tableau.first_artificial_variable

    for index, constraint in enumerate(normalised):
        row = FIRST_CONSTRAINT_ROW + index
        matrix[row, : len(constraint.coefficients)] = constraint.coefficients
        if constraint.relation_sign != 0:
            matrix[row, next_surplus] = constraint.relation_sign
            tableau.basic_variables[row] = next_surplus
            next_surplus += 1
        if constraint.relation_sign <= 0:
            matrix[row, next_artificial] = 1.0
            matrix[PHASE1_OBJECTIVE_ROW, next_artificial] = 1.0
            tableau.basic_variables[row] = next_artificial
            next_artificial += 1
        matrix[row, tableau.target_column] = constraint.target

    coefficients = np.asarray(objective, dtype=float)
    # Phase II always maximises; a negative reduced cost means the objective improves.
    matrix[PHASE2_OBJECTIVE_ROW, : coefficients.size] = -coefficients if sense == "max" else coefficients

    for row in tableau.constraint_rows:
        basic = tableau.basic_variables[row]
        for objective_row in (PHASE1_OBJECTIVE_ROW, PHASE2_OBJECTIVE_ROW):
            factor = matrix[objective_row, basic]
            if factor != 0.0:
                matrix[objective_row] -= factor * matrix[row]

    logger.debug(
        "Built tableau: %d constraints, %d variables, %d surplus, %d artificial",
        tableau.constraint_count,
        tableau.variable_count,
        tableau.surplus_variable_count,
        tableau.artificial_variable_count,
    )
    return tableau
