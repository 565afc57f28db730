"""
Stateless operations over a :class:`Tableau`.

Conventions:
 * Matrix addressing is row, column.
 * A negative reduced cost in the driving objective row means the objective improves
   when that column enters the basis.
 * Ties are broken towards the lowest column (entering) and lowest row (leaving).
 * After a run of degenerate pivots the phase loop switches to Bland's rule until the
   objective moves again, so it cannot cycle.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

import numpy as np

from .errors import SolverInvariantError
from .tableau import FIRST_CONSTRAINT_ROW, PHASE1_OBJECTIVE_ROW, Tableau
from .trace import TraceWriter, render_tableau
from ..schemas import PivotRule, SolveOptions

logger = logging.getLogger(__name__)

DEGENERATE_STREAK_LIMIT = 4


class BasicSolutionType(str, Enum):
    UNIQUE = "unique"
    DEGENERATE = "degenerate"
    UNBOUNDED = "unbounded"
    NOT_BASIC = "not_basic"


@dataclass
class PhaseOutcome:
    status: str  # optimal | unbounded
    pivots: int
    unbounded_column: Optional[int] = None


def default_pivot_ceiling(tableau: Tableau) -> int:
    return 50 * tableau.row_count * tableau.column_count


def select_entering(tableau: Tableau, tol: float, rule: PivotRule = "dantzig") -> Optional[int]:
    reduced = tableau.matrix[tableau.objective_row, : tableau.candidate_column_limit]
    if rule == "bland":
        negative = np.flatnonzero(reduced < -tol)
        return int(negative[0]) if negative.size else None
    column = int(np.argmin(reduced))
    if reduced[column] < -tol:
        return column
    return None


def select_leaving(tableau: Tableau, entering: int, tol: float, rule: PivotRule = "dantzig") -> Optional[int]:
    """
    Minimum ratio test over rows with a positive coefficient in ``entering``.

    Equal ratios go to the lowest row, or under Bland's rule to the row whose basic
    variable has the lowest index.
    """
    matrix = tableau.matrix
    target = tableau.target_column
    best_row: Optional[int] = None
    best_ratio = np.inf
    for row in tableau.constraint_rows:
        coefficient = matrix[row, entering]
        if coefficient <= tol:
            continue
        ratio = matrix[row, target] / coefficient
        if best_row is None or ratio < best_ratio - tol:
            best_ratio, best_row = ratio, row
        elif (
            rule == "bland"
            and abs(ratio - best_ratio) <= tol
            and tableau.basic_variables[row] < tableau.basic_variables[best_row]
        ):
            best_ratio, best_row = ratio, row
    return best_row


def pivot(tableau: Tableau, entering: int, leaving_row: int, tol: float, writer: Optional[TraceWriter] = None) -> None:
    """Gauss-Jordan step making ``entering`` basic in ``leaving_row``."""
    leaving = tableau.basic_variables[leaving_row]
    if leaving == entering:
        raise SolverInvariantError(
            "Entering and leaving variables must be different.", render_tableau(tableau)
        )
    if writer is not None:
        writer.write_pivot(tableau, leaving_row, entering)

    matrix = tableau.matrix
    if abs(matrix[leaving_row, tableau.target_column]) <= tol:
        logger.debug("Degenerate pivot: %s leaves at zero", tableau.variable_name(leaving))

    matrix[leaving_row] /= matrix[leaving_row, entering]
    factors = matrix[:, entering].copy()
    factors[leaving_row] = 0.0
    matrix -= np.outer(factors, matrix[leaving_row])
    rhs = matrix[:, tableau.target_column]
    rhs[np.abs(rhs) < tol] = 0.0
    objectives = matrix[:FIRST_CONSTRAINT_ROW]
    objectives[np.abs(objectives) < tol] = 0.0
    matrix[:, entering] = 0.0
    matrix[leaving_row, entering] = 1.0

    tableau.basic_variables[leaving_row] = entering


def optimise(tableau: Tableau, opts: SolveOptions, writer: TraceWriter, max_pivots: int) -> PhaseOutcome:
    """Pivot on the current objective row until no reduced cost is negative."""
    phase = "Phase 1" if tableau.is_phase1 else "Phase 2"
    pivots = 0
    degenerate_streak = 0
    while True:
        rule = opts.pivot_rule
        if degenerate_streak >= DEGENERATE_STREAK_LIMIT:
            rule = "bland"
        entering = select_entering(tableau, opts.tol, rule)
        if entering is None:
            return PhaseOutcome("optimal", pivots)

        leaving_row = select_leaving(tableau, entering, opts.tol, rule)
        if leaving_row is None:
            if tableau.is_phase1:
                logger.error("Phase 1 objective unbounded on column %s", entering)
                raise SolverInvariantError(
                    f"Phase 1 found no leaving row for {tableau.variable_name(entering)}.",
                    render_tableau(tableau),
                )
            logger.debug("No leaving row for %s: unbounded", tableau.variable_name(entering))
            return PhaseOutcome("unbounded", pivots, unbounded_column=entering)

        if pivots >= max_pivots:
            logger.error("%s exceeded the pivot ceiling of %d", phase, max_pivots)
            raise SolverInvariantError(
                f"{phase} exceeded the pivot ceiling of {max_pivots}.", render_tableau(tableau)
            )

        if abs(tableau.matrix[leaving_row, tableau.target_column]) <= opts.tol:
            degenerate_streak += 1
            if degenerate_streak == DEGENERATE_STREAK_LIMIT and rule != "bland":
                logger.debug("%s: %d degenerate pivots, switching to Bland's rule", phase, degenerate_streak)
        else:
            degenerate_streak = 0

        pivot(tableau, entering, leaving_row, opts.tol, writer)
        pivots += 1
        if opts.check_invariants:
            tableau.check_basis(opts.tol)
        writer.write_tableau(f"{phase}, step", tableau)


def end_phase1(tableau: Tableau, opts: SolveOptions, writer: TraceWriter) -> Optional[int]:
    """
    Close phase I. Returns the number of clean-up pivots, or None when infeasible.

    Artificial variables still basic (at zero) are pivoted out on the non-artificial
    column with the largest entry in their row. Rows with no such entry are redundant and
    keep their artificial as a degenerate basic variable.
    """
    if tableau.infeasibility() > opts.feasibility_tol:
        logger.info("Phase 1 residual %.6g: infeasible", tableau.infeasibility())
        return None

    matrix = tableau.matrix
    matrix[PHASE1_OBJECTIVE_ROW, tableau.target_column] = 0.0
    pivots = 0
    for row in tableau.constraint_rows:
        if not tableau.is_artificial(tableau.basic_variables[row]):
            continue
        matrix[row, tableau.target_column] = 0.0
        entries = np.abs(matrix[row, : tableau.first_artificial_variable])
        column = int(np.argmax(entries))
        if entries[column] <= opts.tol:
            logger.debug("Row %d is redundant; keeping %s basic", row, tableau.row_name(row))
            continue
        pivot(tableau, column, row, opts.tol, writer)
        pivots += 1
        if opts.check_invariants:
            tableau.check_basis(opts.tol)

    tableau.end_phase1()
    return pivots


def try_get_basic_solution(tableau: Tableau, column: int, tol: float = 1e-9) -> Tuple[BasicSolutionType, float]:
    for row in tableau.constraint_rows:
        if tableau.basic_variables[row] != column:
            continue
        value = float(tableau.matrix[row, tableau.target_column])
        if abs(value) <= tol:
            return BasicSolutionType.DEGENERATE, 0.0
        return BasicSolutionType.UNIQUE, value
    return BasicSolutionType.NOT_BASIC, 0.0


def collect_solution(tableau: Tableau, tol: float = 1e-9) -> np.ndarray:
    solution = np.zeros(tableau.variable_count)
    for row in tableau.constraint_rows:
        basic = tableau.basic_variables[row]
        if basic < tableau.variable_count:
            _, solution[basic] = try_get_basic_solution(tableau, basic, tol)
    return solution


def has_alternate_optima(tableau: Tableau, tol: float = 1e-9) -> bool:
    """True when a non-basic, non-artificial column has a zero reduced cost."""
    basic = set(tableau.basic_variables)
    reduced = tableau.matrix[tableau.objective_row]
    return any(
        abs(reduced[column]) <= tol
        for column in range(tableau.first_artificial_variable)
        if column not in basic
    )
