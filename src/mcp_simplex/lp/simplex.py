import logging
from typing import Dict, List, Optional, Sequence, Union

from .constraints import ConstraintSet
from .pivot import (
    BasicSolutionType,
    collect_solution,
    default_pivot_ceiling,
    end_phase1,
    has_alternate_optima,
    optimise,
    try_get_basic_solution,
)
from .tableau import Tableau, build_tableau
from .trace import TraceSink, TraceWriter
from ..schemas import LinearProgram, LPSolution, Sense, SolveOptions

logger = logging.getLogger(__name__)

Trace = Union[TraceWriter, TraceSink, None]


def simplex_solve(problem: LinearProgram, opts: Optional[SolveOptions] = None, trace: Trace = None) -> LPSolution:
    """Solve a wire-format :class:`LinearProgram` with the two-phase tableau simplex."""
    return solve(
        problem.to_constraint_set(),
        problem.objective,
        problem.sense,
        opts,
        trace,
        variable_names=problem.variable_names,
    )


def solve(
    constraints: ConstraintSet,
    objective: Sequence[float],
    sense: Sense = "max",
    options: Optional[SolveOptions] = None,
    trace: Trace = None,
    variable_names: Optional[Sequence[str]] = None,
) -> LPSolution:
    tableau = build_tableau(constraints, objective, sense)
    return run_simplex(tableau, options, trace, variable_names)


def run_simplex(
    tableau: Tableau,
    opts: Optional[SolveOptions] = None,
    trace: Trace = None,
    variable_names: Optional[Sequence[str]] = None,
) -> LPSolution:
    """
    Drive ``tableau`` through phase I (if still active) and phase II, in place.

    Calling this again on a tableau that is already optimal performs no pivots and
    reports the same solution.
    """

    opts = opts or SolveOptions()
    writer = TraceWriter.wrap(trace)
    names = _variable_names(tableau, variable_names)
    ceiling = opts.max_pivots if opts.max_pivots is not None else default_pivot_ceiling(tableau)

    phase1_pivots = 0
    if tableau.is_phase1:
        writer.write_tableau("Phase 1, start", tableau)
        phase1 = optimise(tableau, opts, writer, ceiling)
        cleanup = end_phase1(tableau, opts, writer)
        if cleanup is None:
            writer.write("Phase 1, end: infeasible")
            return LPSolution(
                status="infeasible",
                objective_value=None,
                values=None,
                x=None,
                basis=_basis_report(tableau, opts),
                pivots=phase1.pivots,
                phase1_pivots=phase1.pivots,
                message=f"Infeasible: artificial variables sum to {tableau.infeasibility():.6g} at the end of phase I.",
            )
        phase1_pivots = phase1.pivots + cleanup
        logger.debug("Phase 1 finished after %d pivots", phase1_pivots)

    writer.write_tableau("Phase 2, start", tableau)
    phase2 = optimise(tableau, opts, writer, max(ceiling - phase1_pivots, 0))
    pivots = phase1_pivots + phase2.pivots
    writer.write("Phase 2, end")

    if phase2.status == "unbounded":
        basis = _basis_report(tableau, opts)
        ray = tableau.variable_name(phase2.unbounded_column)
        basis[ray] = BasicSolutionType.UNBOUNDED.value
        logger.info("Unbounded after %d pivots (ray along %s)", pivots, ray)
        return LPSolution(
            status="unbounded",
            objective_value=None,
            values=None,
            x=None,
            basis=basis,
            pivots=pivots,
            phase1_pivots=phase1_pivots,
            message=f"Unbounded: objective improves without limit along {ray}.",
        )

    values = [float(v) for v in collect_solution(tableau, opts.tol)]
    alternate = has_alternate_optima(tableau, opts.tol)
    objective_value = tableau.objective_value()
    logger.info("Optimal objective %.6g after %d pivots", objective_value, pivots)
    return LPSolution(
        status="optimal",
        objective_value=objective_value,
        values=values,
        x=dict(zip(names, values)),
        basis=_basis_report(tableau, opts),
        alternate_optima=alternate,
        pivots=pivots,
        phase1_pivots=phase1_pivots,
        message="Optimal solution is not unique." if alternate else "",
    )


class SimplexSolver:
    """Fluent entry point: ``SimplexSolver.given(constraints).maximise(3, 1)``."""

    def __init__(self, constraints: ConstraintSet, trace: Trace = None, options: Optional[SolveOptions] = None) -> None:
        self.constraints = constraints
        self.trace = trace
        self.options = options

    @classmethod
    def given(cls, constraints: ConstraintSet, trace: Trace = None, options: Optional[SolveOptions] = None) -> "SimplexSolver":
        return cls(constraints, trace, options)

    def maximise(self, *coefficients: float) -> LPSolution:
        return solve(self.constraints, coefficients, "max", self.options, self.trace)

    def minimise(self, *coefficients: float) -> LPSolution:
        return solve(self.constraints, coefficients, "min", self.options, self.trace)


def _variable_names(tableau: Tableau, names: Optional[Sequence[str]]) -> List[str]:
    if names is None:
        return [tableau.variable_name(i) for i in range(tableau.variable_count)]
    if len(names) != tableau.variable_count:
        raise ValueError(
            f"Expected {tableau.variable_count} variable names, got {len(names)}."
        )
    return list(names)


def _basis_report(tableau: Tableau, opts: SolveOptions) -> Dict[str, str]:
    report: Dict[str, str] = {}
    for row in tableau.constraint_rows:
        column = tableau.basic_variables[row]
        kind, _ = try_get_basic_solution(tableau, column, opts.tol)
        report[tableau.variable_name(column)] = kind.value
    return report
