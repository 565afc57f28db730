import logging
from typing import Any, Dict, List

from .simplex import simplex_solve
from ..schemas import LinearProgram, SolveOptions

logger = logging.getLogger(__name__)


def analyze_infeasibility(problem: LinearProgram, opts: SolveOptions | None = None) -> Dict[str, Any]:
    """Very small IIS-style heuristic: drop each constraint and re-solve."""

    opts = opts or SolveOptions()
    solution = simplex_solve(problem, opts)
    if solution.status != "infeasible":
        return {
            "status": solution.status,
            "message": solution.message or "Problem is not infeasible.",
            "conflicting_constraints": [],
            "suggestions": [],
        }

    names = problem.constraint_names()
    conflicts: List[str] = []
    for idx, name in enumerate(names):
        relaxed = problem.model_copy(deep=True)
        relaxed.constraints.pop(idx)
        if not relaxed.constraints:
            # Non-negativity alone is always feasible.
            conflicts.append(name)
            continue
        sub_solution = simplex_solve(relaxed, opts)
        if sub_solution.status != "infeasible":
            conflicts.append(name)

    logger.info("Infeasibility analysis of %s: %s", problem.name, conflicts or "no single culprit")
    suggestions = []
    if conflicts:
        suggestions.append("Relax or inspect the conflicting constraints above.")
    else:
        suggestions.append("No single constraint explains the conflict; check groups of constraints.")

    return {
        "status": "infeasible",
        "message": solution.message,
        "conflicting_constraints": conflicts,
        "suggestions": suggestions,
    }
