"""Two-phase tableau simplex for MCP Simplex."""

from .constraints import Constraint, ConstraintSet, linear
from .diagnostics import analyze_infeasibility
from .errors import SolverInvariantError
from .parser import parse_natural_language_spec
from .pivot import BasicSolutionType
from .simplex import SimplexSolver, run_simplex, simplex_solve, solve
from .tableau import Tableau, build_tableau
from .trace import TraceWriter, render_tableau

__all__ = [
    "BasicSolutionType",
    "Constraint",
    "ConstraintSet",
    "SimplexSolver",
    "SolverInvariantError",
    "Tableau",
    "TraceWriter",
    "analyze_infeasibility",
    "build_tableau",
    "linear",
    "parse_natural_language_spec",
    "render_tableau",
    "run_simplex",
    "simplex_solve",
    "solve",
]
