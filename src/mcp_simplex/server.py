import logging
import os
import sys

from mcp.server.fastmcp import FastMCP
from mcp.server.transport_security import TransportSecuritySettings

from .schemas import LinearProgram, SolveOptions
from .lp.simplex import simplex_solve, run_simplex
from .lp.parser import parse_natural_language_spec
from .lp.diagnostics import analyze_infeasibility as analyze_infeasibility_problem
from .lp.errors import SolverInvariantError
from .lp.tableau import build_tableau

logger = logging.getLogger(__name__)

mcp = FastMCP("MCP Simplex")


@mcp.tool()
def solve_lp(problem: LinearProgram, options: SolveOptions | None = None) -> dict:
    "Solve a linear program via the two-phase tableau simplex and return the solution dict."
    opts = options or SolveOptions()
    try:
        return simplex_solve(problem, opts).model_dump()
    except (ValueError, SolverInvariantError) as exc:
        logger.warning("solve_lp failed: %s", exc)
        return {"error": f"Failed to solve problem: {exc}", "solution": None}


@mcp.tool()
def parse_nl_to_lp(spec: str) -> dict:
    "Parse a small natural-language spec into a structured LinearProgram JSON."
    try:
        return parse_natural_language_spec(spec).model_dump()
    except ValueError as exc:
        return {"error": f"Failed to parse problem: {exc}", "problem": None}


@mcp.tool()
def analyze_infeasibility(problem: LinearProgram) -> dict:
    "Return basic infeasibility diagnostics (drop-one-constraint heuristic)."
    try:
        return analyze_infeasibility_problem(problem)
    except (ValueError, SolverInvariantError) as exc:
        logger.warning("analyze_infeasibility failed: %s", exc)
        return {"error": f"Failed to analyze problem: {exc}", "conflicting_constraints": []}


@mcp.tool()
def trace_lp(problem: LinearProgram, options: SolveOptions | None = None) -> dict:
    "Solve a linear program and return every intermediate tableau as text."
    lines: list[str] = []
    try:
        tableau = build_tableau(problem.to_constraint_set(), problem.objective, problem.sense)
        solution = run_simplex(tableau, options or SolveOptions(), lines.append, problem.variable_names)
    except (ValueError, SolverInvariantError) as exc:
        logger.warning("trace_lp failed: %s", exc)
        return {"error": f"Failed to solve problem: {exc}", "solution": None, "trace": "\n".join(lines)}
    return {"solution": solution.model_dump(), "trace": "\n".join(lines)}


def main() -> None:
    logging.basicConfig(level=os.environ.get("LOG_LEVEL", "WARNING"))
    transport = os.environ.get("MCP_TRANSPORT", "stdio")

    if transport == "stdio" or "--stdio" in sys.argv:
        mcp.run(transport="stdio")
    else:
        port = int(os.environ.get("PORT", "8081"))
        mcp.settings.host = "0.0.0.0"
        mcp.settings.port = port
        mcp.settings.streamable_http_path = "/mcp"
        mcp.settings.transport_security = TransportSecuritySettings(
            enable_dns_rebinding_protection=False,
            allowed_hosts=["*"],
            allowed_origins=["*"],
        )
        mcp.run(transport="streamable-http")


if __name__ == "__main__":
    main()
