#!/usr/bin/env python3
import json
import time
from pathlib import Path

from mcp_simplex.lp.errors import SolverInvariantError
from mcp_simplex.lp.simplex import simplex_solve
from mcp_simplex.schemas import LinearProgram, SolveOptions
from scripts.generate_instances import generate_random_lp


def load_example(name: str) -> LinearProgram:
    path = Path(__file__).resolve().parent.parent / "examples" / name
    return LinearProgram.model_validate(json.loads(path.read_text()))


def main() -> None:
    opts = SolveOptions(check_invariants=False)
    cases = [("examples/small_lp.json", load_example("small_lp.json"))]
    for seed in range(10):
        cases.append((f"random-{seed}", generate_random_lp(20, 20, seed)))

    print("name,status,objective,pivots,time_ms")
    for name, problem in cases:
        start = time.perf_counter()
        try:
            solution = simplex_solve(problem, opts)
        except SolverInvariantError as exc:
            print(f"{name},error,,,{exc.args[0]}")
            continue
        elapsed_ms = (time.perf_counter() - start) * 1000
        print(
            f"{name},{solution.status},{solution.objective_value},{solution.pivots},{elapsed_ms:.2f}"
        )


if __name__ == "__main__":
    main()
