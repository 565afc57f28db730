#!/usr/bin/env python3
import argparse
import json
import random
from pathlib import Path
from typing import List, Optional

from mcp_simplex.schemas import ConstraintSpec, LinearProgram


def generate_random_lp(num_vars: int, num_constraints: int, seed: Optional[int] = None) -> LinearProgram:
    """Random mixed-relation LP; may be infeasible or unbounded."""
    rng = random.Random(seed)
    constraints: List[ConstraintSpec] = []
    for j in range(num_constraints):
        coefficients = [float(rng.randrange(-5, 10)) for _ in range(num_vars)]
        kind = rng.randrange(-2, 3)
        if kind < 0:
            spec = ConstraintSpec(coefficients=coefficients, cmp="<=", rhs=float(rng.randrange(0, 20)), name=f"c{j}")
        elif kind == 0:
            spec = ConstraintSpec(coefficients=coefficients, cmp="==", rhs=float(rng.randrange(0, 10)), name=f"c{j}")
        else:
            spec = ConstraintSpec(coefficients=coefficients, cmp=">=", rhs=float(rng.randrange(0, 20)), name=f"c{j}")
        constraints.append(spec)
    return LinearProgram(
        name=f"random-lp-{seed}",
        sense="max" if rng.random() < 0.5 else "min",
        objective=[float(rng.randrange(-5, 10)) for _ in range(num_vars)],
        constraints=constraints,
    )


def main() -> None:
    parser = argparse.ArgumentParser(description="Generate random LP instances.")
    parser.add_argument("--vars", type=int, default=3, help="Number of variables")
    parser.add_argument("--constraints", type=int, default=3, help="Number of constraints")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--count", type=int, default=1, help="Number of instances")
    parser.add_argument("--out", type=Path, default=None, help="Optional output file")
    args = parser.parse_args()

    instances = [
        generate_random_lp(args.vars, args.constraints, (args.seed or 0) + idx)
        for idx in range(args.count)
    ]
    payload = [instance.model_dump() for instance in instances]

    if args.out:
        Path(args.out).write_text(json.dumps(payload, indent=2))
    else:
        print(json.dumps(payload, indent=2))


if __name__ == "__main__":
    main()
