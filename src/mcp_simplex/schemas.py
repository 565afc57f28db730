from pydantic import BaseModel, Field, field_validator
from typing import Literal, List, Dict, Optional

Sense = Literal["min", "max"]
Cmp = Literal["<=", ">=", "=="]
PivotRule = Literal["dantzig", "bland"]
Status = Literal["optimal", "infeasible", "unbounded"]

RELATION_SIGNS: Dict[str, int] = {"<=": 1, "==": 0, ">=": -1}


class ConstraintSpec(BaseModel):
    coefficients: List[float]
    cmp: Cmp
    rhs: float
    name: str | None = None

    @field_validator("coefficients")
    @classmethod
    def _not_empty(cls, value: List[float]) -> List[float]:
        if not value:
            raise ValueError("Constraint must have at least one coefficient.")
        return value


class LinearProgram(BaseModel):
    name: str = "problem"
    sense: Sense = "max"
    objective: List[float]
    constraints: List[ConstraintSpec]
    variable_names: List[str] | None = None

    def constraint_names(self) -> List[str]:
        return [cons.name or f"c{idx + 1}" for idx, cons in enumerate(self.constraints)]

    def to_constraint_set(self):
        from .lp.constraints import Constraint, ConstraintSet  # local import to avoid cycle

        constraint_set = ConstraintSet()
        for cons in self.constraints:
            constraint_set.add(
                Constraint(
                    coefficients=tuple(cons.coefficients),
                    relation_sign=RELATION_SIGNS[cons.cmp],
                    target=cons.rhs,
                )
            )
        return constraint_set


class SolveOptions(BaseModel):
    max_pivots: int | None = None
    tol: float = 1e-9
    feasibility_tol: float = 1e-6
    pivot_rule: PivotRule = "dantzig"
    check_invariants: bool = True


class LPSolution(BaseModel):
    status: Status
    objective_value: Optional[float]
    values: List[float] | None
    x: Dict[str, float] | None
    basis: Dict[str, str] = Field(default_factory=dict)
    alternate_optima: bool = False
    pivots: int
    phase1_pivots: int = 0
    message: str = ""
