from typing import Iterator, List, Literal, Tuple

from pydantic import BaseModel, ConfigDict, field_validator


class Constraint(BaseModel):
    """
    One row of a linear system: ``coefficients . x  (<=|==|>=)  target``.

    ``relation_sign`` is the coefficient given to the row's slack/surplus variable:
    +1 for <=, 0 for ==, -1 for >=.
    """

    model_config = ConfigDict(frozen=True)

    coefficients: Tuple[float, ...]
    relation_sign: Literal[-1, 0, 1]
    target: float

    @field_validator("coefficients")
    @classmethod
    def _not_empty(cls, value: Tuple[float, ...]) -> Tuple[float, ...]:
        if not value:
            raise ValueError("Constraint must have at least one coefficient.")
        return value

    @property
    def cmp(self) -> str:
        return {1: "<=", 0: "==", -1: ">="}[self.relation_sign]

    def normalised(self) -> "Constraint":
        """Return an equivalent constraint whose target is non-negative."""
        if self.target >= 0:
            return self
        return Constraint(
            coefficients=tuple(-value for value in self.coefficients),
            relation_sign=-self.relation_sign,
            target=-self.target,
        )


class LinearConstraint:
    """Fluent builder: ``linear(1, 1).less_or_equal(4)``."""

    __slots__ = ("coefficients",)

    def __init__(self, coefficients: Tuple[float, ...]) -> None:
        self.coefficients = coefficients

    def less_or_equal(self, value: float) -> Constraint:
        return Constraint(coefficients=self.coefficients, relation_sign=1, target=value)

    def equal_to(self, value: float) -> Constraint:
        return Constraint(coefficients=self.coefficients, relation_sign=0, target=value)

    def greater_or_equal(self, value: float) -> Constraint:
        return Constraint(coefficients=self.coefficients, relation_sign=-1, target=value)


def linear(*coefficients: float) -> LinearConstraint:
    return LinearConstraint(tuple(float(c) for c in coefficients))


class ConstraintSet:
    """Ordered constraints. Row index in the tableau follows insertion order."""

    def __init__(self, constraints: List[Constraint] | None = None) -> None:
        self._constraints: List[Constraint] = []
        self.variable_count = 0
        self.surplus_variable_count = 0
        for constraint in constraints or []:
            self.add(constraint)

    def add(self, constraint: Constraint) -> None:
        if constraint.relation_sign != 0:
            self.surplus_variable_count += 1
        self.variable_count = max(self.variable_count, len(constraint.coefficients))
        self._constraints.append(constraint)

    def __len__(self) -> int:
        return len(self._constraints)

    def __getitem__(self, index: int) -> Constraint:
        return self._constraints[index]

    def __iter__(self) -> Iterator[Constraint]:
        return iter(self._constraints)
