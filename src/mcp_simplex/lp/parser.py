import logging
import re
from collections import OrderedDict
from typing import Dict, List, Tuple

from ..schemas import ConstraintSpec, LinearProgram

logger = logging.getLogger(__name__)

_TOKEN_SPLIT = re.compile(r",|;|\band\b", re.IGNORECASE)
_COMPARATOR = re.compile(r"(<=|>=|==|=)")
_MULTI_BOUND = re.compile(
    r"^([A-Za-z_][\w]*(?:\s*,\s*[A-Za-z_][\w]*)+)\s*(<=|>=)\s*(-?\d+(?:\.\d+)?)$"
)
_TERM_PATTERN = re.compile(r"([+-]?\s*\d*\.?\d*)\s*([A-Za-z_][\w]*)")
_NUMBER_PATTERN = re.compile(r"[+-]?\s*\d+(?:\.\d+)?")


def parse_natural_language_spec(spec: str) -> LinearProgram:
    """
    Small rule-based parser for prompts like:
      "maximize 3x + 2y subject to x + 2y <= 14, 3x - y >= 0, x <= 5, x,y >= 0"
    Every variable is non-negative, so bounds such as "x >= 0" are dropped.
    Constants on the left-hand side are moved to the right-hand side.
    """

    if not spec or not spec.strip():
        raise ValueError("Specification is empty.")

    normalized = " ".join(spec.replace("\n", " ").split())
    pieces = re.split(r"subject to|such that|s\.t\.", normalized, flags=re.IGNORECASE)
    objective_part = pieces[0].strip()
    constraints_part = pieces[1].strip() if len(pieces) > 1 else ""

    match = re.match(r"(maximize|minimize|maximise|minimise|max|min)\s*(.*)", objective_part, flags=re.IGNORECASE)
    if not match:
        raise ValueError("Objective must start with 'maximize' or 'minimize'.")
    sense = "max" if match.group(1).lower().startswith("max") else "min"
    objective_expr_str = match.group(2).strip()
    if not objective_expr_str:
        raise ValueError("Objective expression is missing.")

    objective_terms, _ = _parse_linear_expr(objective_expr_str)
    variable_names: "OrderedDict[str, None]" = OrderedDict((name, None) for name in objective_terms)

    rows: List[Tuple[Dict[str, float], str, float]] = []
    tokens = [tok.strip() for tok in _TOKEN_SPLIT.split(constraints_part) if tok.strip()] if constraints_part else []
    pending_names: List[str] = []

    for token in tokens:
        # "x, y >= 0" is split on the comma, so collect bare names until the bound arrives.
        if re.fullmatch(r"[A-Za-z_][\w]*", token):
            pending_names.append(token)
            continue
        if pending_names:
            token = ", ".join(pending_names + [token])
            pending_names = []

        multi = _MULTI_BOUND.match(token)
        if multi:
            vars_chunk, cmp, rhs_text = multi.groups()
            for var_name in [v.strip() for v in vars_chunk.split(",") if v.strip()]:
                variable_names.setdefault(var_name, None)
                rows.append(({var_name: 1.0}, cmp, float(rhs_text)))
            continue

        comp_match = _COMPARATOR.search(token)
        if not comp_match:
            raise ValueError(f"Could not parse constraint segment '{token}'.")
        lhs_str = token[: comp_match.start()].strip()
        rhs_str = token[comp_match.end() :].strip()
        if not lhs_str or not rhs_str:
            raise ValueError(f"Incomplete constraint expression '{token}'.")
        terms, constant = _parse_linear_expr(lhs_str)
        if not terms:
            raise ValueError(f"Constraint '{token}' has no variables.")
        try:
            rhs_value = float(rhs_str)
        except ValueError as exc:
            raise ValueError(f"Right-hand side '{rhs_str}' is not numeric.") from exc
        cmp = "==" if comp_match.group(1) == "=" else comp_match.group(1)
        rows.append((terms, cmp, rhs_value - constant))
        for name in terms:
            variable_names.setdefault(name, None)

    if pending_names:
        raise ValueError(f"Dangling variable names {pending_names} in constraints.")

    names = list(variable_names.keys())
    index = {name: idx for idx, name in enumerate(names)}
    constraints: List[ConstraintSpec] = []
    for terms, cmp, rhs in rows:
        if _is_non_negativity(terms, cmp, rhs):
            continue
        coefficients = [0.0] * len(names)
        for name, coef in terms.items():
            coefficients[index[name]] = coef
        constraints.append(
            ConstraintSpec(coefficients=coefficients, cmp=cmp, rhs=rhs, name=f"c{len(constraints) + 1}")
        )

    if not constraints:
        raise ValueError("At least one constraint is required.")

    objective = [objective_terms.get(name, 0.0) for name in names]
    logger.debug("Parsed %d variables and %d constraints", len(names), len(constraints))
    return LinearProgram(
        name="parsed",
        sense=sense,
        objective=objective,
        constraints=constraints,
        variable_names=names,
    )


def _is_non_negativity(terms: Dict[str, float], cmp: str, rhs: float) -> bool:
    if len(terms) != 1 or rhs != 0.0:
        return False
    (coef,) = terms.values()
    return (cmp == ">=" and coef > 0) or (cmp == "<=" and coef < 0)


def _parse_linear_expr(expr_str: str) -> Tuple["OrderedDict[str, float]", float]:
    expr_clean = expr_str.replace("*", "")
    coeffs: "OrderedDict[str, float]" = OrderedDict()
    spans: List[Tuple[int, int]] = []

    for match in _TERM_PATTERN.finditer(expr_clean):
        coef_text = match.group(1).replace(" ", "")
        var_name = match.group(2)
        if coef_text in ("", "+"):
            coef = 1.0
        elif coef_text == "-":
            coef = -1.0
        else:
            coef = float(coef_text)
        coeffs[var_name] = coeffs.get(var_name, 0.0) + coef
        spans.append(match.span())

    remaining = list(expr_clean)
    for start, end in spans:
        for idx in range(start, end):
            remaining[idx] = " "
    remaining_str = "".join(remaining)

    constant = 0.0
    for num_match in _NUMBER_PATTERN.finditer(remaining_str):
        text = num_match.group(0).replace(" ", "")
        if text:
            constant += float(text)

    terms = OrderedDict((name, coef) for name, coef in coeffs.items() if abs(coef) > 1e-12)
    return terms, constant
