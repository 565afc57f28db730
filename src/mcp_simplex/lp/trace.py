from typing import Callable, List, Optional, Union

from .tableau import Tableau

TraceSink = Callable[[str], None]


def _format_cell(value: float) -> str:
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    if text in ("", "-0"):
        text = "0"
    return text


def render_tableau(tableau: Tableau) -> str:
    """Render the active rows and columns of ``tableau`` as a fixed-width grid."""
    columns = tableau.active_columns()
    lines = ["".rjust(6) + "".join(tableau.variable_name(i).rjust(6) + ", " for i in columns)]
    for row in tableau.active_rows():
        cells = "".join(_format_cell(tableau.matrix[row, i]).rjust(6) + ", " for i in columns)
        lines.append(f"{tableau.row_name(row)}):".rjust(6) + cells)
    return "\n".join(lines).rstrip()


def describe_basis(tableau: Tableau) -> str:
    parts = []
    for row in tableau.constraint_rows:
        value = _format_cell(tableau.matrix[row, tableau.target_column])
        parts.append(f"{tableau.row_name(row)} = {value}")
    if tableau.is_phase1:
        parts.append(f"z' = {_format_cell(-tableau.infeasibility())}")
    parts.append(f"z = {_format_cell(tableau.objective_value())}")
    return "    ".join(parts)


class TraceWriter:
    """
    Forwards human-readable solver snapshots to an optional sink.

    Every message is also kept in ``buffer`` so tests can assert on the trace. A writer
    without a sink does nothing.
    """

    def __init__(self, sink: Optional[TraceSink] = None) -> None:
        self._sink = sink
        self._lines: List[str] = []

    @classmethod
    def wrap(cls, trace: Union["TraceWriter", TraceSink, None]) -> "TraceWriter":
        if isinstance(trace, TraceWriter):
            return trace
        return cls(trace)

    @property
    def enabled(self) -> bool:
        return self._sink is not None

    @property
    def buffer(self) -> str:
        return "\n".join(self._lines)

    def write(self, message: str) -> None:
        if self._sink is None:
            return
        self._sink(message)
        self._lines.append(message)

    def write_tableau(self, phase: str, tableau: Tableau) -> None:
        if not self.enabled:
            return
        self.write(phase)
        self.write(render_tableau(tableau))
        self.write(describe_basis(tableau))

    def write_pivot(self, tableau: Tableau, row: int, column: int) -> None:
        if not self.enabled:
            return
        self.write(
            f"Pivot: leaving {tableau.row_name(row)} (row {row - 1}), "
            f"entering {tableau.variable_name(column)}"
        )
