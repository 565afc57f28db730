from mcp_simplex.lp.constraints import ConstraintSet, linear
from mcp_simplex.lp.simplex import solve
from mcp_simplex.lp.tableau import build_tableau
from mcp_simplex.lp.trace import TraceWriter, render_tableau


def make_constraints() -> ConstraintSet:
    return ConstraintSet([linear(1, 1).greater_or_equal(1), linear(3, 2).equal_to(6)])


def test_render_shows_phase1_rows_and_artificials():
    text = render_tableau(build_tableau(make_constraints(), [-1, 1]))
    header, *rows = text.splitlines()

    assert header.split(",")[0].split() == ["x1"]
    assert "a2" in header and "tgt" in header
    assert rows[0].strip().startswith("I):")
    assert rows[1].strip().startswith("II):")
    assert len(rows) == 4


def test_render_hides_artificials_in_phase2():
    text = render_tableau(build_tableau(ConstraintSet([linear(1, 1).less_or_equal(4)]), [1, 1]))

    assert "a1" not in text
    assert "I):" not in text.replace("II):", "")
    assert "s1):" in text


def test_trace_writer_collects_snapshots():
    lines = []
    writer = TraceWriter(lines.append)
    solution = solve(make_constraints(), [-1, 1], trace=writer)

    assert solution.status == "optimal"
    assert lines[0] == "Phase 1, start"
    assert "Phase 2, start" in lines
    assert lines[-1] == "Phase 2, end"
    assert any(line.startswith("Pivot: leaving") for line in lines)
    assert "z = 3" in writer.buffer


def test_plain_callable_is_accepted():
    lines = []
    solve(ConstraintSet([linear(1).less_or_equal(2)]), [1], trace=lines.append)
    assert "Pivot: leaving s1 (row 1), entering x1" in lines


def test_writer_without_sink_is_silent():
    writer = TraceWriter()
    solve(make_constraints(), [-1, 1], trace=writer)
    assert writer.buffer == ""
