import sys

import pytest

from progress import reset, snapshot
from solver import orchestrator
from solver.orchestrator import GridDimensionError, solve, validate_dimensions


@pytest.fixture(autouse=True)
def _fresh_progress():
    reset()
    yield


@pytest.mark.parametrize("w,h", [(1, 1), (127, 1), (1, 127), (8, 6)])
def test_validate_dimensions_accepts_signed_byte_range(w, h):
    validate_dimensions(w, h)


@pytest.mark.parametrize(
    "w,h,needle",
    [
        (128, 4, "too wide"),
        (4, 200, "too tall"),
        (0, 4, "at least 1 cell wide"),
        (4, -3, "at least 1 cell tall"),
        ("abc", 4, "not an integer"),
    ],
)
def test_validate_dimensions_rejects_out_of_range(w, h, needle):
    with pytest.raises(GridDimensionError, match=needle):
        validate_dimensions(w, h)


def test_dimension_limit_follows_config(monkeypatch):
    monkeypatch.setattr(orchestrator.CFG, "MAX_DIM", 10, raising=False)
    with pytest.raises(GridDimensionError):
        validate_dimensions(11, 2)


def test_bad_dimensions_raise_before_search(monkeypatch):
    called = []
    monkeypatch.setattr(orchestrator, "Grid", lambda *a: called.append(a))
    with pytest.raises(GridDimensionError):
        solve(300, 2, {"square": 1})
    assert called == []


def test_unknown_shape_is_rejected():
    with pytest.raises(KeyError):
        solve(2, 2, {"pentomino": 1})


def test_solve_reports_success_as_data():
    result = solve(2, 2, {"square": 1})
    assert result["ok"] is True
    assert result["strategy"] == "backtracking"
    assert result["reason"] is None
    assert result["placed_count"] == 1
    assert result["demand_count"] == 1
    assert (result["W"], result["H"]) == (2, 2)
    grid = result["grid"]
    assert len(grid.cells) == 4
    assert {idx for idx, _ in grid.cells.values()} == {0}


def test_solve_reports_exhaustion_as_data():
    result = solve(1, 1, {"line": 1})
    assert result["ok"] is False
    assert result["strategy"] == "exhausted"
    assert result["reason"]
    assert result["placed_count"] == 0
    assert result["grid"].cells == {}


def test_solve_updates_progress_snapshot():
    solve(4, 4, {"line": 4})
    snap = snapshot()
    assert snap["status"] == "Solved"
    assert snap["done"] is True
    assert snap["ok"] is True
    assert snap["placed_count"] == 4
    assert snap["demand_count"] == 4
    assert snap["nodes"] >= 4
    assert snap["grid"] == "4 × 4 cells"


def test_exhausted_run_marks_progress():
    solve(3, 3, {"square": 2})
    snap = snapshot()
    assert snap["status"] == "Exhausted"
    assert snap["ok"] is False


def test_recursion_limit_covers_demand(monkeypatch):
    monkeypatch.setattr(sys, "getrecursionlimit", lambda: 50)
    raised = []
    monkeypatch.setattr(sys, "setrecursionlimit", raised.append)
    with orchestrator._recursion_depth(100):
        assert raised and raised[0] >= 200
    assert raised[-1] == 50


def test_recursion_limit_restored_after_solve(monkeypatch):
    monkeypatch.setattr(sys, "getrecursionlimit", lambda: 50)
    calls = []
    monkeypatch.setattr(sys, "setrecursionlimit", calls.append)
    solve(1, 1, {"line": 1})
    assert calls[-1] == 50


def test_solve_logs_summary(caplog):
    with caplog.at_level("INFO", logger="solver.orchestrator"):
        solve(2, 2, {"square": 1})
    assert any("solved 2x2" in rec.getMessage() for rec in caplog.records)


def test_run_setup_logs_grid_area(monkeypatch):
    import progress

    written = []
    monkeypatch.setattr(progress, "_log_enabled", lambda: True)
    monkeypatch.setattr(progress.ATTEMPT_LOGGER, "info", lambda *args: written.append(args))
    solve(3, 2, {"line": 1})
    setup = [args for args in written if args[1] == "Run setup"]
    assert setup and "grid_area=6" in setup[0][2]
