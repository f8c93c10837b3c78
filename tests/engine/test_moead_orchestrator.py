import logging

import numpy as np
import pytest

from moeadra import MOEAD, MOEADConfig, make_problem
from moeadra.engine.algorithm.components.resource_allocation import Allocation
from moeadra.foundation.exceptions import ConfigurationError, DegenerateStateError, ProblemDimensionError
from moeadra.foundation.metrics.pareto import nondominated_mask

N_SMALL = 20


def _small(maxiter=5):
    """H=19 on two objectives gives 20 subproblems."""
    return MOEADConfig().decomposition("sld", H=19).neighborhood("lambda", T=5).stop(maxiter=maxiter)


def _zdt1():
    return make_problem("zdt1", n_var=8)


class OneObjective:
    n_var = 2
    n_obj = 1
    xl = 0.0
    xu = 1.0

    def evaluate(self, X, out):
        out["F"] = X[:, :1]


@pytest.mark.smoke
def test_sphere_rastrigin_run():
    cfg = MOEADConfig().decomposition("sld", H=49).stop(maxiter=50).fixed()
    problem = make_problem("sphere_rastrigin")

    result = MOEAD(cfg).run(problem, seed=42)

    assert result.X.shape == (50, 30)
    assert result.Y.shape == (50, 2)
    assert result.n_iter == 50
    assert result.nfe == 50 * 51
    assert result.seed == 42
    assert result.archive is None
    np.testing.assert_array_equal(result.ideal, result.Y.min(axis=0))
    np.testing.assert_array_equal(result.nadir, result.Y.max(axis=0))
    assert np.all(result.X >= -1.0) and np.all(result.X <= 1.0)


def test_without_allocation_every_subproblem_is_evaluated():
    result = MOEAD(_small(maxiter=5)).run(_zdt1(), seed=1)

    assert result.nfe == N_SMALL * 6
    assert result.usage.shape == (5, N_SMALL)
    assert result.usage.all()


def test_same_seed_same_run():
    cfg = (
        MOEADConfig.preset("moead.de")
        .decomposition("sld", H=19)
        .neighborhood("lambda", T=5, delta_p=0.9)
        .stop(maxiter=6)
        .fixed()
    )
    a = MOEAD(cfg).run(_zdt1(), seed=123)
    b = MOEAD(cfg).run(_zdt1(), seed=123)
    c = MOEAD(cfg).run(_zdt1(), seed=124)

    np.testing.assert_array_equal(a.X, b.X)
    np.testing.assert_array_equal(a.Y, b.Y)
    assert a.nfe == b.nfe
    assert not np.array_equal(a.X, c.X)


def test_rows_stay_aligned_with_objectives():
    problem = _zdt1()
    result = MOEAD(_small(maxiter=8)).run(problem, seed=5)

    out = {}
    problem.evaluate(result.X, out)
    np.testing.assert_allclose(out["F"], result.Y)


def test_stepping_matches_run():
    cfg = _small(maxiter=4).fixed()
    run_result = MOEAD(cfg).run(_zdt1(), seed=9)

    algo = MOEAD(cfg).setup(_zdt1(), seed=9)
    records = []
    while not algo.finished:
        records.append(algo.step())
    step_result = algo.result()

    np.testing.assert_array_equal(run_result.Y, step_result.Y)
    assert [r.iteration for r in records] == [1, 2, 3, 4]
    assert records[-1].stop and not any(r.stop for r in records[:-1])
    assert records[-1].nfe == step_result.nfe


def test_iteration_record_shapes():
    algo = MOEAD(_small()).setup(_zdt1(), seed=2)
    record = algo.step()

    assert record.bigZ.shape == (5 + 1, N_SMALL)
    assert record.B.shape == (N_SMALL, 5)
    np.testing.assert_array_equal(record.B[:, 0], np.arange(N_SMALL))
    assert record.n_evaluated == N_SMALL
    assert record.usage.dtype == bool


def test_inactive_rows_keep_their_incumbents():
    builder = _small(maxiter=10).resource_allocation("dra", selection="top", n=5)
    algo = MOEAD(builder).setup(_zdt1(), seed=3)

    for _ in range(4):
        X_before = algo.state.X.copy()
        Y_before = algo.state.Y.copy()
        nfe_before = algo.state.nfe
        record = algo.step()
        idle = ~record.usage
        assert record.active.size == 5
        np.testing.assert_array_equal(algo.state.X[idle], X_before[idle])
        np.testing.assert_array_equal(algo.state.Y[idle], Y_before[idle])
        assert algo.state.nfe - nfe_before == 5


def test_incumbents_never_get_worse_on_their_subproblem():
    # weighted sums compare candidates independently of the ideal point
    algo = MOEAD(_small(maxiter=10).aggregation("ws")).setup(_zdt1(), seed=11)
    W = algo.state.W

    previous = np.sum(W * algo.state.Y, axis=1)
    while not algo.finished:
        algo.step()
        current = np.sum(W * algo.state.Y, axis=1)
        assert np.all(current <= previous + 1e-12)
        previous = current


def test_exact_iteration_count_and_trace():
    result = MOEAD(_small(maxiter=7)).run(_zdt1(), seed=4)

    assert result.n_iter == 7
    assert result.iteration_times.shape == (7,)
    assert np.all(result.iteration_times >= 0.0)
    assert len(result.trace) == 7 * N_SMALL
    assert sorted(result.trace["stage"].unique().tolist()) == list(range(1, 8))
    assert list(result.trace.columns) == ["f1", "f2", "stage"]
    last = result.trace[result.trace["stage"] == 7][["f1", "f2"]].to_numpy()
    np.testing.assert_array_equal(last, result.Y)


def test_evaluation_budget_stops_run():
    result = MOEAD(_small(maxiter=100).stop(maxeval=N_SMALL * 3)).run(_zdt1(), seed=6)
    assert result.n_iter == 2
    assert result.nfe == N_SMALL * 3


def test_stop_criteria_combine():
    builder = _small().stop_criteria(("maxiter", {"maxiter": 3}), ("maxeval", {"maxeval": 10**6}))
    assert MOEAD(builder).run(_zdt1(), seed=6).n_iter == 3


def test_dra_preset_spends_budget_on_selected_subproblems():
    cfg = (
        MOEADConfig.preset("moead.dra")
        .decomposition("sld", H=19)
        .neighborhood("lambda", T=5, delta_p=0.9)
        .stop(maxiter=8)
        .fixed()
    )
    result = MOEAD(cfg).run(_zdt1(), seed=8)

    assert result.usage.shape == (8, N_SMALL)
    np.testing.assert_array_equal(result.usage.sum(axis=1), np.full(8, N_SMALL // 5))
    assert result.nfe == N_SMALL + int(result.usage.sum())
    # the extreme subproblems are always active
    assert result.usage[:, 0].all() and result.usage[:, -1].all()


@pytest.mark.parametrize("rule", ["random", "norm", "ri"])
def test_other_allocation_rules_run(rule):
    result = MOEAD(_small(maxiter=5).resource_allocation(rule, selection="priority")).run(_zdt1(), seed=12)
    assert result.n_iter == 5
    assert result.nfe == N_SMALL + int(result.usage.sum())


def test_population_neighborhood_is_rebuilt():
    algo = MOEAD(_small(maxiter=6).neighborhood("x", T=5)).setup(_zdt1(), seed=13)
    records = [algo.step() for _ in range(6)]
    for r in records:
        np.testing.assert_array_equal(r.B[:, 0], np.arange(N_SMALL))
    assert any(not np.array_equal(r.B, records[0].B) for r in records[1:])


def test_weight_neighborhood_is_static():
    algo = MOEAD(_small(maxiter=4)).setup(_zdt1(), seed=13)
    records = [algo.step() for _ in range(4)]
    for r in records[1:]:
        np.testing.assert_array_equal(r.B, records[0].B)


def test_reduced_pressure_keeps_full_scalarization():
    algo = MOEAD(_small(maxiter=3).reduced_pressure()).setup(_zdt1(), seed=14)
    record = algo.step()
    assert record.bigZ.shape == (6, N_SMALL)
    assert record.B.shape == (N_SMALL, 5)
    np.testing.assert_array_equal(record.rank_B, np.arange(N_SMALL).reshape(-1, 1))
    while not algo.finished:
        algo.step()
    assert algo.result().n_iter == 3


def test_ranking_table_is_the_scalarization_table_by_default():
    record = MOEAD(_small(maxiter=1)).setup(_zdt1(), seed=14).step()
    np.testing.assert_array_equal(record.rank_B, record.B)


def test_archive_holds_nondominated_feasible_points():
    result = MOEAD(_small(maxiter=10).archive(8)).run(_zdt1(), seed=15)

    assert result.archive is not None
    assert 1 <= len(result.archive) <= 8
    assert nondominated_mask(result.archive.Y).all()
    assert result.archive.X.shape == (len(result.archive), 8)
    np.testing.assert_array_equal(result.archive.W, result.W)


@pytest.mark.parametrize("problem_name", ["zdt1", "srn"])
def test_archive_invariant_holds_after_every_iteration(problem_name):
    problem = _zdt1() if problem_name == "zdt1" else make_problem("srn")
    builder = _small(maxiter=12).constraint("vbr", type="ts").archive(6)
    algo = MOEAD(builder).setup(problem, seed=17)

    while not algo.finished:
        algo.step()
        members = algo.state.archive.contents()
        assert len(members) <= 6
        if len(members):
            assert nondominated_mask(members.Y).all()
        if members.V is not None:
            assert members.V.feasible.all()
    assert len(algo.state.archive) >= 1


@pytest.mark.parametrize("constraint", [("penalty", {"beta": 10.0}), ("vbr", {"type": "ts"}), ("vbr", {"type": "sr"})])
def test_constrained_problem(constraint):
    name, params = constraint
    builder = _small(maxiter=10).constraint(name, **params).scaling("simple").archive(10)
    result = MOEAD(builder).run(make_problem("srn"), seed=16)

    assert result.V is not None
    assert len(result.V) == N_SMALL
    assert result.archive.V is None or np.all(result.archive.V.feasible)
    front = result.front()
    assert front.shape[1] == 2


def test_debug_snapshots(tmp_path):
    MOEAD(_small(maxiter=2).debug_snapshot_dir(str(tmp_path))).run(_zdt1(), seed=17)
    files = sorted(p.name for p in tmp_path.iterdir())
    assert files == ["iter_00001.npz", "iter_00002.npz"]
    with np.load(tmp_path / "iter_00002.npz") as data:
        assert data["bigZ"].shape == (6, N_SMALL)
        assert data["priorities"].shape == (N_SMALL,)


def test_progress_is_logged(caplog):
    with caplog.at_level(logging.INFO, logger="moeadra"):
        MOEAD(_small(maxiter=4).show("numbers", 2)).run(_zdt1(), seed=18)
    assert "Iteration: 2" in caplog.text
    assert "Iteration: 4" in caplog.text
    assert "Iteration: 3" not in caplog.text


def test_mapping_config_and_random_seed():
    config = {
        "decomposition": {"name": "sld", "H": 19},
        "neighborhood": ["lambda", {"T": 3}],
        "stop_criteria": {"maxiter": 2},
    }
    result = MOEAD(config).run(_zdt1())
    assert isinstance(result.seed, int)
    assert result.seed >= 0
    assert result.input_config["neighborhood"] == ("lambda", {"T": 3, "delta_p": 1.0})


def test_negative_seed_rejected():
    with pytest.raises(ConfigurationError):
        MOEAD(_small()).run(_zdt1(), seed=-1)


def test_neighborhood_must_be_smaller_than_population():
    cfg = MOEADConfig().decomposition("sld", H=4).neighborhood("lambda", T=5).fixed()
    with pytest.raises(ConfigurationError):
        MOEAD(cfg).run(_zdt1(), seed=1)


def test_single_objective_problem_rejected():
    with pytest.raises(ProblemDimensionError):
        MOEAD(_small()).run(OneObjective(), seed=1)


def test_empty_selection_is_degenerate(monkeypatch):
    empty = Allocation(active=np.array([], dtype=int), usage=np.zeros(N_SMALL, dtype=bool))
    monkeypatch.setattr("moeadra.engine.algorithm.moead.moead.select_active", lambda *args, **kwargs: empty)
    algo = MOEAD(_small()).setup(_zdt1(), seed=1)
    with pytest.raises(DegenerateStateError):
        algo.step()


def test_step_lifecycle_errors(caplog):
    algo = MOEAD(_small(maxiter=1))
    with pytest.raises(RuntimeError):
        algo.step()
    algo.setup(_zdt1(), seed=1)
    with caplog.at_level(logging.WARNING, logger="moeadra"):
        early = algo.result()
    assert early.n_iter == 0
    assert "before any stop criterion" in caplog.text
    algo.step()
    assert algo.finished
    with pytest.raises(RuntimeError):
        algo.step()
