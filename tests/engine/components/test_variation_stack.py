import numpy as np
import pytest

from moeadra.engine.algorithm.components.neighborhood import build_neighborhood
from moeadra.engine.algorithm.components.utils import resolve_prob_expression
from moeadra.engine.algorithm.components.variation import VariationContext, build_variation_stack
from moeadra.engine.algorithm.components.variation.pipeline import VariationStack
from moeadra.engine.algorithm.components.variation.steps import draw_mates
from moeadra.engine.algorithm.components.weight_vectors import generate_weights
from moeadra.foundation.exceptions import CollaboratorContractError, ConfigurationError


def _context(n_var=3, active=None, seed=0, delta_p=0.9):
    rng = np.random.default_rng(seed)
    W = generate_weights("sld", {"H": 9}, 2)
    X = rng.random((10, n_var))
    hood = build_neighborhood("lambda", {"T": 3, "delta_p": delta_p}, W, X)
    active = np.arange(10) if active is None else np.asarray(active)
    return VariationContext(population=X, active=active, B=hood.B[active], P=hood.P[active], rng=rng, iteration=1)


def test_default_stack_keeps_offspring_in_box():
    ctx = _context(active=[0, 4, 9])
    stack = build_variation_stack(
        [("sbx", {"eta": 20, "pc": 1.0}), ("polymut", {"eta": 20, "pm": "1/n"}), ("truncate", {})], n_var=3
    )

    offspring, evals = stack(ctx.incumbents, ctx)

    assert stack.names == ["sbx", "polymut", "truncate"]
    assert offspring.shape == (3, 3)
    assert evals == 0
    assert np.all((offspring >= 0.0) & (offspring <= 1.0))


def test_de_stack_runs():
    ctx = _context()
    stack = build_variation_stack(
        [("diffmut", {"basis": "rand", "phi": None}), ("binrec", {"rho": 0.5}), ("reflect", {})], n_var=3
    )
    offspring, _ = stack(ctx.incumbents, ctx)
    assert offspring.shape == (10, 3)
    assert np.all((offspring >= 0.0) & (offspring <= 1.0))


def test_mean_basis_with_zero_phi_is_neighborhood_mean():
    ctx = _context(active=[2, 3])
    stack = build_variation_stack([("diffmut", {"basis": "mean", "phi": 0.0})], n_var=3)
    offspring, _ = stack(ctx.incumbents, ctx)
    np.testing.assert_allclose(offspring, ctx.population[ctx.B].mean(axis=1))


def test_binrec_full_rate_keeps_working_offspring():
    ctx = _context(active=[1, 2])
    stack = build_variation_stack([("binrec", {"rho": 1.0})], n_var=3)
    X = np.full((2, 3), 0.5)
    offspring, _ = stack(X, ctx)
    np.testing.assert_array_equal(offspring, X)


def test_evaluations_are_summed():
    ctx = _context()

    def costly(X, ctx):
        return X, 3

    stack = VariationStack([("a", costly), ("b", costly)])
    _, evals = stack(ctx.incumbents, ctx)
    assert evals == 6


def test_wrong_shape_is_a_contract_error():
    ctx = _context()
    stack = VariationStack([("bad", lambda X, ctx: (X[:1], 0))])
    with pytest.raises(CollaboratorContractError):
        stack(ctx.incumbents, ctx)


@pytest.mark.parametrize(
    "config",
    [
        [("sbx", {"bogus": 1})],
        [("sbx", {"pc": 2.0})],
        [("diffmut", {"basis": "best"})],
        [("binrec", {"rho": -0.1})],
    ],
)
def test_bad_parameters_raise(config):
    with pytest.raises(ConfigurationError):
        build_variation_stack(config, n_var=3)


def test_draw_mates_distinct_and_fallback():
    rng = np.random.default_rng(3)
    P_row = np.array([0.0, 0.5, 0.0, 0.25, 0.25])
    mates = draw_mates(P_row, 3, rng)
    assert sorted(mates.tolist()) == [1, 3, 4]

    narrow = np.array([0.5, 0.5, 0.0, 0.0])
    mates = draw_mates(narrow, 3, rng)
    assert set(mates.tolist()) <= {0, 1}


@pytest.mark.parametrize(
    "value, expected",
    [(None, 0.1), ("1/n", 0.25), ("2/n", 0.5), ("/n", 0.25), (" 0.3 ", 0.3), (1.7, 1.0), (-0.2, 0.0)],
)
def test_resolve_prob_expression(value, expected):
    assert resolve_prob_expression(value, 4) == pytest.approx(expected)
