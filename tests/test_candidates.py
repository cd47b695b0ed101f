"""
Tests for the bundled example candidates.
"""
import copy

import numpy as np
import pytest

from evolver import Candidate, Optimizer
from evolver.candidates import NoisyPolynomial, Polynomial, ScalarTarget, as_points
from evolver.candidates.polynomial import REGULARIZATION


class TestContract:
    """Tests for the Candidate base class."""

    def test_cannot_instantiate_abstract(self):
        with pytest.raises(TypeError):
            Candidate()

    def test_missing_method_is_abstract(self):
        class Half(Candidate):
            def breed(self, other):
                return self

            def evaluate(self):
                return 0.0

        with pytest.raises(TypeError):
            Half()

    @pytest.mark.parametrize("cls", [ScalarTarget, Polynomial, NoisyPolynomial])
    def test_examples_implement_contract(self, cls):
        assert issubclass(cls, Candidate)


class TestScalarTarget:
    """Tests for ScalarTarget."""

    def test_evaluate(self):
        assert ScalarTarget(115.0).evaluate() == -100.0
        assert ScalarTarget(125.0).evaluate() == 0.0

    def test_random_init_range(self, rng):
        for _ in range(50):
            assert 0.0 <= ScalarTarget(rng=rng).value < 1000.0

    def test_breed_leaves_parents(self, rng):
        a, b = ScalarTarget(10.0, rng=rng), ScalarTarget(30.0, rng=rng)
        for _ in range(20):
            child = a.breed(b)
            assert child.value in (10.0, 20.0, 30.0)
            assert child is not a and child is not b
        assert (a.value, b.value) == (10.0, 30.0)

    def test_mutate_changes_value(self, rng):
        item = ScalarTarget(500.0, rng=rng)
        item.mutate()
        assert item.value != 500.0


class TestPolynomial:
    """Tests for Polynomial."""

    def test_starts_as_zero_function(self, quadratic_points):
        poly = Polynomial(quadratic_points)
        assert poly.degree == 0
        assert list(poly.coeffs) == [0.0]

    def test_call(self, quadratic_points):
        poly = Polynomial(quadratic_points, [1.0, 2.0, 3.0])
        assert poly(2.0) == pytest.approx(1.0 + 4.0 + 12.0)

    def test_exact_fit_scores_regularization_only(self, quadratic_points):
        poly = Polynomial(quadratic_points, [0.0, 0.0, 1.0])
        assert poly.evaluate() == pytest.approx(-2 * REGULARIZATION)

    def test_evaluate_is_negated_mse(self, quadratic_points):
        poly = Polynomial(quadratic_points)
        ys = np.array([0.0, 1.0, 4.0, 9.0, 16.0])
        assert poly.evaluate() == pytest.approx(-np.mean(ys ** 2))

    def test_format(self, quadratic_points):
        assert Polynomial(quadratic_points, [1.5, -2.0]).format() == "1.5x^0 + -2.0x^1"

    def test_invalid_points(self):
        with pytest.raises(ValueError):
            Polynomial([])
        with pytest.raises(ValueError):
            Polynomial([(1.0, 2.0, 3.0)])

    def test_breed_leaves_parents(self, quadratic_points, np_rng):
        a = Polynomial(quadratic_points, [1.0, 1.0, 1.0], rng=np_rng)
        b = Polynomial(quadratic_points, [3.0, 3.0], rng=np_rng)
        for _ in range(20):
            child = a.breed(b)
            assert child.coeffs.size == 3
            assert set(child.coeffs[:2]) <= {1.0, 2.0, 3.0}
            assert child.coeffs[2] == 1.0
        assert list(a.coeffs) == [1.0, 1.0, 1.0]
        assert list(b.coeffs) == [3.0, 3.0]

    def test_children_share_points(self, quadratic_points, np_rng):
        a = Polynomial(quadratic_points, rng=np_rng)
        child = a.breed(a)
        assert child.points is a.points

    def test_mutate_keeps_valid_shape(self, quadratic_points, np_rng):
        poly = Polynomial(quadratic_points, rng=np_rng)
        for _ in range(500):
            poly.mutate()
            assert poly.coeffs.ndim == 1
            assert poly.coeffs.size >= 1
            assert np.all(np.isfinite(poly.coeffs))

    def test_deepcopy_copies_coeffs_only(self, quadratic_points, np_rng):
        poly = Polynomial(quadratic_points, [1.0, 2.0], rng=np_rng)
        clone = copy.deepcopy(poly)
        clone.coeffs[0] = 99.0
        assert poly.coeffs[0] == 1.0
        assert clone.points is poly.points

    def test_optimizer_improves_fit(self, quadratic_points, np_rng):
        opt = Optimizer(random_seed=0)
        opt.set_population(100).set_survive(8).set_bad_survive(2).set_prob_mutate(0.9)
        opt.add_item(Polynomial(quadratic_points, rng=np_rng))
        start = opt.get_score()
        score = opt.optimize(20)
        assert score > start
        assert isinstance(opt.get_best(), Polynomial)


class TestNoisyPolynomial:
    """Tests for NoisyPolynomial."""

    def test_exact_fit_is_noise_free(self, quadratic_points, np_rng):
        poly = NoisyPolynomial(quadratic_points, [0.0, 0.0, 1.0], rng=np_rng)
        for _ in range(10):
            assert poly.evaluate() == pytest.approx(-2 * REGULARIZATION)

    def test_scores_vary_between_calls(self, quadratic_points, np_rng):
        poly = NoisyPolynomial(quadratic_points, rng=np_rng)
        scores = {poly.evaluate() for _ in range(30)}
        assert len(scores) > 1

    def test_breed_keeps_type(self, quadratic_points, np_rng):
        poly = NoisyPolynomial(quadratic_points, rng=np_rng)
        assert isinstance(poly.breed(poly), NoisyPolynomial)

    def test_smoothing_with_stochastic_selection(self, np_rng):
        points = as_points([(0.0, 0.1), (1.0, 1.4), (2.0, 4.0), (3.0, 8.4), (4.0, 16.5)])
        opt = Optimizer(random_seed=4)
        opt.set_population(60).set_survive(5).set_bad_survive(3)
        opt.set_selection_strategy("stochastic").set_mean_avg(5)
        opt.add_item(NoisyPolynomial(points, rng=np_rng)).add_item(NoisyPolynomial(points, rng=np_rng))
        opt.optimize(10)
        assert len(opt) == 8
        assert all(r.age <= 4 for r in opt.get_items())
