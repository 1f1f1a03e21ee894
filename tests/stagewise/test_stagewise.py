"""
Tests for forward-stagewise regression.

Validates:
    - a dominant predictor is recovered with few active coefficients and
      every final correlation below delta
    - the caller's DataSource is not modified
    - tie-break and stopping rules
    - NonConvergenceError on an oscillating configuration
    - option validation
"""

import numpy as np
import pytest

from pyinfluence import DataSource, forward_stagewise
from pyinfluence.stagewise import StagewiseDesign, StagewiseState
from pyinfluence.stagewise.backends.cpu import most_correlated, residual_correlations
from pyinfluence.core.exceptions import (
    DimensionError,
    NonConvergenceError,
    ValidationError,
)


@pytest.fixture
def dominant(rng):
    """n = 40000, p = 20; y depends on column 0 only."""
    X = rng.standard_normal((40_000, 20))
    y = 2.0 * X[:, 0] + rng.standard_normal(40_000)
    return DataSource.from_arrays(X), y


class TestDominantPredictor:

    def test_sparse_and_uncorrelated_at_stop(self, dominant):
        source, y = dominant
        result = forward_stagewise(source, y, epsilon=0.005, delta=0.01)

        assert result.state is StagewiseState.STOPPED
        assert len(result.active) <= 5
        assert np.argmax(np.abs(result.coefficients)) == 0
        assert result.max_correlation < 0.01

        X_std = StagewiseDesign.build(source, y).X
        corr = residual_correlations(X_std, np.linalg.norm(X_std, axis=0), result.residuals)
        assert np.max(np.abs(corr)) < 0.01

    def test_path_and_rounds(self, dominant):
        source, y = dominant
        result = forward_stagewise(source, y, epsilon=0.005, delta=0.01)
        assert result.path.shape == (result.n_rounds + 1, 20)
        np.testing.assert_array_equal(result.path[0], 0.0)
        np.testing.assert_array_equal(result.path[-1], result.coefficients)
        # each round moves one coefficient by exactly epsilon
        steps = np.abs(np.diff(result.path, axis=0)).sum(axis=1)
        np.testing.assert_allclose(steps, 0.005)
        assert result.info['rounds'] == result.n_rounds

    def test_source_untouched(self, dominant):
        source, y = dominant
        before = source.to_numpy().tobytes()
        forward_stagewise(source, y, epsilon=0.01, delta=0.02)
        assert source.to_numpy().tobytes() == before


class TestRounds:

    def test_uncorrelated_response_stops_immediately(self, rng):
        source = DataSource.from_arrays(rng.standard_normal((50, 3)))
        result = forward_stagewise(source, np.full(50, 4.0))
        assert result.n_rounds == 0
        assert result.state is StagewiseState.STOPPED
        assert result.intercept == 4.0
        assert result.path.shape == (1, 3)
        assert result.active.size == 0

    def test_response_by_label(self, rng):
        X = rng.standard_normal((200, 2))
        y = 3.0 * X[:, 1] + 0.1 * rng.standard_normal(200)
        table = DataSource.from_arrays(np.column_stack([X, y]), columns=['a', 'b', 'target'])
        result = forward_stagewise(table, 'target', epsilon=0.05, delta=0.05)
        assert result.names == ('a', 'b')
        assert np.argmax(np.abs(result.coefficients)) == 1

    def test_oscillation_raises(self, rng):
        x = rng.standard_normal(100)
        source = DataSource.from_arrays(x)
        with pytest.raises(NonConvergenceError) as exc_info:
            forward_stagewise(source, 0.5 * x, epsilon=1.0, delta=1e-6, max_rounds=50)
        err = exc_info.value
        assert err.iterations == 50
        assert err.threshold == 1e-6
        assert err.final_change == pytest.approx(1.0)
        assert err.reason == 'max_rounds'

    def test_predict(self, dominant):
        source, y = dominant
        result = forward_stagewise(source, y, epsilon=0.01, delta=0.02)
        X_std = StagewiseDesign.build(source, y).X
        np.testing.assert_allclose(result.predict(X_std), y - result.residuals)
        with pytest.raises(DimensionError):
            result.predict(X_std[:, :3])

    def test_summary(self, dominant):
        source, y = dominant
        text = forward_stagewise(source, y, epsilon=0.01, delta=0.02).summary()
        assert "State: stopped" in text
        assert "x0" in text


class TestSelection:

    def test_lowest_index_wins_ties(self):
        assert most_correlated(np.array([0.3, -0.5, 0.5, 0.1])) == (1, 0.5)

    def test_all_zero(self):
        assert most_correlated(np.zeros(3)) == (0, 0.0)

    def test_constant_column_has_zero_correlation(self):
        X = np.column_stack([np.zeros(4), [-1.5, -0.5, 0.5, 1.5]])
        corr = residual_correlations(X, np.linalg.norm(X, axis=0), np.array([1.0, 2.0, 2.0, 4.0]))
        assert corr[0] == 0.0
        assert 0.0 < corr[1] <= 1.0


class TestValidation:

    @pytest.mark.parametrize("kwargs", [
        {'epsilon': 0.0},
        {'epsilon': -0.1},
        {'delta': 0.0},
        {'max_rounds': 0},
        {'max_rounds': 2.5},
    ])
    def test_bad_options(self, rng, kwargs):
        source = DataSource.from_arrays(rng.standard_normal((10, 2)))
        with pytest.raises(ValidationError):
            forward_stagewise(source, rng.standard_normal(10), **kwargs)

    def test_length_mismatch(self, rng):
        source = DataSource.from_arrays(rng.standard_normal((10, 2)))
        with pytest.raises(DimensionError):
            forward_stagewise(source, rng.standard_normal(9))

    def test_rejects_non_datasource(self, rng):
        with pytest.raises(ValidationError, match="DataSource"):
            forward_stagewise(rng.standard_normal((10, 2)), rng.standard_normal(10))
