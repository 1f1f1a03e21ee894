"""
pytest configuration and shared fixtures.
"""

import pytest
import numpy as np

from pyinfluence import DataSource


# Brownlee's stack loss plant data (R: datasets::stackloss)
STACKLOSS_X = np.array([
    [80, 27, 89], [80, 27, 88], [75, 25, 90], [62, 24, 87], [62, 22, 87],
    [62, 23, 87], [62, 24, 93], [62, 24, 93], [58, 23, 87], [58, 18, 80],
    [58, 18, 89], [58, 17, 88], [58, 18, 82], [58, 19, 93], [50, 18, 89],
    [50, 18, 86], [50, 19, 72], [50, 19, 79], [50, 20, 80], [56, 20, 82],
    [70, 20, 91],
], dtype=np.float64)

STACKLOSS_Y = np.array([
    42, 37, 37, 28, 18, 18, 19, 20, 15, 14, 14,
    13, 11, 12, 8, 7, 8, 8, 9, 15, 15,
], dtype=np.float64)

STACKLOSS_COLUMNS = ['air_flow', 'water_temp', 'acid_conc']


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture
def stackloss():
    """Stack loss predictors as a DataSource, and the response."""
    source = DataSource.from_arrays(STACKLOSS_X, columns=STACKLOSS_COLUMNS)
    return source, STACKLOSS_Y.copy()


@pytest.fixture
def simple_regression_data(rng):
    """Simple regression dataset for basic tests (no intercept column in X)."""
    n, k = 100, 3
    X = rng.standard_normal((n, k))
    beta_true = np.array([0.5, 1.0, -2.0, 0.5])  # intercept first
    y = beta_true[0] + X @ beta_true[1:] + rng.standard_normal(n) * 0.1
    return X, y, beta_true


@pytest.fixture
def collinear_data(rng):
    """Dataset with perfect collinearity (should fail)."""
    n = 100
    x1 = rng.standard_normal(n)
    x2 = rng.standard_normal(n)
    x3 = x1 + x2  # Perfect collinearity
    X = np.column_stack([x1, x2, x3])
    y = rng.standard_normal(n)
    return X, y


@pytest.fixture
def near_collinear_data(rng):
    """Third column is the sum of the first two plus tiny noise."""
    n = 200
    x1 = rng.standard_normal(n)
    x2 = rng.standard_normal(n)
    x3 = x1 + x2 + rng.standard_normal(n) * 1e-3
    X = np.column_stack([x1, x2, x3])
    y = x1 - x2 + rng.standard_normal(n)
    return X, y
