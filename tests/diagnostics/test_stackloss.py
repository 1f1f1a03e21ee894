"""
End-to-end check against R on the stack loss data.

Reference values from R 4.x:
    fit <- lm(stack.loss ~ ., data = stackloss)
    hatvalues(fit); cooks.distance(fit); rstandard(fit); vcov(fit)
    summary(fit)

Published to three decimals, compared with PUBLISHED_3DP.
"""

import numpy as np
import pytest

from pyinfluence import OLS
from pyinfluence.core.compute.tolerances import PUBLISHED_3DP

ATOL = PUBLISHED_3DP.atol


@pytest.fixture
def model(stackloss):
    source, y = stackloss
    m = OLS(source)
    m.fit(y)
    return m


class TestStacklossFit:

    def test_coefficients(self, model):
        np.testing.assert_allclose(
            model.coefficients, [-39.9197, 0.7156, 1.2953, -0.1521], atol=5e-4,
        )

    def test_summary_statistics(self, model):
        solution = model.solution
        assert solution.residual_std_error == pytest.approx(3.243, abs=ATOL)
        assert solution.df_residual == 17
        assert solution.r_squared == pytest.approx(0.9136, abs=5e-5)
        assert solution.adjusted_r_squared == pytest.approx(0.8983, abs=5e-5)


class TestStacklossDiagnostics:

    def test_leverage(self, model):
        h = model.leverage()
        assert h[0] == pytest.approx(0.302, abs=ATOL)
        assert h[1] == pytest.approx(0.318, abs=ATOL)
        assert h[20] == pytest.approx(0.285, abs=ATOL)

    def test_cooks_distance(self, model):
        d = model.cooks_distance()
        assert d[0] == pytest.approx(0.154, abs=ATOL)
        assert d[1] == pytest.approx(0.060, abs=ATOL)
        assert d[20] == pytest.approx(0.692, abs=ATOL)

    def test_studentized_residuals(self, model):
        t = model.studentized_residuals()
        assert t.shape == (21,)
        assert t[0] == pytest.approx(1.193, abs=ATOL)
        assert t[1] == pytest.approx(-0.716, abs=ATOL)

    def test_variance_covariance(self, model):
        expected = np.array([
            [141.515, 0.288, -0.652, -1.677],
            [0.288, 0.018, -0.037, -0.008],
            [-0.652, -0.037, 0.135, 0.000],
            [-1.677, -0.008, 0.000, 0.024],
        ])
        vcov = model.variance_covariance_matrix()
        assert vcov[0, 0] == pytest.approx(141.515, abs=ATOL)
        np.testing.assert_allclose(vcov, expected, rtol=0, atol=1e-3)

    def test_observation_21_is_influential(self, model):
        assert abs(model.dffits()[20]) > 1.0
        assert np.argmax(model.cooks_distance()) == 20
