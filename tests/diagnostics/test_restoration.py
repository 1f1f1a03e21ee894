"""
The container and the fit survive VIF, DFFITS and DFBETA untouched,
including when the call fails partway through.
"""

import numpy as np
import pytest

from pyinfluence import DataSource, OLS
from pyinfluence.core.exceptions import RankDeficiencyError


@pytest.fixture
def model(stackloss):
    source, y = stackloss
    m = OLS(source, n_jobs=2)
    m.fit(y)
    return m


def state_of(model):
    return model.source.to_numpy().tobytes(), model.coefficients.tobytes()


class TestRestoration:

    @pytest.mark.parametrize("method", [
        'variance_inflation_factors', 'dffits', 'dfbeta', 'dfbetas',
    ])
    def test_bit_identical_after_call(self, model, method):
        before = state_of(model)
        getattr(model, method)()
        assert state_of(model) == before

    def test_vif_error_path(self, model, monkeypatch):
        before = state_of(model)
        solution = model.solution
        real_fit = model.fit
        calls = []

        def flaky_fit(y, *, exclude=()):
            calls.append(exclude)
            if len(calls) == 2:
                model.source.set_column(0, np.zeros(21))
                raise RankDeficiencyError("refit failed", rank=2, expected_rank=3)
            return real_fit(y, exclude=exclude)

        monkeypatch.setattr(model, 'fit', flaky_fit)
        with pytest.raises(RankDeficiencyError, match="refit failed"):
            model.variance_inflation_factors()

        assert len(calls) == 2
        assert state_of(model) == before
        assert model.solution is solution

    def test_loo_error_path(self, rng):
        X = np.column_stack([rng.standard_normal(10), np.eye(10)[3]])
        source = DataSource.from_arrays(X)
        model = OLS(source, n_jobs=2)
        model.fit(rng.standard_normal(10))
        before = state_of(model)

        with pytest.raises(RankDeficiencyError):
            model.dffits()
        with pytest.raises(RankDeficiencyError):
            model.dfbeta()

        assert state_of(model) == before
        assert model.is_fitted
