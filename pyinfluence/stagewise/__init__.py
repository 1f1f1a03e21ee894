"""
Forward-stagewise regression.

A slow, greedy alternative to least squares: one coefficient moves by a
small step per round toward the predictor most correlated with the
residual. Independent of the OLS model.

Usage:
    from pyinfluence.stagewise import forward_stagewise

    result = forward_stagewise(source, y, epsilon=0.005, delta=0.01)
    print(result.summary())
"""

from pyinfluence.stagewise.design import StagewiseDesign
from pyinfluence.stagewise.solution import (
    StagewiseParams,
    StagewiseSolution,
    StagewiseState,
)
from pyinfluence.stagewise.solvers import forward_stagewise

__all__ = [
    "forward_stagewise",
    "StagewiseDesign",
    "StagewiseParams",
    "StagewiseSolution",
    "StagewiseState",
]
