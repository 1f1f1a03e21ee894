"""
Solver dispatch for forward-stagewise fitting.
"""

from numpy.typing import ArrayLike

from pyinfluence.core.datasource import DataSource
from pyinfluence.stagewise.design import StagewiseDesign
from pyinfluence.stagewise.solution import StagewiseSolution
from pyinfluence.stagewise.backends.cpu import CPUStagewiseBackend


def forward_stagewise(
    source: DataSource,
    y: ArrayLike | str,
    *,
    epsilon: float = 0.01,
    delta: float = 0.01,
    max_rounds: int = 10_000,
) -> StagewiseSolution:
    """
    Fit y by forward-stagewise regression on the standardised columns of source.

    Starting from all-zero coefficients and the mean-centred response,
    each round finds the predictor with the largest absolute correlation
    with the residual and moves its coefficient by epsilon toward that
    correlation. The run stops once every correlation is below delta.

    Args:
        source: Predictor table; a private standardised copy is used
        y: Response of length n, or the label of a source column
        epsilon: Step size
        delta: Correlation threshold
        max_rounds: Round cap

    Returns:
        StagewiseSolution (coefficients on the standardised scale)

    Raises:
        DimensionError: If len(y) != n
        ValidationError: If epsilon, delta or max_rounds is out of range
        NonConvergenceError: If max_rounds is exceeded

    Example:
        >>> from pyinfluence import DataSource, forward_stagewise
        >>> result = forward_stagewise(DataSource.from_arrays(X), y, epsilon=0.005)
        >>> result.active
        array([0])
    """
    design = StagewiseDesign.build(
        source, y, epsilon=epsilon, delta=delta, max_rounds=max_rounds,
    )
    result = CPUStagewiseBackend().solve(design)
    return StagewiseSolution(_result=result, _names=design.names)
