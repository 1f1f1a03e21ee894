"""
Errors raised by pyinfluence.

Everything derives from PyInfluenceError. Three families sit under it:
bad input (ValidationError), failed linear algebra (NumericalError) and
iterations that ran out of rounds (ConvergenceError). The subclasses
carry the numbers that explain the failure as attributes, so callers
can react without parsing messages.
"""


class PyInfluenceError(Exception):
    """Root of the pyinfluence exception tree."""


class ValidationError(PyInfluenceError):
    """An argument was rejected before any computation started."""


class DimensionError(ValidationError):
    """
    Shapes do not line up: wrong ndim, row counts that differ between
    X and y, or a design with more columns than rows.
    """


class InsufficientDataError(ValidationError):
    """
    Not enough rows for the requested quantity.

    A fit needs n > p; leave-one-out diagnostics need n > p + 1 so that
    each refit still has a residual degree of freedom.

    Attributes:
        n_observations: Rows available
        n_parameters: Design columns, intercept included
        required: Smallest row count that would have worked
    """

    def __init__(
        self,
        message: str,
        n_observations: int | None = None,
        n_parameters: int | None = None,
        required: int | None = None,
    ):
        super().__init__(message)
        self.n_observations = n_observations
        self.n_parameters = n_parameters
        self.required = required


class NumericalError(PyInfluenceError):
    """A factorisation or inverse could not be formed."""


class SingularMatrixError(NumericalError):
    """
    A matrix that has to be inverted is singular to working precision.

    Attributes:
        matrix_name: Which matrix ('R', 'X'), when known
        condition_number: 2-norm condition estimate, when computed
        rank: Numerical rank found
        expected_rank: Rank the computation needed
    """

    def __init__(
        self,
        message: str,
        matrix_name: str | None = None,
        condition_number: float | None = None,
        rank: int | None = None,
        expected_rank: int | None = None
    ):
        super().__init__(message)
        self.matrix_name = matrix_name
        self.condition_number = condition_number
        self.rank = rank
        self.expected_rank = expected_rank


class RankDeficiencyError(SingularMatrixError):
    """
    X lacks full column rank.

    Detected from the diagonal of R right after the QR factorisation.
    Collinearity belongs to the data, so nothing retries or perturbs it.
    """


class ConvergenceError(PyInfluenceError):
    """
    An iterative routine stopped without meeting its criterion.

    Attributes:
        iterations: Rounds completed
        final_change: Last value of the monitored quantity
        reason: Short tag such as 'max_rounds'
        threshold: The level the monitored quantity had to reach
    """

    def __init__(
        self,
        message: str,
        iterations: int,
        final_change: float | None = None,
        reason: str | None = None,
        threshold: float | None = None
    ):
        super().__init__(message)
        self.iterations = iterations
        self.final_change = final_change
        self.reason = reason
        self.threshold = threshold


class NonConvergenceError(ConvergenceError):
    """
    Forward stagewise hit max_rounds with a correlation still above delta.

    Typically epsilon is too coarse for delta, and the leading
    correlation flips sign round after round.
    """
