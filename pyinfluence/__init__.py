"""
pyinfluence: OLS regression with leverage and influence diagnostics.

Submodules:
    core: DataSource, Result envelope, exceptions, numerical kernels
    regression: QR-based OLS (functional fit() and the stateful OLS model)
    diagnostics: leverage, scaled residuals, PRESS, VIF, Cook's distance,
        DFFITS, DFBETA
    stagewise: forward-stagewise regression
"""

__version__ = "0.1.0"

from pyinfluence.core import DataSource
from pyinfluence.regression import fit, OLS
from pyinfluence.diagnostics import influence
from pyinfluence.stagewise import forward_stagewise
from pyinfluence import core, regression, diagnostics, stagewise

__all__ = [
    "__version__",
    "DataSource",
    "OLS",
    "fit",
    "influence",
    "forward_stagewise",
    "core",
    "regression",
    "diagnostics",
    "stagewise",
]
