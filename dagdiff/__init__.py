# dagdiff/__init__.py
"""
dagdiff: forward- and reverse-mode automatic differentiation over immutable
expression DAGs of named scalar and matrix variables, plus fixed-step
gradient descent.
"""

__version__ = "0.1.0"

from .ad import *  # noqa: F401,F403
from .ad import __all__ as _ad_all
from .optim import GradientDescentConfig, GradientDescent, gradient_descent

__all__ = list(_ad_all) + [
    'GradientDescentConfig',
    'GradientDescent',
    'gradient_descent',
    '__version__',
]
