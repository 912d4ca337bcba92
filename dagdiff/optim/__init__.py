"""
Optimization on top of reverse-mode AD.

- GradientDescentConfig: step size, iteration count and logging options
- GradientDescent: fixed-iteration descent with loss history
- gradient_descent: functional wrapper returning the final environment
"""

from .gd_config import GradientDescentConfig
from .gradient_descent import GradientDescent, gradient_descent, copy_env

__all__ = [
    'GradientDescentConfig',
    'GradientDescent',
    'gradient_descent',
    'copy_env',
]
