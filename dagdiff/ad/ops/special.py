# dagdiff/ad/ops/special.py
import numpy as np
from scipy.special import erf as scipy_erf, ndtr

from ..core.node import Node, Operation
from .arithmetic import _label, _unary

SQRT_TWO_PI = np.sqrt(2.0 * np.pi)
TWO_OVER_SQRT_PI = 2.0 / np.sqrt(np.pi)


def norm_pdf(x):
    return np.exp(-0.5 * x * x) / SQRT_TWO_PI


def norm_cdf(a: Node) -> Operation:
    """
    Standard normal CDF N(a); local partial is the density phi(a).
    """
    return _unary(a, f"N({_label(a)})", ndtr, norm_pdf, "norm_cdf")


def erf(a: Node) -> Operation:
    """
    Error function: erf(x) = (2/√π) ∫₀ˣ e^(-t²) dt

    Derivative: d/dx erf(x) = (2/√π) * e^(-x²)
    """
    return _unary(a, f"erf({_label(a)})", scipy_erf,
                  lambda x: TWO_OVER_SQRT_PI * np.exp(-x * x), "erf")
