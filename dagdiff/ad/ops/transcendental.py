# dagdiff/ad/ops/transcendental.py
import numpy as np
from ..core.node import Node, Operation
from .arithmetic import _label, _unary


def exp(a: Node) -> Operation:
    return _unary(a, f"e^{_label(a)}", np.exp, np.exp, "exp")

def log(a: Node) -> Operation:
    # log of a non-positive value is -inf/nan, not an error
    return _unary(a, f"log({_label(a)})", np.log, lambda x: np.divide(1.0, x), "log")

def sqrt(a: Node) -> Operation:
    return _unary(a, f"sqrt({_label(a)})", np.sqrt,
                  lambda x: np.divide(0.5, np.sqrt(x)), "sqrt")
