# dagdiff/ad/ops/__init__.py

from ..core.node import Node
from . import arithmetic
from .arithmetic import (
    constant, add, sub, neg, constadd, mult, constmult, div, constdiv, constpow,
)
from .transcendental import exp, log, sqrt
from .special import erf, norm_cdf
from .matrix import Matrix, scalar, matrix, matmul, msum, det2, det

# Bind Python operators to Node
Node.__add__      = arithmetic.node_add
Node.__radd__     = arithmetic.node_radd
Node.__sub__      = arithmetic.node_sub
Node.__rsub__     = arithmetic.node_rsub
Node.__mul__      = arithmetic.node_mul
Node.__rmul__     = arithmetic.node_rmul
Node.__truediv__  = arithmetic.node_truediv
Node.__rtruediv__ = arithmetic.node_rtruediv
Node.__neg__      = arithmetic.neg
Node.__pow__      = arithmetic.node_pow

__all__ = [
    "constant", "add", "sub", "neg", "constadd", "mult", "constmult",
    "div", "constdiv", "constpow",
    "exp", "log", "sqrt",
    "erf", "norm_cdf",
    "Matrix", "scalar", "matrix", "matmul", "msum", "det2", "det",
]
