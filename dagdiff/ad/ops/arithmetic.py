# dagdiff/ad/ops/arithmetic.py
import numpy as np
from ..core.node import Node, Operation, operation


MAX_LABEL = 48


def _label(n):
    """Child label for expression names, clipped so deep chains stay small."""
    label = n.name if isinstance(n, Node) else repr(n)
    return label if len(label) <= MAX_LABEL else label[:MAX_LABEL - 3] + "..."


def constant(k) -> Operation:
    """Zero-input node with value k."""
    k = float(k)
    return operation(f"{k:g}", (), lambda xs: k, lambda xs: (), "const")


def _binary(a, b, f, dfda, dfdb, tag, symbol):
    """
    Generic binary combinator:
      value = f(x, y)
      deriv = (∂f/∂x, ∂f/∂y) evaluated at the children's values
    """
    return operation(
        f"({_label(a)} {symbol} {_label(b)})", (a, b),
        lambda xs: f(xs[0], xs[1]),
        lambda xs: (dfda(xs[0], xs[1]), dfdb(xs[0], xs[1])),
        tag,
    )


def _unary(a, name, f, dfda, tag):
    return operation(name, (a,), lambda xs: f(xs[0]), lambda xs: (dfda(xs[0]),), tag)


def add(a: Node, b: Node) -> Operation:
    return _binary(a, b, lambda x, y: x + y, lambda x, y: 1.0, lambda x, y: 1.0, "add", "+")

def sub(a: Node, b: Node) -> Operation:
    return _binary(a, b, lambda x, y: x - y, lambda x, y: 1.0, lambda x, y: -1.0, "sub", "-")

def mult(a: Node, b: Node) -> Operation:
    return _binary(a, b, lambda x, y: x * y, lambda x, y: y, lambda x, y: x, "mult", "*")

def div(a: Node, b: Node) -> Operation:
    # quotient rule: ∂(x/y)/∂y = -x/y²
    return _binary(a, b,
                   lambda x, y: np.divide(x, y),
                   lambda x, y: np.divide(1.0, y),
                   lambda x, y: np.divide(-x, np.square(y)),
                   "div", "/")


def neg(a: Node) -> Operation:
    return _unary(a, f"-{_label(a)}", lambda x: -x, lambda x: -1.0, "neg")

def constadd(k, a: Node) -> Operation:
    return _unary(a, f"({_label(a)} + {k})", lambda x: k + x, lambda x: 1.0, "constadd")

def constmult(k, a: Node) -> Operation:
    return _unary(a, f"{k}{_label(a)}", lambda x: k * x, lambda x: k, "constmult")

def constdiv(k, a: Node) -> Operation:
    """k / a; derivative -k/a²."""
    return _unary(a, f"({k} / {_label(a)})",
                  lambda x: np.divide(k, x),
                  lambda x: np.divide(-k, np.square(x)),
                  "constdiv")

def constpow(a: Node, k) -> Operation:
    """
    a ** k for a construction-time exponent k.

    Local partial k * a^(k-1). Non-integer k on a negative base gives nan,
    which flows through the graph like any other value.
    """
    return _unary(a, f"{_label(a)}^{k}",
                  lambda x: np.power(x, k),
                  lambda x: k * np.power(x, k - 1),
                  "constpow")


# ---------------- Python operator binding helpers ----------------
# Plain numbers on either side are lifted into the const* combinators so
# no extra constant leaves end up in the graph.

def _is_number(v):
    return isinstance(v, (int, float, np.integer, np.floating))


def node_add(a, b):
    if _is_number(b):
        return constadd(b, a)
    return add(a, b)

def node_radd(a, b):
    return constadd(b, a)

def node_sub(a, b):
    if _is_number(b):
        return constadd(-b, a)
    return sub(a, b)

def node_rsub(a, b):
    return constadd(b, neg(a))

def node_mul(a, b):
    if _is_number(b):
        return constmult(b, a)
    return mult(a, b)

def node_rmul(a, b):
    return constmult(b, a)

def node_truediv(a, b):
    if _is_number(b):
        return constmult(np.divide(1.0, b), a)
    return div(a, b)

def node_rtruediv(a, b):
    return constdiv(b, a)

def node_pow(a, k):
    if not _is_number(k):
        return NotImplemented
    return constpow(a, k)
