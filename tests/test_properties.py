"""Property tests: mode agreement and the path-sum law on random DAGs."""
import math

import numpy as np
from hypothesis import given, settings, strategies as st

from dagdiff.ad import (
    Variable, scalar, add, sub, mult, constmult, erf, norm_cdf, exp,
    forward, reverse,
)

NAMES = ("a", "b", "c")


def random_dag(seed, n_ops):
    """
    Random DAG over three scalar leaves with heavy node reuse.

    Every op maps [-1, 1] inputs back into [-1, 1] so values stay bounded.
    """
    rng = np.random.default_rng(seed)
    nodes = [scalar(n) for n in NAMES]
    for _ in range(n_ops):
        kind = int(rng.integers(5))
        p = nodes[int(rng.integers(len(nodes)))]
        q = nodes[int(rng.integers(len(nodes)))]
        if kind == 0:
            nodes.append(constmult(0.5, add(p, q)))
        elif kind == 1:
            nodes.append(constmult(0.5, sub(p, q)))
        elif kind == 2:
            nodes.append(mult(p, q))
        elif kind == 3:
            nodes.append(erf(p))
        else:
            nodes.append(norm_cdf(p))
    return nodes[-1]


def path_sums(node, env):
    """Brute force: sum over all root-to-leaf paths of the product of partials."""
    if isinstance(node, Variable):
        return {node.name: 1.0}
    xs = [forward(child, "", env).value for child in node.inputs]
    out = {}
    for child, d in zip(node.inputs, node.deriv(xs)):
        for name, s in path_sums(child, env).items():
            out[name] = out.get(name, 0.0) + d * s
    return out


unit = st.floats(min_value=-1.0, max_value=1.0, allow_nan=False)


@settings(deadline=None, max_examples=60)
@given(seed=st.integers(0, 2**32 - 1), a=unit, b=unit, c=unit)
def test_modes_agree_on_random_dags(seed, a, b, c):
    f = random_dag(seed, 20)
    env = {"a": a, "b": b, "c": c}
    value, gradients = reverse(f, env)
    for name in NAMES:
        r = forward(f, name, env)
        assert r.value == value
        assert math.isclose(r.derivative, gradients.get(name, 0.0),
                            rel_tol=1e-8, abs_tol=1e-7)


@settings(deadline=None, max_examples=30)
@given(seed=st.integers(0, 2**32 - 1), a=unit, b=unit, c=unit)
def test_path_sum_law(seed, a, b, c):
    f = random_dag(seed, 10)
    env = {"a": a, "b": b, "c": c}
    _, gradients = reverse(f, env)
    expected = path_sums(f, env)
    for name in NAMES:
        assert math.isclose(gradients.get(name, 0.0), expected.get(name, 0.0),
                            rel_tol=1e-8, abs_tol=1e-9)


@settings(deadline=None, max_examples=50)
@given(x1=st.floats(-3.0, 3.0), x2=st.floats(-3.0, 3.0))
def test_modes_agree_on_gaussian_bump(x1, x2):
    a = scalar("x1")
    b = scalar("x2")
    f = mult(a, exp(constmult(-0.5, add(mult(a, a), mult(b, b)))))
    env = {"x1": x1, "x2": x2}
    value, gradients = reverse(f, env)
    for name in ("x1", "x2"):
        r = forward(f, name, env)
        assert math.isclose(r.value, value)
        assert math.isclose(r.derivative, gradients[name], rel_tol=1e-9, abs_tol=1e-12)


@settings(deadline=None, max_examples=20)
@given(seed=st.integers(0, 2**32 - 1), a=unit, b=unit, c=unit)
def test_repeated_calls_are_bit_identical(seed, a, b, c):
    f = random_dag(seed, 20)
    env = {"a": a, "b": b, "c": c}
    assert reverse(f, env) == reverse(f, env)
