# dagdiff/ad/core/engine.py
from __future__ import annotations
import logging
from typing import Callable, Dict, List, MutableMapping, NamedTuple, Optional, Tuple

import numpy as np

from .errors import NonFiniteValueError, UnboundVariableError
from .graph_utils import topological_order
from .node import Node, Operation, Variable

logger = logging.getLogger(__name__)

# observer(phase, node, value); phase is "forward", "value" or "adjoint"
Observer = Callable[[str, Node, float], None]
# update(loss, current_value, gradient) -> new_value
UpdateFn = Callable[[float, float, float], float]


class ForwardResult(NamedTuple):
    value: float
    derivative: float


def _read(env, node: Variable) -> float:
    """lens.get(env[name]); an unbound name fails fast."""
    try:
        storage = env[node.name]
    except KeyError:
        raise UnboundVariableError(node.name) from None
    return node.lens.get(storage)


def _check(node: Node, phase: str, x) -> None:
    if not np.isfinite(x):
        raise NonFiniteValueError(node, phase, x)


def forward(root: Node, wrt: str, env, *, observer: Optional[Observer] = None,
            check_finite: bool = False) -> ForwardResult:
    """
    Forward mode: value of `root` and its derivative along variable `wrt`.

    Every Variable named `wrt` is seeded with tangent 1 (so all cells of a
    matrix variable move together), every other leaf with 0. Each node is
    computed once however many parents share it. `env` is never mutated.
    """
    memo: Dict[Node, Tuple[float, float]] = {}
    for node in topological_order(root):
        if isinstance(node, Variable):
            x = _read(env, node)
            dx = 1.0 if node.name == wrt else 0.0
        else:
            children = [memo[c] for c in node.inputs]
            xs = [c[0] for c in children]
            x = node.value(xs)
            dx = 0.0
            for (_, cdx), d in zip(children, node.partials(xs)):
                dx += cdx * d
        if check_finite:
            _check(node, "value", x)
            _check(node, "derivative", dx)
        memo[node] = (x, dx)
        if observer is not None:
            observer("forward", node, x)
    return ForwardResult(*memo[root])


def reverse(root: Node, env: MutableMapping, update: Optional[UpdateFn] = None, *,
            observer: Optional[Observer] = None,
            check_finite: bool = False) -> Tuple[float, Dict[str, object]]:
    """
    Reverse mode: value of `root` and the gradient w.r.t. every variable.

    Phase 1 (value pass)
        Walk the graph children-first, memoizing each node's value once and
        recording it on a per-call tape (integer handles). Every parent edge
        into a node bumps its fan-in; the root gets one virtual edge.

    Phase 2 (adjoint pass)
        Seed adj[root] = 1. A node is released from the worklist only after
        it has received one contribution per fan-in edge; releasing it
        earlier would propagate a partial path-sum. On release:
          - Operation: adj[input_i] += adj[node] * ∂node/∂input_i
          - Variable : adj[node] is final and is folded into
                       gradients[name] via lens.set (accumulating).

    Parameters
    ----------
    update : optional callable(loss, current, gradient) -> new value
        When given, each storage cell (name, lens) is overwritten in `env`
        once, with its fully accumulated gradient, at the end of the pass.

    Returns
    -------
    (value, gradients) where gradients[name] has the shape of env[name].
    """
    # ---------- Phase 1: values + fan-in ----------
    tape: List[Node] = topological_order(root)
    handle = {node: i for i, node in enumerate(tape)}
    n = len(tape)
    values: List[float] = [0.0] * n
    fan_in: List[int] = [0] * n
    inputs_of: List[Tuple[int, ...]] = [()] * n

    for i, node in enumerate(tape):
        if isinstance(node, Variable):
            x = _read(env, node)
        else:
            idx = tuple(handle[c] for c in node.inputs)
            inputs_of[i] = idx
            for j in idx:
                fan_in[j] += 1
            x = node.value([values[j] for j in idx])
        if check_finite:
            _check(node, "value", x)
        values[i] = x
        if observer is not None:
            observer("value", node, x)

    root_i = handle[root]
    fan_in[root_i] += 1
    result = values[root_i]

    # ---------- Phase 2: gated adjoint propagation ----------
    adj: List[float] = [0.0] * n
    visits: List[int] = [0] * n
    adj[root_i] = 1.0
    visits[root_i] = 1

    gradients: Dict[str, object] = {}
    cells: Dict[tuple, list] = {}  # (name, lens) -> [current value, gradient]
    worklist = [root_i]
    while worklist:
        i = worklist.pop()
        node = tape[i]
        ubar = adj[i]
        if check_finite:
            _check(node, "adjoint", ubar)
        if observer is not None:
            observer("adjoint", node, ubar)

        if isinstance(node, Variable):
            lens = node.lens
            current = gradients[node.name] if node.name in gradients else lens.init()
            gradients[node.name] = lens.set(current, lens.get(current) + ubar)
            if update is not None:
                cell = cells.setdefault((node.name, lens), [values[i], 0.0])
                cell[1] += ubar
            continue

        idx = inputs_of[i]
        derivs = node.partials([values[j] for j in idx])
        for j, d in zip(idx, derivs):
            adj[j] += ubar * d
            visits[j] += 1
            if visits[j] == fan_in[j]:
                worklist.append(j)

    if update is not None:
        for (name, lens), (current, gradient) in cells.items():
            env[name] = lens.set(env[name], update(result, current, gradient))

    logger.debug("reverse: %d nodes, %d edges, %d variables",
                 n, sum(len(t) for t in inputs_of), len(gradients))
    return result, gradients
