# dagdiff/ad/core/seeds.py

#-----------------------------------------------------------------------------
# Convenience wrappers: plant the seed (dy/dy = 1) at the root and read off
# values, gradients or single derivatives without touching the caller's env.
#-----------------------------------------------------------------------------
from __future__ import annotations
import copy
from typing import Dict, Optional

import numpy as np

from .engine import forward, reverse
from .node import Node


def value(root: Node, env) -> float:
    """Primal value of `root` under `env`."""
    return forward(root, "", env).value


def grad(root: Node, env) -> Dict[str, object]:
    """Full gradient {name: storage-shaped gradient} from one reverse pass."""
    _, gradients = reverse(root, env)
    return gradients


def derivative(root: Node, wrt: str, env) -> float:
    """Directional derivative along `wrt` from one forward pass."""
    return forward(root, wrt, env).derivative


def check_gradient(root: Node, env, *, eps: float = 1e-6,
                   names: Optional[list] = None) -> Dict[str, float]:
    """
    Compare reverse-mode gradients against central finite differences.

    Every scalar cell of every variable in `names` (default: all variables
    in the reverse gradient) is bumped by ±eps on a private copy of `env`.

    Returns
    -------
    dict {name: max |reverse - finite difference|} over that name's cells.
    """
    _, gradients = reverse(root, env)
    errors: Dict[str, float] = {}
    for name in (names if names is not None else list(gradients)):
        g = np.asarray(gradients[name], dtype=float)
        base = np.asarray(env[name], dtype=float)
        fd = np.zeros_like(base)
        for pos in np.ndindex(base.shape):
            bumped = base.copy()
            bumped[pos] += eps
            up = value(root, _with(env, name, bumped))
            bumped[pos] -= 2.0 * eps
            down = value(root, _with(env, name, bumped))
            fd[pos] = (up - down) / (2.0 * eps)
        errors[name] = float(np.max(np.abs(g - fd))) if g.size else 0.0
    return errors


def _with(env, name, storage):
    out = copy.copy(env)
    out[name] = float(storage) if np.ndim(storage) == 0 else storage
    return out
