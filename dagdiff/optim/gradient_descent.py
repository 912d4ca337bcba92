"""
Fixed-step gradient descent driven by reverse-mode AD.

Each iteration is a single reverse pass over the same immutable graph with
the update rule

    new = current - learning_rate * gradient

fused into the pass, so the environment is updated in place cell by cell.
There is no convergence test, line search or adaptive step: the loop runs
exactly `iterations` times.
"""

import logging
from typing import Dict, List, Optional

import numpy as np

from ..ad.core.engine import reverse
from ..ad.core.node import Node
from ..ad.core.seeds import value
from .gd_config import GradientDescentConfig

logger = logging.getLogger(__name__)


class GradientDescent:
    """
    Minimize a scalar expression graph over its variables.

    Usage:
        >>> x = scalar("x")
        >>> loss = constpow(constadd(-3.0, x), 2)
        >>> gd = GradientDescent(loss, GradientDescentConfig(learning_rate=0.1, iterations=200))
        >>> result = gd.run({"x": 0.0})
        >>> result['env']['x']   # ~3.0
    """

    def __init__(self, root: Node, config: Optional[GradientDescentConfig] = None):
        self.root = root
        self.config = config or GradientDescentConfig()
        self.loss_history: List[float] = []

    def step(self, env: Dict) -> float:
        """One reverse pass with the descent update fused in; returns the pre-step loss."""
        lr = self.config.learning_rate
        loss, _ = reverse(
            self.root, env,
            lambda _loss, current, gradient: current - lr * gradient,
            check_finite=self.config.check_finite,
        )
        return loss

    def run(self, env: Dict) -> Dict:
        """
        Run the configured number of iterations on a copy of `env`.

        Returns:
            Dictionary with:
                - env: the updated environment
                - loss: loss at the final point
                - n_iterations: iterations performed
                - loss_history: loss before each step
        """
        work = copy_env(env)
        self.loss_history = []
        cfg = self.config

        if cfg.verbose:
            logger.info("gradient descent: lr=%g, iterations=%d, variables=%s",
                        cfg.learning_rate, cfg.iterations, sorted(work))

        for it in range(1, cfg.iterations + 1):
            loss = self.step(work)
            self.loss_history.append(loss)
            if cfg.verbose and it % cfg.log_every == 0:
                logger.info("  iteration %d: loss = %.6e", it, loss)

        final_loss = value(self.root, work)
        if cfg.verbose:
            logger.info("gradient descent done: final loss = %.6e", final_loss)

        return {
            'env': work,
            'loss': final_loss,
            'n_iterations': cfg.iterations,
            'loss_history': self.loss_history,
        }


def gradient_descent(root: Node, env: Dict, learning_rate: float, iterations: int) -> Dict:
    """
    Functional form: returns the environment after `iterations` steps.

    The caller's mapping (and any arrays in it) is left untouched; the
    returned dict is the working copy that was mutated in place.
    """
    config = GradientDescentConfig(learning_rate=learning_rate, iterations=iterations)
    return GradientDescent(root, config).run(env)['env']


def copy_env(env: Dict) -> Dict:
    """Shallow-copy the mapping; array-like storage is copied as float64 arrays."""
    out = {}
    for name, storage in env.items():
        if np.ndim(storage) == 0:
            out[name] = float(storage)
        else:
            out[name] = np.array(storage, dtype=np.float64)
    return out
