# dagdiff/optim/gd_config.py
from dataclasses import dataclass

import numpy as np


@dataclass
class GradientDescentConfig:
    """Configuration for fixed-step gradient descent."""
    # Step
    learning_rate: float = 0.001
    iterations: int = 1000

    # Numerics
    check_finite: bool = False  # raise NonFiniteValueError on inf/nan

    # Logging
    verbose: bool = False
    log_every: int = 100

    def __post_init__(self):
        if not np.isfinite(self.learning_rate):
            raise ValueError(f"learning_rate must be finite, got {self.learning_rate}")
        if self.iterations < 0:
            raise ValueError(f"iterations must be non-negative, got {self.iterations}")
        if self.log_every < 1:
            raise ValueError(f"log_every must be >= 1, got {self.log_every}")
