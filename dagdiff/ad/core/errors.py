# dagdiff/ad/core/errors.py
"""Exception hierarchy for graph construction and evaluation."""


class DagDiffError(Exception):
    """Base class for all dagdiff errors."""


class DimensionMismatchError(DagDiffError, ValueError):
    """Raised at construction time when matrix shapes are incompatible."""

    def __init__(self, message: str, left=None, right=None):
        super().__init__(message)
        self.left = left
        self.right = right


class UnboundVariableError(DagDiffError, KeyError):
    """Raised when a Variable's name has no entry in the environment."""

    def __init__(self, name: str):
        super().__init__(name)
        self.name = name

    def __str__(self):
        return f"variable {self.name!r} is not bound in the environment"


class NonFiniteValueError(DagDiffError, ArithmeticError):
    """Raised in strict mode when a value or adjoint is inf/nan."""

    def __init__(self, node, phase: str, value):
        super().__init__(f"non-finite {phase} {value!r} at node {node.name!r}")
        self.node = node
        self.phase = phase
        self.value = value
