# dagdiff/ad/__init__.py
# Automatic differentiation over immutable expression DAGs

from .core import (
    Node, Variable, Operation, variable, operation,
    Lens, ScalarLens, MatrixLens,
    ForwardResult, forward, reverse,
    value, grad, derivative, check_gradient,
    DagDiffError, DimensionMismatchError, UnboundVariableError, NonFiniteValueError,
)
from . import ops
from .ops import *  # noqa: F401,F403

__all__ = [
    # Core
    'Node', 'Variable', 'Operation', 'variable', 'operation',
    'Lens', 'ScalarLens', 'MatrixLens',
    # Engine
    'ForwardResult', 'forward', 'reverse',
    'value', 'grad', 'derivative', 'check_gradient',
    # Errors
    'DagDiffError', 'DimensionMismatchError', 'UnboundVariableError',
    'NonFiniteValueError',
    # Ops
    'ops',
] + ops.__all__
