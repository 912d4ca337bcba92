# dagdiff/ad/core/__init__.py

"""
Core public API for the AD package.

Exports:
    Node, Variable, Operation : expression DAG vertices (identity-hashed).
    variable, operation       : constructors for leaves and custom combinators.
    Lens, ScalarLens, MatrixLens : storage accessors behind leaf nodes.
    forward                   : value + one directional derivative.
    reverse                   : value + full gradient (optionally fused update).
    value, grad, derivative   : convenience wrappers.
    check_gradient            : finite-difference check of reverse gradients.
"""

from .node import Node, Variable, Operation, variable, operation
from .lens import Lens, ScalarLens, MatrixLens
from .engine import ForwardResult, forward, reverse
from .seeds import value, grad, derivative, check_gradient
from .errors import (
    DagDiffError,
    DimensionMismatchError,
    UnboundVariableError,
    NonFiniteValueError,
)

__all__ = [
    "Node", "Variable", "Operation", "variable", "operation",
    "Lens", "ScalarLens", "MatrixLens",
    "ForwardResult", "forward", "reverse",
    "value", "grad", "derivative", "check_gradient",
    "DagDiffError", "DimensionMismatchError",
    "UnboundVariableError", "NonFiniteValueError",
]
