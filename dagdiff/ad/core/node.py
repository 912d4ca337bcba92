# dagdiff/ad/core/node.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Callable, Sequence, Tuple

from .lens import Lens, ScalarLens


@dataclass(frozen=True, eq=False)
class Node:
    """
    One vertex of the expression DAG.

    Nodes are immutable and hash/compare by identity (`eq=False`): two
    textually identical subexpressions built separately are different
    nodes. Passing the *same* Node object to several parents is how a shared
    subexpression is expressed.

    Attributes
    ----------
    name : str
        Debug label (variable name, or expression string for operations).
    """
    name: str


@dataclass(frozen=True, eq=False)
class Variable(Node):
    """
    Leaf node reading `lens.get(env[name])`.

    Several Variables may share one `name` with different lenses (one per
    matrix cell); they all address the same storage object.
    """
    lens: Lens = field(default_factory=ScalarLens)

    def __post_init__(self):
        if not isinstance(self.name, str):
            raise TypeError(f"Variable name must be str, got {type(self.name)}")
        if not isinstance(self.lens, Lens):
            raise TypeError(f"Variable lens must be a Lens, got {type(self.lens)}")


@dataclass(frozen=True, eq=False)
class Operation(Node):
    """
    Interior node.

    Attributes
    ----------
    inputs : tuple[Node, ...]
        Ordered child nodes (shared references).
    value  : Callable[[Sequence[float]], float]
        Primal value from the children's values.
    deriv  : Callable[[Sequence[float]], Sequence[float]]
        Local partials ∂out/∂input_i at the children's values; must return
        exactly len(inputs) entries.
    op_tag : str
        Short operation kind ("add", "exp", ...) used in graph summaries.
    """
    # repr would recurse through the whole subgraph
    inputs: Tuple[Node, ...] = field(default=(), repr=False)
    value: Callable[[Sequence[float]], float] = field(default=None, repr=False)
    deriv: Callable[[Sequence[float]], Sequence[float]] = field(default=None, repr=False)
    op_tag: str = "op"

    def __post_init__(self):
        inputs = tuple(self.inputs)
        for i, node in enumerate(inputs):
            if not isinstance(node, Node):
                raise TypeError(
                    f"input {i} of {self.name!r} must be a Node, got {type(node)}"
                )
        if not callable(self.value) or not callable(self.deriv):
            raise TypeError(f"operation {self.name!r} needs callable value and deriv")
        # frozen: bypass __setattr__ to store inputs as a tuple
        object.__setattr__(self, "inputs", inputs)

    def partials(self, input_values: Sequence[float]) -> Sequence[float]:
        """Call `deriv` and check that it returned one entry per input."""
        derivs = self.deriv(input_values)
        if len(derivs) != len(self.inputs):
            raise ValueError(
                f"deriv of {self.name!r} returned {len(derivs)} partials "
                f"for {len(self.inputs)} inputs"
            )
        return derivs


def variable(name: str, lens: Lens = None) -> Variable:
    """Declare a leaf; scalar lens by default."""
    return Variable(name=name, lens=lens if lens is not None else ScalarLens())


def operation(name: str, inputs: Sequence[Node],
              value: Callable[[Sequence[float]], float],
              deriv: Callable[[Sequence[float]], Sequence[float]],
              op_tag: str = "op") -> Operation:
    """Open-ended combinator constructor: any value/deriv pair makes a node."""
    return Operation(name=name, inputs=tuple(inputs), value=value, deriv=deriv,
                     op_tag=op_tag)
