# dagdiff/ad/ops/matrix.py
"""
Structured variables and matrix composition.

A matrix variable of width x height is just a grid of Variable leaves that
share one name; each leaf carries a MatrixLens pointing at its cell of the
shared (height, width) storage block:

    w = matrix("w", 2, 4)          # 4 rows, 2 columns
    env = {"w": np.ones((4, 2))}

Composite results (matmul, det) are grids of ordinary Operation nodes. The
same input cells are referenced by many output cells, which is where most
shared subexpressions in practice come from.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Iterator, Optional, Tuple

from ..core.errors import DimensionMismatchError
from ..core.lens import MatrixLens, ScalarLens
from ..core.node import Node, Variable
from .arithmetic import add, mult, sub


@dataclass(frozen=True, eq=False)
class Matrix:
    """Immutable height x width grid of nodes."""
    name: str
    rows: Tuple[Tuple[Node, ...], ...]

    def __post_init__(self):
        rows = tuple(tuple(r) for r in self.rows)
        if not rows or not rows[0]:
            raise ValueError(f"matrix {self.name!r} must have at least one cell")
        if any(len(r) != len(rows[0]) for r in rows):
            raise ValueError(f"matrix {self.name!r} rows have unequal lengths")
        object.__setattr__(self, "rows", rows)

    @property
    def height(self) -> int:
        return len(self.rows)

    @property
    def width(self) -> int:
        return len(self.rows[0])

    @property
    def shape(self) -> Tuple[int, int]:
        return self.height, self.width

    @property
    def params(self) -> Tuple[Node, ...]:
        """Cells in row-major order."""
        return tuple(self)

    def cell(self, row: int, col: int) -> Node:
        return self.rows[row][col]

    def item(self) -> Node:
        """The single cell of a 1x1 matrix."""
        if self.shape != (1, 1):
            raise DimensionMismatchError(
                f"item() needs a 1x1 matrix, {self.name!r} is {self.height}x{self.width}",
                left=self.shape,
            )
        return self.rows[0][0]

    def __iter__(self) -> Iterator[Node]:
        for row in self.rows:
            yield from row


def scalar(name: str) -> Variable:
    """Scalar variable: identity lens over a single number."""
    return Variable(name=name, lens=ScalarLens())


def matrix(name: str, width: int, height: int) -> Matrix:
    """One leaf per cell, all named `name`, storage shape (height, width)."""
    if width < 1 or height < 1:
        raise ValueError(f"matrix dimensions must be positive, got {width}x{height}")
    rows = tuple(
        tuple(Variable(name=name, lens=MatrixLens(r, c, height, width)) for c in range(width))
        for r in range(height)
    )
    return Matrix(name, rows)


def matmul(a: Matrix, b: Matrix) -> Matrix:
    """
    Matrix product; cell (i, j) is the add-fold of a[i,k] * b[k,j].

    Inner dimensions are checked here, before any graph is evaluated.
    """
    if a.width != b.height:
        raise DimensionMismatchError(
            f"cannot multiply {a.name!r} ({a.height}x{a.width}) by "
            f"{b.name!r} ({b.height}x{b.width}): inner dimensions differ",
            left=a.shape, right=b.shape,
        )
    rows = []
    for i in range(a.height):
        row = []
        for j in range(b.width):
            acc = mult(a.rows[i][0], b.rows[0][j])
            for k in range(1, a.width):
                acc = add(acc, mult(a.rows[i][k], b.rows[k][j]))
            row.append(acc)
        rows.append(tuple(row))
    return Matrix(f"({a.name} @ {b.name})", tuple(rows))


def msum(m: Matrix) -> Node:
    """Sum of all cells."""
    cells = m.params
    acc = cells[0]
    for node in cells[1:]:
        acc = add(acc, node)
    return acc


def det2(m: Matrix) -> Node:
    """ad - bc for a 2x2 matrix."""
    if m.shape != (2, 2):
        raise DimensionMismatchError(
            f"det2 needs a 2x2 matrix, {m.name!r} is {m.height}x{m.width}", left=m.shape
        )
    (a, b), (c, d) = m.rows
    return sub(mult(a, d), mult(b, c))


def det(m: Matrix) -> Node:
    """
    Determinant of a square matrix by cofactor expansion along the first row.

    Minors are memoized on (first row, remaining columns), so the same minor
    node is reused by every cofactor that needs it.
    """
    if m.height != m.width:
        raise DimensionMismatchError(
            f"det needs a square matrix, {m.name!r} is {m.height}x{m.width}", left=m.shape
        )
    return _minor_det(m, 0, tuple(range(m.width)), {})


def _minor_det(m: Matrix, r: int, cols: Tuple[int, ...],
               memo: Dict[Tuple[int, Tuple[int, ...]], Node]) -> Node:
    key = (r, cols)
    hit: Optional[Node] = memo.get(key)
    if hit is not None:
        return hit
    if len(cols) == 1:
        out = m.rows[r][cols[0]]
    elif len(cols) == 2:
        c0, c1 = cols
        out = sub(mult(m.rows[r][c0], m.rows[r + 1][c1]),
                  mult(m.rows[r][c1], m.rows[r + 1][c0]))
    else:
        out = None
        for pos, c in enumerate(cols):
            term = mult(m.rows[r][c], _minor_det(m, r + 1, cols[:pos] + cols[pos + 1:], memo))
            if out is None:
                out = term
            elif pos % 2:
                out = sub(out, term)
            else:
                out = add(out, term)
    memo[key] = out
    return out
