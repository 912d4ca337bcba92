# dagdiff/ad/core/lens.py
"""
Variable lenses.

A lens binds a leaf Node to one position inside the storage of a named
variable. The engine only ever talks to storage through the lens, so a plain
scalar and a cell of a matrix look the same to it:

    init()            -> fresh zero storage of the right shape
    get(storage)      -> float read at this lens' position
    set(storage, v)   -> storage with position overwritten by v

Lenses are frozen dataclasses; two lenses addressing the same cell compare
equal, which lets the reverse pass identify a storage cell as (name, lens).
"""
from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

import numpy as np


class Lens(ABC):
    """Accessor contract over a variable's backing storage."""

    @abstractmethod
    def init(self) -> Any:
        """Return zero-filled storage of the shape this lens addresses."""

    @abstractmethod
    def get(self, storage: Any) -> float:
        """Read the number this lens points at."""

    @abstractmethod
    def set(self, storage: Any, value: float) -> Any:
        """Write `value` at this lens' position and return the storage."""


@dataclass(frozen=True)
class ScalarLens(Lens):
    """Identity accessor over a single number."""

    def init(self) -> float:
        return 0.0

    def get(self, storage) -> float:
        return float(storage)

    def set(self, storage, value) -> float:
        return float(value)


@dataclass(frozen=True)
class MatrixLens(Lens):
    """
    Accessor for one cell of a (height x width) block.

    Storage may be an np.ndarray or a nested list of rows; `set` writes in
    place and returns the same object. Integer arrays are first upcast to a
    float64 copy, which is returned instead.
    """
    row: int
    col: int
    height: int
    width: int

    def __post_init__(self):
        if not (0 <= self.row < self.height and 0 <= self.col < self.width):
            raise ValueError(
                f"cell ({self.row}, {self.col}) outside {self.height}x{self.width} block"
            )

    def init(self) -> np.ndarray:
        return np.zeros((self.height, self.width), dtype=np.float64)

    def get(self, storage) -> float:
        return float(storage[self.row][self.col])

    def set(self, storage, value):
        if isinstance(storage, np.ndarray) and not np.issubdtype(storage.dtype, np.floating):
            storage = storage.astype(np.float64)
        storage[self.row][self.col] = value
        return storage
