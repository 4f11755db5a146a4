"""
Dense matrix type used for the term-document matrix and its factors.
"""
from typing import List, Optional, Sequence

import numpy as np

# Smallest positive normal double.  Dividing by it instead of zero keeps
# results finite for the magnitudes that occur during factorisation.
EPSILON = np.finfo(np.float64).tiny


class Matrix:
    """
    A rows x columns matrix of floats, stored row-major.

    All operations that combine matrices check their dimensions and raise
    ValueError on a mismatch rather than truncating.
    """
    __slots__ = ('_data',)

    def __init__(self, row_count: int, column_count: int):
        if row_count < 0 or column_count < 0:
            raise ValueError(f"Invalid matrix dimensions {row_count}x{column_count}")
        self._data = np.zeros((row_count, column_count), dtype=np.float64)

    @classmethod
    def _wrap(cls, data: np.ndarray) -> 'Matrix':
        matrix = cls.__new__(cls)
        matrix._data = np.ascontiguousarray(data, dtype=np.float64)
        return matrix

    @classmethod
    def from_rows(cls, values: Sequence[Sequence[float]]) -> 'Matrix':
        """Build a matrix from a list of equal-length rows."""
        if not values:
            return cls(0, 0)
        widths = {len(row) for row in values}
        if len(widths) != 1:
            raise ValueError("All rows must have the same number of columns")
        return cls._wrap(np.array(values, dtype=np.float64))

    @classmethod
    def random(cls, row_count: int, column_count: int,
               rng: Optional[np.random.Generator] = None) -> 'Matrix':
        """Build a matrix of independent uniform random values in [0, 1)."""
        rng = rng if rng is not None else np.random.default_rng()
        return cls._wrap(rng.random((row_count, column_count)))

    @property
    def row_count(self) -> int:
        return self._data.shape[0]

    @property
    def column_count(self) -> int:
        return self._data.shape[1]

    def get(self, row: int, column: int) -> float:
        return float(self._data[row, column])

    def set(self, row: int, column: int, value: float) -> None:
        self._data[row, column] = value

    def row(self, index: int) -> List[float]:
        return self._data[index].tolist()

    def to_list(self) -> List[List[float]]:
        return self._data.tolist()

    def transpose(self) -> 'Matrix':
        return Matrix._wrap(self._data.T)

    def multiply(self, other: 'Matrix') -> 'Matrix':
        """
        Multiply this matrix (row-by-column) by the specified matrix.

        Returns:
            A new row_count x other.column_count matrix
        """
        if self.column_count != other.row_count:
            raise ValueError(f"Cannot multiply {self.shape_str()} by {other.shape_str()}")
        return Matrix._wrap(self._data @ other._data)

    def multiply_transpose_right(self, other: 'Matrix') -> 'Matrix':
        """
        Multiply this matrix by the transpose of the specified matrix.

        Returns:
            A new row_count x other.row_count matrix
        """
        if self.column_count != other.column_count:
            raise ValueError(f"Cannot multiply {self.shape_str()} by transpose of {other.shape_str()}")
        return Matrix._wrap(self._data @ other._data.T)

    def multiply_transpose_left(self, other: 'Matrix') -> 'Matrix':
        """
        Transpose this matrix and multiply it by the specified matrix.

        Returns:
            A new column_count x other.column_count matrix
        """
        if self.row_count != other.row_count:
            raise ValueError(f"Cannot multiply transpose of {self.shape_str()} by {other.shape_str()}")
        return Matrix._wrap(self._data.T @ other._data)

    def element_multiply_and_divide(self, multiplier: 'Matrix', divisor: 'Matrix') -> None:
        """
        In place, set each cell to cell * multiplier / divisor.

        Divisors are never negative during factorisation; zeros are replaced
        by EPSILON so the result stays finite and keeps its sign.
        """
        shape = self._data.shape
        if multiplier._data.shape != shape or divisor._data.shape != shape:
            raise ValueError(f"Element-wise operands must all be {self.shape_str()}, got "
                             f"{multiplier.shape_str()} and {divisor.shape_str()}")
        self._data *= multiplier._data
        self._data /= np.maximum(divisor._data, EPSILON)

    def squared_distance(self, other: 'Matrix') -> float:
        """Sum of the squared differences between corresponding cells."""
        if self._data.shape != other._data.shape:
            raise ValueError(f"Cannot compare {self.shape_str()} with {other.shape_str()}")
        difference = self._data - other._data
        return float(np.sum(difference * difference))

    def shape_str(self) -> str:
        return f"{self.row_count}x{self.column_count}"

    def __eq__(self, other) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self._data.shape == other._data.shape and bool(np.array_equal(self._data, other._data))

    __hash__ = None

    def __repr__(self) -> str:
        return f"Matrix({self.shape_str()})"
