# rescue_ctr/cryptography/matrix.py
"""
Rescue-CTR Matrices over FpField

Dense row-major matrices. Entries are Python ints held in numpy
object-dtype arrays, so precision is unbounded and every entry is reduced
through field.create on construction.
"""

from __future__ import annotations

from typing import List, Sequence, Tuple

import numpy as np

from .common import ShapeMismatch, generate_random_field_elem
from .field import FpField, ct_add_mod, ct_sub_mod, get_bin_size


class Matrix:
    """Matrix over a prime field. Column vectors are (m, 1) matrices."""

    def __init__(self, field: FpField, data):
        self.field = field
        rows = [list(r) for r in data]
        if not rows or not rows[0]:
            raise ShapeMismatch("matrix must have at least one row and one column")
        ncols = len(rows[0])
        for r in rows[1:]:
            if len(r) != ncols:
                raise ShapeMismatch("All rows must have same number of columns.")
        arr = np.empty((len(rows), ncols), dtype=object)
        for i, r in enumerate(rows):
            for j, c in enumerate(r):
                arr[i, j] = field.create(c)
        self.data = arr

    @classmethod
    def _wrap(cls, field: FpField, arr: np.ndarray) -> "Matrix":
        """Build from an object array whose entries are already reduced."""
        out = cls.__new__(cls)
        out.field = field
        out.data = arr
        return out

    @property
    def shape(self) -> Tuple[int, int]:
        return self.data.shape

    @property
    def nrows(self) -> int:
        return self.data.shape[0]

    @property
    def ncols(self) -> int:
        return self.data.shape[1]

    def rows(self) -> List[List[int]]:
        return [[int(c) for c in r] for r in self.data]

    def column(self, j: int = 0) -> List[int]:
        return [int(c) for c in self.data[:, j]]

    def __eq__(self, other) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        return (
            self.field == other.field
            and self.shape == other.shape
            and bool(np.all(self.data == other.data))
        )

    def __repr__(self) -> str:
        return f"Matrix({self.nrows}x{self.ncols})"

    def _check_same_shape(self, rhs: "Matrix") -> None:
        if self.nrows != rhs.nrows:
            raise ShapeMismatch(
                f"this.nrows must be equal to rhs.nrows (found {self.nrows} and {rhs.nrows})"
            )
        if self.ncols != rhs.ncols:
            raise ShapeMismatch(
                f"this.ncols must be equal to rhs.ncols (found {self.ncols} and {rhs.ncols})"
            )

    def mat_mul(self, rhs: "Matrix") -> "Matrix":
        """Matrix product self @ rhs."""
        if self.ncols != rhs.nrows:
            raise ShapeMismatch(
                f"this.ncols must be equal to rhs.nrows (found {self.ncols} and {rhs.nrows})"
            )
        prod = (self.data @ rhs.data) % self.field.ORDER
        return Matrix._wrap(self.field, prod)

    def add(self, rhs: "Matrix", ct: bool = False) -> "Matrix":
        """Element-wise addition. ct=True uses the constant-time adder."""
        self._check_same_shape(rhs)
        order = self.field.ORDER
        if not ct:
            return Matrix._wrap(self.field, (self.data + rhs.data) % order)
        bin_size = get_bin_size(order - 1)
        out = np.empty(self.shape, dtype=object)
        for idx in np.ndindex(*self.shape):
            out[idx] = ct_add_mod(self.data[idx], rhs.data[idx], order, bin_size)
        return Matrix._wrap(self.field, out)

    def sub(self, rhs: "Matrix", ct: bool = False) -> "Matrix":
        """Element-wise subtraction. ct=True uses the constant-time adder."""
        self._check_same_shape(rhs)
        order = self.field.ORDER
        if not ct:
            return Matrix._wrap(self.field, (self.data - rhs.data) % order)
        bin_size = get_bin_size(order - 1)
        out = np.empty(self.shape, dtype=object)
        for idx in np.ndindex(*self.shape):
            out[idx] = ct_sub_mod(self.data[idx], rhs.data[idx], order, bin_size)
        return Matrix._wrap(self.field, out)

    def pow(self, e: int) -> "Matrix":
        """Raise each entry to the power e (S-box layer)."""
        out = np.empty(self.shape, dtype=object)
        for idx in np.ndindex(*self.shape):
            out[idx] = self.field.pow(self.data[idx], e)
        return Matrix._wrap(self.field, out)

    def is_square(self) -> bool:
        return self.nrows == self.ncols

    def det(self) -> int:
        """
        Determinant by forward Gaussian elimination.

        Rows with a zero leading entry are set aside and re-appended after
        the pivot step, so a zero pivot is never chosen. Row reordering is not
        tracked, so the result is exact up to sign; it is only ever compared
        against zero. Not constant-time.
        """
        if not self.is_square():
            raise ShapeMismatch("Matrix must be square and non-empty to compute the determinant.")
        f = self.field
        det = f.ONE
        rows = self.rows()
        for _ in range(self.nrows):
            lz_rows = [r for r in rows if f.is0(r[0])]
            nlz_rows = [r for r in rows if not f.is0(r[0])]
            if not nlz_rows:
                # rank < n
                return f.ZERO
            pivot_row = nlz_rows.pop(0)
            pivot = pivot_row[0]
            det = f.mul(det, pivot)
            pivot_inv = f.inv(pivot)
            normalized = [f.mul(pivot_inv, v) for v in pivot_row]
            processed = [
                [f.sub(v, f.mul(row[0], normalized[k])) for k, v in enumerate(row)]
                for row in nlz_rows
            ]
            rows = [r[1:] for r in processed + lz_rows]
        return det


def to_vec(values: Sequence[int]) -> List[List[int]]:
    """Column-vector data [[v0], [v1], ...]."""
    return [[v] for v in values]


def rand_matrix(field: FpField, nrows: int, ncols: int) -> Matrix:
    data = [
        [generate_random_field_elem(field.ORDER) for _ in range(ncols)]
        for _ in range(nrows)
    ]
    return Matrix(field, data)
