# rescue_ctr/cryptography/field.py
"""
Rescue-CTR Prime Field Arithmetic

FpField: arithmetic modulo a large prime (default: the Curve25519 base field).

Constant-time helpers:
  Values are handled as fixed-width 2's complement bit vectors (least
  significant bit first). Addition and subtraction run a full adder over
  every bit, with no early exit; selection is computed as y + b*(x-y).
  These are used wherever a plaintext-dependent branch would otherwise
  appear (CTR combine, conditional reduction, hash absorption, permutation
  key addition).
"""

from __future__ import annotations

import math
import operator
from typing import List

from .common import CURVE25519_BASE_FIELD_ORDER


# =============================================================================
# Prime Field
# =============================================================================

class FpField:
    """Integers modulo a prime ORDER. All returned elements lie in [0, ORDER)."""

    def __init__(self, order: int):
        order = int(order)
        if order < 3:
            raise ValueError(f"invalid field order: {order}")
        self.ORDER = order
        self.BITS = order.bit_length()
        self.BYTES = (self.BITS + 7) >> 3
        self.ZERO = 0
        self.ONE = 1

    def __repr__(self) -> str:
        return f"FpField(bits={self.BITS})"

    def __eq__(self, other) -> bool:
        return isinstance(other, FpField) and other.ORDER == self.ORDER

    def __hash__(self) -> int:
        return hash(("FpField", self.ORDER))

    def create(self, x: int) -> int:
        """Reduce any integer (possibly negative) into [0, ORDER). Non-integers raise TypeError."""
        return operator.index(x) % self.ORDER

    def is0(self, x: int) -> bool:
        return x == 0

    def eql(self, x: int, y: int) -> bool:
        return self.create(x) == self.create(y)

    def add(self, x: int, y: int) -> int:
        return (x + y) % self.ORDER

    def sub(self, x: int, y: int) -> int:
        return (x - y) % self.ORDER

    def neg(self, x: int) -> int:
        return -x % self.ORDER

    def mul(self, x: int, y: int) -> int:
        return (x * y) % self.ORDER

    def pow(self, x: int, e: int) -> int:
        if e < 0:
            return pow(self.inv(x), -e, self.ORDER)
        return pow(x, e, self.ORDER)

    def inv(self, x: int) -> int:
        """Multiplicative inverse. Zero has none and raises ZeroDivisionError."""
        x = self.create(x)
        if x == 0:
            raise ZeroDivisionError("cannot invert the zero field element")
        return pow(x, -1, self.ORDER)

    def div(self, x: int, y: int) -> int:
        return self.mul(x, self.inv(y))


CURVE25519_BASE_FIELD = FpField(CURVE25519_BASE_FIELD_ORDER)


def get_bin_size(max_value: int) -> int:
    """
    Bit width for constant-time arithmetic on values up to max_value.

    floor(log2(max)) + 1 bits for unsigned values, +1 for the sign and
    +1 for the difference of two negative values. The floating-point log2
    is kept so widths agree with other implementations of this construction.
    """
    return math.floor(math.log2(float(max_value))) + 3


# =============================================================================
# Constant-Time Helpers
# =============================================================================

def ct_sign_bit(x: int, bin_size: int) -> int:
    """Bit `bin_size` of x (2's complement), as 0 or 1."""
    return (x >> bin_size) & 1


def to_bin_le(x: int, bin_size: int) -> List[int]:
    return [(x >> i) & 1 for i in range(bin_size)]


def from_bin_le(x_bin: List[int]) -> int:
    top = len(x_bin) - 1
    res = 0
    for i in range(top):
        res |= x_bin[i] << i
    return res - (x_bin[top] << top)


def adder(x_bin: List[int], y_bin: List[int], carry_in: int, bin_size: int) -> List[int]:
    """
    Ripple-carry full adder over bin_size bits.

    Operands must be equally long and wide enough to hold the sum.
    """
    res = []
    carry = carry_in
    for i in range(bin_size):
        xi = x_bin[i]
        yi = y_bin[i]
        # res = x ^ y ^ carry
        y_xor_carry = yi ^ carry
        res.append(xi ^ y_xor_carry)
        # carry = (x & y) ^ (x & carry) ^ (y & carry)
        carry = yi ^ (y_xor_carry & (xi ^ yi))
    return res


def ct_add(x: int, y: int, bin_size: int) -> int:
    return from_bin_le(adder(to_bin_le(x, bin_size), to_bin_le(y, bin_size), 0, bin_size))


def ct_sub(x: int, y: int, bin_size: int) -> int:
    y_not = [b ^ 1 for b in to_bin_le(y, bin_size)]
    return from_bin_le(adder(to_bin_le(x, bin_size), y_not, 1, bin_size))


def ct_lt(x: int, y: int, bin_size: int) -> int:
    """1 if x < y else 0."""
    return ct_sign_bit(ct_sub(x, y, bin_size), bin_size)


def ct_select(b: int, x: int, y: int, bin_size: int) -> int:
    """x if b else y, without branching on b."""
    return ct_add(y, int(b) * ct_sub(x, y, bin_size), bin_size)


def verify_bin_size(x: int, bin_size: int) -> bool:
    """
    True if -2^bin_size <= x < 2^bin_size.

    Not constant-time for arbitrary x, but constant-time for every x
    for which it returns True.
    """
    return (x >> bin_size) in (0, -1)


def ct_add_mod(x: int, y: int, order: int, bin_size: int) -> int:
    """(x + y) mod order for x, y in [0, order), reduced without branching."""
    s = ct_add(x, y, bin_size)
    return ct_select(ct_lt(s, order, bin_size), s, ct_sub(s, order, bin_size), bin_size)


def ct_sub_mod(x: int, y: int, order: int, bin_size: int) -> int:
    """(x - y) mod order for x, y in [0, order), reduced without branching."""
    d = ct_sub(x, y, bin_size)
    return ct_select(ct_sign_bit(d, bin_size), ct_add(d, order, bin_size), d, bin_size)
