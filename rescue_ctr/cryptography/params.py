# rescue_ctr/cryptography/params.py
"""
Rescue-CTR Parameter Derivation

Everything about a Rescue instance that does not depend on the key:
  - alpha: smallest prime in ALPHA_CANDIDATES not dividing p-1
  - alpha_inverse: alpha^-1 mod (p-1)
  - n_rounds: closed-form bounds for SECURITY_LEVEL bits
  - MDS matrix: m x m Cauchy matrix 1/(i+j), with a closed-form inverse
  - round constants: sampled from SHAKE256 under a domain string

Reference: https://tosc.iacr.org/index.php/ToSC/article/view/8695/8287
           https://eprint.iacr.org/2020/1143.pdf (Rescue-Prime)

Bundles are memoized per (field, mode kind, m, capacity); constructing many
ciphers only re-runs the key schedule.
"""

from __future__ import annotations

import hashlib
import math
import threading
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from .common import (
    ALPHA_CANDIDATES,
    CIPHER_DOMAIN,
    SECURITY_LEVEL,
    XOF_EXTRA_BYTES,
    NoValidAlpha,
    SingularMatrix,
    deserialize_le,
    logger,
)
from .field import FpField
from .matrix import Matrix, to_vec


# =============================================================================
# Alpha and Round Count
# =============================================================================

def get_alpha_and_inverse(p: int) -> Tuple[int, int]:
    """Smallest candidate prime alpha coprime to p-1, and alpha^-1 mod (p-1)."""
    p_minus_one = p - 1
    for a in ALPHA_CANDIDATES:
        if p_minus_one % a != 0:
            return a, pow(a, -1, p_minus_one)
    raise NoValidAlpha("Could not find prime alpha that does not divide p-1.")


def get_n_rounds(p: int, kind: str, alpha: int, m: int, capacity: int = 0) -> int:
    """
    Number of Rescue rounds for SECURITY_LEVEL bits of security.

    cipher: 2 * max(l0, l1, 5), l0 from the algebraic bound and l1 from the
            statistical bound (which depends on alpha == 3).
    hash:   smallest l1 (searched up to 24) whose Groebner-basis cost exceeds
            2^SECURITY_LEVEL, floored at 5, plus 50%.
    """
    if kind == "cipher":
        l0 = math.ceil(
            (2 * SECURITY_LEVEL)
            / ((m + 1) * (math.log2(float(p)) - math.log2(float(alpha) - 1)))
        )
        if alpha == 3:
            l1 = math.ceil((SECURITY_LEVEL + 2) / (4 * m))
        else:
            l1 = math.ceil((SECURITY_LEVEL + 3) / (5.5 * m))
        return 2 * max(l0, l1, 5)

    if kind == "hash":
        rate = m - capacity

        def dcon(n: int) -> int:
            return math.floor(0.5 * (alpha - 1) * m * (n - 1) + 2.0)

        def v(n: int) -> int:
            return m * (n - 1) + rate

        target = 1 << SECURITY_LEVEL
        l1 = 1
        tmp = math.comb(v(l1) + dcon(l1), v(l1))
        while tmp * tmp <= target and l1 <= 23:
            l1 += 1
            tmp = math.comb(v(l1) + dcon(l1), v(l1))
        return math.ceil(1.5 * max(5, l1))

    raise ValueError(f"unknown Rescue mode: {kind!r}")


# =============================================================================
# MDS Matrix (Cauchy)
# =============================================================================

def build_cauchy(field: FpField, size: int) -> Matrix:
    """C[i][j] = 1 / (i + j) for i, j in 1..size. i + j >= 2, so never zero."""
    data = [
        [field.inv(i + j) for j in range(1, size + 1)]
        for i in range(1, size + 1)
    ]
    return Matrix(field, data)


def build_inverse_cauchy(field: FpField, size: int) -> Matrix:
    """Closed-form inverse of build_cauchy(field, size)."""

    def product(values) -> int:
        acc = field.ONE
        for v in values:
            acc = field.mul(acc, field.create(v))
        return acc

    def prime(values, val) -> int:
        return product(val - u if u != val else 1 for u in values)

    ks = range(1, size + 1)
    data = []
    for i in ks:
        row = []
        for j in ks:
            a = product(-i - k for k in ks)
            a_prime = prime(list(ks), j)
            b = product(j + k for k in ks)
            b_prime = prime([-k for k in ks], -i)
            row.append(
                field.mul(a, field.mul(b, field.mul(
                    field.inv(a_prime),
                    field.mul(field.inv(b_prime), field.inv(-i - j)),
                )))
            )
        data.append(row)
    return Matrix(field, data)


def get_mds_matrix_and_inverse(field: FpField, m: int) -> Tuple[Matrix, Matrix]:
    return build_cauchy(field, m), build_inverse_cauchy(field, m)


# =============================================================================
# Round Constants
# =============================================================================

class ShakeStream:
    """
    SHAKE256 as a readable stream.

    Successive read() calls return consecutive output bytes. hashlib only
    offers a prefix digest, so the output is regenerated at a doubled length
    whenever the buffer runs out.
    """

    def __init__(self, seed: bytes):
        self._hasher = hashlib.shake_256(seed)
        self._buf = b""
        self._pos = 0

    def read(self, n: int) -> bytes:
        end = self._pos + n
        if end > len(self._buf):
            self._buf = self._hasher.digest(max(end, 2 * len(self._buf), 1024))
        out = self._buf[self._pos:end]
        self._pos = end
        return out


def _field_elems(field: FpField, stream: ShakeStream, count: int) -> List[int]:
    # prime fields have no subgroups to check against
    buffer_len = math.ceil(field.BITS / 8) + XOF_EXTRA_BYTES
    return [field.create(deserialize_le(stream.read(buffer_len))) for _ in range(count)]


def _chunk(values: List[int], width: int) -> List[List[int]]:
    return [values[k:k + width] for k in range(0, len(values), width)]


def hash_domain(field: FpField, m: int, capacity: int) -> bytes:
    return f"Rescue-XLIX({field.ORDER},{m},{capacity},{SECURITY_LEVEL})".encode()


def require_invertible(mat: Matrix) -> Matrix:
    if mat.field.is0(mat.det()):
        raise SingularMatrix(f"{mat.nrows}x{mat.ncols} matrix is singular")
    return mat


def _sample_invertible(field: FpField, stream: ShakeStream, m: int, first: List[int]) -> Matrix:
    """Resample only the matrix (never the vectors) until it is invertible."""
    mat = Matrix(field, _chunk(first, m))
    attempts = 0
    while True:
        try:
            return require_invertible(mat)
        except SingularMatrix:
            attempts += 1
            logger.warning(f"Singular round constant matrix, resampling (attempt {attempts})")
            mat = Matrix(field, _chunk(_field_elems(field, stream, m * m), m))


def sample_constants(
    field: FpField, kind: str, m: int, n_rounds: int, capacity: int = 0
) -> List[Matrix]:
    """
    Round constants as 2*n_rounds + 1 column vectors.

    cipher: an affine recurrence c[r+1] = M c[r] + t, with M resampled
            until invertible. These feed the key schedule.
    hash:   a leading zero vector followed by 2*n_rounds sampled vectors
            (Algorithm 3 of the Rescue-Prime paper).
    """
    if kind == "cipher":
        stream = ShakeStream(CIPHER_DOMAIN)
        r = _field_elems(field, stream, m * m + 2 * m)
        mat = _sample_invertible(field, stream, m, r[:m * m])
        initial = Matrix(field, to_vec(r[m * m:m * m + m]))
        affine = Matrix(field, to_vec(r[m * m + m:]))
        constants = [initial]
        for i in range(2 * n_rounds):
            constants.append(mat.mat_mul(constants[i]).add(affine))
        return constants

    if kind == "hash":
        stream = ShakeStream(hash_domain(field, m, capacity))
        r = _field_elems(field, stream, 2 * m * n_rounds)
        constants = [Matrix(field, to_vec([0] * m))]
        for vec in _chunk(r, m):
            constants.append(Matrix(field, to_vec(vec)))
        return constants

    raise ValueError(f"unknown Rescue mode: {kind!r}")


# =============================================================================
# Parameter Bundle Cache
# =============================================================================

@dataclass(frozen=True)
class RescueParams:
    """Key-independent parameters of one Rescue instance."""
    field: FpField
    kind: str
    m: int
    capacity: int
    alpha: int
    alpha_inverse: int
    n_rounds: int
    mds_mat: Matrix
    mds_mat_inverse: Matrix
    round_constants: Tuple[Matrix, ...]


_PARAMS_CACHE: Dict[Tuple[int, str, int, int], RescueParams] = {}
_PARAMS_LOCK = threading.Lock()


def get_rescue_params(
    field: FpField, kind: str, m: int, capacity: Optional[int] = None
) -> RescueParams:
    """Return the (memoized) parameter bundle for this field and mode."""
    if kind not in ("cipher", "hash"):
        raise ValueError(f"unknown Rescue mode: {kind!r}")
    capacity = int(capacity or 0) if kind == "hash" else 0
    key = (field.ORDER, kind, m, capacity)
    with _PARAMS_LOCK:
        params = _PARAMS_CACHE.get(key)
        if params is None:
            params = _derive_params(field, kind, m, capacity)
            _PARAMS_CACHE[key] = params
        return params


def _derive_params(field: FpField, kind: str, m: int, capacity: int) -> RescueParams:
    alpha, alpha_inverse = get_alpha_and_inverse(field.ORDER)
    n_rounds = get_n_rounds(field.ORDER, kind, alpha, m, capacity)
    mds, mds_inv = get_mds_matrix_and_inverse(field, m)
    constants = sample_constants(field, kind, m, n_rounds, capacity)
    logger.debug(
        f"Derived Rescue {kind} params: m={m}, capacity={capacity}, "
        f"alpha={alpha}, n_rounds={n_rounds}"
    )
    return RescueParams(
        field=field,
        kind=kind,
        m=m,
        capacity=capacity,
        alpha=alpha,
        alpha_inverse=alpha_inverse,
        n_rounds=n_rounds,
        mds_mat=mds,
        mds_mat_inverse=mds_inv,
        round_constants=tuple(constants),
    )


def clear_params_cache() -> None:
    with _PARAMS_LOCK:
        _PARAMS_CACHE.clear()
