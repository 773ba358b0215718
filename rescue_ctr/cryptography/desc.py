# rescue_ctr/cryptography/desc.py
"""
Rescue-CTR Permutation

RescueDesc binds a parameter bundle to a mode:
  - CipherMode(key): m = len(key); round keys come from the key schedule
  - HashMode(m, capacity): round keys are the sampled round constants

Permutation (2*n_rounds rounds over an m x 1 state):
    s = s + k[0]
    for r in 0 .. 2*n_rounds-1:
        s = MDS @ s^(e_even if r even else e_odd) + k[r+1]

Cipher mode uses (alpha^-1, alpha) for (even, odd) rounds, hash mode the
reverse. Key additions use the constant-time adder.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence, Tuple, Union

from .common import RESCUE_PARAMS
from .field import FpField
from .matrix import Matrix, to_vec
from .params import get_rescue_params


# =============================================================================
# Modes
# =============================================================================

@dataclass(frozen=True)
class CipherMode:
    key: Tuple[int, ...]

    def __post_init__(self):
        object.__setattr__(self, "key", tuple(int(k) for k in self.key))


@dataclass(frozen=True)
class HashMode:
    m: int = RESCUE_PARAMS["hash"]["m"]
    capacity: int = RESCUE_PARAMS["hash"]["capacity"]


RescueMode = Union[CipherMode, HashMode]


def exponent_for_even(mode: RescueMode, alpha: int, alpha_inverse: int) -> int:
    if isinstance(mode, CipherMode):
        return alpha_inverse
    if isinstance(mode, HashMode):
        return alpha
    raise TypeError(f"unknown Rescue mode: {mode!r}")


def exponent_for_odd(mode: RescueMode, alpha: int, alpha_inverse: int) -> int:
    if isinstance(mode, CipherMode):
        return alpha
    if isinstance(mode, HashMode):
        return alpha_inverse
    raise TypeError(f"unknown Rescue mode: {mode!r}")


# =============================================================================
# Permutation
# =============================================================================

def rescue_permutation(
    mode: RescueMode,
    alpha: int,
    alpha_inverse: int,
    mds_mat: Matrix,
    subkeys: Sequence[Matrix],
    state: Matrix,
) -> List[Matrix]:
    """Forward permutation. Returns every intermediate state; the output is the last."""
    e_even = exponent_for_even(mode, alpha, alpha_inverse)
    e_odd = exponent_for_odd(mode, alpha, alpha_inverse)
    states = [state.add(subkeys[0], ct=True)]
    for r in range(len(subkeys) - 1):
        s = states[r].pow(e_even if r % 2 == 0 else e_odd)
        states.append(mds_mat.mat_mul(s).add(subkeys[r + 1], ct=True))
    return states


def rescue_permutation_inverse(
    mode: RescueMode,
    alpha: int,
    alpha_inverse: int,
    mds_mat_inverse: Matrix,
    subkeys: Sequence[Matrix],
    state: Matrix,
) -> List[Matrix]:
    """
    Inverse permutation. Walks the subkeys backwards; the last returned
    state is the preimage of `state`.
    """
    # undoing forward round r uses the exponent of round r, inverted
    e_even = exponent_for_even(mode, alpha, alpha_inverse)
    e_odd = exponent_for_odd(mode, alpha, alpha_inverse)
    n = len(subkeys) - 1
    states = [state]
    for r in range(n):
        s = mds_mat_inverse.mat_mul(states[r].sub(subkeys[n - r], ct=True))
        fwd_round = n - 1 - r
        # inverse of x^e_even is x^e_odd and vice versa
        s = s.pow(e_odd if fwd_round % 2 == 0 else e_even)
        states.append(s)
    states.append(states[-1].sub(subkeys[0], ct=True))
    return states[1:]


# =============================================================================
# Rescue Description
# =============================================================================

class RescueDesc:
    """
    Parameters of the Rescue cipher or hash, including round keys.

    Immutable after construction; safe to share between threads.
    See: https://tosc.iacr.org/index.php/ToSC/article/view/8695/8287
    """

    def __init__(self, field: FpField, mode: RescueMode):
        if isinstance(mode, CipherMode):
            m = len(mode.key)
            if m < 2:
                raise ValueError(f"parameter m must be at least 2 (found {m})")
            params = get_rescue_params(field, "cipher", m)
        elif isinstance(mode, HashMode):
            m = mode.m
            if m < 2 or not 0 < mode.capacity < m:
                raise ValueError(f"invalid hash mode m={m}, capacity={mode.capacity}")
            params = get_rescue_params(field, "hash", m, mode.capacity)
        else:
            raise TypeError(f"unknown Rescue mode: {mode!r}")

        self.field = field
        self.mode = mode
        self.m = m
        self.alpha = params.alpha
        self.alpha_inverse = params.alpha_inverse
        self.n_rounds = params.n_rounds
        self.mds_mat = params.mds_mat
        self.mds_mat_inverse = params.mds_mat_inverse

        if isinstance(mode, CipherMode):
            # key schedule: the key runs through the permutation keyed by the round constants
            self.round_keys = tuple(rescue_permutation(
                mode, self.alpha, self.alpha_inverse, self.mds_mat,
                params.round_constants, Matrix(field, to_vec(mode.key)),
            ))
        else:
            self.round_keys = params.round_constants

    def __repr__(self) -> str:
        kind = "cipher" if isinstance(self.mode, CipherMode) else "hash"
        return f"RescueDesc(kind={kind}, m={self.m}, n_rounds={self.n_rounds})"

    def permute(self, state: Matrix) -> Matrix:
        return rescue_permutation(
            self.mode, self.alpha, self.alpha_inverse, self.mds_mat, self.round_keys, state
        )[2 * self.n_rounds]

    def permute_inverse(self, state: Matrix) -> Matrix:
        return rescue_permutation_inverse(
            self.mode, self.alpha, self.alpha_inverse, self.mds_mat_inverse, self.round_keys, state
        )[2 * self.n_rounds]
