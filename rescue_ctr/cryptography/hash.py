# rescue_ctr/cryptography/hash.py
"""
Rescue-CTR Hashing and Key Derivation

RescuePrimeHash: sponge over the Rescue permutation (m = 6, capacity = 1,
rate = 5), see https://eprint.iacr.org/2020/1143.pdf. Offers
log2(p) / 2 bits of collision and (second-)preimage resistance.

HMACRescuePrime: RFC 2104 with B = L = rate. The pads are added to the key
in the field instead of XORed.

HKDFRescuePrime: RFC 5869, single output block only (L = HashLen = rate).
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from .common import InvalidKeyLength, RESCUE_PARAMS, deserialize_le
from .desc import HashMode, RescueDesc
from .field import CURVE25519_BASE_FIELD, FpField
from .matrix import Matrix, to_vec

_IPAD = deserialize_le(b"\x36" * 32)
_OPAD = deserialize_le(b"\x5c" * 32)


class RescuePrimeHash:
    """Rescue-Prime sponge. digest() outputs `rate` field elements."""

    def __init__(self, field: FpField = CURVE25519_BASE_FIELD):
        m = RESCUE_PARAMS["hash"]["m"]
        capacity = RESCUE_PARAMS["hash"]["capacity"]
        self.desc = RescueDesc(field, HashMode(m=m, capacity=capacity))
        self.rate = m - capacity

    def digest(self, message: Sequence[int]) -> List[int]:
        """Algorithm 1 of the Rescue-Prime paper, padded per Algorithm 2."""
        field = self.desc.field
        m = self.desc.m
        rate = self.rate

        # pad: a single 1, then zeros up to a multiple of the rate
        padded = list(message) + [1]
        padded += [0] * (-len(padded) % rate)

        state = Matrix(field, to_vec([0] * m))
        for off in range(0, len(padded), rate):
            block = padded[off:off + rate] + [0] * (m - rate)
            state = self.desc.permute(state.add(Matrix(field, to_vec(block)), ct=True))
        return state.column()[:rate]


class HMACRescuePrime:
    """HMAC over Rescue-Prime, see https://datatracker.ietf.org/doc/html/rfc2104."""

    def __init__(self, hasher: Optional[RescuePrimeHash] = None):
        self.hasher = hasher or RescuePrimeHash()

    def digest(self, key: Sequence[int], message: Sequence[int]) -> List[int]:
        rate = self.hasher.rate
        if len(key) > rate:
            raise InvalidKeyLength(
                f"length of key is supposed to be at most the hash function's rate "
                f"(found {len(key)} and {rate})"
            )
        # key is zero-extended to B = rate
        key = list(key) + [0] * (rate - len(key))
        inner = self.hasher.digest([k + _IPAD for k in key] + list(message))
        return self.hasher.digest([k + _OPAD for k in key] + inner)


class HKDFRescuePrime:
    """HKDF over Rescue-Prime (RFC 5869). Only L = HashLen is supported."""

    def __init__(self, hmac: Optional[HMACRescuePrime] = None):
        self.hmac = hmac or HMACRescuePrime()

    def extract(self, salt: Sequence[int], ikm: Sequence[int]) -> List[int]:
        """HKDF-Extract: PRK = HMAC(salt, IKM); empty salt means HashLen zeros."""
        if len(salt) == 0:
            salt = [0] * self.hmac.hasher.rate
        return self.hmac.digest(salt, ikm)

    def expand(self, prk: Sequence[int], info: Sequence[int]) -> List[int]:
        """HKDF-Expand with N = 1: OKM = T(1) = HMAC(PRK, info || 1)."""
        return self.hmac.digest(prk, list(info) + [1])

    def okm(self, salt: Sequence[int], ikm: Sequence[int], info: Sequence[int]) -> List[int]:
        """One-shot derivation: Extract then Expand."""
        return self.expand(self.extract(salt, ikm), info)
