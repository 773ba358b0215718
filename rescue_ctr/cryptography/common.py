# rescue_ctr/cryptography/common.py
"""
Rescue-CTR Common Components

Shared constants, error types and byte-level helpers for the Rescue cipher.

Wire Format Specification:
  - Field elements: unsigned little-endian, fixed 32 bytes per element
  - Nonce: 16 raw bytes, read as an unsigned little-endian integer
  - uint128 compression: 16-byte little-endian groups
"""

from __future__ import annotations

import logging
import secrets
from typing import Dict, List, Sequence

logger = logging.getLogger("rescue-ctr")


# =============================================================================
# Constants
# =============================================================================

# Base field of Curve25519
CURVE25519_BASE_FIELD_ORDER: int = 2**255 - 19

SECURITY_LEVEL: int = 128

# Probable-prime candidates for the S-box exponent
ALPHA_CANDIDATES = (2, 3, 5, 7, 11, 13, 17, 19, 23, 29, 31, 37, 41, 43, 47)

CIPHER_DOMAIN: bytes = b"encrypt everything, compute anything"

# Extra XOF bytes per field element, keeps the reduction close to uniform
XOF_EXTRA_BYTES: int = 16

NONCE_BYTES: int = 16
BLOCK_BYTES: int = 32
SHARED_SECRET_BYTES: int = 32
CIPHER_BLOCK_SIZE: int = 5

RESCUE_PARAMS: Dict[str, Dict[str, int]] = {
    "cipher": {"m": CIPHER_BLOCK_SIZE},
    "hash": {"m": 6, "capacity": 1},
}


# =============================================================================
# Errors
# =============================================================================

class RescueError(ValueError):
    """Base class for all Rescue-CTR input and configuration errors."""


class InvalidNonceLength(RescueError):
    pass


class InvalidBlockLength(RescueError):
    pass


class InvalidKeyLength(RescueError):
    pass


class PlaintextOutOfRange(RescueError):
    pass


class NoValidAlpha(RescueError):
    """The field has no small prime alpha coprime to p-1."""


class SingularMatrix(RescueError):
    """Sampled round-constant matrix has determinant zero."""


class ShapeMismatch(RescueError):
    pass


# =============================================================================
# Utility Functions
# =============================================================================

def serialize_le(val: int, length: int) -> bytes:
    """Serialize a non-negative integer to exactly `length` little-endian bytes."""
    if val < 0:
        raise ValueError(f"Value {val} is negative")
    if val >> (8 * length):
        raise ValueError(f"Value {val} is too large for the byte length {length}")
    return val.to_bytes(length, "little")


def deserialize_le(data: bytes) -> int:
    """Convert bytes to integer (little-endian, unsigned)."""
    return int.from_bytes(bytes(data), "little", signed=False)


def compress_uint128(data: bytes) -> List[int]:
    """
    Compress bytes into 128-bit integers, 16 bytes per integer.

    Length must be a multiple of 16.
    """
    if len(data) % 16 != 0:
        raise ValueError(f"bytes length must be a multiple of 16 (found {len(data)})")
    return [deserialize_le(data[n:n + 16]) for n in range(0, len(data), 16)]


def decompress_uint128(compressed: Sequence[int]) -> bytes:
    """Inverse of compress_uint128. Every input must be below 2^128."""
    for c in compressed:
        if c < 0 or c >= 1 << 128:
            raise ValueError(f"input must be in [0, 2^128) (found {c})")
    return b"".join(serialize_le(c, 16) for c in compressed)


def generate_random_field_elem(q: int) -> int:
    """Uniform random value in [0, q) via rejection sampling."""
    byte_len = (q.bit_length() + 7) >> 3
    while True:
        r = int.from_bytes(secrets.token_bytes(byte_len), "big")
        if r < q:
            return r


def get_random_nonce() -> bytes:
    """Fresh 16-byte CTR nonce. Callers must never reuse one under the same key."""
    return secrets.token_bytes(NONCE_BYTES)
