# rescue_ctr/cryptography/cipher.py
"""
Rescue-CTR Stream Cipher

The Rescue block cipher (m = 5) in counter mode over the Curve25519 base
field. Designed for encrypting small vectors of field elements (e.g. votes)
for a confidential-computation network.

  - Key: HKDF-RescuePrime(salt=[], ikm=[LE(shared_secret)], info=[])
  - Counter block i: [LE(nonce), i, 0, 0, 0]
  - ct[j] = pt[j] + Rescue_K(counter)[j]  (mod p), combined in constant time
  - Wire: one 32-byte little-endian block per element

The nonce MUST be unique per key. Reusing one leaks the difference of the
plaintexts.
"""

from __future__ import annotations

import operator
from typing import List, Sequence

from .common import (
    BLOCK_BYTES,
    CIPHER_BLOCK_SIZE,
    NONCE_BYTES,
    SHARED_SECRET_BYTES,
    InvalidBlockLength,
    InvalidKeyLength,
    InvalidNonceLength,
    PlaintextOutOfRange,
    deserialize_le,
    serialize_le,
)
from .desc import CipherMode, RescueDesc
from .field import (
    CURVE25519_BASE_FIELD,
    ct_add_mod,
    ct_lt,
    ct_sign_bit,
    ct_sub_mod,
    get_bin_size,
    verify_bin_size,
)
from .hash import HKDFRescuePrime
from .matrix import Matrix, to_vec


def get_counter(nonce: int, n_blocks: int) -> List[int]:
    """CTR counter stream: [nonce, i, 0, 0, 0] for each block i."""
    counter = []
    for i in range(n_blocks):
        counter.extend([nonce, i, 0, 0, 0])
    return counter


def _check_nonce(nonce: bytes) -> int:
    if len(nonce) != NONCE_BYTES:
        raise InvalidNonceLength(f"nonce must be of length {NONCE_BYTES} (found {len(nonce)})")
    return deserialize_le(nonce)


class RescueCipher:
    """
    Rescue cipher in Counter (CTR) mode with block size m = 5.

    Stateless after construction: encrypt/decrypt calls are independent and
    the instance may be shared between threads.
    See: https://tosc.iacr.org/index.php/ToSC/article/view/8695/8287
    """

    BLOCK_SIZE = CIPHER_BLOCK_SIZE
    NONCE_BYTES = NONCE_BYTES
    CT_BYTES = BLOCK_BYTES

    def __init__(self, shared_secret: bytes):
        if len(shared_secret) != SHARED_SECRET_BYTES:
            raise InvalidKeyLength(
                f"shared secret must be {SHARED_SECRET_BYTES} bytes (found {len(shared_secret)})"
            )
        hkdf = HKDFRescuePrime()
        rescue_key = hkdf.okm([], [deserialize_le(shared_secret)], [])
        self.desc = RescueDesc(CURVE25519_BASE_FIELD, CipherMode(key=tuple(rescue_key)))
        self._bin_size = get_bin_size(self.desc.field.ORDER - 1)

    def _keystream(self, counter: Sequence[int]) -> List[int]:
        if len(counter) != self.BLOCK_SIZE:
            raise ValueError(f"counter must be of length {self.BLOCK_SIZE} (found {len(counter)})")
        return self.desc.permute(Matrix(self.desc.field, to_vec(counter))).column()

    def _check_plaintext(self, x: int) -> None:
        order = self.desc.field.ORDER
        b = self._bin_size
        if (
            not verify_bin_size(x, b - 1)
            or ct_sign_bit(x, b)
            or not ct_lt(x, order, b)
        ):
            raise PlaintextOutOfRange(f"plaintext must be non-negative and less than {order}")

    # -----------------------------------------
    # Raw (field element) API
    # -----------------------------------------

    def encrypt_raw(self, plaintext: Sequence[int], nonce: bytes) -> List[int]:
        """Encrypt field elements; returns ciphertext field elements."""
        values = [operator.index(x) for x in plaintext]
        counter = get_counter(_check_nonce(nonce), -(-len(values) // self.BLOCK_SIZE))
        for x in values:
            self._check_plaintext(x)
        order = self.desc.field.ORDER
        ciphertext = []
        for off in range(0, len(values), self.BLOCK_SIZE):
            ks = self._keystream(counter[off:off + self.BLOCK_SIZE])
            for j, x in enumerate(values[off:off + self.BLOCK_SIZE]):
                ciphertext.append(ct_add_mod(x, ks[j], order, self._bin_size))
        return ciphertext

    def decrypt_raw(self, ciphertext: Sequence[int], nonce: bytes) -> List[int]:
        """Decrypt field elements produced by encrypt_raw under the same nonce."""
        values = [operator.index(c) for c in ciphertext]
        counter = get_counter(_check_nonce(nonce), -(-len(values) // self.BLOCK_SIZE))
        field = self.desc.field
        plaintext = []
        for off in range(0, len(values), self.BLOCK_SIZE):
            chunk = values[off:off + self.BLOCK_SIZE]
            ks = self._keystream(counter[off:off + self.BLOCK_SIZE])
            for j, c in enumerate(chunk):
                plaintext.append(
                    ct_sub_mod(field.create(c), ks[j], field.ORDER, self._bin_size)
                )
        return plaintext

    # -----------------------------------------
    # Serialized (32-byte block) API
    # -----------------------------------------

    def encrypt(self, plaintext: Sequence[int], nonce: bytes) -> List[bytes]:
        """Encrypt and serialize each element to a 32-byte little-endian block."""
        return [serialize_le(c, self.CT_BYTES) for c in self.encrypt_raw(plaintext, nonce)]

    def decrypt(self, ciphertext: Sequence[bytes], nonce: bytes) -> List[int]:
        """Deserialize 32-byte blocks and decrypt them."""
        values = []
        for c in ciphertext:
            if len(c) != self.CT_BYTES:
                raise InvalidBlockLength(
                    f"ciphertext must be of length {self.CT_BYTES} (found {len(c)})"
                )
            values.append(deserialize_le(c))
        return self.decrypt_raw(values, nonce)
