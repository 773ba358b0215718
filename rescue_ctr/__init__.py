# rescue_ctr/__init__.py
"""
Rescue-CTR: Rescue Cipher in Counter Mode

Symmetric encryption of field elements for confidential-computation
networks, over the Curve25519 base field (p = 2^255 - 19).

Architecture:
    ┌─────────────────────────────────────────────────────────┐
    │  rescue_ctr                                             │
    │  └── cryptography/                                      │
    │      ├── field.py   # FpField + constant-time helpers   │
    │      ├── matrix.py  # Matrices over the field           │
    │      ├── params.py  # alpha, rounds, MDS, constants     │
    │      ├── desc.py    # Rescue permutation / inverse      │
    │      ├── hash.py    # Rescue-Prime, HMAC, HKDF          │
    │      └── cipher.py  # RescueCipher (CTR mode)           │
    └─────────────────────────────────────────────────────────┘

Usage:
    cipher = RescueCipher(shared_secret)          # 32 bytes
    nonce = get_random_nonce()                    # 16 bytes, never reuse
    blocks = cipher.encrypt([1, 2, 3], nonce)     # 32-byte LE blocks
    assert cipher.decrypt(blocks, nonce) == [1, 2, 3]
"""

__version__ = "0.4.0"

from .cryptography import (
    CURVE25519_BASE_FIELD,
    CURVE25519_BASE_FIELD_ORDER,
    RescueError,
    InvalidNonceLength,
    InvalidBlockLength,
    InvalidKeyLength,
    PlaintextOutOfRange,
    NoValidAlpha,
    RescueCipher,
    RescueDesc,
    CipherMode,
    HashMode,
    RescuePrimeHash,
    HMACRescuePrime,
    HKDFRescuePrime,
    serialize_le,
    deserialize_le,
    compress_uint128,
    decompress_uint128,
    get_random_nonce,
)

__all__ = [
    "__version__",
    "CURVE25519_BASE_FIELD",
    "CURVE25519_BASE_FIELD_ORDER",
    "RescueError",
    "InvalidNonceLength",
    "InvalidBlockLength",
    "InvalidKeyLength",
    "PlaintextOutOfRange",
    "NoValidAlpha",
    "RescueCipher",
    "RescueDesc",
    "CipherMode",
    "HashMode",
    "RescuePrimeHash",
    "HMACRescuePrime",
    "HKDFRescuePrime",
    "serialize_le",
    "deserialize_le",
    "compress_uint128",
    "decompress_uint128",
    "get_random_nonce",
]
