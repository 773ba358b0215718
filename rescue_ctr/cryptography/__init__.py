# rescue_ctr/cryptography/__init__.py
"""
Rescue-CTR Cryptography Module

Layers, leaf-first:
  - field.py:  FpField and constant-time helpers
  - matrix.py: matrices over the field
  - params.py: alpha, round counts, Cauchy MDS, SHAKE256 round constants
  - desc.py:   Rescue permutation and its inverse
  - hash.py:   Rescue-Prime hash, HMAC, HKDF
  - cipher.py: RescueCipher (CTR mode)

Wire Format:
  - Ciphertext: 32-byte little-endian block per field element
  - Nonce: 16 bytes
"""

# Common utilities, constants and errors
from .common import (
    # Constants
    CURVE25519_BASE_FIELD_ORDER,
    SECURITY_LEVEL,
    NONCE_BYTES,
    BLOCK_BYTES,
    SHARED_SECRET_BYTES,
    CIPHER_BLOCK_SIZE,
    RESCUE_PARAMS,
    # Errors
    RescueError,
    InvalidNonceLength,
    InvalidBlockLength,
    InvalidKeyLength,
    PlaintextOutOfRange,
    NoValidAlpha,
    SingularMatrix,
    ShapeMismatch,
    # Utilities
    serialize_le,
    deserialize_le,
    compress_uint128,
    decompress_uint128,
    generate_random_field_elem,
    get_random_nonce,
)

# Field arithmetic
from .field import (
    FpField,
    CURVE25519_BASE_FIELD,
    get_bin_size,
    ct_add,
    ct_sub,
    ct_lt,
    ct_select,
    ct_sign_bit,
    verify_bin_size,
)

# Matrices
from .matrix import Matrix, rand_matrix

# Parameters
from .params import (
    RescueParams,
    get_alpha_and_inverse,
    get_n_rounds,
    get_mds_matrix_and_inverse,
    get_rescue_params,
)

# Permutation
from .desc import (
    CipherMode,
    HashMode,
    RescueDesc,
    rescue_permutation,
    rescue_permutation_inverse,
)

# Hash / KDF
from .hash import RescuePrimeHash, HMACRescuePrime, HKDFRescuePrime

# Cipher
from .cipher import RescueCipher, get_counter

__all__ = [
    "CURVE25519_BASE_FIELD_ORDER",
    "SECURITY_LEVEL",
    "NONCE_BYTES",
    "BLOCK_BYTES",
    "SHARED_SECRET_BYTES",
    "CIPHER_BLOCK_SIZE",
    "RESCUE_PARAMS",
    "RescueError",
    "InvalidNonceLength",
    "InvalidBlockLength",
    "InvalidKeyLength",
    "PlaintextOutOfRange",
    "NoValidAlpha",
    "SingularMatrix",
    "ShapeMismatch",
    "serialize_le",
    "deserialize_le",
    "compress_uint128",
    "decompress_uint128",
    "generate_random_field_elem",
    "get_random_nonce",
    "FpField",
    "CURVE25519_BASE_FIELD",
    "get_bin_size",
    "ct_add",
    "ct_sub",
    "ct_lt",
    "ct_select",
    "ct_sign_bit",
    "verify_bin_size",
    "Matrix",
    "rand_matrix",
    "RescueParams",
    "get_alpha_and_inverse",
    "get_n_rounds",
    "get_mds_matrix_and_inverse",
    "get_rescue_params",
    "CipherMode",
    "HashMode",
    "RescueDesc",
    "rescue_permutation",
    "rescue_permutation_inverse",
    "RescuePrimeHash",
    "HMACRescuePrime",
    "HKDFRescuePrime",
    "RescueCipher",
    "get_counter",
]
