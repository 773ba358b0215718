# tests/test_cipher.py
"""
Rescue-CTR Cipher Test Suite

Tests for: RescueCipher (CTR mode), get_counter
Categories:
  C1. Correctness (round-trip, boundaries)
  C2. Robustness (input validation)
  C3. Security-in-practice (nonce sensitivity, key sensitivity)
  C4. Reproducibility (determinism, known answers)
  C5. Interoperability (X25519 shared secrets, threads)
"""

import secrets
import threading

import pytest

from rescue_ctr import RescueCipher
from rescue_ctr.cryptography.common import (
    InvalidBlockLength,
    InvalidKeyLength,
    InvalidNonceLength,
    PlaintextOutOfRange,
    RescueError,
    deserialize_le,
    generate_random_field_elem,
    get_random_nonce,
    serialize_le,
)
from rescue_ctr.cryptography.cipher import get_counter
from rescue_ctr.cryptography.field import CURVE25519_BASE_FIELD
from rescue_ctr.cryptography.hash import HKDFRescuePrime
from rescue_ctr.cryptography.matrix import Matrix, to_vec

F = CURVE25519_BASE_FIELD
P = F.ORDER
ZERO_SECRET = bytes(32)
ZERO_NONCE = bytes(16)

# Plaintext [0] under a zero secret and a zero nonce.
ZERO_VECTOR_CIPHERTEXT_HEX = "78fc947fd2477218e9573a764fdc520af235967b1a82a627ea85da4d68c6221b"

# Two-block vector: first and last ciphertext blocks.
MULTI_BLOCK_SECRET = bytes((i * 7 + 3) & 255 for i in range(32))
MULTI_BLOCK_NONCE = bytes(range(16))
MULTI_BLOCK_PLAINTEXT = [0, 1, 2, 3, 4, P - 1, 123456789]
MULTI_BLOCK_FIRST_HEX = "52c58a1f794e558acb743e144bff4ff744d9b131399a88a8bdea99932b27290b"
MULTI_BLOCK_LAST_HEX = "a82f31c8139e466084c82158d97d32c15b1577902ad50651b57301e9133d446c"


@pytest.fixture(scope="module")
def cipher():
    return RescueCipher(secrets.token_bytes(32))


@pytest.fixture(scope="module")
def zero_cipher():
    return RescueCipher(ZERO_SECRET)


# =============================================================================
# C1. Correctness
# =============================================================================

def test_c1_1_roundtrip_sizes(cipher):
    """C1.1: decrypt(encrypt(P, N), N) == P for lengths around the block size"""
    for n in (0, 1, 4, 5, 6, 11):
        pt = [generate_random_field_elem(P) for _ in range(n)]
        nonce = get_random_nonce()
        ct = cipher.encrypt(pt, nonce)
        assert len(ct) == n
        assert all(isinstance(c, bytes) and len(c) == 32 for c in ct)
        assert cipher.decrypt(ct, nonce) == pt


def test_c1_2_boundary_values(cipher):
    """C1.2: 0 and p-1 round-trip"""
    pt = [0, P - 1, 1, P - 2]
    nonce = get_random_nonce()
    assert cipher.decrypt(cipher.encrypt(pt, nonce), nonce) == pt


def test_c1_3_raw_roundtrip(cipher):
    """C1.3: encrypt_raw / decrypt_raw work on field elements"""
    pt = [3, 1, 4, 1, 5, 9, 2]
    nonce = get_random_nonce()
    ct = cipher.encrypt_raw(pt, nonce)
    assert all(0 <= c < P for c in ct)
    assert cipher.decrypt_raw(ct, nonce) == pt
    assert cipher.encrypt(pt, nonce) == [serialize_le(c, 32) for c in ct]


def test_c1_4_ctr_structure(cipher):
    """C1.4: ct = pt + Rescue(counter) mod p, block by block"""
    nonce = get_random_nonce()
    pt = list(range(7))
    ct = cipher.encrypt_raw(pt, nonce)
    counter = get_counter(deserialize_le(nonce), 2)
    ks = []
    for off in (0, 5):
        block = Matrix(F, to_vec(counter[off:off + 5]))
        ks.extend(cipher.desc.permute(block).column())
    assert ct == [F.add(p, k) for p, k in zip(pt, ks)]


def test_c1_5_get_counter():
    """C1.5: counter blocks are [nonce, i, 0, 0, 0]"""
    assert get_counter(9, 2) == [9, 0, 0, 0, 0, 9, 1, 0, 0, 0]
    assert get_counter(9, 0) == []


def test_c1_6_decrypt_accepts_bytearray(cipher):
    """C1.6: ciphertext blocks may be any 32-byte buffer"""
    nonce = get_random_nonce()
    ct = [bytearray(c) for c in cipher.encrypt([42], nonce)]
    assert cipher.decrypt(ct, nonce) == [42]


# =============================================================================
# C2. Robustness
# =============================================================================

@pytest.mark.parametrize("n", [0, 8, 15, 17, 32])
def test_c2_1_bad_nonce_length(cipher, n):
    """C2.1: nonce must be 16 bytes"""
    with pytest.raises(InvalidNonceLength):
        cipher.encrypt([1], bytes(n))
    with pytest.raises(InvalidNonceLength):
        cipher.decrypt([bytes(32)], bytes(n))


@pytest.mark.parametrize("value", [P, -1, P + 1, 2**256, -(2**300), 2**300])
def test_c2_2_plaintext_out_of_range(cipher, value):
    """C2.2: elements outside [0, p) are rejected"""
    with pytest.raises(PlaintextOutOfRange):
        cipher.encrypt([0, value], ZERO_NONCE)


def test_c2_3_bad_block_length(cipher):
    """C2.3: ciphertext blocks must be 32 bytes"""
    with pytest.raises(InvalidBlockLength):
        cipher.decrypt([bytes(31)], ZERO_NONCE)
    with pytest.raises(InvalidBlockLength):
        cipher.decrypt([bytes(32), bytes(33)], ZERO_NONCE)


def test_c2_4_bad_shared_secret():
    """C2.4: shared secret must be 32 bytes"""
    with pytest.raises(InvalidKeyLength):
        RescueCipher(bytes(31))


def test_c2_5_errors_are_value_errors(cipher):
    """C2.5: every input error is a RescueError and a ValueError"""
    with pytest.raises(RescueError):
        cipher.encrypt([1], b"short")
    with pytest.raises(ValueError):
        cipher.encrypt([-1], ZERO_NONCE)


def test_c2_6_non_integer_plaintext(cipher):
    """C2.6: floats are not field elements"""
    with pytest.raises(TypeError):
        cipher.encrypt([1.5], ZERO_NONCE)


# =============================================================================
# C3. Security-in-practice
# =============================================================================

def test_c3_1_nonce_sensitivity(cipher):
    """C3.1: different nonces give different ciphertexts"""
    pt = [1, 2, 3]
    n1 = get_random_nonce()
    n2 = bytes([n1[0] ^ 1]) + n1[1:]
    assert cipher.encrypt(pt, n1) != cipher.encrypt(pt, n2)


def test_c3_2_key_sensitivity(cipher, zero_cipher):
    """C3.2: different secrets give different ciphertexts"""
    assert cipher.encrypt([0], ZERO_NONCE) != zero_cipher.encrypt([0], ZERO_NONCE)


def test_c3_3_wrong_nonce_does_not_decrypt(cipher):
    """C3.3: decrypting under another nonce yields garbage"""
    pt = [7, 7, 7]
    n1, n2 = get_random_nonce(), get_random_nonce()
    assert cipher.decrypt(cipher.encrypt(pt, n1), n2) != pt


def test_c3_4_equal_elements_encrypt_differently(cipher):
    """C3.4: positions within a stream use distinct keystream"""
    ct = cipher.encrypt([5] * 6, get_random_nonce())
    assert len(set(ct)) == 6


# =============================================================================
# C4. Reproducibility
# =============================================================================

def test_c4_1_determinism(zero_cipher):
    """C4.1: two instances from one secret agree"""
    other = RescueCipher(ZERO_SECRET)
    pt = [10, 20, 30, 40, 50, 60]
    nonce = bytes(range(16))
    assert other.encrypt(pt, nonce) == zero_cipher.encrypt(pt, nonce)
    assert other.desc.round_keys == zero_cipher.desc.round_keys


def test_c4_2_key_derivation(zero_cipher):
    """C4.2: the cipher key is HKDF(salt=[], ikm=[LE(secret)], info=[])"""
    key = HKDFRescuePrime().okm([], [0], [])
    assert list(zero_cipher.desc.mode.key) == key
    assert zero_cipher.desc.m == 5
    assert zero_cipher.desc.n_rounds == 10


def test_c4_3_zero_vector_structure(zero_cipher):
    """C4.3: encrypting [0] returns the first element of Rescue([0, 0, 0, 0, 0])"""
    ct = zero_cipher.encrypt([0], ZERO_NONCE)
    first = zero_cipher.desc.permute(Matrix(F, to_vec([0] * 5))).column()[0]
    assert ct == [serialize_le(first, 32)]


def test_c4_4_zero_vector_known_answer(zero_cipher):
    """C4.4: byte-exact match with the reference client"""
    ct = zero_cipher.encrypt([0], ZERO_NONCE)
    assert ct[0].hex() == ZERO_VECTOR_CIPHERTEXT_HEX
    assert zero_cipher.decrypt(ct, ZERO_NONCE) == [0]


def test_c4_5_multi_block_known_answer():
    """C4.5: byte-exact match across two counter blocks"""
    cipher = RescueCipher(MULTI_BLOCK_SECRET)
    ct = cipher.encrypt(MULTI_BLOCK_PLAINTEXT, MULTI_BLOCK_NONCE)
    assert len(ct) == 7
    assert ct[0].hex() == MULTI_BLOCK_FIRST_HEX
    assert ct[-1].hex() == MULTI_BLOCK_LAST_HEX
    assert cipher.decrypt(ct, MULTI_BLOCK_NONCE) == MULTI_BLOCK_PLAINTEXT


# =============================================================================
# C5. Interoperability
# =============================================================================

def test_c5_1_x25519_shared_secret():
    """C5.1: both ends of an X25519 exchange build interoperable ciphers"""
    x25519 = pytest.importorskip("cryptography.hazmat.primitives.asymmetric.x25519")
    client = x25519.X25519PrivateKey.generate()
    network = x25519.X25519PrivateKey.generate()
    client_secret = client.exchange(network.public_key())
    network_secret = network.exchange(client.public_key())
    assert client_secret == network_secret

    nonce = get_random_nonce()
    vote = [1]
    ct = RescueCipher(client_secret).encrypt(vote, nonce)
    assert RescueCipher(network_secret).decrypt(ct, nonce) == vote


def test_c5_2_shared_between_threads(cipher):
    """C5.2: one instance serves concurrent callers"""
    jobs = [([i, i + 1], get_random_nonce()) for i in range(4)]
    results = [None] * len(jobs)

    def worker(idx):
        pt, nonce = jobs[idx]
        results[idx] = cipher.decrypt(cipher.encrypt(pt, nonce), nonce)

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(len(jobs))]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert results == [pt for pt, _ in jobs]
