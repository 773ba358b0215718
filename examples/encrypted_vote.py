"""
Encrypted Vote: Client <-> Computation Network

Walks through how a client encrypts a vote for a confidential-computation
network:
    1. Client and network agree on a 32-byte secret (X25519)
    2. Client encrypts the vote with RescueCipher under a fresh nonce
    3. Network side derives the same cipher and decrypts

Requires the `cryptography` package for X25519.

Run:
    python examples/encrypted_vote.py
"""

import logging
import time

from cryptography.hazmat.primitives.asymmetric.x25519 import X25519PrivateKey

from rescue_ctr import RescueCipher, deserialize_le, get_random_nonce

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("rescue-ctr.example")


def run_vote(choice: int = 1) -> bool:
    print("=" * 70)
    print("Rescue-CTR: Encrypted Vote")
    print("=" * 70)

    # [1] Key agreement
    client_key = X25519PrivateKey.generate()
    network_key = X25519PrivateKey.generate()
    client_secret = client_key.exchange(network_key.public_key())
    network_secret = network_key.exchange(client_key.public_key())

    # [2] Client side
    start = time.time()
    client_cipher = RescueCipher(client_secret)
    setup_ms = (time.time() - start) * 1000

    nonce = get_random_nonce()
    start = time.time()
    ciphertext = client_cipher.encrypt([choice], nonce)
    encrypt_ms = (time.time() - start) * 1000

    print(f"\n[Client] vote={choice}")
    print(f"  nonce (u128):    {deserialize_le(nonce)}")
    print(f"  ciphertext[0]:   {ciphertext[0].hex()}")
    print(f"  setup:           {setup_ms:.1f}ms")
    print(f"  encrypt:         {encrypt_ms:.1f}ms")

    # [3] Network side
    network_cipher = RescueCipher(network_secret)
    recovered = network_cipher.decrypt(ciphertext, nonce)
    ok = recovered == [choice]

    print(f"\n[Network] recovered vote={recovered[0]}")
    if ok:
        logger.info("Vote round-trip OK")
    else:
        logger.error("Vote round-trip FAILED")
    return ok


if __name__ == "__main__":
    raise SystemExit(0 if run_vote() else 1)
