"""
Chain Hashing

Script identities are blake2b-256 digests with the chain's default
personalization over the molecule-packed script.
"""

import hashlib

CKB_HASH_PERSONALIZATION = b"ckb-default-hash"
HASH_LEN = 32


def ckb_hash(data: bytes) -> bytes:
    """
    blake2b-256 personalized with b"ckb-default-hash"

    Example:
        >>> ckb_hash(b"").hex()[:16]
        '44f4c69744d5f8c5'
    """
    return hashlib.blake2b(data, digest_size=HASH_LEN, person=CKB_HASH_PERSONALIZATION).digest()
