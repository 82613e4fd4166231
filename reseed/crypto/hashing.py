"""
Fixed-size digests used to fold entropy into the pool.

SHA-256 goes through ``hashlib`` like the rest of the pool code; the other
32-byte digests come from the ``cryptography`` hash primitives.
"""

import hashlib
from typing import Tuple

from cryptography.hazmat.primitives import hashes

DIGEST_SIZE = 32  # every supported algorithm yields 256 bits

DEFAULT_ALGORITHM = "sha256"

_CRYPTOGRAPHY_ALGORITHMS = {
    "sha3_256": hashes.SHA3_256,
    "blake2s": lambda: hashes.BLAKE2s(DIGEST_SIZE),
}


def supported_algorithms() -> Tuple[str, ...]:
    """Names accepted by :func:`digest`."""
    return (DEFAULT_ALGORITHM,) + tuple(sorted(_CRYPTOGRAPHY_ALGORITHMS))


def digest(data: bytes, algorithm: str = DEFAULT_ALGORITHM) -> bytes:
    """
    Hash ``data`` into a 32-byte digest.

    Args:
        data: Input bytes
        algorithm: One of :func:`supported_algorithms`

    Returns:
        32-byte digest

    Raises:
        ValueError: If the algorithm is unknown
    """
    if algorithm == DEFAULT_ALGORITHM:
        return hashlib.sha256(data).digest()

    factory = _CRYPTOGRAPHY_ALGORITHMS.get(algorithm)
    if factory is None:
        raise ValueError(
            f"Unsupported hash algorithm {algorithm!r}, "
            f"expected one of {', '.join(supported_algorithms())}"
        )

    hasher = hashes.Hash(factory())
    hasher.update(data)
    return hasher.finalize()
