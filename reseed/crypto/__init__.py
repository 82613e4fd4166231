"""
Cryptographic building blocks for the reseed registry.

This module provides:
- Fixed-size digests (SHA-256, SHA3-256, BLAKE2s)
- The entropy pool and its reseeding function
- The ChaCha20 pseudo-random stream
"""

from .hashing import digest, supported_algorithms
from .pool import EntropyPool, reseed_state
from .stream import ChaCha20Stream

__all__ = [
    'digest',
    'supported_algorithms',
    'EntropyPool',
    'reseed_state',
    'ChaCha20Stream',
]
