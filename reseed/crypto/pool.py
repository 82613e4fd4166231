"""
Entropy pool: a single evolving 32-byte secret.

The pool is seeded once by hashing the host's weak seed and is then replaced,
never merged, by hashing the current state together with fresh inputs before
every random draw. All randomness the registry uses is a deterministic
function of the sequence of inputs folded in here.
"""

import logging
from typing import Sequence

from .hashing import DEFAULT_ALGORITHM, DIGEST_SIZE, digest
from .stream import ChaCha20Stream
from .utils import secure_zero

logger = logging.getLogger(__name__)


def reseed_state(current_state: bytes, fresh_inputs: Sequence[bytes],
                 algorithm: str = DEFAULT_ALGORITHM) -> bytes:
    """
    Derive the successor pool state.

    Computes ``Hash(current_state || fresh_inputs[0] || fresh_inputs[1] ...)``.
    The order of ``fresh_inputs`` is part of the contract: the same inputs in
    the same order always give the same successor.

    Args:
        current_state: 32-byte current state
        fresh_inputs: Ordered byte strings to fold in
        algorithm: Hash algorithm name

    Returns:
        32-byte successor state
    """
    if len(current_state) != DIGEST_SIZE:
        raise ValueError("Pool state must be 32 bytes")

    data = bytearray(current_state)
    for item in fresh_inputs:
        if not isinstance(item, (bytes, bytearray)):
            raise TypeError(f"Entropy inputs must be bytes, got {type(item).__name__}")
        data.extend(item)

    new_state = digest(bytes(data), algorithm)
    secure_zero(data)
    return new_state


class EntropyPool:
    """Holds the secret state that keys every pseudo-random stream."""

    def __init__(self, state: bytes, algorithm: str = DEFAULT_ALGORITHM):
        """
        Wrap an existing 32-byte state.

        Use :meth:`initialize` to seed a pool from a weak seed.

        Args:
            state: 32-byte secret state
            algorithm: Hash algorithm used for reseeding
        """
        if len(state) != DIGEST_SIZE:
            raise ValueError("Pool state must be 32 bytes")

        self.algorithm = algorithm
        self._state = bytearray(state)
        self._generation = 0

    @classmethod
    def initialize(cls, weak_seed: bytes, algorithm: str = DEFAULT_ALGORITHM) -> 'EntropyPool':
        """
        Seed a new pool with ``Hash(weak_seed)``.

        The hash keeps a raw, directly observable seed out of the stream key
        but adds no unpredictability of its own.

        Args:
            weak_seed: Host-provided seed of any length
            algorithm: Hash algorithm name

        Returns:
            Freshly seeded pool
        """
        pool = cls(digest(bytes(weak_seed), algorithm), algorithm)
        logger.debug(f"Entropy pool initialized using {algorithm}")
        return pool

    @property
    def generation(self) -> int:
        """Number of reseeds applied since initialization."""
        return self._generation

    def reseed(self, fresh_inputs: Sequence[bytes]) -> 'EntropyPool':
        """
        Fold fresh inputs into the pool, producing its successor.

        The current state is always the first segment hashed, followed by
        ``fresh_inputs`` in the given order. This pool is left untouched so a
        caller can discard the successor if the operation it was drawn for
        fails; once the successor is adopted this pool should be dropped.

        Args:
            fresh_inputs: Ordered byte strings to fold in

        Returns:
            Successor pool, one generation ahead
        """
        successor = EntropyPool(
            reseed_state(bytes(self._state), fresh_inputs, self.algorithm),
            self.algorithm,
        )
        successor._generation = self._generation + 1
        return successor

    def derive_stream(self) -> ChaCha20Stream:
        """
        Spawn a pseudo-random stream keyed by the current state.

        Returns:
            Stream positioned at word zero
        """
        return ChaCha20Stream(bytes(self._state))

    def __repr__(self) -> str:
        return f"EntropyPool(algorithm={self.algorithm!r}, generation={self._generation})"

    def __del__(self):
        """Clear the state on destruction."""
        if hasattr(self, '_state'):
            secure_zero(self._state)
