"""
Host environment seen by the counter registry.

The registry does not produce its own entropy or know who is calling; it asks
the host for a per-call weak seed, the current round number and the caller's
account. ``StaticEnvironment`` pins those values for tests and replay,
``SystemEnvironment`` draws the weak seed from the operating system.
"""

import secrets
import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Iterator

ROUND_COUNTER_SIZE = 8  # rounds are mixed in as big-endian u64
MAX_ROUND = (1 << 64) - 1


class HostEnvironment(ABC):
    """Source of the external inputs folded into the entropy pool."""

    @abstractmethod
    def weak_random_seed(self) -> bytes:
        """Per-call random value; possibly low-entropy or observable."""

    @abstractmethod
    def round_counter(self) -> int:
        """Monotonically non-decreasing execution round, 0 <= n < 2**64."""

    @abstractmethod
    def caller_identity(self) -> str:
        """Account invoking the current operation."""


class StaticEnvironment(HostEnvironment):
    """
    Environment with fixed, directly settable inputs.

    Every call returns the same seed, round and caller until they are changed,
    which makes registry runs reproducible.
    """

    def __init__(self, random_seed: bytes, round_counter: int = 0,
                 caller: str = "alice.testnet"):
        """
        Initialize the environment.

        Args:
            random_seed: Weak seed returned on every call
            round_counter: Current round
            caller: Current caller account
        """
        if not 0 <= round_counter <= MAX_ROUND:
            raise ValueError("Round counter must fit in 64 unsigned bits")

        self.random_seed = bytes(random_seed)
        self.round = round_counter
        self.caller = caller

    def weak_random_seed(self) -> bytes:
        return self.random_seed

    def round_counter(self) -> int:
        return self.round

    def caller_identity(self) -> str:
        return self.caller

    def advance(self, rounds: int = 1) -> int:
        """
        Move the round counter forward.

        Returns:
            The new round
        """
        if rounds < 0:
            raise ValueError("Round counter cannot move backwards")
        if self.round + rounds > MAX_ROUND:
            raise ValueError("Round counter must fit in 64 unsigned bits")
        self.round += rounds
        return self.round

    @contextmanager
    def as_caller(self, caller: str) -> Iterator['StaticEnvironment']:
        """Temporarily switch the caller account."""
        previous = self.caller
        self.caller = caller
        try:
            yield self
        finally:
            self.caller = previous

    def __repr__(self) -> str:
        return f"StaticEnvironment(round={self.round}, caller={self.caller!r})"


class SystemEnvironment(HostEnvironment):
    """
    Environment backed by the operating system's random source.

    Each seed request returns 32 fresh random bytes and starts a new round.
    """

    def __init__(self, caller: str, seed_size: int = 32):
        """
        Initialize the environment.

        Args:
            caller: Account reported as the caller
            seed_size: Length of each weak seed in bytes
        """
        if seed_size <= 0:
            raise ValueError("Seed size must be positive")

        self.caller = caller
        self.seed_size = seed_size
        self._round = 0
        self._lock = threading.Lock()

    def weak_random_seed(self) -> bytes:
        with self._lock:
            self._round += 1
        return secrets.token_bytes(self.seed_size)

    def round_counter(self) -> int:
        with self._lock:
            return self._round

    def caller_identity(self) -> str:
        return self.caller
