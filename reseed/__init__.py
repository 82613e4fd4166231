"""
Reseed Counter Registry.

A registry of named counters, each owned by one account, whose ids and
step sizes are drawn from an entropy pool that is re-derived from fresh host
inputs before every draw.

Key Features:
- One evolving 32-byte secret, reseeded by hashing before each random draw
- One-shot ChaCha20 streams, never reused across operations
- Output is a pure function of the host inputs, so runs can be replayed
- Ownership enforcement on every update

Security caveat:
    This is not a cryptographically secure random source. The caller's own
    account name is mixed into every reseed, and the host's weak seed may be
    predictable or observable. A caller who can predict the weak seed and
    choose their account name has some influence over the ids and step
    sizes they receive.

Basic Usage:
    >>> from reseed import StaticEnvironment, create_registry
    >>>
    >>> env = StaticEnvironment(bytes([0, 1, 2]), round_counter=0, caller="alice.testnet")
    >>> registry = create_registry(env)
    >>>
    >>> counter_id = registry.create_counter()
    >>> registry.increment("alice.testnet", counter_id)
    >>> print(registry.get_counter(counter_id))
"""

from typing import Optional

__version__ = "0.1.0"
__author__ = "Reseed Project"

from .config import ConfigError, RegistryConfig
from .crypto.pool import EntropyPool
from .crypto.stream import ChaCha20Stream
from .host import HostEnvironment, StaticEnvironment, SystemEnvironment
from .registry import (
    AccountId,
    AlreadyInitialized,
    CounterOverflow,
    CounterRecord,
    CounterRegistry,
    IdentifierCollision,
    InvalidAccountId,
    NotFound,
    NotInitialized,
    NotOwner,
    RegistryError,
)
from .sync import SerializedRegistry


def create_registry(env: HostEnvironment, config: Optional[RegistryConfig] = None,
                    serialized: bool = False):
    """
    Create and initialize a counter registry.

    Args:
        env: Host environment supplying weak seeds, rounds and callers
        config: Registry settings; defaults when omitted
        serialized: Wrap the registry for use from several threads

    Returns:
        An initialized CounterRegistry, or SerializedRegistry if requested
    """
    registry = CounterRegistry(env, config).initialize()
    if serialized:
        return SerializedRegistry(registry)
    return registry


__all__ = [
    '__version__',

    # High-level interface
    'create_registry',
    'CounterRegistry',
    'SerializedRegistry',
    'CounterRecord',
    'AccountId',

    # Host environment
    'HostEnvironment',
    'StaticEnvironment',
    'SystemEnvironment',

    # Randomness
    'EntropyPool',
    'ChaCha20Stream',

    # Configuration
    'RegistryConfig',
    'ConfigError',

    # Errors
    'RegistryError',
    'NotFound',
    'NotOwner',
    'AlreadyInitialized',
    'NotInitialized',
    'CounterOverflow',
    'IdentifierCollision',
    'InvalidAccountId',
]
