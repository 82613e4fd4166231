"""
Owned counter registry.

This module provides:
- Account id validation for owners and callers
- Prefixed key-value maps for counter values and owners
- The counter registry and its error kinds
"""

from .account import AccountId, InvalidAccountId, is_valid_account_id
from .registry import (
    AlreadyInitialized,
    CounterOverflow,
    CounterRecord,
    CounterRegistry,
    IdentifierCollision,
    NotFound,
    NotInitialized,
    NotOwner,
    RegistryError,
)
from .store import PrefixedMap

__all__ = [
    'AccountId',
    'InvalidAccountId',
    'is_valid_account_id',
    'CounterRecord',
    'CounterRegistry',
    'PrefixedMap',
    'RegistryError',
    'NotFound',
    'NotOwner',
    'AlreadyInitialized',
    'NotInitialized',
    'CounterOverflow',
    'IdentifierCollision',
]
